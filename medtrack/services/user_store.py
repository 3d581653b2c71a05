# medtrack/services/user_store.py
from sqlalchemy.exc import IntegrityError

from ..model import User, ROLES, PATIENT, ADMIN
from ..utils.errors import invalid


def normalize_email(email) -> str:
    return (email or "").strip().lower()


class CredentialStore:
    """User identity, password hash, role, active flag and refresh token.

    Every write commits immediately; a single row update is the unit of
    atomicity, so concurrent refresh-token writes for one user resolve as
    last write wins.
    """

    DUPLICATE_EMAIL = "User with this email already exists"

    def __init__(self, db, hasher):
        self.db = db
        self.hasher = hasher
        self._decoy = None

    # ---------- lookups ----------
    def get(self, user_id):
        if user_id is None:
            return None
        return self.db.session.get(User, user_id)

    def find_by_email(self, email):
        email = normalize_email(email)
        if not email:
            return None
        return User.query.filter_by(email=email).first()

    def count_active_admins(self) -> int:
        return User.query.filter_by(role=ADMIN, is_active=True).count()

    def is_last_active_admin(self, user) -> bool:
        return user.role == ADMIN and user.is_active and self.count_active_admins() <= 1

    # ---------- writes ----------
    def create(self, name, email, password, role=PATIENT):
        """Returns (user, failure). Hashing errors propagate; nothing is persisted."""
        email = normalize_email(email)
        if role not in ROLES:
            return None, invalid(f"Role must be one of: {', '.join(ROLES)}")
        if self.find_by_email(email):
            return None, invalid(self.DUPLICATE_EMAIL)

        user = User(name=(name or "").strip(), email=email, role=role, is_active=True)
        self.set_password(user, password, commit=False)
        self.db.session.add(user)
        try:
            self.db.session.commit()
        except IntegrityError:
            # lost a race with a concurrent registration for the same email
            self.db.session.rollback()
            return None, invalid(self.DUPLICATE_EMAIL)
        return user, None

    def set_password(self, user, plaintext, commit=True):
        user.password_hash = self.hasher.hash(plaintext)
        if commit:
            self.db.session.commit()

    def check_password(self, user, plaintext) -> bool:
        return self.hasher.verify(plaintext, user.password_hash)

    def authenticate(self, email, plaintext):
        """User for a matching email/password pair, else None.

        An unknown email still pays for one hash verification so response
        time does not reveal which emails are registered.
        """
        user = self.find_by_email(email)
        if user is None:
            if self._decoy is None:
                self._decoy = self.hasher.hash("decoy-password")
            self.hasher.verify(plaintext, self._decoy)
            return None
        return user if self.check_password(user, plaintext) else None

    def set_refresh_token(self, user, token):
        user.refresh_token = token
        self.db.session.commit()

    def set_active(self, user, active: bool):
        user.is_active = bool(active)
        self.db.session.commit()

    def set_role(self, user, role):
        user.role = role
        self.db.session.commit()
