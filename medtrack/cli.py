# medtrack/cli.py
import click
from flask.cli import with_appcontext

from .extensions import services
from .model import ADMIN


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--name", required=True)
@with_appcontext
def create_admin(email, password, name):
    user, failure = services().store.create(name, email, password, role=ADMIN)
    if failure:
        click.echo(failure.message)
        return
    click.echo(f"Admin created: {user.id} {user.email}")


def register_cli(app):
    app.cli.add_command(create_admin)
