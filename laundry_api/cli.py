"""CLI tools for laundry pickup administration."""

import click

from laundry_api.core.config import settings
from laundry_api.core.errors import AppError
from laundry_api.db.enums import UserRole
from laundry_api.db.session import SessionLocal
from laundry_api.services import user_service


@click.group()
def cli():
    """Laundry pickup API CLI tools."""
    pass


@cli.command()
@click.option("--name", required=True, help="Display name")
@click.option("--phone", required=True, help="Phone number (normalized to digits)")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Password")
@click.option("--email", default=None, help="Optional email address")
def create_admin(name: str, phone: str, password: str, email: str | None):
    """
    Create an admin account.

    This is the bootstrap command: signup only ever creates customers.

    Example:
        laundry-api create-admin --name "Ops" --phone "98765 43210"
    """
    db = SessionLocal()
    try:
        user = user_service.create_user(
            db,
            name=name,
            phone=phone,
            password=password,
            email=email,
            role=UserRole.ADMIN,
        )
        click.echo(f"✓ Created admin: {user.name}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"  Phone: {user.phone}")
    except AppError as e:
        raise click.ClickException(e.message)
    finally:
        db.close()


@cli.command()
@click.option("--phone", required=True, help="Phone number of an existing account")
def promote(phone: str):
    """Grant the admin role to an existing account."""
    db = SessionLocal()
    try:
        user = user_service.get_user_by_phone(db, phone)
        if not user:
            raise click.ClickException(f"No account with phone {phone}")
        if user.role == UserRole.ADMIN:
            click.echo(f"✓ {user.name} is already an admin")
            return
        user_service.set_role(db, user.id, UserRole.ADMIN.value)
        click.echo(f"✓ Promoted {user.name} to admin")
    except AppError as e:
        raise click.ClickException(e.message)
    finally:
        db.close()


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=None, type=int, help="Defaults to PORT")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes (dev only)")
def serve(host: str, port: int | None, reload: bool):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("laundry_api.main:app", host=host, port=port or settings.PORT, reload=reload)


if __name__ == "__main__":
    cli()
