# helpdesk/cli.py
"""Help desk command line.

Usage:
    helpdesk serve                      # run the API
    helpdesk init-db                    # create the tables
    helpdesk issue-code --role admin    # print a staff sign-up code
"""
import sys

import click


@click.group()
def cli():
    """Help desk administration."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Address to listen on")
@click.option("--port", default=8000, type=int, help="Port to listen on")
def serve(host: str, port: int):
    """Run the API with uvicorn."""
    import uvicorn
    from helpdesk.main import app

    click.echo(f"Serving on http://{host}:{port}")
    click.echo(f"API docs: http://{host}:{port}/docs")
    uvicorn.run(app, host=host, port=port)


@cli.command("init-db")
def init_db_command():
    """Create all tables."""
    from helpdesk.core.database import init_db

    try:
        init_db()
    except Exception as e:
        click.echo(f"[ERROR] Database init failed: {e}", err=True)
        sys.exit(1)
    click.echo("[OK] Database initialised")


@cli.command("issue-code")
@click.option("--role", type=click.Choice(["agent", "admin"]), required=True, help="Role the code unlocks")
@click.option("--company-id", type=int, default=None, help="Company the new profile joins")
def issue_code(role: str, company_id: int | None):
    """Print a fresh verification code for staff sign-up."""
    from helpdesk.auth import services as auth_service
    from helpdesk.auth.models import UserRole
    from helpdesk.companies import services as company_service
    from helpdesk.core.database import SessionLocal, init_db

    init_db()
    with SessionLocal() as db:
        if company_id is not None and company_service.get_company(db, company_id) is None:
            click.echo(f"[ERROR] Company {company_id} not found", err=True)
            sys.exit(1)
        code = auth_service.issue_verification_code(db, UserRole(role), company_id)
        click.echo(code.code)


if __name__ == "__main__":
    cli()
