"""Command-line interface for Greyn.

This module provides the CLI commands for running and managing
the Greyn authentication service.
"""

import sys
from typing import NoReturn

import click

from greyn.core.config import get_settings
from greyn.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="Greyn")
def cli() -> None:
    """Greyn - role-based authentication for the Greyn ESG platform.

    Settings are read from GREYN_* environment variables and .env files.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=click.IntRange(1, 65535),
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the Greyn API server.

    By default, the server runs on 0.0.0.0:5000.
    """
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting Greyn server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "greyn.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates the role partition tables. Use this only in development.
    In production, use migrations instead.
    """
    import asyncio

    from greyn.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init_db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize():
        db = get_db_manager()
        try:
            await init_database()
            if not settings.is_development:
                await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--email", type=str, default=None, help="Admin email (prompts if not provided)")
@click.option("--name", type=str, default=None, help="Admin name (prompts if not provided)")
@click.option(
    "--password",
    type=str,
    default=None,
    help="Admin password (prompts if not provided)",
)
def create_admin(email: str | None, name: str | None, password: str | None) -> None:
    """Create an admin account.

    Uses the configured admin code, so it works without exposing the
    code to whoever runs the command.
    """
    import asyncio

    from greyn.domain.exceptions import AccountError
    from greyn.domain.services import AuthenticationService
    from greyn.infrastructure.persistence.database import get_db_manager, init_database

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    if email is None:
        email = click.prompt("Admin email", type=str)
    if name is None:
        name = click.prompt("Admin name", type=str)
    if password is None:
        password = click.prompt("Admin password", hide_input=True, confirmation_prompt=True)

    async def create() -> None:
        db = get_db_manager()
        try:
            await init_database()
            async with db.session() as session:
                service = AuthenticationService(session, settings=settings)
                result = await service.signup(
                    "admin",
                    email=email,
                    password=password,
                    confirm_password=None,
                    profile={"name": name},
                    admin_code=settings.admin_code,
                )
        except AccountError as e:
            click.echo(f"Error: {e.message}", err=True)
            logger.error("Admin creation failed", error=e.message)
            raise SystemExit(1)
        finally:
            await db.disconnect()

        click.echo(
            f"\nAdmin created successfully!\n"
            f"  Account ID: {result.profile.id}\n"
            f"  Email:      {result.profile.email}\n"
        )
        logger.info("Admin created via CLI", user_id=result.profile.id)

    asyncio.run(create())


@cli.command()
def info() -> None:
    """Display Greyn configuration and system information."""
    settings = get_settings()

    click.echo(f"""
Greyn v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}
  Frontend URL: {settings.frontend_url}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Security:
  Token Expire: {settings.token_expire_days} days
  Min Password: {settings.password_min_length} characters
  Org Approval: {settings.organization_approval_required}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")

    warnings = settings.configuration_warnings()
    if warnings:
        click.echo("Warnings:")
        for warning in warnings:
            click.echo(f"  - {warning}")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `greyn` command is run
    or when using `python -m greyn`.
    """
    cli()


def serve_main() -> NoReturn:
    """Entry point for the `greyn-server` script."""
    sys.argv[0] = "greyn"
    if len(sys.argv) == 1:
        sys.argv.append("serve")
    main()


if __name__ == "__main__":
    main()
