"""CLI commands for Quire."""

import asyncio
import os
import sys
from pathlib import Path

import click


@click.group()
@click.version_option(package_name="quire")
def cli():
    """Quire - a small async page CMS."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8080, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
def serve(host, port, reload, workers, log_level):
    """Run the Quire server."""
    import signal

    from hypercorn.asyncio import serve as hypercorn_serve
    from hypercorn.config import Config

    config = Config()
    config.application_path = "quire.asgi:app"
    config.bind = [f"{host}:{port}"]
    config.workers = 1 if reload else workers
    config.loglevel = log_level.upper()
    config.include_server_header = False

    # The app reads its own log level from settings; an explicit env value wins
    os.environ.setdefault("QUIRE_LOG_LEVEL", log_level.upper())

    if reload:
        config.use_reloader = True
        from hypercorn.run import run
        run(config)
        return

    from quire.asgi import app

    shutdown_event = asyncio.Event()

    loop = asyncio.new_event_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_event.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_event.set)
    try:
        loop.run_until_complete(
            hypercorn_serve(app, config, shutdown_trigger=shutdown_event.wait)
        )
    finally:
        loop.close()


def _run_alembic(args: list[str]) -> None:
    """Build an Alembic Config programmatically and run the given command."""
    from alembic.config import CommandLine, Config

    alembic_ini = Path.cwd() / "alembic.ini"
    if not alembic_ini.exists():
        alembic_ini = Path(__file__).parent / "alembic.ini"
        if not alembic_ini.exists():
            click.echo("Error: Could not find alembic.ini", err=True)
            sys.exit(1)

    cfg = Config(str(alembic_ini))

    # Parse and run through CommandLine for proper subcommand dispatch
    cmd = CommandLine()
    options = cmd.parser.parse_args(args)
    if not hasattr(options, "cmd"):
        cmd.parser.error("too few arguments")
    else:
        cfg.cmd_opts = options
        fn, positional, kwarg = options.cmd
        fn(
            cfg,
            *[getattr(options, k, None) for k in positional],
            **{k: getattr(options, k, None) for k in kwarg},
        )


@cli.command(
    context_settings=dict(
        ignore_unknown_options=True,
        allow_extra_args=True,
    )
)
@click.pass_context
def db(ctx):
    """Run database migrations via Alembic.

    \b
    Examples:
        quire db upgrade head      # Apply all migrations
        quire db downgrade -1      # Rollback one migration
        quire db current           # Show current revision
        quire db history           # Show migration history
    """
    if not ctx.args:
        click.echo(ctx.get_help())
        return

    _run_alembic(ctx.args)


async def _seed() -> int:
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from quire.config import get_settings
    from quire.seed import seed_pages

    engine = create_async_engine(get_settings().db.url)
    try:
        session_maker = async_sessionmaker(engine, expire_on_commit=False)
        async with session_maker() as session:
            return await seed_pages(session)
    finally:
        await engine.dispose()


@cli.command()
def seed():
    """Insert sample pages (existing slugs are left alone)."""
    created = asyncio.run(_seed())
    click.echo(f"Created {created} sample pages.")


if __name__ == "__main__":
    cli()
