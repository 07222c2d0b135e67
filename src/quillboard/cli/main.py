"""Quillboard CLI — create the schema, load demo data, run the server.

Usage:
    quillboard init-db                  # Create all tables
    quillboard seed                     # Demo users, posts and comments
    quillboard seed --reset             # Drop everything first, then seed
    quillboard serve --port 8000        # Run the API with uvicorn
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys

import click

from quillboard import __version__

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Drive a database coroutine (init-db, seed) to completion.

    Commands are sync click callbacks. When one is invoked while a loop
    is already running, as under pytest-asyncio, the coroutine gets a
    fresh loop on a worker thread instead.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        # asyncio.run refuses to nest
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="quillboard")
def main():
    """Quillboard — blog, comments and task manager API."""


# ---------------------------------------------------------------------------
# quillboard init-db
# ---------------------------------------------------------------------------


@main.command("init-db")
def init_db():
    """Create all tables from the ORM models."""
    _run(_init_db_impl())
    click.secho("Tables created.", fg="green")


async def _init_db_impl():
    from quillboard.db.engine import engine, init_models

    try:
        await init_models(engine)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# quillboard seed
# ---------------------------------------------------------------------------


@main.command()
@click.option("--reset", is_flag=True, help="Drop and recreate all tables first")
def seed(reset: bool):
    """Load demo users (password: password123), posts and comments."""
    from quillboard.db.seed import AlreadySeededError

    if reset:
        click.confirm("This deletes ALL data. Continue?", abort=True)
    try:
        result = _run(_seed_impl(reset))
    except AlreadySeededError as e:
        click.secho(f"Error: {e}. Use --reset to start over.", fg="red", err=True)
        sys.exit(1)

    click.secho("Database seeded successfully!", fg="green")
    click.echo(
        f"Created {result.users} users, {result.posts} posts and {result.comments} comments"
    )


async def _seed_impl(reset: bool):
    from quillboard.db.engine import async_session_factory, drop_models, engine, init_models
    from quillboard.db.seed import seed_demo_data

    try:
        if reset:
            await drop_models(engine)
        await init_models(engine)
        async with async_session_factory() as session:
            return await seed_demo_data(session)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# quillboard serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: QUILLBOARD_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: QUILLBOARD_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server with uvicorn."""
    import uvicorn

    from quillboard.config import settings

    uvicorn.run(
        "quillboard.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
