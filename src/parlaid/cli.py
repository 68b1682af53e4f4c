"""CLI interface for Parlaid."""

import asyncio
import contextlib
import dataclasses
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from parlaid import __version__
from parlaid.config import Config, get_config, load_credentials
from parlaid.exceptions import (
    EXIT_FAILURE,
    EXIT_USAGE,
    ConfigurationError,
    ParlaidError,
    UsageError,
)
from parlaid.models.credentials import Credentials
from parlaid.output.console import Console
from parlaid.sdk import Parlaid

app = typer.Typer(
    name="parlaid",
    help="Fetch Parler profiles, posts, follows, comments and votes as JSON",
    add_completion=False,
)

logger = logging.getLogger(__name__)

Action = Callable[[Parlaid], Awaitable[object]]

# Newer typer releases raise usage errors from their own bundled click, whose
# classes are unrelated to the installed click package
USAGE_ERRORS = (click.UsageError, typer.BadParameter.__base__)
ABORTS = (click.Abort, typer.Abort)


@dataclass
class Options:
    """Options shared by every command."""

    authorization: Optional[Path] = None
    output: Optional[Path] = None
    rate_limit: bool = True


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr through rich."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=RichConsole(stderr=True), show_path=False)],
        force=True,
    )


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"parlaid version {__version__}")
        raise typer.Exit()


def create_client(config: Config, credentials: Credentials, output: Console) -> Parlaid:
    """Build the SDK client a command runs against."""
    return Parlaid(credentials, config=config, output=output)


async def _invoke(client: Parlaid, action: Action) -> None:
    async with client:
        await action(client)


def _fail(output: Console, error: Exception, status: int) -> None:
    output.write_err(f"[fatal] {str(error) or error.__class__.__name__}\n")
    output.exit(status)


def _execute(ctx: typer.Context, action: Action) -> None:
    """Run one command; the single place fatal errors become exit statuses."""
    options: Options = ctx.obj
    config = get_config()
    if not options.rate_limit:
        config = dataclasses.replace(config, rate_limiting_enabled=False)

    try:
        credentials = load_credentials(options.authorization or config.auth_file)
    except ConfigurationError as e:
        _fail(Console(), e, e.exit_code)

    if options.output is not None:
        options.output.parent.mkdir(parents=True, exist_ok=True)
        stream_cm = open(options.output, "w", encoding="utf-8")
    else:
        stream_cm = contextlib.nullcontext(None)

    with stream_cm as stream:
        output = Console(stream=stream)
        try:
            asyncio.run(_invoke(create_client(config, credentials, output), action))
        except ParlaidError as e:
            _fail(output, e, e.exit_code)
        except KeyboardInterrupt:
            _fail(output, RuntimeError("Cancelled"), EXIT_FAILURE)
        except Exception as e:
            logger.debug("Unhandled error", exc_info=True)
            _fail(output, e, EXIT_FAILURE)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    authorization: Optional[Path] = typer.Option(
        None,
        "--authorization",
        "-a",
        help="Authorization file (JSON with mst and jst tokens)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON to this file instead of stdout",
    ),
    rate_limit: bool = typer.Option(
        True,
        "--rate-limit/--no-rate-limit",
        help="Honor the server's rate limit headers",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output"),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Parlaid - Fetch Parler collections as a streaming JSON array."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(EXIT_USAGE)

    setup_logging(verbose=verbose, quiet=quiet)
    ctx.obj = Options(
        authorization=authorization,
        output=output,
        rate_limit=rate_limit,
    )


@app.command()
def profile(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="The name of the user"),
):
    """Fetch a user profile."""
    _execute(ctx, lambda client: client.write_profile(username))


@app.command()
def posts(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="The name of the user"),
):
    """Fetch all posts for a user."""
    _execute(ctx, lambda client: client.posts(username))


@app.command()
def echoes(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="The name of the user"),
):
    """Fetch all echoes for a user."""
    _execute(ctx, lambda client: client.echoes(username))


@app.command()
def votes(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="The name of the user"),
):
    """Fetch all posts a user has up-voted."""
    _execute(ctx, lambda client: client.votes(username))


@app.command()
def following(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="The name of the user"),
):
    """Fetch all users followed by a user."""
    _execute(ctx, lambda client: client.following(username))


@app.command()
def followers(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="The name of the user"),
):
    """Fetch all followers of a user."""
    _execute(ctx, lambda client: client.followers(username))


@app.command()
def comments(
    ctx: typer.Context,
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="The name of the user"
    ),
    identifier: Optional[str] = typer.Option(
        None, "--identifier", "-i", help="The unique identifier of the post"
    ),
):
    """Fetch all comments for a user or post."""
    if (username is None) == (identifier is None):
        _fail(
            Console(),
            UsageError("Exactly one of --username or --identifier is required"),
            EXIT_USAGE,
        )

    if identifier is not None:
        _execute(ctx, lambda client: client.post_comments(identifier))
    else:
        _execute(ctx, lambda client: client.user_comments(username))


def main() -> None:
    """Console script entry point; usage errors exit with status 1."""
    try:
        status = app(standalone_mode=False)
    except USAGE_ERRORS as e:
        e.show()
        sys.exit(EXIT_USAGE)
    except ABORTS:
        sys.exit(EXIT_FAILURE)
    sys.exit(status if isinstance(status, int) else 0)


if __name__ == "__main__":
    main()
