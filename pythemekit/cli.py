"""CLI interface for pythemekit."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

import click

from .api import ThemeClient
from .config import LIVE_THEME, Configuration
from .events import EventLog
from .exceptions import ThemeKitConfigError
from .output import OutputFormatter
from .sync import SyncEngine
from .utils import DEFAULT_TIMEOUT, VERSION

logger = logging.getLogger(__name__)


def _close_when_done(done: threading.Event, event_log: EventLog) -> None:
    done.wait()
    event_log.close()


def run_sync(
    ctx: Any, action: Callable[[SyncEngine], threading.Event]
) -> None:
    """Build the client and engine, run ``action`` and report its events.

    Exits with status 1 when the configuration is invalid or any event
    reports a failure.
    """
    out: OutputFormatter = ctx.obj["out"]
    try:
        config = Configuration(
            domain=ctx.obj["domain"] or "",
            access_token=ctx.obj["password"] or "",
            theme_id=ctx.obj["theme_id"],
            proxy=ctx.obj["proxy"],
            timeout=ctx.obj["timeout"],
            directory=ctx.obj["directory"],
        )
        client = ThemeClient(config)
    except ThemeKitConfigError as e:
        out.error(str(e))
        ctx.exit(1)

    event_log = EventLog()
    with client:
        engine = SyncEngine(client, event_log, directory=config.directory)
        done = action(engine)
        threading.Thread(
            target=_close_when_done, args=(done, event_log), daemon=True
        ).start()
        for event in event_log:
            out.report(event)

    out.print_summary()
    if out.failures:
        ctx.exit(1)


@click.group()
@click.option("--domain", "-s", envvar="THEMEKIT_DOMAIN", help="Store domain")
@click.option(
    "--password", "-p", envvar="THEMEKIT_PASSWORD", help="Admin API access token"
)
@click.option(
    "--theme-id",
    "-t",
    envvar="THEMEKIT_THEME_ID",
    default=LIVE_THEME,
    show_default=True,
    help="Theme id, or 'live' for the published theme",
)
@click.option("--proxy", envvar="THEMEKIT_PROXY", help="Outbound proxy URL")
@click.option(
    "--timeout",
    envvar="THEMEKIT_TIMEOUT",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Request timeout in seconds",
)
@click.option(
    "--directory",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Project directory",
)
@click.option("--quiet", "-q", is_flag=True, help="Only report failures")
@click.option("--json", is_flag=True, help="Report events as JSON lines")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=VERSION)
@click.pass_context
def main(
    ctx: Any,
    domain: Optional[str],
    password: Optional[str],
    theme_id: str,
    proxy: Optional[str],
    timeout: float,
    directory: Path,
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """pythemekit - Download & upload theme assets of a store."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        domain=domain,
        password=password,
        theme_id=theme_id,
        proxy=proxy,
        timeout=timeout,
        directory=directory,
    )
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pythemekit").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("filenames", nargs=-1)
@click.pass_context
def download(ctx: Any, filenames: tuple[str, ...]) -> None:
    """Download theme assets into the project directory.

    Without FILENAMES the whole theme is downloaded.
    """
    run_sync(ctx, lambda engine: engine.download(list(filenames)))


@main.command()
@click.argument("filenames", nargs=-1)
@click.pass_context
def upload(ctx: Any, filenames: tuple[str, ...]) -> None:
    """Upload local files to the theme.

    Without FILENAMES every file in the project directories is uploaded.
    """
    run_sync(ctx, lambda engine: engine.upload(list(filenames)))


@main.command()
@click.argument("filenames", nargs=-1, required=True)
@click.pass_context
def remove(ctx: Any, filenames: tuple[str, ...]) -> None:
    """Delete FILENAMES from the theme."""
    run_sync(ctx, lambda engine: engine.remove(list(filenames)))


if __name__ == "__main__":
    main()
