"""``notionsync`` console command.

Syncs every markdown file changed by one commit into the Notion page named
in its frontmatter.  Meant to run as a post-commit hook or CI step::

    NOTION_TOKEN=secret_xxx notionsync --repo . --revision HEAD

Exit status is ``0`` when every file synced, ``1`` when any file failed,
``2`` when git could not report the changed files, and ``3`` when Notion
rejected the token.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional

import typer

from notionsync.client import NotionSyncClient
from notionsync.converter.block_builder import build_callout
from notionsync.errors import GitQueryError, NotionSyncAuthError
from notionsync.models import FileSyncOutcome
from notionsync.observability import get_logger
from notionsync.runner import sync_changed_files

app = typer.Typer(
    name="notionsync",
    help="Push markdown files changed by a commit into their Notion pages.",
    add_completion=False,
    rich_markup_mode=None,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ExitCode(IntEnum):
    """Process exit codes for the ``notionsync`` command."""

    SUCCESS = 0
    FILES_FAILED = 1
    GIT_ERROR = 2
    AUTH_ERROR = 3


def exit_code_for(outcomes: list[FileSyncOutcome]) -> ExitCode:
    """Pick the exit code for a finished run.

    An authentication failure on any file wins over other failures, since
    no later file can succeed with the same token.
    """
    if any(isinstance(o.error, NotionSyncAuthError) for o in outcomes):
        return ExitCode.AUTH_ERROR
    if any(not o.ok for o in outcomes):
        return ExitCode.FILES_FAILED
    return ExitCode.SUCCESS


def _print_summary(outcomes: list[FileSyncOutcome]) -> None:
    for outcome in outcomes:
        if outcome.ok:
            result = outcome.result
            typer.echo(
                f"synced  {outcome.path} -> {outcome.page_id} "
                f"({result.blocks_deleted} deleted, {result.blocks_appended} appended)"
            )
        else:
            typer.echo(f"FAILED  {outcome.path}: {outcome.error}", err=True)

    failed = sum(1 for o in outcomes if not o.ok)
    typer.echo(f"{len(outcomes) - failed} synced, {failed} failed")


@app.command()
def sync(
    token: str = typer.Option(
        ...,
        "--token",
        envvar="NOTION_TOKEN",
        help="Notion integration token",
        show_default=False,
    ),
    repo: str = typer.Option(
        ".",
        "--repo",
        help="Path to the git repository",
        metavar="PATH",
    ),
    revision: str = typer.Option(
        "HEAD",
        "--revision",
        help="Commit whose changed markdown files are synced",
        metavar="REV",
    ),
    banner: Optional[str] = typer.Option(
        None,
        "--banner",
        envvar="NOTIONSYNC_BANNER",
        help="Text of a callout placed above the content of every synced page",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="One of DEBUG, INFO, WARNING, ERROR",
    ),
) -> None:
    """Sync the markdown files changed by REV into Notion."""
    level = log_level.upper()
    if level not in _LOG_LEVELS:
        raise typer.BadParameter(
            f"expected one of {', '.join(_LOG_LEVELS)}", param_hint="--log-level"
        )
    get_logger().setLevel(level)

    preamble = [build_callout(banner)] if banner else None

    with NotionSyncClient(token=token) as client:
        try:
            outcomes = sync_changed_files(
                client, repo_path=repo, revision=revision, preamble=preamble
            )
        except GitQueryError as exc:
            typer.echo(f"Error: {exc.message}", err=True)
            raise typer.Exit(ExitCode.GIT_ERROR) from exc

    if not outcomes:
        typer.echo(f"No markdown files changed in {revision}")
        raise typer.Exit(ExitCode.SUCCESS)

    _print_summary(outcomes)
    code = exit_code_for(outcomes)
    if code is not ExitCode.SUCCESS:
        raise typer.Exit(code)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
