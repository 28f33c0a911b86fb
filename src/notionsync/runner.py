"""Drive one sync run: changed files in, Notion pages replaced.

Files are processed one at a time.  A file that cannot be read, whose
frontmatter is invalid, or whose Notion calls fail is logged and recorded as a failed
:class:`FileSyncOutcome`; the run then moves on to the next file.  A failed
git query has no files to move on to and propagates.  So does a failure to
resolve the repository root.
"""

from __future__ import annotations

from pathlib import Path

from notionsync.changes import list_changed_markdown_files, repository_root
from notionsync.client import NotionSyncClient
from notionsync.errors import FileReadError, NotionSyncError
from notionsync.frontmatter import parse_notion_frontmatter
from notionsync.models import FileSyncOutcome
from notionsync.observability import get_logger

log = get_logger("notionsync.runner")


def sync_file(
    client: NotionSyncClient,
    path: str | Path,
    preamble: list[dict] | None = None,
    display_path: str | None = None,
) -> FileSyncOutcome:
    """Replace the Notion page named in *path*'s frontmatter with its body.

    Raises
    ------
    FileReadError
        If the file is missing or is not valid UTF-8.
    FrontmatterError
        If the file has no valid notion frontmatter.  Nothing is sent to
        Notion in that case.
    NotionSyncError
        From the clear, append or title update.
    """
    shown = display_path or str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(
            f"Could not read {shown}: {exc}",
            context={"path": shown},
            cause=exc,
        ) from exc
    frontmatter, body = parse_notion_frontmatter(text, path=shown)

    log.info(
        "Syncing file",
        extra={
            "extra_fields": {
                "op": "sync_file",
                "path": shown,
                "page_id": frontmatter.notion_page,
            }
        },
    )
    try:
        result = client.replace_markdown(
            frontmatter.notion_page,
            body,
            preamble=preamble,
            title=frontmatter.title,
        )
    except NotionSyncError as exc:
        exc.context.setdefault("page_id", frontmatter.notion_page)
        raise
    return FileSyncOutcome(
        path=shown,
        page_id=frontmatter.notion_page,
        ok=True,
        result=result,
    )


def sync_changed_files(
    client: NotionSyncClient,
    repo_path: str | Path = ".",
    revision: str = "HEAD",
    preamble: list[dict] | None = None,
) -> list[FileSyncOutcome]:
    """Sync every markdown file changed by *revision*, one after another.

    Raises
    ------
    GitQueryError
        If the changed files cannot be determined.
    """
    repo = Path(repo_path)
    paths = list_changed_markdown_files(repo, revision)
    log.info(
        "Found changed markdown files",
        extra={"extra_fields": {"op": "sync_changed_files", "files": paths}},
    )
    # git reports paths from the top of the work tree, whatever *repo_path* is.
    root = repository_root(repo) if paths else repo

    outcomes: list[FileSyncOutcome] = []
    for rel_path in paths:
        try:
            outcome = sync_file(client, root / rel_path, preamble, display_path=rel_path)
        except NotionSyncError as exc:
            log.error(
                "Failed to sync file",
                extra={
                    "extra_fields": {
                        "op": "sync_file",
                        "path": rel_path,
                        "error_code": exc.code,
                        "error": exc.message,
                        "context": exc.context,
                    }
                },
            )
            outcome = FileSyncOutcome(
                path=rel_path,
                page_id=exc.context.get("page_id"),
                ok=False,
                error=exc,
            )
        else:
            log.info(
                "Synced file",
                extra={
                    "extra_fields": {
                        "op": "sync_file",
                        "path": rel_path,
                        "page_id": outcome.page_id,
                        "blocks_deleted": outcome.result.blocks_deleted,
                        "blocks_appended": outcome.result.blocks_appended,
                    }
                },
            )
        outcomes.append(outcome)

    return outcomes
