"""Locate the markdown files touched by the most recent commit.

Runs ``git show --name-status -z`` for a single revision and keeps the
paths that still exist after the commit (anything not deleted) and end in
``.md``.  Output order is whatever git reports.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from notionsync.errors import GitQueryError
from notionsync.models import ChangedPath, ChangeStatus
from notionsync.observability import get_logger

log = get_logger("notionsync.changes")

MARKDOWN_SUFFIX = ".md"


def parse_name_status(output: str) -> list[ChangedPath]:
    """Parse NUL-separated ``--name-status -z`` output.

    Each entry is a status token followed by one path, or two paths (old,
    new) for renames and copies, e.g. ``"M\\0a.md\\0R100\\0old.md\\0new.md\\0"``.
    Status tokens carry a similarity score for renames and copies
    (``R086``); only the leading letter is kept.
    """
    fields = output.split("\0")
    entries: list[ChangedPath] = []
    i = 0
    while i < len(fields):
        token = fields[i].strip()
        i += 1
        if not token:
            continue

        try:
            status = ChangeStatus(token[0])
        except ValueError:
            status = ChangeStatus.UNKNOWN

        if status in (ChangeStatus.RENAMED, ChangeStatus.COPIED):
            if i + 1 >= len(fields):
                break
            old_path, path = fields[i], fields[i + 1]
            i += 2
            entries.append(ChangedPath(status=status, path=path, old_path=old_path))
        else:
            if i >= len(fields):
                break
            entries.append(ChangedPath(status=status, path=fields[i]))
            i += 1

    return entries


def select_markdown_paths(entries: list[ChangedPath]) -> list[str]:
    """Return the paths of non-deleted entries that end in ``.md``."""
    return [
        entry.path
        for entry in entries
        if entry.status is not ChangeStatus.DELETED
        and entry.path.endswith(MARKDOWN_SUFFIX)
    ]


def _run_git(cmd: list[str], repo_path: str | Path, failure: str) -> str:
    """Run *cmd* in *repo_path* and return its stdout.

    *failure* prefixes the :class:`GitQueryError` message on a non-zero exit.
    """
    try:
        result = subprocess.run(
            cmd,
            cwd=str(repo_path),
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise GitQueryError(
            f"Could not run git in {repo_path}: {exc}",
            context={"command": cmd, "repo_path": str(repo_path)},
            cause=exc,
        ) from exc

    if result.returncode != 0:
        raise GitQueryError(
            f"{failure}: {result.stderr.strip()}",
            context={
                "command": cmd,
                "returncode": result.returncode,
                "stderr": result.stderr,
            },
        )
    return result.stdout


def repository_root(repo_path: str | Path = ".") -> Path:
    """Return the top-level directory of the repository containing *repo_path*.

    Paths reported by :func:`list_changed_files` are relative to this
    directory, not to *repo_path*.
    """
    cmd = ["git", "rev-parse", "--show-toplevel"]
    output = _run_git(cmd, repo_path, f"Could not resolve the repository root of {repo_path}")
    return Path(output.strip())


def list_changed_files(
    repo_path: str | Path = ".",
    revision: str = "HEAD",
) -> list[ChangedPath]:
    """Return every path changed by *revision*, as reported by git.

    Paths are relative to :func:`repository_root`.

    Raises
    ------
    GitQueryError
        If git is not installed, *repo_path* is not a repository, or
        *revision* does not exist (e.g. a repository with no commits).
    """
    cmd = ["git", "show", "--name-status", "-z", "--pretty=format:", revision, "--"]
    return parse_name_status(_run_git(cmd, repo_path, f"git show failed for {revision}"))


def list_changed_markdown_files(
    repo_path: str | Path = ".",
    revision: str = "HEAD",
) -> list[str]:
    """Return the markdown files added or modified by *revision*.

    Deleted paths are excluded since they cannot be synced; renamed files
    are reported under their new path.  An empty list is returned when the
    commit touches no markdown files.
    """
    entries = list_changed_files(repo_path, revision)
    paths = select_markdown_paths(entries)
    log.debug(
        "Located changed markdown files",
        extra={
            "extra_fields": {
                "op": "list_changed_markdown_files",
                "revision": revision,
                "changed": len(entries),
                "markdown": len(paths),
            }
        },
    )
    return paths
