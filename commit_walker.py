# commit_walker.py

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from git_errors import GIT_READ_ERRORS, TraversalError
from git_manager import GitManager

# `git stash` records the index and the untracked files as extra commits with these summaries
STASH_AUXILIARY_PREFIXES = ("index on ", "untracked files on ")


def commit_summary(commit) -> str:
    """First line of the commit message, always as text."""
    summary = commit.summary
    if isinstance(summary, bytes):
        summary = summary.decode("utf-8", errors="replace")
    return summary or ""


def is_stash_auxiliary(commit) -> bool:
    return commit_summary(commit).startswith(STASH_AUXILIARY_PREFIXES)


@dataclass
class WalkResult:
    commits: list
    has_more: bool


def iter_topo_date_order(manager: GitManager, root_ids: Iterable[str]) -> Iterator:
    """Yield every commit reachable from ``root_ids`` exactly once.

    This is ``git rev-list --date-order``: no commit before all of its
    children, newest commit time first otherwise. Commits are streamed, so a
    short page never reads the rest of the history.
    """
    revs = list(dict.fromkeys(root_ids))
    if not revs:
        return
    try:
        yield from manager.iter_commits(revs, date_order=True)
    except GIT_READ_ERRORS as e:
        logging.exception("CommitWalker: failed to walk commit history")
        raise TraversalError(f"Failed to walk commit history: {e!s}") from e


def walk_commits(
    commits: Iterable,
    skip: int = 0,
    limit: Optional[int] = None,
    exclude: Callable[[object], bool] = is_stash_auxiliary,
) -> WalkResult:
    """Return one page of an ordered commit stream.

    ``skip`` and ``limit`` count emitted commits only: excluded commits are
    still walked through but never appear in the page. ``limit=None`` means
    no limit. The stream is read only up to the first commit after the page.
    """
    if skip < 0:
        raise ValueError(f"skip must be >= 0, got {skip}")
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    page: List = []
    emitted = 0
    end = None if limit is None else skip + limit
    for commit in commits:
        try:
            excluded = exclude(commit)
        except GIT_READ_ERRORS as e:
            raise TraversalError(f"Failed to read commit {commit.hexsha}: {e!s}") from e
        if excluded:
            continue
        if end is not None and emitted >= end:
            return WalkResult(page, True)
        if emitted >= skip:
            page.append(commit)
        emitted += 1
    return WalkResult(page, False)
