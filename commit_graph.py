"""Commit graph assembly.

Turns the ordered walk into the node list the graph view renders: commit
metadata, parent links, reference and stash labels, the HEAD marker, and the
working-copy node on the first page.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from commit_walker import commit_summary, iter_topo_date_order, walk_commits
from git_errors import GIT_READ_ERRORS, CommitNotFoundError, InvalidCommitIdError, TraversalError
from git_graph_data import HEAD_LABEL, UNKNOWN_AUTHOR, AuthorSummary, CommitNode, CommitPage
from git_manager import GitManager
from ref_resolver import ReferenceSet, resolve_references
from synthetic_nodes import node_labels, prepend_working_copy, stash_labels


def build_commit_node(
    commit, references: ReferenceSet, stash_map: Optional[Dict[str, Tuple[str, ...]]] = None
) -> CommitNode:
    stash_map = stash_map or {}
    try:
        author = commit.author.name if commit.author else ""
        node = CommitNode(
            id=commit.hexsha,
            message=commit_summary(commit),
            author=author or UNKNOWN_AUTHOR,
            timestamp=int(commit.committed_date),
            parents=[parent.hexsha for parent in commit.parents],
            refs=node_labels(references.labels_for(commit.hexsha), stash_map.get(commit.hexsha, ())),
        )
    except GIT_READ_ERRORS as e:
        raise TraversalError(f"Failed to read commit {commit.hexsha}: {e!s}") from e
    if HEAD_LABEL in node.refs:
        node.head_type = references.head_type
    return node


def _root_ids(manager: GitManager, references: ReferenceSet) -> List[str]:
    roots = []
    for commit_id in references.root_ids():
        try:
            roots.append(manager.get_commit(commit_id).hexsha)
        except (InvalidCommitIdError, CommitNotFoundError) as e:
            logging.warning("CommitGraph: skipping unreadable root %s: %s", commit_id, e)
    return roots


def list_commits(manager: GitManager, limit: Optional[int], skip: int = 0, now: Optional[int] = None) -> CommitPage:
    """One page of the commit graph, newest first.

    The working-copy node, if any, is only ever the first element of the
    page requested with ``skip == 0``; it does not count against ``limit``.
    """
    references = resolve_references(manager)
    stash_map = stash_labels(references.stashes)
    stream = iter_topo_date_order(manager, _root_ids(manager, references))
    try:
        result = walk_commits(stream, skip=skip, limit=limit)
    finally:
        stream.close()
    nodes = [build_commit_node(commit, references, stash_map) for commit in result.commits]

    if skip == 0:
        nodes = prepend_working_copy(nodes, manager.is_dirty(), references.head_id, skip, now)

    logging.info(
        "CommitGraph: %s -> %d nodes (skip=%d, limit=%s, has_more=%s)",
        manager.repo_path,
        len(nodes),
        skip,
        limit,
        result.has_more,
    )
    return CommitPage(commits=nodes, has_more=result.has_more)


def summarize_authors(nodes: Iterable[CommitNode]) -> List[AuthorSummary]:
    """Commit count per author, most active first, then by name."""
    counts: Dict[str, int] = {}
    for node in nodes:
        if node.is_working_copy:
            continue
        counts[node.author] = counts.get(node.author, 0) + 1
    summaries = [AuthorSummary(name, count) for name, count in counts.items()]
    summaries.sort(key=lambda s: (-s.count, s.name))
    return summaries
