# synthetic_nodes.py

import time
from typing import Dict, Iterable, List, Optional, Tuple

from git_graph_data import WORKING_COPY_ID, CommitNode, StashEntry

WORKING_COPY_MESSAGE = "Uncommitted Changes"
WORKING_COPY_AUTHOR = "You"


def working_copy_node(head_id: Optional[str], now: Optional[int] = None) -> CommitNode:
    """The virtual node for uncommitted work, hanging off the current HEAD commit."""
    if now is None:
        now = int(time.time())
    return CommitNode(
        id=WORKING_COPY_ID,
        message=WORKING_COPY_MESSAGE,
        author=WORKING_COPY_AUTHOR,
        timestamp=now,
        # unborn HEAD: nothing to hang off
        parents=[head_id] if head_id else [],
    )


def prepend_working_copy(
    nodes: List[CommitNode], is_dirty: bool, head_id: Optional[str], skip: int, now: Optional[int] = None
) -> List[CommitNode]:
    """Put the working-copy node in front of the first page when the tree is dirty.

    The node is not part of the skip/limit bookkeeping, so later pages never
    see it.
    """
    if skip != 0 or not is_dirty:
        return nodes
    return [working_copy_node(head_id, now), *nodes]


def stash_labels(stashes: Iterable[StashEntry]) -> Dict[str, Tuple[str, ...]]:
    labels: Dict[str, List[str]] = {}
    for stash in stashes:
        labels.setdefault(stash.commit_id, []).append(stash.label)
    return {commit_id: tuple(names) for commit_id, names in labels.items()}


def node_labels(ref_labels: Iterable[str], stash_label_names: Iterable[str]) -> List[str]:
    """Ref labels first, then stash labels, each name once."""
    merged: List[str] = []
    for name in (*ref_labels, *stash_label_names):
        if name not in merged:
            merged.append(name)
    return merged
