"""Reference resolution for the commit graph.

Builds, once per request, the lookup tables the walk and the node assembly
need: which labels point at which commit, where HEAD is and how it is
attached, and which commits are stash entries. Any single reference that
cannot be read is skipped; it never aborts the whole resolution.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from git_errors import GIT_READ_ERRORS
from git_graph_data import HEAD_LABEL, RefEntry, StashEntry
from git_manager import GitManager


@dataclass(frozen=True)
class ReferenceSet:
    labels: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    head_id: Optional[str] = None
    head_type: Optional[str] = None
    branch_ids: Tuple[str, ...] = ()
    tag_ids: Tuple[str, ...] = ()
    stashes: Tuple[StashEntry, ...] = ()

    def labels_for(self, commit_id: str) -> Tuple[str, ...]:
        return self.labels.get(commit_id, ())

    def root_ids(self) -> List[str]:
        """HEAD, local branches, tags, then stashes, without duplicates."""
        roots = []
        candidates = [self.head_id, *self.branch_ids, *self.tag_ids, *(s.commit_id for s in self.stashes)]
        for commit_id in candidates:
            if commit_id and commit_id not in roots:
                roots.append(commit_id)
        return roots


def _add_label(labels: Dict[str, List[str]], commit_id: str, name: str):
    names = labels.setdefault(commit_id, [])
    if name not in names:
        names.append(name)


def _branch_targets(manager: GitManager) -> List[Tuple[str, str]]:
    targets = []
    for head in manager.get_branches():
        try:
            targets.append((head.name, head.commit.hexsha))
        except GIT_READ_ERRORS as e:
            logging.debug("RefResolver: skipping branch %s: %s", head.path, e)
    return targets


def _remote_targets(manager: GitManager) -> List[Tuple[str, str]]:
    targets = []
    for ref in manager.get_remote_branches():
        try:
            targets.append((ref.name, ref.commit.hexsha))
        except GIT_READ_ERRORS as e:
            logging.debug("RefResolver: skipping remote branch %s: %s", ref.path, e)
    return targets


def _tag_targets(manager: GitManager) -> List[Tuple[str, str, str]]:
    """(short name, full path, peeled commit id) for every tag pointing at a commit."""
    targets = []
    for tag in manager.get_tags():
        try:
            # .commit peels annotated tags down to the tagged commit
            targets.append((tag.name, tag.path, tag.commit.hexsha))
        except GIT_READ_ERRORS as e:
            logging.debug("RefResolver: skipping tag %s: %s", tag.path, e)
    return targets


def enumerate_stashes(manager: GitManager) -> Tuple[StashEntry, ...]:
    """stash@{n} entries from the stash reflog, most recent first."""
    stashes = []
    for index, entry in enumerate(manager.get_stash_log()):
        stashes.append(StashEntry(label=f"stash@{{{index}}}", commit_id=entry.newhexsha, message=entry.message))
    return tuple(stashes)


def resolve_references(manager: GitManager) -> ReferenceSet:
    labels: Dict[str, List[str]] = {}

    head_id = manager.head_target()
    head_type = manager.head_mode() if head_id else None
    if head_id:
        _add_label(labels, head_id, HEAD_LABEL)

    branches = _branch_targets(manager)
    for name, commit_id in branches:
        _add_label(labels, commit_id, name)

    for name, commit_id in _remote_targets(manager):
        _add_label(labels, commit_id, name)

    tags = _tag_targets(manager)
    for name, _, commit_id in tags:
        _add_label(labels, commit_id, name)

    stashes = enumerate_stashes(manager)

    logging.debug(
        "RefResolver: HEAD=%s (%s), %d branches, %d tags, %d stashes",
        head_id,
        head_type,
        len(branches),
        len(tags),
        len(stashes),
    )
    return ReferenceSet(
        labels=MappingProxyType({commit_id: tuple(names) for commit_id, names in labels.items()}),
        head_id=head_id,
        head_type=head_type,
        branch_ids=tuple(commit_id for _, commit_id in branches),
        tag_ids=tuple(commit_id for _, _, commit_id in tags),
        stashes=stashes,
    )


def list_references(manager: GitManager) -> List[RefEntry]:
    """Flat reference list for the sidebar: HEAD, branches, remotes, tags (full path), stashes."""
    refs: List[RefEntry] = []
    head_id = manager.head_target()
    if head_id:
        refs.append(RefEntry(HEAD_LABEL, head_id))
    refs.extend(RefEntry(name, commit_id) for name, commit_id in _branch_targets(manager))
    refs.extend(RefEntry(name, commit_id) for name, commit_id in _remote_targets(manager))
    refs.extend(RefEntry(path, commit_id) for _, path, commit_id in _tag_targets(manager))
    refs.extend(RefEntry(stash.label, stash.commit_id) for stash in enumerate_stashes(manager))
    return refs
