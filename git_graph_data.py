# git_graph_data.py

from dataclasses import dataclass, field
from typing import List, Optional

# Reserved id of the synthetic "uncommitted changes" node. Never a valid hex sha.
WORKING_COPY_ID = "working-copy"

HEAD_TYPE_BRANCH = "branch"
HEAD_TYPE_DETACHED = "detached"

HEAD_LABEL = "HEAD"
UNKNOWN_AUTHOR = "Unknown"


@dataclass
class CommitNode:
    """One node of the rendered commit graph."""

    id: str
    message: str
    author: str
    timestamp: int
    parents: List[str] = field(default_factory=list)
    refs: List[str] = field(default_factory=list)  # e.g. ['HEAD', 'main', 'origin/main', 'v1.0', 'stash@{0}']
    head_type: Optional[str] = None  # only set on the node HEAD points at

    @property
    def is_working_copy(self) -> bool:
        return self.id == WORKING_COPY_ID

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "message": self.message,
            "author": self.author,
            "timestamp": self.timestamp,
            "parents": list(self.parents),
            "refs": list(self.refs),
        }
        if self.head_type is not None:
            data["headType"] = self.head_type
        return data

    def __repr__(self) -> str:
        return (
            f"CommitNode(id='{self.id[:7]}', "
            f"parents={[p[:7] for p in self.parents]}, "
            f"refs={self.refs}, "
            f"message='{self.message[:20]}...', "
            f"head_type={self.head_type})"
        )


@dataclass
class CommitPage:
    commits: List[CommitNode]
    has_more: bool

    def to_dict(self) -> dict:
        return {"commits": [c.to_dict() for c in self.commits], "hasMore": self.has_more}


@dataclass
class DiffEntry:
    """One changed path between two snapshots, with whole-file content on both sides."""

    path: str
    old_content: str = ""  # empty for an added file
    new_content: str = ""  # empty for a deleted file

    def to_dict(self) -> dict:
        return {"path": self.path, "oldContent": self.old_content, "newContent": self.new_content}


@dataclass(frozen=True)
class RefEntry:
    name: str
    commit_id: str

    def to_dict(self) -> dict:
        return {"name": self.name, "commitId": self.commit_id}


@dataclass(frozen=True)
class StashEntry:
    label: str  # stash@{n}, n = 0 for the most recent stash
    commit_id: str
    message: str = ""


@dataclass
class AuthorSummary:
    name: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}
