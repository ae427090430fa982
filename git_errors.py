import git.exc
from git.exc import ODBError


class GitGraphError(Exception):
    """Base class for every error surfaced to the viewer."""


class RepositoryNotFoundError(GitGraphError):
    def __init__(self, repo_path: str, reason: str = ""):
        self.repo_path = repo_path
        message = f"Not a git repository: {repo_path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidCommitIdError(GitGraphError):
    def __init__(self, commit_id):
        self.commit_id = commit_id
        super().__init__(f"Invalid commit id: {commit_id!r}")


class CommitNotFoundError(GitGraphError):
    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__(f"Commit not found: {commit_id}")


class TraversalError(GitGraphError):
    """The object store failed in the middle of a history walk."""


class WorkingCopyNotAllowedError(GitGraphError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} requires a real commit, not the uncommitted working copy")


class UncommittedChangesError(GitGraphError):
    """Checkout refused because it would overwrite local changes."""

    def __init__(self, details: str = ""):
        self.details = details
        message = "Checkout would overwrite uncommitted local changes. Commit or stash them first."
        if details:
            message += f"\n{details}"
        super().__init__(message)


# Errors raised by GitPython / gitdb when a single object or reference cannot be read.
# Unborn or dangling references surface as ValueError.
GIT_READ_ERRORS = (git.exc.GitError, ODBError, OSError, ValueError)
