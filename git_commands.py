"""Request/response commands for the graph viewer.

Every command opens the repository, does its work, and closes it again;
nothing is kept between calls. Results are plain dicts/lists ready for JSON.
"""

import logging
from typing import List, Optional

import commit_diff
import commit_graph
import ref_resolver
from git_manager import GitManager


def list_references(repo_path: str) -> List[dict]:
    with GitManager(repo_path) as manager:
        return [ref.to_dict() for ref in ref_resolver.list_references(manager)]


def list_commits(repo_path: str, limit: Optional[int], skip: int = 0) -> dict:
    with GitManager(repo_path) as manager:
        return commit_graph.list_commits(manager, limit=limit, skip=skip).to_dict()


def get_diff(repo_path: str, old_commit_id: str, new_commit_id: str) -> dict:
    with GitManager(repo_path) as manager:
        files = commit_diff.get_diff(manager, old_commit_id, new_commit_id)
        return {"files": [entry.to_dict() for entry in files]}


def checkout_commit(repo_path: str, commit_id: str) -> None:
    logging.info("Checkout %s in %s", commit_id, repo_path)
    with GitManager(repo_path) as manager:
        manager.checkout_commit(commit_id)


def list_authors(repo_path: str, limit: Optional[int], skip: int = 0) -> List[dict]:
    with GitManager(repo_path) as manager:
        page = commit_graph.list_commits(manager, limit=limit, skip=skip)
        return [author.to_dict() for author in commit_graph.summarize_authors(page.commits)]
