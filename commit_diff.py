# commit_diff.py

import logging
from typing import List

from git_errors import WorkingCopyNotAllowedError
from git_graph_data import WORKING_COPY_ID, DiffEntry
from git_manager import GitManager


def get_diff(manager: GitManager, old_commit_id: str, new_commit_id: str) -> List[DiffEntry]:
    """File-level diff between two commits with whole-file content on each side.

    Both ids must name real commits; the working-copy node is rejected. A side
    whose file cannot be found (or is not a regular blob) comes back empty
    instead of failing the whole diff.
    """
    if WORKING_COPY_ID in (old_commit_id, new_commit_id):
        raise WorkingCopyNotAllowedError("Diff")

    old_commit = manager.get_commit(old_commit_id)
    new_commit = manager.get_commit(new_commit_id)
    old_tree = old_commit.tree
    new_tree = new_commit.tree

    entries = []
    for diff in manager.diff_commits(old_commit, new_commit):
        old_path = diff.a_path or diff.b_path
        new_path = diff.b_path or diff.a_path

        # 新增文件没有旧内容，删除文件没有新内容
        old_content = "" if diff.new_file else manager.read_file_text(old_tree, old_path)
        new_content = "" if diff.deleted_file else manager.read_file_text(new_tree, new_path)

        entries.append(
            DiffEntry(
                path=old_path if diff.deleted_file else new_path,
                old_content=old_content,
                new_content=new_content,
            )
        )

    logging.info("CommitDiff: %s..%s -> %d files", old_commit.hexsha[:7], new_commit.hexsha[:7], len(entries))
    return entries
