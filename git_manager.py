import logging
import re
from typing import Iterator, List, Optional

import git
from git import GitCommandError

from git_errors import (
    GIT_READ_ERRORS,
    CommitNotFoundError,
    GitGraphError,
    InvalidCommitIdError,
    RepositoryNotFoundError,
    UncommittedChangesError,
    WorkingCopyNotAllowedError,
)
from git_graph_data import HEAD_TYPE_BRANCH, HEAD_TYPE_DETACHED, WORKING_COPY_ID

# 完整或缩写的 SHA-1，以及完整的 SHA-256
COMMIT_ID_PATTERN = re.compile(r"^(?:[0-9a-fA-F]{4,40}|[0-9a-fA-F]{64})$")

STASH_REF = "refs/stash"


class GitManager:
    """Thin wrapper around ``git.Repo`` for the graph engine.

    One instance is opened per request and closed when the request finishes.
    """

    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self.repo: Optional[git.Repo] = None

    def initialize(self) -> bool:
        """初始化 Git 仓库"""
        try:
            self.repo = git.Repo(self.repo_path)
            return True
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            logging.warning("GitManager: '%s' 不是有效的 Git 仓库", self.repo_path)
            return False

    def close(self):
        """关闭仓库，结束 GitPython 的常驻 cat-file 进程"""
        if self.repo is not None:
            self.repo.close()
            self.repo = None

    def __enter__(self) -> "GitManager":
        if self.repo is None and not self.initialize():
            raise RepositoryNotFoundError(self.repo_path)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _require_repo(self) -> git.Repo:
        if not self.repo:
            raise RepositoryNotFoundError(self.repo_path, "repository not initialized")
        return self.repo

    def head_target(self) -> Optional[str]:
        """HEAD 当前指向的提交；空仓库（unborn HEAD）返回 None"""
        repo = self._require_repo()
        try:
            return repo.head.commit.hexsha
        except GIT_READ_ERRORS as e:
            logging.debug("GitManager: 无法解析 HEAD：%s", e)
            return None

    def head_mode(self) -> Optional[str]:
        """HEAD 的模式：'branch'（符号引用）或 'detached'（直接指向提交）

        使用 GitPython 的结构化检查 ``HEAD.is_detached``，不解析 .git/HEAD 文本。
        """
        repo = self._require_repo()
        if self.head_target() is None:
            return None
        return HEAD_TYPE_DETACHED if repo.head.is_detached else HEAD_TYPE_BRANCH

    def get_branches(self) -> List[git.Head]:
        """获取所有本地分支"""
        return list(self._require_repo().heads)

    def get_remote_branches(self) -> List[git.RemoteReference]:
        """获取所有远程分支（跳过 origin/HEAD 这类符号引用）"""
        repo = self._require_repo()
        remote_branches = []
        for remote in repo.remotes:
            try:
                refs = list(remote.refs)
            except GIT_READ_ERRORS + (AssertionError,):
                logging.debug("GitManager: 远程 %s 没有可读的引用", remote.name)
                continue
            for ref in refs:
                if ref.remote_head == "HEAD":
                    continue
                remote_branches.append(ref)
        return remote_branches

    def get_tags(self) -> List[git.TagReference]:
        """获取所有标签"""
        return list(self._require_repo().tags)

    def get_stash_log(self) -> List[git.RefLogEntry]:
        """读取 stash 的 reflog，最新的在前（即 stash@{0} 在前）

        没有 stash 时返回空列表。
        """
        repo = self._require_repo()
        stash_ref = git.SymbolicReference(repo, STASH_REF)
        try:
            if not stash_ref.is_valid():
                return []
            entries = list(stash_ref.log())
        except GIT_READ_ERRORS as e:
            logging.warning("GitManager: 读取 stash reflog 失败：%s", e)
            return []
        entries.reverse()
        return entries

    def is_dirty(self) -> bool:
        """工作区是否有未提交的修改（包括未跟踪文件）"""
        repo = self._require_repo()
        try:
            return repo.is_dirty(untracked_files=True)
        except GIT_READ_ERRORS as e:
            logging.warning("GitManager: 获取工作区状态失败：%s", e)
            return False

    def get_commit(self, commit_id: str) -> git.Commit:
        """按 id 获取提交；id 格式错误或不存在时抛出异常"""
        repo = self._require_repo()
        if not isinstance(commit_id, str) or not COMMIT_ID_PATTERN.match(commit_id):
            raise InvalidCommitIdError(commit_id)
        try:
            obj = repo.commit(commit_id)
        except GIT_READ_ERRORS as e:
            raise CommitNotFoundError(commit_id) from e
        if not isinstance(obj, git.Commit):
            raise CommitNotFoundError(commit_id)
        return obj

    def iter_commits(self, revs: List[str], **kwargs) -> Iterator[git.Commit]:
        """从 revs 出发遍历提交历史，kwargs 原样传给 git rev-list（如 date_order=True）"""
        return self._require_repo().iter_commits(revs, **kwargs)

    def read_file_text(self, tree: git.Tree, path: str) -> str:
        """读取树中某个路径的文件内容；找不到或不是文件时返回空字符串"""
        try:
            obj = tree / path
        except KeyError:
            return ""
        except GIT_READ_ERRORS as e:
            logging.debug("GitManager: 无法在树 %s 中找到 %s：%s", tree.hexsha, path, e)
            return ""
        if obj.type != "blob":
            return ""
        try:
            data = obj.data_stream.read()
        except GIT_READ_ERRORS as e:
            logging.warning("GitManager: 读取 %s 内容失败：%s", path, e)
            return ""
        return data.decode("utf-8", errors="replace")

    def diff_commits(self, old_commit: git.Commit, new_commit: git.Commit) -> git.DiffIndex:
        """两个提交之间的树对树差异（不做重命名检测）"""
        return old_commit.diff(new_commit, no_renames=True)

    def checkout_commit(self, commit_id: str):
        """检出指定提交，HEAD 变为分离状态"""
        repo = self._require_repo()
        if commit_id == WORKING_COPY_ID:
            raise WorkingCopyNotAllowedError("Checkout")
        commit = self.get_commit(commit_id)
        try:
            repo.git.checkout("--detach", commit.hexsha)
        except GitCommandError as e:
            stderr = e.stderr.strip() if e.stderr else ""
            logging.error("检出 %s 失败：%s", commit.hexsha, stderr or e)
            if "would be overwritten by checkout" in stderr:
                raise UncommittedChangesError(stderr) from e
            raise GitGraphError(f"Checkout of {commit_id} failed: {stderr or e!s}") from e
        logging.info("GitManager: HEAD 已分离到 %s", commit.hexsha)
