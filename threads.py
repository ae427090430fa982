from PyQt6.QtCore import QThread, pyqtSignal

import git_commands


class CommitPageThread(QThread):
    """在后台加载一页提交图"""

    finished = pyqtSignal(object)  # {"commits": [...], "hasMore": bool}
    error = pyqtSignal(str)

    def __init__(self, repo_path: str, limit: int, skip: int = 0, parent=None):
        super().__init__(parent)
        self.repo_path = repo_path
        self.limit = limit
        self.skip = skip

    def run(self):
        try:
            page = git_commands.list_commits(self.repo_path, self.limit, self.skip)
            self.finished.emit(page)
        except Exception as e:
            self.error.emit(str(e))


class DiffThread(QThread):
    """在后台计算两个提交之间的差异"""

    finished = pyqtSignal(object)  # {"files": [...]}
    error = pyqtSignal(str)

    def __init__(self, repo_path: str, old_commit_id: str, new_commit_id: str, parent=None):
        super().__init__(parent)
        self.repo_path = repo_path
        self.old_commit_id = old_commit_id
        self.new_commit_id = new_commit_id

    def run(self):
        try:
            self.finished.emit(git_commands.get_diff(self.repo_path, self.old_commit_id, self.new_commit_id))
        except Exception as e:
            self.error.emit(str(e))


class CheckoutThread(QThread):
    """用于在后台检出提交的线程"""

    finished = pyqtSignal(bool, str)  # (success, error_message)

    def __init__(self, repo_path: str, commit_id: str, parent=None):
        super().__init__(parent)
        self.repo_path = repo_path
        self.commit_id = commit_id

    def run(self):
        try:
            git_commands.checkout_commit(self.repo_path, self.commit_id)
            self.finished.emit(True, "")
        except Exception as e:
            self.finished.emit(False, str(e))
