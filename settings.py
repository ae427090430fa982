import json
import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_PAGE_SIZE = 100


class Settings:
    def __init__(self, config_dir: Optional[str] = None):
        # 配置目录，可通过 GIT_GRAPH_CONFIG_DIR 覆盖
        if config_dir is None:
            config_dir = os.getenv("GIT_GRAPH_CONFIG_DIR") or os.path.join(str(Path.home()), ".git_graph")
        self.config_dir = config_dir

        # 配置文件路径
        self.config_file = os.path.join(self.config_dir, "settings.json")

        # 默认设置
        self.settings = {
            "page_size": DEFAULT_PAGE_SIZE,  # 每页加载的提交数
            "recent_repositories": [],  # 最近打开的仓库列表
            "max_recent": 10,  # 最大记录数
        }

        # 加载已有设置
        self.load_settings()

    def load_settings(self):
        """加载设置"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r", encoding="utf-8") as f:
                    saved_settings = json.load(f)
                    self.settings.update(saved_settings)
        except (OSError, ValueError) as e:
            logging.warning(f"加载设置失败：{e!s}")

    def save_settings(self):
        """保存设置"""
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logging.warning(f"保存设置失败：{e!s}")

    def add_recent_repository(self, repo_path):
        """添加最近打开的仓库"""
        recent = self.settings["recent_repositories"]

        # 如果已经在列表中，先移除
        if repo_path in recent:
            recent.remove(repo_path)

        # 添加到列表开头，并保持列表在最大长度以内
        recent.insert(0, repo_path)
        self.settings["recent_repositories"] = recent[: self.settings["max_recent"]]

        self.save_settings()

    def get_recent_repositories(self):
        """获取最近仓库列表"""
        return self.settings["recent_repositories"]

    def get_page_size(self) -> int:
        """获取每页提交数"""
        page_size = self.settings.get("page_size", DEFAULT_PAGE_SIZE)
        if not isinstance(page_size, int) or page_size <= 0:
            return DEFAULT_PAGE_SIZE
        return page_size

    def set_page_size(self, page_size: int):
        """设置每页提交数"""
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.settings["page_size"] = page_size
        self.save_settings()


# 创建全局settings实例
settings = Settings()
