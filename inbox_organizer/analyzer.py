"""
フォルダ解析

ディレクトリツリーを走査してカテゴリ別のファイル数を数え、
フォルダ全体の多数派カテゴリを判定する機能を提供します。
"""

import logging
from pathlib import Path
from typing import List, Optional, Set, Tuple

from .config import OrganizerConfig
from .models import CATEGORY_PRIORITY, Category, FileStats


def get_majority_type(stats: FileStats) -> Optional[Category]:
    """
    最もファイル数の多いカテゴリを判定

    同数の場合は MUSIC, VIDEO, IMAGE, DOCS の順で先のカテゴリを優先します。

    Args:
        stats: カテゴリ別のファイル数

    Returns:
        多数派カテゴリ。すべて0の場合はNone
    """
    majority: Optional[Category] = None
    best = 0
    for category in CATEGORY_PRIORITY:
        count = stats.get(category)
        if count > best:
            majority = category
            best = count
    return majority


class FolderAnalyzer:
    """ディレクトリを走査してファイルを分類するクラス"""

    def __init__(self, config: OrganizerConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def analyze(self, path: Path) -> FileStats:
        """
        ディレクトリ配下のすべてのファイルをカテゴリ別に数える

        読み取れないディレクトリはスキップします。シンボリックリンクによる
        循環は解決済みパスで検出してスキップします。

        Args:
            path: 解析するディレクトリ

        Returns:
            カテゴリ別のファイル数
        """
        stats = FileStats()
        visited: Set[Path] = set()
        pending = [path]

        while pending:
            directory = pending.pop()
            try:
                real_path = directory.resolve()
            except (OSError, RuntimeError) as e:
                self.logger.debug(f"パスを解決できません: {directory} - {e}")
                continue

            if real_path in visited:
                self.logger.debug(f"循環を検出したためスキップ: {directory}")
                continue
            visited.add(real_path)

            try:
                entries = list(directory.iterdir())
            except OSError as e:
                self.logger.debug(f"ディレクトリを読み取れません: {directory} - {e}")
                continue

            for entry in entries:
                try:
                    if entry.is_dir():
                        pending.append(entry)
                    elif entry.is_file():
                        category = self.config.classify_path(entry)
                        if category is not None:
                            stats.increment(category)
                except OSError as e:
                    self.logger.debug(f"エントリを読み取れません: {entry} - {e}")

        return stats

    def classify_folder(self, path: Path) -> Tuple[FileStats, Optional[Category]]:
        """フォルダを解析して多数派カテゴリを判定"""
        stats = self.analyze(path)
        return stats, get_majority_type(stats)

    def scan_children(self, root: Path) -> Tuple[List[Path], List[Path]]:
        """
        ディレクトリ直下のエントリをサブフォルダとファイルに分ける

        Args:
            root: スキャンするディレクトリ

        Returns:
            (サブフォルダのリスト, ファイルのリスト)。列挙順

        Raises:
            OSError: ディレクトリを読み取れない場合
        """
        folders: List[Path] = []
        files: List[Path] = []

        for entry in root.iterdir():
            try:
                if entry.is_dir():
                    folders.append(entry)
                elif entry.is_file():
                    files.append(entry)
            except OSError as e:
                self.logger.debug(f"エントリを読み取れません: {entry} - {e}")

        return folders, files
