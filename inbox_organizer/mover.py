"""
ファイル移動処理モジュール

ファイルとフォルダをカテゴリ別の移動先ディレクトリへ移動する機能を提供します。
移動先に同名のフォルダが存在する場合はディレクトリツリーをマージします。
"""

import logging
import shutil
import threading
from pathlib import Path
from typing import Dict

from .exceptions import FileOperationError
from .models import Category


class Mover:
    """ファイルとフォルダを移動するクラス"""

    def __init__(self):
        """Moverを初期化"""
        self.logger = logging.getLogger(__name__)
        # カテゴリごとの移動先ツリーを変更する処理はこのロックで直列化する
        self._category_locks: Dict[Category, threading.Lock] = {
            category: threading.Lock() for category in Category
        }

    def move_file(self, source_path: Path, target_dir: Path, category: Category) -> Path:
        """
        ファイルを移動先ディレクトリへ移動

        同名のファイルが存在する場合は上書きします。

        Args:
            source_path: 移動するファイル
            target_dir: 移動先ディレクトリ
            category: 移動先のカテゴリ

        Returns:
            移動後のパス

        Raises:
            FileOperationError: 移動に失敗した場合
        """
        target_path = target_dir / source_path.name
        with self._category_locks[category]:
            self._move_entry(source_path, target_path)
        self.logger.debug(f"ファイル移動: {source_path} -> {target_path}")
        return target_path

    def move_folder(self, source_path: Path, target_dir: Path, category: Category) -> Path:
        """
        フォルダを移動先ディレクトリへ移動

        同名のフォルダが存在する場合は中身をマージします。

        Args:
            source_path: 移動するフォルダ
            target_dir: 移動先ディレクトリ
            category: 移動先のカテゴリ

        Returns:
            移動後のパス

        Raises:
            FileOperationError: 移動またはマージに失敗した場合
        """
        target_path = target_dir / source_path.name
        with self._category_locks[category]:
            self.merge_directories(source_path, target_path)
        self.logger.debug(f"フォルダ移動: {source_path} -> {target_path}")
        return target_path

    def merge_directories(self, source_dir: Path, target_dir: Path) -> None:
        """
        ディレクトリツリーをマージ

        移動先が存在しない場合はツリー全体を移動します。存在する場合は
        サブディレクトリを再帰的にマージし、ファイルは上書きで移動してから
        空になった移動元ディレクトリを削除します。途中で失敗した場合、
        それまでの移動は元に戻しません。

        Args:
            source_dir: 移動元ディレクトリ
            target_dir: 移動先ディレクトリ

        Raises:
            FileOperationError: 移動に失敗した場合
        """
        # リンク先のディレクトリは展開せず、リンク自体を移動する
        if source_dir.is_symlink():
            if target_dir.exists() or target_dir.is_symlink():
                raise FileOperationError(
                    source_dir, f"同名のエントリが存在するためリンクを移動できません: {target_dir}")
            self._move_entry(source_dir, target_dir)
            return

        if not target_dir.exists():
            self._move_entry(source_dir, target_dir)
            return

        if not target_dir.is_dir():
            raise FileOperationError(
                source_dir, f"移動先がディレクトリではありません: {target_dir}")

        try:
            entries = list(source_dir.iterdir())
        except OSError as e:
            raise FileOperationError(source_dir, f"ディレクトリ読み取りエラー: {e}") from e

        for entry in entries:
            child_target = target_dir / entry.name
            # シンボリックリンクはたどらずにリンク自体を移動する
            if entry.is_dir() and not entry.is_symlink():
                self.merge_directories(entry, child_target)
            else:
                self._move_entry(entry, child_target)

        try:
            source_dir.rmdir()
        except OSError as e:
            raise FileOperationError(source_dir, f"移動元ディレクトリ削除エラー: {e}") from e

    def remove_empty_file(self, file_path: Path) -> bool:
        """
        0バイトのファイルを削除

        Args:
            file_path: 対象ファイル

        Returns:
            削除した場合True

        Raises:
            FileOperationError: 削除に失敗した場合
        """
        try:
            if file_path.stat().st_size != 0:
                return False
            file_path.unlink()
        except OSError as e:
            raise FileOperationError(file_path, f"空ファイル削除エラー: {e}") from e

        self.logger.debug(f"空ファイルを削除: {file_path}")
        return True

    def _move_entry(self, source_path: Path, target_path: Path) -> None:
        """
        単一エントリを移動

        Raises:
            FileOperationError: 移動に失敗した場合
        """
        if target_path.is_dir() and (source_path.is_symlink() or not source_path.is_dir()):
            raise FileOperationError(
                source_path, f"同名のディレクトリが存在します: {target_path}")

        try:
            # 別ボリュームへの移動はコピーと削除にフォールバックする
            shutil.move(str(source_path), str(target_path))
        except PermissionError as e:
            raise FileOperationError(source_path, f"アクセス権限エラー: {e}") from e
        except OSError as e:
            raise FileOperationError(source_path, f"ファイル操作エラー: {e}") from e
