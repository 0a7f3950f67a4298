"""
カスタム例外クラス定義

Inbox Organizerで使用する例外クラスを定義します。
"""

from pathlib import Path
from typing import Optional


class OrganizerError(Exception):
    """処理エラーの基底クラス"""
    pass


class ValidationError(OrganizerError):
    """検証エラー"""
    pass


class EmptyUsernameError(ValidationError):
    """ユーザー名が空の場合のエラー"""
    pass


class UserNotFoundError(OrganizerError):
    """ユーザーのホームディレクトリが見つからない場合のエラー"""

    def __init__(self, username: str, message: Optional[str] = None):
        self.username = username
        super().__init__(message or f"User {username} not found")


class FileOperationError(OrganizerError):
    """ファイル操作エラー"""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class DirectoryCreationError(FileOperationError):
    """ディレクトリ作成エラー"""
    pass


class WorkerError(OrganizerError):
    """ワーカースレッドが処理を完了できなかった場合のエラー

    他のワーカーが完了した分の結果を outcome に保持します。
    """

    def __init__(self, message: str, outcome=None):
        self.outcome = outcome
        super().__init__(message)


class ConfigError(OrganizerError):
    """設定ファイルエラー"""
    pass
