"""
ユーザー解決モジュール

ユーザー名からホームディレクトリを解決し、ローカルユーザーの一覧を取得します。
プラットフォーム（Windows / macOS / Unix系）ごとに実装を切り替えます。
Windowsでは `net user` コマンドを外部コマンドとして実行してアカウント一覧を取得します。
"""

import logging
import platform
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence


class UserProvider(ABC):
    """ユーザー一覧とホームディレクトリの解決を行う基底クラス"""

    # ユーザーのホームディレクトリを格納するルート（優先順）
    DEFAULT_USER_ROOTS: Sequence[Path] = ()

    def __init__(self, user_roots: Optional[Iterable[Path]] = None):
        self.user_roots: List[Path] = [Path(p) for p in (user_roots or self.DEFAULT_USER_ROOTS)]
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def list_users(self) -> List[str]:
        """ホームディレクトリを持つユーザー名の一覧を取得"""

    def user_home(self, username: str) -> Optional[Path]:
        """
        ユーザーのホームディレクトリを取得

        Args:
            username: ユーザー名（完全一致）

        Returns:
            ホームディレクトリのパス。見つからない場合はNone
        """
        if not self._is_valid_username(username):
            return None

        for root in self.user_roots:
            candidate = root / username
            try:
                if candidate.is_dir():
                    return candidate
            except OSError as e:
                self.logger.debug(f"ホームディレクトリ確認エラー: {candidate} - {e}")
        return None

    def _list_root_directories(self, excluded: Iterable[str] = ()) -> List[str]:
        """ユーザールート直下のディレクトリ名を列挙順に取得"""
        excluded = {name.lower() for name in excluded}
        users: List[str] = []
        for root in self.user_roots:
            try:
                entries = list(root.iterdir())
            except OSError as e:
                self.logger.debug(f"ユーザールートを読み取れません: {root} - {e}")
                continue
            for entry in entries:
                if entry.name.lower() in excluded or entry.name in users:
                    continue
                try:
                    if entry.is_dir():
                        users.append(entry.name)
                except OSError:
                    continue
        return users

    @staticmethod
    def _is_valid_username(username: str) -> bool:
        # パスの1要素として扱える名前のみ受け付ける
        if not username or username in ('.', '..'):
            return False
        return not any(sep in username for sep in ('/', '\\', '\0'))


class WindowsUserProvider(UserProvider):
    """Windows用のユーザー解決（英語版とスペイン語版のユーザーフォルダに対応）"""

    DEFAULT_USER_ROOTS = (Path('C:/Users'), Path('C:/Usuarios'))

    # アカウントではないプロファイルフォルダ
    SYSTEM_PROFILES = ('Public', 'Default', 'Default User', 'All Users')

    # net user のアカウント表の列幅
    NET_USER_COLUMN_WIDTH = 25

    def list_users(self) -> List[str]:
        """
        `net user` でアカウントを列挙し、ユーザーフォルダを持つものだけを返す

        コマンドが使用できない場合はユーザーフォルダの一覧にフォールバックします。
        """
        try:
            accounts = self._run_net_user()
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.warning(f"net user の実行に失敗しました。ユーザーフォルダから一覧を作成します: {e}")
            return self._list_root_directories(self.SYSTEM_PROFILES)

        users = [account for account in accounts if self.user_home(account) is not None]
        self.logger.debug(f"アカウント {len(accounts)}件中 {len(users)}件がユーザーフォルダを持っています")
        return users

    def _run_net_user(self) -> List[str]:
        """
        net user コマンドを実行してアカウント名を取得

        Raises:
            FileNotFoundError: コマンドが見つからない場合
            subprocess.CalledProcessError: コマンドが失敗した場合
        """
        net_path = shutil.which('net') or 'net'
        result = subprocess.run(
            [net_path, 'user'],
            capture_output=True,
            text=True,
            timeout=30,
            check=True,
        )
        return self.parse_net_user_output(result.stdout)

    @classmethod
    def parse_net_user_output(cls, output: str) -> List[str]:
        """
        net user の出力からアカウント名を抽出

        出力形式:
            User accounts for \\\\HOST
            -------------------------------
            Administrator            Guest                    John Smith
            The command completed successfully.

        区切り線の後から最終行（完了メッセージ、言語によって異なる）の手前までが
        アカウントの表になります。各行は25文字幅の列でアカウント名を並べます。
        """
        lines = [line.rstrip() for line in output.splitlines()]
        separator = next(
            (i for i, line in enumerate(lines) if line and set(line.strip()) == {'-'}),
            None,
        )
        if separator is None:
            return []

        table = [line for line in lines[separator + 1:] if line.strip()]
        if table:
            table = table[:-1]

        accounts: List[str] = []
        for line in table:
            # アカウント名は空白を含み得るため固定幅の列で切り出す
            for start in range(0, len(line), cls.NET_USER_COLUMN_WIDTH):
                name = line[start:start + cls.NET_USER_COLUMN_WIDTH].strip()
                if name:
                    accounts.append(name)
        return accounts


class MacUserProvider(UserProvider):
    """macOS用のユーザー解決"""

    DEFAULT_USER_ROOTS = (Path('/Users'),)

    def list_users(self) -> List[str]:
        return self._list_root_directories()


class UnixUserProvider(UserProvider):
    """Unix系OS用のユーザー解決"""

    DEFAULT_USER_ROOTS = (Path('/home'),)

    def list_users(self) -> List[str]:
        return self._list_root_directories()


def get_user_provider(system: Optional[str] = None,
                      user_roots: Optional[Iterable[Path]] = None) -> UserProvider:
    """
    実行中のプラットフォームに対応するUserProviderを作成

    Args:
        system: platform.system() の値（Noneの場合は実行環境から取得）
        user_roots: ユーザールートの上書き

    Returns:
        UserProviderのインスタンス
    """
    system = system or platform.system()
    if system == 'Windows':
        return WindowsUserProvider(user_roots)
    if system == 'Darwin':
        return MacUserProvider(user_roots)
    return UnixUserProvider(user_roots)
