"""
整理処理管理モジュール

ユーザーのダウンロードフォルダとデスクトップフォルダを並列にスキャンし、
ファイルとフォルダをカテゴリ別のディレクトリへ移動します。
複数ユーザーの処理結果の集計もここで行います。
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .analyzer import FolderAnalyzer
from .config import DEFAULT_LANGUAGE, OrganizerConfig
from .exceptions import (
    DirectoryCreationError, EmptyUsernameError, FileOperationError,
    OrganizerError, UserNotFoundError, WorkerError
)
from .logger import ProgressLogger
from .models import (
    FileStats, LocalizedDirectorySet, MoveFailure, OrganizeOutcome, Role,
    RunResult, SOURCE_ROLES
)
from .mover import Mover
from .user_provider import UserProvider, get_user_provider

# 全ユーザーを対象にする場合の指定
ALL_USERS = '<ALL>'


class _RunState:
    """1回の整理処理でワーカー間に共有される状態"""

    def __init__(self):
        self.stats = FileStats()
        self.failures: List[MoveFailure] = []
        self.lock = threading.Lock()

    def record_success(self, category) -> None:
        with self.lock:
            self.stats.increment(category)

    def record_failure(self, path: Path, message: str) -> None:
        with self.lock:
            self.failures.append(MoveFailure(path=path, message=message))


class Organizer:
    """ファイル整理を担当するクラス"""

    def __init__(self, config: Optional[OrganizerConfig] = None,
                 user_provider: Optional[UserProvider] = None,
                 progress_logger: Optional[ProgressLogger] = None):
        """Organizerを初期化"""
        self.config = config or OrganizerConfig()
        self.user_provider = user_provider or get_user_provider()
        self.analyzer = FolderAnalyzer(self.config)
        self.mover = Mover()
        self.progress_logger = progress_logger
        self.logger = logging.getLogger(__name__)

    def organize(self, username: str, language: str = DEFAULT_LANGUAGE) -> OrganizeOutcome:
        """
        1ユーザー分のファイルを整理

        Args:
            username: ユーザー名（前後の空白は除去される）
            language: ディレクトリ名とエラーメッセージの言語タグ

        Returns:
            カテゴリ別の移動数と個別の失敗を含む整理結果

        Raises:
            EmptyUsernameError: ユーザー名が空の場合
            UserNotFoundError: ホームディレクトリが見つからない場合
            WorkerError: ワーカーが処理を完了できなかった場合
        """
        username = username.strip()
        if not username:
            raise EmptyUsernameError(self.config.error_message(language, 'empty_username'))

        home = self.user_provider.user_home(username)
        if home is None:
            raise UserNotFoundError(
                username, self.config.error_message(language, 'user_not_found', username))

        if self.progress_logger:
            self.progress_logger.log_user_start(username, home)
        start_time = time.time()

        directories = self.config.localized_directories(home, language)
        state = _RunState()
        self._ensure_directories(directories, state)

        worker_errors = []
        with ThreadPoolExecutor(max_workers=self.config.max_workers,
                                thread_name_prefix='organizer') as executor:
            future_to_role = {
                executor.submit(self._process_source_root, directories, role, state): role
                for role in SOURCE_ROLES
            }

            for future in as_completed(future_to_role):
                role = future_to_role[future]
                try:
                    future.result()
                except Exception as e:
                    self._log_failure(directories.path_for(role), "ワーカー処理エラー", e)
                    worker_errors.append((role, e))

        outcome = OrganizeOutcome(username=username, stats=state.stats, failures=state.failures)
        if worker_errors:
            role, error = worker_errors[0]
            raise WorkerError(
                f"{directories.path_for(role)} の処理を完了できませんでした: {error}",
                outcome) from error

        if self.progress_logger:
            self.progress_logger.log_user_complete(outcome, time.time() - start_time)
        return outcome

    def organize_users(self, selection: Union[str, Iterable[str]],
                       language: str = DEFAULT_LANGUAGE) -> RunResult:
        """
        複数ユーザーのファイルを整理して結果を集計

        ユーザー単位のエラーは記録して次のユーザーの処理を続けます。

        Args:
            selection: ユーザー名、ユーザー名のリスト、または ALL_USERS
            language: 言語タグ

        Returns:
            集計結果
        """
        usernames = self.resolve_usernames(selection)
        result = RunResult()

        if self.progress_logger:
            self.progress_logger.log_processing_start(usernames, language)

        for username in usernames:
            try:
                outcome = self.organize(username, language)
            except WorkerError as e:
                result.errors.append((username, str(e)))
                self.logger.error(f"ユーザー処理エラー: {username} - {e}")
                if e.outcome is not None:
                    # 完了したワーカーの移動分も集計に含める
                    self._collect_outcome(result, e.outcome)
                continue
            except OrganizerError as e:
                result.errors.append((username, str(e)))
                self.logger.error(f"ユーザー処理エラー: {username} - {e}")
                continue

            self._collect_outcome(result, outcome)

        if self.progress_logger:
            self.progress_logger.log_processing_complete(result)
        return result

    @staticmethod
    def _collect_outcome(result: RunResult, outcome: OrganizeOutcome) -> None:
        result.outcomes.append(outcome)
        result.stats.add(outcome.stats)
        for failure in outcome.failures:
            result.errors.append((outcome.username, f"{failure.path}: {failure.message}"))

    def resolve_usernames(self, selection: Union[str, Iterable[str]]) -> List[str]:
        """ユーザー指定を対象ユーザー名のリストに展開"""
        if selection == ALL_USERS:
            return self.user_provider.list_users()
        if isinstance(selection, str):
            return [selection]
        return list(selection)

    def _ensure_directories(self, directories: LocalizedDirectorySet, state: _RunState) -> None:
        """役割ディレクトリを作成（失敗しても処理は継続）"""
        for directory in directories.all_paths():
            try:
                self._create_directory(directory)
            except DirectoryCreationError as e:
                state.record_failure(e.path, str(e))
                self._log_failure(e.path, str(e))

    @staticmethod
    def _create_directory(directory: Path) -> None:
        if directory.is_dir():
            return
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(directory, f"ディレクトリ作成失敗: {e}") from e

    def _process_source_root(self, directories: LocalizedDirectorySet, role: Role,
                             state: _RunState) -> None:
        """
        ソースディレクトリ1つ分の整理（ワーカースレッドで実行）

        読み取れないソースディレクトリは空として扱い、失敗として記録します。

        Args:
            directories: 解決済みの役割ディレクトリ
            role: 処理するソースディレクトリの役割
            state: ワーカー間で共有される状態
        """
        root = directories.path_for(role)
        try:
            folders, files = self.analyzer.scan_children(root)
        except OSError as e:
            error_msg = f"ソースディレクトリ読み取りエラー: {e}"
            state.record_failure(root, error_msg)
            self._log_failure(root, error_msg)
            return
        self.logger.debug(f"スキャン完了: {root} (フォルダ {len(folders)}件, ファイル {len(files)}件)")

        remaining_files = []
        for file_path in files:
            try:
                if self.mover.remove_empty_file(file_path):
                    continue
            except FileOperationError as e:
                state.record_failure(e.path, str(e))
                self._log_failure(e.path, str(e))
                continue
            remaining_files.append(file_path)

        if self.config.allows_folder_relocation(role):
            for folder_path in folders:
                self._relocate_folder(folder_path, directories, state)

        for file_path in remaining_files:
            self._relocate_file(file_path, directories, state)

    def _relocate_folder(self, folder_path: Path, directories: LocalizedDirectorySet,
                         state: _RunState) -> None:
        """フォルダを多数派カテゴリのディレクトリへ移動"""
        try:
            stats, majority = self.analyzer.classify_folder(folder_path)
            if self.progress_logger:
                self.progress_logger.log_folder_analysis(folder_path, stats, majority)
            if majority is None:
                return

            target_path = self.mover.move_folder(
                folder_path, directories.category_dir(majority), majority)
        except FileOperationError as e:
            state.record_failure(e.path, str(e))
            self._log_failure(e.path, str(e))
            return
        except Exception as e:
            error_msg = f"予期しないエラー: {e}"
            state.record_failure(folder_path, error_msg)
            self._log_failure(folder_path, error_msg, e)
            return

        state.record_success(majority)
        if self.progress_logger:
            self.progress_logger.log_move(folder_path, target_path)

    def _relocate_file(self, file_path: Path, directories: LocalizedDirectorySet,
                       state: _RunState) -> None:
        """ファイルを拡張子のカテゴリのディレクトリへ移動"""
        category = self.config.classify_path(file_path)
        if category is None:
            return

        try:
            target_path = self.mover.move_file(
                file_path, directories.category_dir(category), category)
        except FileOperationError as e:
            state.record_failure(e.path, str(e))
            self._log_failure(e.path, str(e))
            return
        except Exception as e:
            error_msg = f"予期しないエラー: {e}"
            state.record_failure(file_path, error_msg)
            self._log_failure(file_path, error_msg, e)
            return

        state.record_success(category)
        if self.progress_logger:
            self.progress_logger.log_move(file_path, target_path)

    def _log_failure(self, path: Path, message: str, exception: Optional[Exception] = None) -> None:
        if self.progress_logger:
            self.progress_logger.log_error(path, message, exception)
        else:
            self.logger.error(f"移動エラー: {path} - {message}")


def organize_files(username: str, language: str = DEFAULT_LANGUAGE,
                   config: Optional[OrganizerConfig] = None,
                   user_provider: Optional[UserProvider] = None) -> FileStats:
    """
    1ユーザー分のファイルを整理してカテゴリ別の移動数を返す

    Raises:
        EmptyUsernameError: ユーザー名が空の場合
        UserNotFoundError: ホームディレクトリが見つからない場合
        WorkerError: ワーカーが処理を完了できなかった場合
    """
    organizer = Organizer(config, user_provider)
    return organizer.organize(username, language).stats
