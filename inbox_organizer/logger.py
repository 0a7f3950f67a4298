"""
ロギングシステム

Inbox Organizerのロギング機能を提供します。
標準出力とファイル出力の両方をサポートし、進捗表示とエラーログを管理します。
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .models import Category, FileStats, OrganizeOutcome, RunResult

LOGGER_NAME = 'inbox_organizer'


@dataclass
class LogConfig:
    """ログ設定"""
    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_file: Optional[Path] = None
    verbose: bool = False


class ProgressLogger:
    """進捗表示とロギングを管理するクラス"""

    def __init__(self, config: LogConfig):
        self.config = config
        self.logger = self._setup_logger()
        self._start_time: Optional[datetime] = None

    def _setup_logger(self) -> logging.Logger:
        """ロガーのセットアップ"""
        # 各モジュールのロガー（inbox_organizer.*）もこのロガーに伝播する
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG)

        # 既存のハンドラーをクリア
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        console_formatter = logging.Formatter('%(message)s')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.config.console_level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        if self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.config.log_file, encoding='utf-8')
            file_handler.setLevel(self.config.file_level)
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

        return logger

    def log_processing_start(self, usernames: List[str], language: str):
        """処理開始時のサマリー表示"""
        self._start_time = datetime.now()

        self.logger.info("=" * 60)
        self.logger.info("Inbox Organizer - 処理開始")
        self.logger.info("=" * 60)
        self.logger.info(f"開始時刻: {self._start_time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info(f"言語: {language}")

        if usernames:
            self.logger.info("対象ユーザー:")
            for username in usernames:
                self.logger.info(f"  - {username}")

        self.logger.info("")

    def log_user_start(self, username: str, home: Path):
        """ユーザー単位の処理開始のログ"""
        self.logger.info(f"整理開始: {username} ({home})")

    def log_folder_analysis(self, folder: Path, stats: FileStats, majority: Optional[Category]):
        """フォルダ解析結果のログ"""
        label = majority.value if majority else 'なし'
        self.logger.debug(
            f"フォルダ解析: {folder} - music={stats.music}, videos={stats.videos}, "
            f"images={stats.images}, docs={stats.docs} -> {label}"
        )

    def log_move(self, source: Path, target: Path):
        """移動のログ"""
        if self.config.verbose:
            self.logger.info(f"移動: {source.name} -> {target.parent}")
        else:
            self.logger.debug(f"移動: {source} -> {target}")

    def log_user_complete(self, outcome: OrganizeOutcome, processing_time: float):
        """ユーザー単位の処理完了のログ"""
        stats = outcome.stats
        self.logger.info(
            f"整理完了: {outcome.username} - music={stats.music}, videos={stats.videos}, "
            f"images={stats.images}, docs={stats.docs} (失敗: {len(outcome.failures)}件)"
        )
        self.logger.info(f"処理時間: {processing_time:.2f}秒")
        self.logger.info("")

    def log_processing_complete(self, result: RunResult):
        """処理完了時のサマリー表示"""
        end_time = datetime.now()
        total_time = (end_time - self._start_time).total_seconds() if self._start_time else 0

        self.logger.info("=" * 60)
        self.logger.info("処理完了サマリー")
        self.logger.info("=" * 60)
        self.logger.info(f"終了時刻: {end_time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info(f"総処理時間: {total_time:.2f}秒")
        self.logger.info("")
        self.logger.info("移動したファイル/フォルダ:")
        self.logger.info(f"  - Music: {result.stats.music}")
        self.logger.info(f"  - Videos: {result.stats.videos}")
        self.logger.info(f"  - Images: {result.stats.images}")
        self.logger.info(f"  - Docs: {result.stats.docs}")

        if result.errors:
            self.logger.info("")
            self.logger.info(f"エラー詳細 ({len(result.errors)}件):")
            for username, error_msg in result.errors:
                self.logger.error(f"  - {username}: {error_msg}")

        self.logger.info("=" * 60)

    def log_error(self, file_path: Path, error_message: str, exception: Optional[Exception] = None):
        """エラーログの詳細記録"""
        error_msg = f"エラー - {file_path}: {error_message}"

        if exception:
            error_msg += f" ({type(exception).__name__}: {str(exception)})"

        self.logger.error(error_msg)

        # 詳細なスタックトレースはファイルログのみに記録
        if exception and self.config.log_file:
            self.logger.debug("スタックトレース:", exc_info=exception)

    def log_warning(self, message: str):
        """警告メッセージのログ"""
        self.logger.warning(f"警告: {message}")

    def log_info(self, message: str):
        """情報メッセージのログ"""
        self.logger.info(message)

    def log_debug(self, message: str):
        """デバッグメッセージのログ"""
        self.logger.debug(message)


def create_default_logger(verbose: bool = False, log_file: Optional[Path] = None) -> ProgressLogger:
    """デフォルトのロガーを作成"""
    config = LogConfig(
        console_level=logging.DEBUG if verbose else logging.INFO,
        file_level=logging.DEBUG,
        log_file=log_file,
        verbose=verbose
    )
    return ProgressLogger(config)


def get_default_log_file() -> Path:
    """デフォルトのログファイルパスを取得"""
    log_dir = Path.home() / '.inbox_organizer' / 'logs'
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return log_dir / f'inbox_organizer_{timestamp}.log'
