"""
設定管理

拡張子からカテゴリへの対応表、言語別のディレクトリ名、言語別のエラーメッセージを
まとめた設定を提供します。設定はJSONファイルで上書きできます。
実行中は読み取り専用で、複数のワーカーから共有されます。
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .exceptions import ConfigError
from .models import Category, LocalizedDirectorySet, Role

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = 'en'

DEFAULT_FILE_EXTENSIONS: Dict[Category, Tuple[str, ...]] = {
    Category.MUSIC: ('mp3', 'ogg', 'wav', 'flac'),
    Category.VIDEO: ('mp4', 'avi', 'mkv', 'mov'),
    Category.IMAGE: ('png', 'jpg', 'jpeg', 'gif'),
    Category.DOCS: ('pdf', 'txt', 'epub'),
}

# 設定ファイル上のキー名
EXTENSION_KEYS: Dict[str, Category] = {
    'music': Category.MUSIC,
    'videos': Category.VIDEO,
    'images': Category.IMAGE,
    'docs': Category.DOCS,
}

DEFAULT_LOCALIZED_DIRS: Dict[str, Dict[str, str]] = {
    'en': {
        'Downloads': 'Downloads',
        'Desktop': 'Desktop',
        'Music': 'Music',
        'Videos': 'Videos',
        'Pictures': 'Pictures',
        'Documents': 'Documents',
    },
    'es': {
        'Downloads': 'Descargas',
        'Desktop': 'Escritorio',
        'Music': 'Música',
        'Videos': 'Vídeos',
        'Pictures': 'Imágenes',
        'Documents': 'Documentos',
    },
}

DEFAULT_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    'en': {
        'empty_username': 'Empty username. Please enter a valid username.',
        'user_not_found': 'User {username} not found. Please enter a valid username.',
    },
    'es': {
        'empty_username': 'Usuario vacío. Por favor, ingrese un nombre de usuario válido.',
        'user_not_found': 'Usuario {username} no encontrado. Por favor, ingrese un nombre de usuario válido.',
    },
}

# ソースディレクトリごとのサブフォルダ移動ポリシー
DEFAULT_FOLDER_RELOCATION: Dict[Role, bool] = {
    Role.DOWNLOADS: True,
    Role.DESKTOP: False,
}


def _freeze(table: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({key: MappingProxyType(dict(value)) for key, value in table.items()})


def _normalize_extension(ext: str) -> str:
    return ext.strip().lstrip('.').lower()


@dataclass(frozen=True)
class OrganizerConfig:
    """実行中に共有される設定（読み取り専用）"""
    file_extensions: Mapping[Category, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_FILE_EXTENSIONS)))
    localized_dirs: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _freeze(DEFAULT_LOCALIZED_DIRS))
    error_messages: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _freeze(DEFAULT_ERROR_MESSAGES))
    folder_relocation: Mapping[Role, bool] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_FOLDER_RELOCATION)))
    max_workers: int = 2

    def __post_init__(self):
        # 拡張子 -> カテゴリの逆引き表。先に定義されたカテゴリを優先する
        lookup: Dict[str, Category] = {}
        for category in Category:
            for ext in self.file_extensions.get(category, ()):
                lookup.setdefault(_normalize_extension(ext), category)
        object.__setattr__(self, '_extension_lookup', MappingProxyType(lookup))

    def classify_extension(self, ext: str) -> Optional[Category]:
        """
        拡張子からカテゴリを判定

        Args:
            ext: 拡張子（先頭のドットは有っても無くてもよい、大文字小文字は区別しない）

        Returns:
            該当するカテゴリ。どのカテゴリにも該当しない場合はNone
        """
        return self._extension_lookup.get(_normalize_extension(ext))

    def classify_path(self, path: Path) -> Optional[Category]:
        """ファイルパスの拡張子からカテゴリを判定"""
        if not path.suffix:
            return None
        return self.classify_extension(path.suffix)

    def localized_name(self, language: str, role: Union[Role, str]) -> str:
        """
        役割に対応する言語別のディレクトリ名を取得

        Args:
            language: 言語タグ（例: 'en', 'es'）。未知の言語は英語にフォールバック
            role: ディレクトリの役割

        Returns:
            ローカライズされたディレクトリ名

        Raises:
            ValueError: 未知の役割が指定された場合
        """
        role = Role(role)
        names = self.localized_dirs.get(language) or {}
        if role.value in names:
            return names[role.value]
        return self.localized_dirs.get(DEFAULT_LANGUAGE, {}).get(role.value, role.value)

    def localized_directories(self, home: Path, language: str) -> LocalizedDirectorySet:
        """ホームディレクトリ配下の役割ディレクトリを言語別の名前で解決"""
        paths = {role.value.lower(): home / self.localized_name(language, role) for role in Role}
        return LocalizedDirectorySet(home=home, **paths)

    def error_message(self, language: str, key: str, username: str = '') -> str:
        """
        言語別のエラーメッセージを取得

        Args:
            language: 言語タグ
            key: 'empty_username' または 'user_not_found'
            username: メッセージに埋め込むユーザー名

        Returns:
            {username} を置換済みのメッセージ
        """
        messages = self.error_messages.get(language) or {}
        template = messages.get(key) or self.error_messages.get(DEFAULT_LANGUAGE, {}).get(key)
        if template is None:
            template = DEFAULT_ERROR_MESSAGES[DEFAULT_LANGUAGE].get(key, 'Unknown error')
        return template.replace('{username}', username)

    def allows_folder_relocation(self, source_role: Role) -> bool:
        return bool(self.folder_relocation.get(source_role, False))

    def to_dict(self) -> Dict[str, Any]:
        """JSON形式で保存できる辞書に変換"""
        return {
            'file_extensions': {
                key: list(self.file_extensions.get(category, ()))
                for key, category in EXTENSION_KEYS.items()
            },
            'localized_dirs': {lang: dict(names) for lang, names in self.localized_dirs.items()},
            'error_messages': {lang: dict(msgs) for lang, msgs in self.error_messages.items()},
            'folder_relocation': {role.value: flag for role, flag in self.folder_relocation.items()},
            'max_workers': self.max_workers,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrganizerConfig':
        """
        辞書から設定を作成（指定されていない項目はデフォルト値）

        Raises:
            ConfigError: 値の形式が不正な場合
        """
        if not isinstance(data, dict):
            raise ConfigError("設定のルートはオブジェクトである必要があります")

        try:
            extensions = dict(DEFAULT_FILE_EXTENSIONS)
            for key, values in (data.get('file_extensions') or {}).items():
                if key not in EXTENSION_KEYS:
                    raise ConfigError(f"未知のカテゴリ: {key}")
                if not isinstance(values, list):
                    raise ConfigError(f"拡張子はリストで指定してください: {key}")
                _require_strings(values, f"file_extensions.{key}")
                extensions[EXTENSION_KEYS[key]] = tuple(_normalize_extension(v) for v in values)

            localized_dirs = {lang: dict(names) for lang, names in DEFAULT_LOCALIZED_DIRS.items()}
            for lang, names in (data.get('localized_dirs') or {}).items():
                for role_name in names:
                    Role(role_name)
                _require_strings(names.values(), f"localized_dirs.{lang}")
                localized_dirs.setdefault(lang, {}).update(names)

            error_messages = {lang: dict(msgs) for lang, msgs in DEFAULT_ERROR_MESSAGES.items()}
            for lang, msgs in (data.get('error_messages') or {}).items():
                _require_strings(msgs.values(), f"error_messages.{lang}")
                error_messages.setdefault(lang, {}).update(msgs)

            folder_relocation = dict(DEFAULT_FOLDER_RELOCATION)
            for role_name, flag in (data.get('folder_relocation') or {}).items():
                if not isinstance(flag, bool):
                    raise ConfigError(f"folder_relocation の値は真偽値で指定してください: {role_name}")
                folder_relocation[Role(role_name)] = flag

            max_workers = int(data.get('max_workers', 2))
            if max_workers < 1:
                raise ConfigError(f"max_workers は1以上である必要があります: {max_workers}")
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"設定値が不正です: {e}") from e

        return cls(
            file_extensions=MappingProxyType(extensions),
            localized_dirs=_freeze(localized_dirs),
            error_messages=_freeze(error_messages),
            folder_relocation=MappingProxyType(folder_relocation),
            max_workers=max_workers,
        )


def _require_strings(values: Iterable[Any], label: str) -> None:
    for value in values:
        if not isinstance(value, str):
            raise ConfigError(f"{label} の値は文字列で指定してください: {value!r}")


def get_default_config_file() -> Path:
    """デフォルトの設定ファイルパスを取得"""
    return Path.home() / '.inbox_organizer' / 'config.json'


def load_config(config_file: Optional[Path] = None) -> OrganizerConfig:
    """
    設定ファイルを読み込む

    Args:
        config_file: 設定ファイルのパス（Noneの場合はデフォルトの場所）

    Returns:
        読み込んだ設定。ファイルが存在しない場合はデフォルト設定

    Raises:
        ConfigError: ファイルの読み込みまたは解析に失敗した場合
    """
    path = config_file or get_default_config_file()

    if not path.exists():
        logger.debug(f"設定ファイルが存在しません。デフォルト設定を使用します: {path}")
        return OrganizerConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"設定ファイル読み込みエラー: {path} - {e}") from e

    config = OrganizerConfig.from_dict(data)
    logger.info(f"設定ファイルを読み込みました: {path}")
    return config
