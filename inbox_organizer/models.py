"""
データモデル定義

Inbox Organizerで使用するデータクラスと列挙型を定義します。
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple


class Category(Enum):
    """ファイルの分類カテゴリ"""
    MUSIC = 'music'
    VIDEO = 'video'
    IMAGE = 'image'
    DOCS = 'docs'


# 同数の場合はこの順序で先に来るカテゴリを優先
CATEGORY_PRIORITY: Tuple[Category, ...] = (
    Category.MUSIC,
    Category.VIDEO,
    Category.IMAGE,
    Category.DOCS,
)


class Role(Enum):
    """ディレクトリの論理的な役割"""
    DOWNLOADS = 'Downloads'
    DESKTOP = 'Desktop'
    MUSIC = 'Music'
    VIDEOS = 'Videos'
    PICTURES = 'Pictures'
    DOCUMENTS = 'Documents'


# カテゴリごとの移動先ディレクトリ
CATEGORY_ROLES: Dict[Category, Role] = {
    Category.MUSIC: Role.MUSIC,
    Category.VIDEO: Role.VIDEOS,
    Category.IMAGE: Role.PICTURES,
    Category.DOCS: Role.DOCUMENTS,
}

# スキャン対象のソースディレクトリ
SOURCE_ROLES: Tuple[Role, ...] = (Role.DOWNLOADS, Role.DESKTOP)


@dataclass
class FileStats:
    """カテゴリ別のファイル数（または移動数）"""
    music: int = 0
    videos: int = 0
    images: int = 0
    docs: int = 0

    _FIELDS = {
        Category.MUSIC: 'music',
        Category.VIDEO: 'videos',
        Category.IMAGE: 'images',
        Category.DOCS: 'docs',
    }

    def get(self, category: Category) -> int:
        return getattr(self, self._FIELDS[category])

    def increment(self, category: Category, amount: int = 1) -> None:
        name = self._FIELDS[category]
        setattr(self, name, getattr(self, name) + amount)

    def add(self, other: 'FileStats') -> None:
        """別の統計を加算"""
        for category in CATEGORY_PRIORITY:
            self.increment(category, other.get(category))

    @property
    def total(self) -> int:
        return self.music + self.videos + self.images + self.docs


@dataclass
class LocalizedDirectorySet:
    """ユーザーのホーム配下にある6つの役割ディレクトリ（言語別の名前で解決済み）"""
    home: Path
    downloads: Path
    desktop: Path
    music: Path
    videos: Path
    pictures: Path
    documents: Path

    def path_for(self, role: Role) -> Path:
        return getattr(self, role.value.lower())

    def category_dir(self, category: Category) -> Path:
        return self.path_for(CATEGORY_ROLES[category])

    def all_paths(self) -> List[Path]:
        return [self.path_for(role) for role in Role]


@dataclass
class MoveFailure:
    """個別アイテムの移動失敗"""
    path: Path
    message: str


@dataclass
class OrganizeOutcome:
    """1ユーザー分の整理結果"""
    username: str
    stats: FileStats
    failures: List[MoveFailure] = field(default_factory=list)


@dataclass
class RunResult:
    """複数ユーザー分の集計結果"""
    stats: FileStats = field(default_factory=FileStats)
    errors: List[Tuple[str, str]] = field(default_factory=list)  # (username, error_message)
    outcomes: List[OrganizeOutcome] = field(default_factory=list)
