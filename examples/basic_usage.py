#!/usr/bin/env python3
"""
Inbox Organizer - 基本的な使用例

このスクリプトは、Inbox Organizerの基本的な使用方法を示します。
プログラムから直接ツールの機能を呼び出す例を提供します。
"""

import getpass
import sys
from pathlib import Path

# プロジェクトのルートディレクトリをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from inbox_organizer import (
    ALL_USERS, Organizer, OrganizerError, create_default_logger,
    get_user_provider, load_config
)


def example_current_user():
    """ログイン中のユーザーを整理する例"""
    print("=" * 60)
    print("Inbox Organizer - 基本的な使用例")
    print("=" * 60)

    username = getpass.getuser()
    provider = get_user_provider()
    home = provider.user_home(username)

    if home is None:
        print(f"⚠️  ホームディレクトリが見つかりません: {username}")
        return

    print(f"ユーザー: {username}")
    print(f"ホームディレクトリ: {home}")
    print()

    try:
        organizer = Organizer(load_config(), provider, create_default_logger(verbose=True))
        outcome = organizer.organize(username, 'en')
    except OrganizerError as e:
        print(f"❌ エラーが発生しました: {e}")
        return

    print(f"音楽: {outcome.stats.music}")
    print(f"動画: {outcome.stats.videos}")
    print(f"画像: {outcome.stats.images}")
    print(f"文書: {outcome.stats.docs}")

    if outcome.failures:
        print()
        print(f"移動できなかった項目 ({len(outcome.failures)}件):")
        for failure in outcome.failures:
            print(f"  - {failure.path}: {failure.message}")

    print()
    print("✅ 処理が完了しました！")


def example_all_users_spanish():
    """スペイン語のフォルダ名で全ユーザーを整理する例"""
    print("=" * 60)
    print("Inbox Organizer - 全ユーザー（スペイン語）の例")
    print("=" * 60)

    organizer = Organizer(load_config(), get_user_provider(), create_default_logger())
    result = organizer.organize_users(ALL_USERS, 'es')

    print(f"移動数の合計: {result.stats.total}")
    for username, message in result.errors:
        print(f"  - {username}: {message}")


if __name__ == '__main__':
    example_current_user()
