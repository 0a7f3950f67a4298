"""
コマンドラインインターフェース

Inbox Organizerのメインエントリーポイントです。
argparseのサブコマンド機能を使用して、organize、list-users、show-configコマンドを提供します。
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .exceptions import OrganizerError, ValidationError
from .logger import create_default_logger, get_default_log_file
from .organizer import ALL_USERS, Organizer
from .path_validator import PathValidator
from .user_provider import get_user_provider


def create_parser() -> argparse.ArgumentParser:
    """
    コマンドライン引数パーサーを作成

    Returns:
        設定済みのArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='inbox-organizer',
        description='ダウンロードとデスクトップのファイルを種類別のフォルダへ整理するツール',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  # ユーザーのファイルを整理
  inbox-organizer organize alice

  # スペイン語のフォルダ名（Descargas, Escritorio...）で整理
  inbox-organizer organize alice --lang es

  # 全ユーザーを整理
  inbox-organizer organize --all-users

  # ユーザー一覧を表示
  inbox-organizer list-users

詳細については各サブコマンドのヘルプを参照してください:
  inbox-organizer <command> --help
        """
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='利用可能なコマンド',
        metavar='<command>'
    )

    # organizeコマンド（エイリアス: o）
    organize_parser = subparsers.add_parser(
        'organize',
        aliases=['o'],
        help='ファイルを種類別のフォルダへ整理',
        description='ダウンロードとデスクトップのファイルを音楽・動画・画像・文書のフォルダへ移動します。',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  inbox-organizer organize alice
  inbox-organizer organize alice --lang es --verbose
  inbox-organizer organize --all-users --users-root /srv/home
        """
    )
    organize_parser.add_argument(
        'username',
        nargs='?',
        help='整理するユーザー名'
    )
    organize_parser.add_argument(
        '--all-users', '-a',
        action='store_true',
        help='ホームディレクトリを持つ全ユーザーを整理'
    )
    organize_parser.add_argument(
        '--lang', '-l',
        default='en',
        help='フォルダ名とメッセージの言語（デフォルト: en）'
    )
    _add_common_arguments(organize_parser)
    organize_parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='詳細ログを表示'
    )

    # list-usersコマンド（エイリアス: u）
    users_parser = subparsers.add_parser(
        'list-users',
        aliases=['u'],
        help='ユーザー一覧を表示',
        description='ホームディレクトリを持つユーザーの一覧を表示します。'
    )
    users_parser.add_argument(
        '--users-root',
        action='append',
        metavar='DIR',
        help='ユーザーのホームディレクトリを格納するルート（複数指定可）'
    )

    # show-configコマンド（エイリアス: c）
    config_parser = subparsers.add_parser(
        'show-config',
        aliases=['c'],
        help='有効な設定を表示',
        description='デフォルト値と設定ファイルを合成した設定をJSON形式で表示します。'
    )
    config_parser.add_argument(
        '--config',
        type=str,
        help='設定ファイルのパス（デフォルト: ~/.inbox_organizer/config.json）'
    )

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--config',
        type=str,
        help='設定ファイルのパス（デフォルト: ~/.inbox_organizer/config.json）'
    )
    parser.add_argument(
        '--users-root',
        action='append',
        metavar='DIR',
        help='ユーザーのホームディレクトリを格納するルート（複数指定可）'
    )


def _resolve_users_roots(values: Optional[List[str]]) -> Optional[List[Path]]:
    """--users-root の値を検証してPathのリストに変換"""
    if not values:
        return None
    roots = [PathValidator.normalize_path(value) for value in values]
    for root in roots:
        PathValidator.validate_directory(root)
    return roots


def _resolve_config_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    path = PathValidator.normalize_path(value)
    PathValidator.validate_file(path)
    return path


def handle_organize_command(args) -> int:
    """
    organizeコマンドを処理

    Args:
        args: 解析されたコマンドライン引数

    Returns:
        終了コード（0: 成功、1: エラー）
    """
    try:
        if args.all_users and args.username:
            raise ValidationError("ユーザー名と --all-users は同時に指定できません")

        config = load_config(_resolve_config_path(args.config))
        user_provider = get_user_provider(user_roots=_resolve_users_roots(args.users_root))

        log_file = get_default_log_file() if args.verbose else None
        progress_logger = create_default_logger(verbose=args.verbose, log_file=log_file)

        organizer = Organizer(config, user_provider, progress_logger)
        selection = ALL_USERS if args.all_users else (args.username or '')
        result = organizer.organize_users(selection, args.lang)

        print(f"Music files/folders moved: {result.stats.music}")
        print(f"Video files/folders moved: {result.stats.videos}")
        print(f"Image files/folders moved: {result.stats.images}")
        print(f"Docs files/folders moved: {result.stats.docs}")

        if result.errors:
            print("", file=sys.stderr)
            print("Errors:", file=sys.stderr)
            for username, message in result.errors:
                print(f"{username}: {message}", file=sys.stderr)
            return 1

        return 0

    except ValidationError as e:
        print(f"❌ 入力エラー: {e}", file=sys.stderr)
        return 1
    except OrganizerError as e:
        print(f"❌ 処理エラー: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ 予期しないエラー: {e}", file=sys.stderr)
        return 1


def handle_list_users_command(args) -> int:
    """
    list-usersコマンドを処理

    Returns:
        終了コード（0: 成功、1: エラー）
    """
    try:
        user_provider = get_user_provider(user_roots=_resolve_users_roots(args.users_root))
        for username in user_provider.list_users():
            print(username)
        return 0

    except ValidationError as e:
        print(f"❌ 入力エラー: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ 予期しないエラー: {e}", file=sys.stderr)
        return 1


def handle_show_config_command(args) -> int:
    """
    show-configコマンドを処理

    Returns:
        終了コード（0: 成功、1: エラー）
    """
    try:
        config = load_config(_resolve_config_path(args.config))
        print(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
        return 0

    except ValidationError as e:
        print(f"❌ 入力エラー: {e}", file=sys.stderr)
        return 1
    except OrganizerError as e:
        print(f"❌ 設定エラー: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ 予期しないエラー: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        終了コード（0: 成功、1: エラー）
    """
    parser = create_parser()
    argv = sys.argv[1:] if argv is None else argv

    # 引数が指定されていない場合はヘルプを表示
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command in ['organize', 'o']:
        return handle_organize_command(args)
    elif args.command in ['list-users', 'u']:
        return handle_list_users_command(args)
    elif args.command in ['show-config', 'c']:
        return handle_show_config_command(args)
    else:
        print(f"❌ 不明なコマンド: {args.command}", file=sys.stderr)
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
