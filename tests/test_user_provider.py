"""
ユーザー解決のユニットテスト
"""

import subprocess
import unittest
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

from inbox_organizer.user_provider import (
    MacUserProvider, UnixUserProvider, WindowsUserProvider, get_user_provider
)


NET_USER_OUTPUT = """
User accounts for \\\\DESKTOP-1234

-------------------------------------------------------------------------------
Administrator            alice                    DefaultAccount
Guest                    bob                      WDAGUtilityAccount
The command completed successfully.

"""

NET_USER_OUTPUT_ES = """
Cuentas de usuario de \\\\EQUIPO

-------------------------------------------------------------------------------
Administrador            carlos                   Invitado
Se ha completado el comando correctamente.
"""


class TestUnixUserProvider(unittest.TestCase):
    """ユーザールート直下の一覧によるユーザー解決のテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        (self.temp_dir / "alice").mkdir()
        (self.temp_dir / "bob").mkdir()
        (self.temp_dir / "stray.txt").write_text("not a user")
        self.provider = UnixUserProvider(user_roots=[self.temp_dir])

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_list_users_only_directories(self):
        self.assertEqual(sorted(self.provider.list_users()), ["alice", "bob"])

    def test_user_home_existing(self):
        self.assertEqual(self.provider.user_home("alice"), self.temp_dir / "alice")

    def test_user_home_missing(self):
        self.assertIsNone(self.provider.user_home("nonexistent_user_xyz"))

    def test_user_home_rejects_path_like_names(self):
        for username in ["", ".", "..", "alice/../bob", "a\\b", "!@#/$%"]:
            self.assertIsNone(self.provider.user_home(username), username)

    def test_user_home_non_ascii_missing(self):
        self.assertIsNone(self.provider.user_home("测试用户"))

    def test_missing_root_lists_nothing(self):
        provider = UnixUserProvider(user_roots=[self.temp_dir / "missing"])
        self.assertEqual(provider.list_users(), [])

    def test_mac_provider_shares_behaviour(self):
        provider = MacUserProvider(user_roots=[self.temp_dir])
        self.assertEqual(provider.user_home("bob"), self.temp_dir / "bob")


class TestWindowsUserProvider(unittest.TestCase):
    """Windows用ユーザー解決のテスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.users_root = self.temp_dir / "Users"
        self.usuarios_root = self.temp_dir / "Usuarios"
        for name in ["alice", "Public", "Default"]:
            (self.users_root / name).mkdir(parents=True)
        (self.usuarios_root / "carlos").mkdir(parents=True)
        self.provider = WindowsUserProvider(user_roots=[self.users_root, self.usuarios_root])

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_parse_net_user_output(self):
        accounts = WindowsUserProvider.parse_net_user_output(NET_USER_OUTPUT)
        self.assertEqual(
            accounts,
            ["Administrator", "alice", "DefaultAccount", "Guest", "bob", "WDAGUtilityAccount"]
        )

    def test_parse_net_user_output_spanish(self):
        accounts = WindowsUserProvider.parse_net_user_output(NET_USER_OUTPUT_ES)
        self.assertEqual(accounts, ["Administrador", "carlos", "Invitado"])

    def test_parse_account_names_with_spaces(self):
        output = (
            "User accounts for \\\\DESKTOP-1234\n\n"
            + "-" * 79 + "\n"
            + "Administrator".ljust(25) + "John Smith".ljust(25) + "Maria Jose\n"
            + "The command completed successfully.\n"
        )
        accounts = WindowsUserProvider.parse_net_user_output(output)
        self.assertEqual(accounts, ["Administrator", "John Smith", "Maria Jose"])

    def test_parse_unexpected_output(self):
        self.assertEqual(WindowsUserProvider.parse_net_user_output("error"), [])

    def test_list_users_filters_accounts_without_folder(self):
        output = NET_USER_OUTPUT.replace("bob   ", "carlos")
        completed = subprocess.CompletedProcess(args=['net', 'user'], returncode=0, stdout=output)
        with patch('inbox_organizer.user_provider.subprocess.run', return_value=completed):
            users = self.provider.list_users()
        self.assertEqual(users, ["alice", "carlos"])

    def test_list_users_falls_back_when_command_missing(self):
        with patch('inbox_organizer.user_provider.subprocess.run',
                   side_effect=FileNotFoundError("net")):
            users = self.provider.list_users()
        self.assertEqual(sorted(users), ["alice", "carlos"])

    def test_list_users_falls_back_when_command_fails(self):
        error = subprocess.CalledProcessError(returncode=2, cmd=['net', 'user'])
        with patch('inbox_organizer.user_provider.subprocess.run', side_effect=error):
            users = self.provider.list_users()
        self.assertEqual(sorted(users), ["alice", "carlos"])

    def test_user_home_checks_alternate_root(self):
        self.assertEqual(self.provider.user_home("carlos"), self.usuarios_root / "carlos")
        self.assertEqual(self.provider.user_home("alice"), self.users_root / "alice")
        self.assertIsNone(self.provider.user_home("nonexistent_user_xyz"))


class TestGetUserProvider(unittest.TestCase):
    """プラットフォーム選択のテスト"""

    def test_selects_by_system(self):
        self.assertIsInstance(get_user_provider('Windows'), WindowsUserProvider)
        self.assertIsInstance(get_user_provider('Darwin'), MacUserProvider)
        self.assertIsInstance(get_user_provider('Linux'), UnixUserProvider)
        self.assertIsInstance(get_user_provider('FreeBSD'), UnixUserProvider)

    def test_default_roots(self):
        self.assertEqual(get_user_provider('Linux').user_roots, [Path('/home')])
        self.assertEqual(get_user_provider('Darwin').user_roots, [Path('/Users')])
        self.assertEqual(
            get_user_provider('Windows').user_roots,
            [Path('C:/Users'), Path('C:/Usuarios')]
        )

    def test_roots_override(self):
        provider = get_user_provider('Linux', user_roots=[Path('/srv/home')])
        self.assertEqual(provider.user_roots, [Path('/srv/home')])

    def test_current_platform_does_not_crash(self):
        provider = get_user_provider()
        users = provider.list_users()
        self.assertTrue(all(users))
        self.assertIsNone(provider.user_home("nonexistent_user_xyz"))
