"""
Moverのプロパティベーステスト

Property 5: ディレクトリマージの保存性
"""

import os
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, strategies as st
from hypothesis import settings

from inbox_organizer.exceptions import FileOperationError
from inbox_organizer.models import Category
from inbox_organizer.mover import Mover


safe_name_strategy = st.text(
    alphabet='abcdefghijklmnopqrstuvwxyz0123456789',
    min_size=1,
    max_size=12
)


@st.composite
def merge_scenario_strategy(draw):
    """移動元と移動先に一部重複するファイルを配置するシナリオを生成"""
    names = draw(st.lists(safe_name_strategy, min_size=1, max_size=10, unique=True))
    source = {}
    target = {}
    for name in names:
        subdir = draw(st.sampled_from(['', 'inner', 'inner/deep']))
        relative = f"{subdir}/{name}.jpg" if subdir else f"{name}.jpg"
        placement = draw(st.sampled_from(['source', 'target', 'both']))
        if placement in ('source', 'both'):
            source[relative] = draw(st.binary(min_size=1, max_size=64))
        if placement in ('target', 'both'):
            target[relative] = draw(st.binary(min_size=1, max_size=64))
    return source, target


@settings(max_examples=50)
@given(merge_scenario_strategy())
def test_directory_merge_preservation_property(scenario):
    """
    **Property 5: ディレクトリマージの保存性**

    任意の移動元ツリーと既存の移動先ツリーに対して、マージ後の移動先は
    両方のファイルの和集合を持ち、同名ファイルは移動元の内容で上書きされ、
    移動元ディレクトリは存在しなくなるべきである。
    """
    source_files, target_files = scenario

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        source_dir = temp_path / "Downloads" / "Trip"
        target_root = temp_path / "Pictures"
        source_dir.mkdir(parents=True)
        target_root.mkdir()

        for relative, content in source_files.items():
            path = source_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        if target_files:
            for relative, content in target_files.items():
                path = target_root / "Trip" / relative
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(content)

        Mover().move_folder(source_dir, target_root, Category.IMAGE)

        expected = dict(target_files)
        expected.update(source_files)
        merged_dir = target_root / "Trip"
        actual = {
            path.relative_to(merged_dir).as_posix(): path.read_bytes()
            for path in merged_dir.rglob('*') if path.is_file()
        }

        assert actual == expected
        assert not source_dir.exists()


class TestMover:
    """Moverのテスト"""

    def test_folder_merge_into_existing_destination(self, tmp_path):
        source = tmp_path / "Downloads" / "Trip"
        source.mkdir(parents=True)
        for i in range(3):
            (source / f"photo{i}.jpg").write_bytes(b"new")
        pictures = tmp_path / "Pictures"
        (pictures / "Trip").mkdir(parents=True)
        (pictures / "Trip" / "old.jpg").write_bytes(b"old")

        target = Mover().move_folder(source, pictures, Category.IMAGE)

        assert target == pictures / "Trip"
        assert len(list(target.iterdir())) == 4
        assert not source.exists()

    @pytest.mark.skipif(os.name == 'nt', reason="シンボリックリンクの作成に権限が必要")
    def test_symlinked_folder_is_not_merged_through(self, tmp_path):
        external = tmp_path / "nas" / "Trip"
        external.mkdir(parents=True)
        (external / "p0.jpg").write_bytes(b"x")
        link = tmp_path / "Downloads" / "Trip"
        link.parent.mkdir()
        link.symlink_to(external, target_is_directory=True)
        pictures = tmp_path / "Pictures"
        (pictures / "Trip").mkdir(parents=True)
        (pictures / "Trip" / "old.jpg").write_bytes(b"old")

        with pytest.raises(FileOperationError) as exc_info:
            Mover().move_folder(link, pictures, Category.IMAGE)

        assert exc_info.value.path == link
        assert link.is_symlink()
        assert (external / "p0.jpg").exists()
        assert sorted(p.name for p in (pictures / "Trip").iterdir()) == ["old.jpg"]

    @pytest.mark.skipif(os.name == 'nt', reason="シンボリックリンクの作成に権限が必要")
    def test_symlinked_folder_moves_as_link(self, tmp_path):
        external = tmp_path / "nas" / "Trip"
        external.mkdir(parents=True)
        (external / "p0.jpg").write_bytes(b"x")
        link = tmp_path / "Downloads" / "Trip"
        link.parent.mkdir()
        link.symlink_to(external, target_is_directory=True)
        pictures = tmp_path / "Pictures"
        pictures.mkdir()

        target = Mover().move_folder(link, pictures, Category.IMAGE)

        assert target.is_symlink()
        assert not os.path.lexists(link)
        assert (external / "p0.jpg").exists()

    def test_folder_move_without_collision(self, tmp_path):
        source = tmp_path / "Downloads" / "Album"
        (source / "disc1").mkdir(parents=True)
        (source / "disc1" / "a.mp3").write_bytes(b"x")
        music = tmp_path / "Music"
        music.mkdir()

        Mover().move_folder(source, music, Category.MUSIC)

        assert (music / "Album" / "disc1" / "a.mp3").read_bytes() == b"x"
        assert not source.exists()

    def test_file_move_overwrites_existing(self, tmp_path):
        source = tmp_path / "song.mp3"
        source.write_bytes(b"new")
        music = tmp_path / "Music"
        music.mkdir()
        (music / "song.mp3").write_bytes(b"old")

        target = Mover().move_file(source, music, Category.MUSIC)

        assert target.read_bytes() == b"new"
        assert not source.exists()

    def test_file_onto_directory_fails(self, tmp_path):
        source = tmp_path / "report.pdf"
        source.write_bytes(b"x")
        documents = tmp_path / "Documents"
        (documents / "report.pdf").mkdir(parents=True)

        with pytest.raises(FileOperationError) as exc_info:
            Mover().move_file(source, documents, Category.DOCS)

        assert exc_info.value.path == source
        assert source.exists()

    def test_merge_fails_when_destination_is_file(self, tmp_path):
        source = tmp_path / "Downloads" / "Trip"
        source.mkdir(parents=True)
        (source / "a.jpg").write_bytes(b"x")
        pictures = tmp_path / "Pictures"
        pictures.mkdir()
        (pictures / "Trip").write_bytes(b"not a folder")

        with pytest.raises(FileOperationError):
            Mover().move_folder(source, pictures, Category.IMAGE)

        assert (source / "a.jpg").exists()

    def test_move_missing_file_fails(self, tmp_path):
        music = tmp_path / "Music"
        music.mkdir()
        with pytest.raises(FileOperationError):
            Mover().move_file(tmp_path / "gone.mp3", music, Category.MUSIC)

    def test_remove_empty_file(self, tmp_path):
        empty = tmp_path / "empty.mp3"
        empty.write_bytes(b"")
        full = tmp_path / "full.mp3"
        full.write_bytes(b"x")

        mover = Mover()
        assert mover.remove_empty_file(empty) is True
        assert mover.remove_empty_file(full) is False
        assert not empty.exists()
        assert full.exists()
