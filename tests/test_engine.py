"""Tests for thememgr.core.engine."""

import os
import shutil
from pathlib import Path

import pytest

from thememgr.core import engine as engine_module
from thememgr.core.engine import ApplyEngine
from thememgr.core.manifest import first_entry_name, parse_manifest
from thememgr.core.models import OperationStage, PackageVariant, ThemePackage
from thememgr.errors import ErrorCode, ThemeManagerError

HEADER = "Filetype: Flipper Animation Manifest\nVersion: 1\n"


def _snapshot(root: Path) -> dict[str, bytes]:
    """Map relative file paths to their contents (empty dirs as None)."""
    result = {}
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root)
        if not dirnames and not filenames:
            result[str(rel_dir) + "/"] = None
        for fname in filenames:
            result[str(rel_dir / fname)] = (Path(dirpath) / fname).read_bytes()
    return result


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def storage(tmp_path):
    """A storage volume with one pack of each layout and an active folder."""
    packs = tmp_path / "animation_packs"

    _write(packs / "Alpha" / "manifest.txt", HEADER + "\nName: alpha_anim\n")
    _write(packs / "Alpha" / "alpha_anim" / "meta.txt", "Width: 128\nHeight: 64\n")
    _write(packs / "Alpha" / "alpha_anim" / "frame_0.bm", "alpha frame")

    _write(packs / "Beta" / "Anims" / "manifest.txt", HEADER + "\nName: beta_anim\n")
    _write(packs / "Beta" / "Anims" / "beta_anim" / "meta.txt", "Width: 64\nHeight: 32\n")
    _write(packs / "Beta" / "README.md", "beta readme stays out of the active folder")

    _write(packs / "Foo" / "meta.txt", "Width: 32\nHeight: 32\n")
    _write(packs / "Foo" / "frame_0.bm", "foo frame")

    active = tmp_path / "dolphin"
    _write(active / "manifest.txt", HEADER + "\nName: stock\n")
    _write(active / "stock" / "meta.txt", "Width: 128\nHeight: 64\n")
    _write(active / "stock" / "frame_0.bm", "stock frame")
    return tmp_path


@pytest.fixture
def engine(storage):
    return ApplyEngine.for_storage_root(storage)


def _package(engine: ApplyEngine, name: str) -> ThemePackage:
    package = engine.scan().get(name)
    assert package is not None
    return package


class TestApply:
    def test_apply_pack_moves_old_active_to_backup(self, engine, storage):
        before = _snapshot(storage / "dolphin")
        result = engine.apply(_package(engine, "Alpha"))
        assert result.ok
        assert result.stage is OperationStage.DONE
        assert result.backup_taken is True
        assert _snapshot(storage / "dolphin_backup") == before
        assert first_entry_name(storage / "dolphin" / "manifest.txt") == "alpha_anim"
        assert (storage / "dolphin" / "alpha_anim" / "frame_0.bm").read_text() == "alpha frame"
        assert not (storage / "dolphin" / "stock").exists()

    def test_apply_anims_pack_merges_only_anims_folder(self, engine, storage):
        assert engine.apply(_package(engine, "Beta"))
        active = storage / "dolphin"
        assert (active / "manifest.txt").exists()
        assert (active / "beta_anim" / "meta.txt").exists()
        assert not (active / "README.md").exists()
        assert not (active / "Anims").exists()

    def test_apply_single_generates_manifest(self, engine, storage):
        result = engine.apply(_package(engine, "Foo"))
        assert result.ok
        manifest = storage / "dolphin" / "manifest.txt"
        valid, count = parse_manifest(manifest)
        assert valid is True
        assert count == 1
        assert first_entry_name(manifest) == "Foo"
        assert (storage / "dolphin" / "Foo" / "frame_0.bm").read_text() == "foo frame"
        assert "Anim + manifest" in result.message

    def test_apply_without_active_folder_skips_backup(self, engine, storage):
        shutil.rmtree(storage / "dolphin")
        result = engine.apply(_package(engine, "Alpha"))
        assert result.ok
        assert result.backup_taken is False
        assert not (storage / "dolphin_backup").exists()
        assert (storage / "dolphin" / "manifest.txt").exists()

    def test_apply_does_not_change_package_source(self, engine, storage):
        before = _snapshot(storage / "animation_packs")
        engine.apply(_package(engine, "Foo"))
        assert _snapshot(storage / "animation_packs") == before

    def test_only_one_backup_is_kept(self, engine, storage):
        original = _snapshot(storage / "dolphin")
        assert engine.apply(_package(engine, "Alpha"))
        after_alpha = _snapshot(storage / "dolphin")
        assert engine.apply(_package(engine, "Foo"))

        assert _snapshot(storage / "dolphin_backup") == after_alpha
        assert _snapshot(storage / "dolphin_backup") != original
        assert engine.restore()
        assert _snapshot(storage / "dolphin") == after_alpha
        assert engine.restore().ok is False

    def test_backup_failure_leaves_active_untouched(self, engine, storage, monkeypatch):
        before = _snapshot(storage / "dolphin")

        def failing_rename(src, dst):
            raise ThemeManagerError(ErrorCode.RENAME_FAILED, path=src)

        monkeypatch.setattr(engine_module.fsops, "rename_dir", failing_rename)
        result = engine.apply(_package(engine, "Alpha"))
        assert result.ok is False
        assert result.stage is OperationStage.BACKUP
        assert result.error.code is ErrorCode.RENAME_FAILED
        assert result.backup_only is False
        assert _snapshot(storage / "dolphin") == before

    def test_populate_failure_keeps_backup(self, engine, storage, monkeypatch):
        before = _snapshot(storage / "dolphin")

        def failing_merge(src, dst):
            raise ThemeManagerError(ErrorCode.MERGE_FAILED, path=src)

        monkeypatch.setattr(engine_module.fsops, "merge_tree", failing_merge)
        result = engine.apply(_package(engine, "Alpha"))
        assert result.ok is False
        assert result.stage is OperationStage.POPULATE
        assert result.backup_only is True
        assert engine.has_backup is True
        assert _snapshot(storage / "dolphin_backup") == before

    def test_prepare_failure_reports_prepare_stage(self, engine, storage):
        shutil.rmtree(storage / "dolphin")
        (storage / "dolphin").write_text("not a folder", encoding="utf-8")
        result = engine.apply(_package(engine, "Alpha"))
        assert result.ok is False
        assert result.stage is OperationStage.PREPARE
        assert result.error.code is ErrorCode.MKDIR_FAILED
        assert result.backup_taken is False

    def test_single_manifest_write_failure_keeps_backup(self, engine, storage, monkeypatch):
        before = _snapshot(storage / "dolphin")

        def failing_write(path, content):
            raise ThemeManagerError(ErrorCode.OPEN_FAILED, path=path)

        monkeypatch.setattr(engine_module.fsops, "write_text_file", failing_write)
        result = engine.apply(_package(engine, "Foo"))
        assert result.ok is False
        assert result.stage is OperationStage.POPULATE
        assert result.error.code is ErrorCode.OPEN_FAILED
        assert result.backup_only is True
        assert _snapshot(storage / "dolphin_backup") == before
        assert not (storage / "dolphin" / "manifest.txt").exists()

    def test_file_in_backup_slot_is_replaced(self, engine, storage):
        (storage / "dolphin_backup").write_text("stray", encoding="utf-8")
        before = _snapshot(storage / "dolphin")
        result = engine.apply(_package(engine, "Foo"))
        assert result.ok
        assert result.backup_taken is True
        assert _snapshot(storage / "dolphin_backup") == before
        assert engine.has_backup is True

    def test_symlink_in_backup_slot_is_unlinked_not_followed(self, engine, storage, tmp_path_factory):
        outside = tmp_path_factory.mktemp("outside")
        _write(outside / "keep.txt", "outside file")
        try:
            os.symlink(outside, storage / "dolphin_backup", target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert engine.apply(_package(engine, "Alpha"))
        assert (outside / "keep.txt").read_text() == "outside file"
        assert not (storage / "dolphin_backup").is_symlink()
        assert (storage / "dolphin_backup" / "stock").is_dir()

    def test_apply_missing_package_folder(self, engine, storage):
        package = _package(engine, "Alpha")
        shutil.rmtree(storage / "animation_packs" / "Alpha")
        result = engine.apply(package)
        assert result.ok is False
        assert result.error.code is ErrorCode.NOT_FOUND
        assert not (storage / "dolphin_backup").exists()

    def test_apply_rejects_path_like_names(self, engine, storage):
        package = ThemePackage("..", PackageVariant.PACK, storage)
        assert engine.apply(package).ok is False
        assert (storage / "dolphin" / "stock").exists()


class TestMerge:
    def test_merge_overwrites_and_keeps_extra_files(self, engine, storage):
        shutil.rmtree(storage / "dolphin")
        assert engine.apply(_package(engine, "Alpha"))
        active = storage / "dolphin"
        _write(active / "alpha_anim" / "frame_0.bm", "edited")
        _write(active / "leftover.txt", "keep me")

        # Second apply backs up the edited folder and starts from an empty one.
        assert engine.apply(_package(engine, "Alpha"))
        assert (active / "alpha_anim" / "frame_0.bm").read_text() == "alpha frame"
        assert not (active / "leftover.txt").exists()
        assert (storage / "dolphin_backup" / "leftover.txt").read_text() == "keep me"

    def test_merge_tree_semantics(self, tmp_path):
        from thememgr.core.fsops import merge_tree

        src = tmp_path / "src"
        dst = tmp_path / "dst"
        _write(src / "shared.txt", "from source")
        _write(src / "nested" / "new.txt", "new")
        _write(dst / "shared.txt", "old")
        _write(dst / "only_dst.txt", "untouched")
        merge_tree(src, dst)
        assert (dst / "shared.txt").read_text() == "from source"
        assert (dst / "nested" / "new.txt").read_text() == "new"
        assert (dst / "only_dst.txt").read_text() == "untouched"


class TestFsops:
    def test_remove_tree_deletes_plain_file(self, tmp_path):
        from thememgr.core.fsops import remove_tree

        target = tmp_path / "stray"
        target.write_text("x", encoding="utf-8")
        remove_tree(target)
        assert not target.exists()

    def test_remove_tree_missing_path(self, tmp_path):
        from thememgr.core.fsops import remove_tree

        with pytest.raises(ThemeManagerError) as excinfo:
            remove_tree(tmp_path / "absent")
        assert excinfo.value.code is ErrorCode.NOT_FOUND

    def test_write_text_file_onto_directory(self, tmp_path):
        from thememgr.core.fsops import write_text_file

        (tmp_path / "manifest.txt").mkdir()
        with pytest.raises(ThemeManagerError) as excinfo:
            write_text_file(tmp_path / "manifest.txt", "text")
        assert excinfo.value.code is ErrorCode.OPEN_FAILED


class TestRestore:
    def test_apply_then_restore_round_trip(self, engine, storage):
        before = _snapshot(storage / "dolphin")
        assert engine.apply(_package(engine, "Beta"))
        result = engine.restore()
        assert result.ok
        assert _snapshot(storage / "dolphin") == before
        assert engine.has_backup is False
        assert engine.scan().has_backup is False

    def test_restore_without_backup_fails_and_changes_nothing(self, engine, storage):
        before = _snapshot(storage)
        result = engine.restore()
        assert result.ok is False
        assert result.error.code is ErrorCode.NOT_FOUND
        assert _snapshot(storage) == before

    def test_restore_when_active_missing(self, engine, storage):
        assert engine.apply(_package(engine, "Alpha"))
        shutil.rmtree(storage / "dolphin")
        assert engine.restore()
        assert (storage / "dolphin" / "stock" / "frame_0.bm").read_text() == "stock frame"


class TestDelete:
    def test_delete_removes_only_package(self, engine, storage):
        assert engine.apply(_package(engine, "Alpha"))
        active_before = _snapshot(storage / "dolphin")
        backup_before = _snapshot(storage / "dolphin_backup")

        result = engine.delete(_package(engine, "Alpha"))
        assert result.ok
        assert not (storage / "animation_packs" / "Alpha").exists()
        assert _snapshot(storage / "dolphin") == active_before
        assert _snapshot(storage / "dolphin_backup") == backup_before
        assert engine.has_backup is True
        assert engine.scan().get("Alpha") is None

    def test_delete_missing_package(self, engine, storage):
        package = _package(engine, "Foo")
        shutil.rmtree(storage / "animation_packs" / "Foo")
        result = engine.delete(package)
        assert result.ok is False
        assert result.stage is OperationStage.DELETE


class TestScan:
    def test_scan_lists_packs(self, engine):
        names = {pkg.name: pkg.variant for pkg in engine.scan()}
        assert names == {
            "Alpha": PackageVariant.PACK,
            "Beta": PackageVariant.ANIMS_PACK,
            "Foo": PackageVariant.SINGLE,
        }

    def test_from_settings_without_root(self):
        class _Settings:
            storage_root = None

        assert ApplyEngine.from_settings(_Settings()) is None
