"""Tests for the plugin install/update/uninstall lifecycle."""

import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from paw_installer.console import BufferIO
from paw_installer.errors import InvalidPluginError, RegistryCorruptedError
from paw_installer.installer import InstalledRepository, PluginInstaller
from paw_installer.packages import Package
from paw_installer.plugins import PluginRecord


@pytest.fixture
def vendor(tmp_path: Path) -> Path:
    return tmp_path / "vendor"


@pytest.fixture
def io() -> BufferIO:
    return BufferIO()


@pytest.fixture
def installer(io, vendor) -> PluginInstaller:
    return PluginInstaller(io, vendor)


@pytest.fixture
def repo() -> InstalledRepository:
    return InstalledRepository()


@pytest.fixture
def make_package(tmp_path: Path):
    """Build a plugin package whose source dir contains ``src/`` files."""

    def _make(
        version: str = "1.0.0",
        extra: dict | None = None,
        with_plugin_class: bool = True,
        pretty_name: str = "acme/foo",
    ) -> Package:
        source = tmp_path / "sources" / f"{pretty_name.replace('/', '-')}-{version}"
        src = source / "src"
        src.mkdir(parents=True, exist_ok=True)
        (source / "VERSION").write_text(version)
        if with_plugin_class:
            (src / "Plugin.php").write_text("<?php class Plugin {}")
        return Package(
            pretty_name=pretty_name,
            pretty_version=version,
            type="paw-plugin",
            extra={"handle": "foo"} if extra is None else extra,
            autoload={"psr-4": {"Acme\\Foo\\": "src/"}},
            source_dir=source,
        )

    return _make


class TestSupports:
    def test_plugin_type(self, installer):
        assert installer.supports("paw-plugin")

    def test_other_types(self, installer):
        assert not installer.supports("library")
        assert not installer.supports("paw-module")

    def test_custom_plugin_type(self, io, vendor):
        installer = PluginInstaller(io, vendor, plugin_type="acme-plugin")
        assert installer.supports("acme-plugin")
        assert not installer.supports("paw-plugin")


class TestInstall:
    def test_registers_plugin(self, installer, repo, vendor, make_package):
        package = make_package()

        installer.install(repo, package)

        plugins = installer.get_plugins()
        assert list(plugins) == ["acme/foo"]
        record = plugins["acme/foo"]
        assert record.class_name == "Acme\\Foo\\Plugin"
        assert record.base_path == str(vendor / "acme" / "foo" / "src")
        assert record.aliases == {"@Acme/Foo": str(vendor / "acme" / "foo" / "src")}
        assert record.version == "1.0.0"
        assert repo.has_package(package)
        assert (vendor / "acme" / "foo" / "src" / "Plugin.php").is_file()

    def test_persists_portable_paths(self, installer, repo, make_package):
        installer.install(repo, make_package())

        source = installer.registry.path.read_text()
        assert "'@Acme/Foo': vendor_dir + '/acme/foo/src'," in source

    def test_registry_key_is_lowercase(self, installer, repo, make_package):
        installer.install(repo, make_package(pretty_name="Acme/FooBar"))

        assert list(installer.get_plugins()) == ["acme/foobar"]

    def test_invalid_plugin_rolls_back(self, installer, repo, vendor, make_package):
        installer.install(repo, make_package(pretty_name="acme/other"))
        before = installer.registry.path.read_bytes()
        broken = make_package(pretty_name="acme/foo", with_plugin_class=False)

        with pytest.raises(InvalidPluginError) as exc_info:
            installer.install(repo, broken)

        assert exc_info.value.reason == "Unable to determine the Plugin class"
        assert installer.registry.path.read_bytes() == before
        assert not repo.has_package(broken)
        assert not (vendor / "acme" / "foo").exists()

    def test_invalid_plugin_does_not_create_registry(self, installer, repo, vendor, make_package):
        with pytest.raises(InvalidPluginError):
            installer.install(repo, make_package(extra={"handle": "123bad"}))

        assert not installer.registry.path.exists()
        assert len(repo) == 0
        assert not (vendor / "acme").exists()

    def test_handle_warning_written_to_io(self, installer, repo, io, make_package):
        installer.install(repo, make_package(extra={"handle": "FooPlugin"}))

        assert installer.get_plugins()["acme/foo"].handle == "foo-plugin"
        assert len(io.messages) == 1
        assert "old plugin handle format" in io.messages[0]

    def test_corrupted_registry_propagates_without_rollback(
        self, installer, repo, vendor, make_package
    ):
        installer.registry.path.parent.mkdir(parents=True)
        installer.registry.path.write_text("plugins = {")
        package = make_package()

        with pytest.raises(RegistryCorruptedError):
            installer.install(repo, package)

        assert repo.has_package(package)


class TestUpdate:
    def test_replaces_record(self, installer, repo, vendor, make_package):
        initial = make_package("1.0.0")
        target = make_package("2.0.0")
        installer.install(repo, initial)

        installer.update(repo, initial, target)

        assert installer.get_plugins()["acme/foo"].version == "2.0.0"
        assert repo.has_package(target)
        assert not repo.has_package(initial)
        assert (vendor / "acme" / "foo" / "VERSION").read_text() == "2.0.0"

    def test_invalid_target_restores_initial(self, installer, repo, vendor, make_package):
        initial = make_package("1.0.0", extra={"handle": "foo", "description": "v1"})
        installer.install(repo, initial)
        installer.install(repo, make_package(pretty_name="acme/bar"))
        old_record = installer.get_plugins()["acme/foo"]
        target = make_package("2.0.0", with_plugin_class=False)

        with pytest.raises(InvalidPluginError):
            installer.update(repo, initial, target)

        plugins = installer.get_plugins()
        assert plugins["acme/foo"] == old_record
        assert "acme/bar" in plugins
        assert repo.has_package(initial)
        assert not repo.has_package(target)
        assert (vendor / "acme" / "foo" / "VERSION").read_text() == "1.0.0"

    def test_invalid_target_without_initial_record(self, installer, repo, vendor, make_package):
        initial = make_package("1.0.0")
        repo.add_package(initial)
        installer._install_code(initial)
        target = make_package("2.0.0", extra={})

        with pytest.raises(InvalidPluginError):
            installer.update(repo, initial, target)

        assert "acme/foo" not in installer.get_plugins()
        assert repo.has_package(initial)
        assert (vendor / "acme" / "foo" / "VERSION").read_text() == "1.0.0"

    def test_rollback_without_initial_source(self, installer, repo, vendor, make_package):
        initial = make_package("1.0.0")
        installer.install(repo, initial)
        old_record = installer.get_plugins()["acme/foo"]
        shutil.rmtree(initial.source_dir)
        target = make_package("2.0.0", with_plugin_class=False)

        with pytest.raises(InvalidPluginError):
            installer.update(repo, initial, target)

        assert installer.get_plugins() == {"acme/foo": old_record}
        assert repo.has_package(initial)
        assert not repo.has_package(target)
        assert (vendor / "acme" / "foo" / "VERSION").read_text() == "1.0.0"
        assert (vendor / "acme" / "foo" / "src" / "Plugin.php").is_file()

    def test_rollback_ignores_edited_initial_source(self, installer, repo, vendor, make_package):
        initial = make_package("1.0.0")
        installer.install(repo, initial)
        (initial.source_dir / "VERSION").write_text("edited")
        target = make_package("2.0.0", extra={})

        with pytest.raises(InvalidPluginError):
            installer.update(repo, initial, target)

        assert (vendor / "acme" / "foo" / "VERSION").read_text() == "1.0.0"

    def test_registry_restored_when_file_rollback_fails(self, installer, repo, make_package):
        initial = make_package("1.0.0")
        installer.install(repo, initial)
        old_record = installer.get_plugins()["acme/foo"]
        target = make_package("2.0.0", extra={})

        with patch.object(installer, "_restore_code", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                installer.update(repo, initial, target)

        assert installer.get_plugins() == {"acme/foo": old_record}

    @pytest.mark.parametrize("valid_target", [True, False])
    def test_no_backup_left_behind(self, installer, repo, vendor, make_package, valid_target):
        initial = make_package("1.0.0")
        installer.install(repo, initial)
        target = make_package("2.0.0", with_plugin_class=valid_target)

        if valid_target:
            installer.update(repo, initial, target)
        else:
            with pytest.raises(InvalidPluginError):
                installer.update(repo, initial, target)

        assert not list(vendor.glob(".paw-backup-*"))


class TestUninstall:
    def test_removes_record(self, installer, repo, vendor, make_package):
        package = make_package()
        installer.install(repo, package)
        installer.install(repo, make_package(pretty_name="acme/bar"))

        installer.uninstall(repo, package)

        assert list(installer.get_plugins()) == ["acme/bar"]
        assert not repo.has_package(package)
        assert not (vendor / "acme" / "foo").exists()

    def test_unregistered_package_is_noop(self, installer, repo, make_package):
        installer.install(repo, make_package(pretty_name="acme/bar"))
        before = installer.registry.path.read_bytes()
        package = make_package()
        repo.add_package(package)
        installer._install_code(package)

        installer.uninstall(repo, package)

        assert installer.registry.path.read_bytes() == before
        assert not repo.has_package(package)

    def test_keeps_vendor_dir_of_other_packages(self, installer, repo, vendor, make_package):
        foo = make_package()
        installer.install(repo, foo)
        installer.install(repo, make_package(pretty_name="acme/bar"))

        installer.uninstall(repo, foo)

        assert (vendor / "acme" / "bar").is_dir()


class TestAddPlugin:
    def test_returns_record(self, installer, vendor, make_package):
        package = make_package()
        installer._install_code(package)

        record = installer.add_plugin(package)

        assert isinstance(record, PluginRecord)
        assert installer.get_plugins() == {"acme/foo": record}

    def test_remove_plugin_missing(self, installer, make_package):
        assert installer.remove_plugin(make_package()) is None
