"""Tests for package manifest loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from paw_installer.errors import ManifestError
from paw_installer.packages import Package, load_package, split_pretty_name

YAML_MANIFEST = """\
name: Acme/Foo
version: 1.2.0
type: paw-plugin
description: Foo for your paw site
authors:
  - name: Jane Doe
    email: jane@example.com
autoload:
  psr-4:
    "Acme\\\\Foo\\\\": src/
extra:
  handle: foo
"""


class TestLoadPackage:
    def test_yaml_manifest(self, tmp_path):
        (tmp_path / "paw.yaml").write_text(YAML_MANIFEST)

        package = load_package(tmp_path)

        assert package.pretty_name == "Acme/Foo"
        assert package.name == "acme/foo"
        assert package.pretty_version == "1.2.0"
        assert package.type == "paw-plugin"
        assert package.psr4 == {"Acme\\Foo\\": "src/"}
        assert package.extra == {"handle": "foo"}
        assert package.first_author("name") == "Jane Doe"
        assert package.source_dir == tmp_path.resolve()

    def test_json_manifest_file(self, tmp_path):
        manifest = tmp_path / "paw.json"
        manifest.write_text(
            json.dumps(
                {
                    "name": "acme/bar",
                    "type": "paw-plugin",
                    "autoload": {"psr-4": {"Acme\\Bar\\": ["src/", "lib/"]}},
                }
            )
        )

        package = load_package(manifest)

        assert package.pretty_version == "dev-main"
        assert package.psr4 == {"Acme\\Bar\\": ["src/", "lib/"]}
        assert package.description is None
        assert package.authors is None

    def test_numeric_version_is_string(self, tmp_path):
        (tmp_path / "paw.yml").write_text("name: acme/baz\nversion: 2\n")

        assert load_package(tmp_path).pretty_version == "2"

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestError, match="No package manifest"):
            load_package(tmp_path)

    def test_missing_name(self, tmp_path):
        (tmp_path / "paw.yaml").write_text("version: 1.0.0\n")

        with pytest.raises(ManifestError, match="missing 'name'"):
            load_package(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "paw.yaml").write_text("name: [unclosed\n")

        with pytest.raises(ManifestError):
            load_package(tmp_path)

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / "paw.yaml").write_text("- a\n- b\n")

        with pytest.raises(ManifestError, match="must contain a mapping"):
            load_package(tmp_path)

    def test_invalid_field_type(self, tmp_path):
        (tmp_path / "paw.yaml").write_text("name: acme/foo\nextra: not-a-mapping\n")

        with pytest.raises(ManifestError):
            load_package(tmp_path)

    def test_psr4_list_rejected(self, tmp_path):
        (tmp_path / "paw.yaml").write_text("name: acme/foo\nautoload:\n  psr-4:\n    - src/\n")

        with pytest.raises(ManifestError, match="psr-4"):
            load_package(tmp_path)


class TestPackageModel:
    def test_split_pretty_name(self):
        assert split_pretty_name("acme/foo") == ("acme", "foo")
        assert split_pretty_name("foo") == (None, "foo")

    def test_vendor_and_short_name(self):
        package = Package(pretty_name="Acme/Foo")
        assert package.vendor == "Acme"
        assert package.short_name == "Foo"

    def test_first_author_without_authors(self):
        assert Package(pretty_name="foo").first_author("name") is None
        assert Package(pretty_name="foo", authors=[]).first_author("name") is None

    def test_str(self):
        assert str(Package(pretty_name="acme/foo", pretty_version="1.0.0")) == "acme/foo (1.0.0)"

    @pytest.mark.parametrize(
        "psr4",
        [["src/"], {"Acme\\Foo\\": 42}, {"Acme\\Foo\\": {"path": "src/"}}],
    )
    def test_malformed_psr4_rejected(self, psr4):
        with pytest.raises(ValidationError):
            Package(pretty_name="acme/foo", autoload={"psr-4": psr4})

    def test_empty_psr4_list_allowed(self):
        assert Package(pretty_name="acme/foo", autoload={"psr-4": []}).psr4 == {}
