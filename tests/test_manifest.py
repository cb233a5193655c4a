"""Tests for locating and reading package manifests."""

import pytest

from errors import ManifestError
from sources.manifest import Minifest, find_manifest, load_manifest, read_manifest


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestFindManifest:
    """Search depth and naming."""

    def test_finds_manifest_at_root(self, tmp_path):
        """Test finds manifest at root."""
        target = write(tmp_path / "manifest.yaml", "name: a\nversion: 1\n")
        assert find_manifest(tmp_path) == target

    def test_finds_pk_yaml_one_level_down(self, tmp_path):
        """Test finds pk yaml one level down."""
        target = write(tmp_path / "pkg" / "pk.yaml", "name: a\nversion: 1\n")
        assert find_manifest(tmp_path) == target

    def test_prefers_shallowest(self, tmp_path):
        """Test prefers shallowest."""
        write(tmp_path / "a" / "manifest.yaml", "name: deep\nversion: 1\n")
        target = write(tmp_path / "pk.yaml", "name: top\nversion: 1\n")
        assert find_manifest(tmp_path) == target

    def test_ignores_too_deep_and_other_yaml(self, tmp_path):
        """Test ignores too deep and other yaml."""
        write(tmp_path / "a" / "b" / "manifest.yaml", "name: a\nversion: 1\n")
        write(tmp_path / "config.yaml", "x: 1\n")
        assert find_manifest(tmp_path) is None

    def test_missing_directory(self, tmp_path):
        """Test missing directory."""
        assert find_manifest(tmp_path / "nope") is None


class TestLoadManifest:
    """Field extraction."""

    def test_reads_name_version_and_flavours(self, tmp_path):
        """Test reads name version and flavours."""
        path = write(
            tmp_path / "manifest.yaml",
            "name: houdini_submission\nversion: '5.4.0'\nflavours:\n  - maya\n  - nuke\n",
        )
        assert load_manifest(path) == Minifest("houdini_submission", "5.4.0", ["maya", "nuke"])

    def test_keys_are_case_insensitive(self, tmp_path):
        """Test keys are case insensitive."""
        path = write(tmp_path / "manifest.yaml", "Name: pkg\nVERSION: 2.0.1\n")
        assert load_manifest(path) == Minifest("pkg", "2.0.1", [])

    def test_flavour_entries_as_mappings(self, tmp_path):
        """Test flavour entries as mappings."""
        path = write(
            tmp_path / "pk.yaml",
            "name: pkg\nversion: 1.0\nflavours:\n  - name: maya2018\n    requires: [maya]\n  - name: nuke\n",
        )
        assert load_manifest(path).flavours == ["maya2018", "nuke"]

    def test_flavours_as_mapping(self, tmp_path):
        """Test flavours as mapping."""
        path = write(tmp_path / "pk.yaml", "name: pkg\nversion: 1.0\nflavors:\n  maya: {}\n  nuke: {}\n")
        assert load_manifest(path).flavours == ["maya", "nuke"]

    def test_missing_version(self, tmp_path):
        """Test missing version."""
        path = write(tmp_path / "manifest.yaml", "name: pkg\n")
        with pytest.raises(ManifestError, match="version"):
            load_manifest(path)

    def test_not_a_mapping(self, tmp_path):
        """Test not a mapping."""
        path = write(tmp_path / "manifest.yaml", "- a\n- b\n")
        with pytest.raises(ManifestError):
            load_manifest(path)

    def test_invalid_yaml(self, tmp_path):
        """Test invalid yaml."""
        path = write(tmp_path / "manifest.yaml", "name: [unterminated\n")
        with pytest.raises(ManifestError):
            load_manifest(path)


class TestReadManifest:
    def test_reads_from_directory(self, tmp_path):
        """Test reads from directory."""
        write(tmp_path / "manifest.yaml", "name: pkg\nversion: 3.0.0\n")
        assert read_manifest(str(tmp_path)).version == "3.0.0"

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        """Test defaults to cwd."""
        write(tmp_path / "pk.yaml", "name: here\nversion: 1.2.3\n")
        monkeypatch.chdir(tmp_path)
        assert read_manifest().name == "here"

    def test_nothing_found(self, tmp_path):
        """Test nothing found."""
        with pytest.raises(ManifestError, match="Unable to find a manifest"):
            read_manifest(tmp_path)
