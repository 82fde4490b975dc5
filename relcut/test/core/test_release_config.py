"""Tests for relcut.core.config."""

from __future__ import annotations

from pathlib import Path

from relcut.core.config import (
    DEFAULT_UPDATER_ENDPOINT,
    ManifestConfig,
    ReleaseConfig,
    load_config,
    load_config_or_default,
)
from relcut.core.result import Err, Ok


class TestDefaults:
    def test_panorama_layout(self) -> None:
        config = ReleaseConfig()

        assert config.primary_manifest == "package.json"
        assert config.packaging_config == "src-tauri/tauri.conf.json"
        assert config.workflow == ".github/workflows/release.yml"
        assert config.updater_endpoint == DEFAULT_UPDATER_ENDPOINT
        assert [m.path for m in config.manifests] == [
            "src-core/Cargo.toml",
            "src-server/Cargo.toml",
            "src-tauri/Cargo.toml",
        ]
        assert config.manifests[1] == ManifestConfig(
            path="src-server/Cargo.toml",
            lock="src-server/Cargo.lock",
            lock_records=("panorama-server", "panorama_core"),
        )


class TestFromDict:
    def test_empty_uses_defaults(self) -> None:
        assert ReleaseConfig.from_dict({}) == ReleaseConfig()

    def test_overrides(self) -> None:
        config = ReleaseConfig.from_dict(
            {
                "release": {
                    "primary_manifest": "app/package.json",
                    "updater_endpoint": "https://example.com/latest.json",
                    "manifests": [
                        {"path": "core/Cargo.toml", "lock": "Cargo.lock", "lock_records": ["core"]},
                        {"path": "cli/Cargo.toml"},
                    ],
                }
            }
        )

        assert config.primary_manifest == "app/package.json"
        assert config.updater_endpoint == "https://example.com/latest.json"
        assert config.workflow == ".github/workflows/release.yml"
        assert config.manifests == (
            ManifestConfig(path="core/Cargo.toml", lock="Cargo.lock", lock_records=("core",)),
            ManifestConfig(path="cli/Cargo.toml"),
        )

    def test_empty_manifest_list(self) -> None:
        config = ReleaseConfig.from_dict({"release": {"manifests": []}})

        assert config.manifests == ()


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path / "relcut.toml") == Ok(ReleaseConfig())

    def test_missing_file_is_error_for_load_config(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "relcut.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_load_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "relcut.toml"
        path.write_text(
            "[release]\n"
            'workflow = ".github/workflows/publish.yml"\n'
            "\n"
            "[[release.manifests]]\n"
            'path = "src-tauri/Cargo.toml"\n'
            'lock = "src-tauri/Cargo.lock"\n'
            'lock_records = ["panorama-app"]\n',
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.workflow == ".github/workflows/publish.yml"
        assert result.value.manifests == (
            ManifestConfig(
                path="src-tauri/Cargo.toml",
                lock="src-tauri/Cargo.lock",
                lock_records=("panorama-app",),
            ),
        )

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "relcut.toml"
        path.write_text("[release\n", encoding="utf-8")

        result = load_config_or_default(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_manifest_without_path(self, tmp_path: Path) -> None:
        path = tmp_path / "relcut.toml"
        path.write_text('[[release.manifests]]\nlock = "Cargo.lock"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "missing 'path'" in result.error.message

    def test_lock_records_without_lock(self, tmp_path: Path) -> None:
        path = tmp_path / "relcut.toml"
        path.write_text(
            '[[release.manifests]]\npath = "Cargo.toml"\nlock_records = ["x"]\n',
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Err)
        assert "without 'lock'" in result.error.message

    def test_lock_records_must_be_strings(self, tmp_path: Path) -> None:
        path = tmp_path / "relcut.toml"
        path.write_text(
            '[[release.manifests]]\npath = "Cargo.toml"\nlock = "Cargo.lock"\nlock_records = [1]\n',
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Err)
        assert "lock_records" in result.error.message
