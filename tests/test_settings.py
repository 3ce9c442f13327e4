from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
import yaml

from ctxroots.locator import ContextLocator
from ctxroots.resources import MemoryResourceProvider
from ctxroots.settings import LocatorSettings, SettingsError, load_settings


def test_defaults_match_dart_style_layout() -> None:
    settings = LocatorSettings()

    assert settings.options_file_names == ["analysis_options.yaml", ".analysis_options"]
    assert settings.manifest_file_name == ".packages"
    assert settings.packages_dir_name == "packages"
    assert settings.hidden_prefix == "."
    assert settings.sdk_path is None


def test_load_settings_accepts_nested_section(tmp_path: Path) -> None:
    path = tmp_path / "ctxroots.yaml"
    path.write_text(
        textwrap.dedent(
            """
            locator:
              manifest_file_name: pubspec.yaml
              options_file_names: [lint.yaml]
              sdk_path: /opt/sdk
            """
        ).lstrip(),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.manifest_file_name == "pubspec.yaml"
    assert settings.options_file_names == ["lint.yaml"]
    assert settings.sdk_path == "/opt/sdk"


def test_load_settings_accepts_flat_mapping(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump({"packages_dir_name": "vendor"}, handle)

    assert load_settings(path).packages_dir_name == "vendor"


@pytest.mark.parametrize(
    "payload",
    [
        "locator:\n  unknown_key: 1\n",
        "options_file_names: []\n",
        "manifest_file_name: '  '\n",
        "- just\n- a list\n",
        "locator: [1, 2]\n",
        "locator: {manifest_file_name: [unclosed\n",
    ],
)
def test_invalid_settings_raise(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "ctxroots.yaml"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(SettingsError):
        load_settings(path)


def test_explicit_missing_settings_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "absent.yaml")


def test_default_settings_file_is_optional(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert load_settings() == LocatorSettings()

    (tmp_path / "ctxroots.yaml").write_text("hidden_prefix: _\n", encoding="utf-8")
    assert load_settings().hidden_prefix == "_"


def test_custom_file_names_drive_root_detection() -> None:
    provider = MemoryResourceProvider()
    provider.new_files(
        [
            "/app/pubspec.yaml",
            "/app/pkg/pubspec.yaml",
            "/app/vendor/dep/pubspec.yaml",
            "/app/.packages",
        ]
    )
    settings = LocatorSettings(manifest_file_name="pubspec.yaml", packages_dir_name="vendor")

    roots = ContextLocator(provider, settings=settings).locate_roots(["/app"])

    assert [root.root.path for root in roots] == ["/app", "/app/pkg"]
    assert roots[0].manifest_path == "/app/pubspec.yaml"
    assert roots[0].excluded_paths == ["/app/pkg", "/app/vendor"]


def test_blank_hidden_prefix_disables_hidden_folder_check() -> None:
    provider = MemoryResourceProvider()
    provider.new_files(["/app/.tool/analysis_options.yaml", "/app/lib/a.dart"])

    roots = ContextLocator(provider, settings=LocatorSettings(hidden_prefix="")).locate_roots(["/app"])

    assert [root.root.path for root in roots] == ["/app", "/app/.tool"]
