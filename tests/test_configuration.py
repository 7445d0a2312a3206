"""Tests for layered configuration loading."""

import pytest

from zhpick.configuration import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS, get_settings
from zhpick.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("FOLDER_LIST", "OUTPUT_DIR", "ERROR_LOG", "EXCLUDE_DIRS", "EXTENSIONS"):
        monkeypatch.delenv(f"ZHPICK_{name}", raising=False)


class TestDefaults:
    def test_defaults_without_sources(self, tmp_path):
        settings = get_settings(tmp_path)
        assert settings.FOLDER_LIST == "folder.txt"
        assert settings.OUTPUT_DIR == "dist"
        assert settings.ERROR_LOG == "error.log"
        assert settings.EXCLUDE_DIRS == list(DEFAULT_EXCLUDE_DIRS)
        assert settings.EXTENSIONS == list(DEFAULT_EXTENSIONS)


class TestLayers:
    def test_yaml_file(self, tmp_path):
        (tmp_path / "zhpick.yaml").write_text(
            "output_dir: out\nexclude_dirs:\n  - vendor\n  - .git\n",
            encoding="utf-8",
        )
        settings = get_settings(tmp_path)
        assert settings.OUTPUT_DIR == "out"
        assert settings.EXCLUDE_DIRS == ["vendor", ".git"]

    def test_dotenv_overrides_yaml(self, tmp_path):
        (tmp_path / "zhpick.yaml").write_text("output_dir: out\n", encoding="utf-8")
        (tmp_path / ".env").write_text("ZHPICK_OUTPUT_DIR=from-dotenv\n", encoding="utf-8")
        assert get_settings(tmp_path).OUTPUT_DIR == "from-dotenv"

    def test_environment_overrides_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("ZHPICK_OUTPUT_DIR=from-dotenv\n", encoding="utf-8")
        monkeypatch.setenv("ZHPICK_OUTPUT_DIR", "from-env")
        assert get_settings(tmp_path).OUTPUT_DIR == "from-env"

    def test_list_values_from_strings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ZHPICK_EXTENSIONS", ".TS, vue")
        monkeypatch.setenv("ZHPICK_EXCLUDE_DIRS", "node_modules dist")
        settings = get_settings(tmp_path)
        assert settings.EXTENSIONS == ["ts", "vue"]
        assert settings.EXCLUDE_DIRS == ["node_modules", "dist"]


class TestValidation:
    def test_empty_extensions_rejected(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ZHPICK_EXTENSIONS", " , ")
        with pytest.raises(ConfigurationError) as excinfo:
            get_settings(tmp_path)
        assert "EXTENSIONS" in str(excinfo.value)

    def test_yaml_root_must_be_mapping(self, tmp_path):
        (tmp_path / "zhpick.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            get_settings(tmp_path)

    def test_malformed_yaml(self, tmp_path):
        (tmp_path / "zhpick.yaml").write_text("output_dir: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            get_settings(tmp_path)
