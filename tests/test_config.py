"""Tests for config.py - configuration loading and validation."""

import pytest

from portability_insight.config import AnalysisConfig, ScoreWeights, load_config
from portability_insight.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the user's home and working directory configs out of the tests."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in ("MANIFEST_NAME", "PROGRESS_EVERY", "VERBOSITY", "CATALOG_FILE"):
        monkeypatch.delenv(f"PORTABILITY_{key}", raising=False)
    return home, work


class TestAnalysisConfig:
    """Test AnalysisConfig defaults and validation."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.source_extensions == (".tsx", ".ts", ".jsx", ".js")
        assert config.excluded_dirs == ("node_modules",)
        assert config.manifest_name == "package.json"
        assert config.progress_every == 5
        assert config.weights == ScoreWeights()

    def test_invalid_progress_every(self):
        with pytest.raises(ValueError, match="progress_every"):
            AnalysisConfig(progress_every=0)

    def test_invalid_extension(self):
        with pytest.raises(ValueError, match="must start with"):
            AnalysisConfig(source_extensions=("ts",))

    def test_invalid_verbosity(self):
        with pytest.raises(ValueError):
            AnalysisConfig(verbosity="loud")

    def test_source_file_predicate(self):
        config = AnalysisConfig()
        assert config.is_source_file("src/App.tsx")
        assert not config.is_source_file("node_modules/react/index.js")
        assert not config.is_source_file("src/index.css")

    def test_backslash_separators_excluded(self):
        config = AnalysisConfig()
        assert config.is_excluded("node_modules\\@lovable\\x.js")
        assert not config.is_source_file("app\\node_modules\\x.js")
        assert not config.is_excluded("src\\App.tsx")


class TestLoadConfig:
    """Test load_config merging."""

    def test_defaults_when_nothing_configured(self):
        assert load_config() == AnalysisConfig()

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            "progress_every = 10\n"
            'excluded_dirs = ["node_modules", "dist"]\n'
            "\n"
            "[weights]\n"
            "critical_issue = 20\n"
        )
        config = load_config(config_file=path)
        assert config.progress_every == 10
        assert config.excluded_dirs == ("node_modules", "dist")
        assert config.weights.critical_issue == 20
        assert config.weights.warning_issue == 5

    def test_project_file_discovered(self, isolated_environment):
        _home, work = isolated_environment
        (work / "portability-insight.toml").write_text('manifest_name = "deps.json"\n')
        assert load_config().manifest_name == "deps.json"

    def test_project_overrides_global(self, isolated_environment):
        home, work = isolated_environment
        (home / ".portability-insight.toml").write_text("progress_every = 3\n")
        (work / "portability-insight.toml").write_text("progress_every = 7\n")
        assert load_config().progress_every == 7

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text("progress_every = 10\n")
        monkeypatch.setenv("PORTABILITY_PROGRESS_EVERY", "2")
        assert load_config(config_file=path).progress_every == 2

    def test_kwargs_override_env(self, monkeypatch):
        monkeypatch.setenv("PORTABILITY_PROGRESS_EVERY", "2")
        assert load_config(progress_every=9).progress_every == 9

    def test_verbosity_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("progress_every = \n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("progress_every = 0\n")
        with pytest.raises(ConfigurationError, match="progress_every"):
            load_config(config_file=path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("colour = true\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_invalid_weights(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[weights]\nclean_bonus = -5\n")
        with pytest.raises(ConfigurationError, match="weights"):
            load_config(config_file=path)

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("PORTABILITY_PROGRESS_EVERY", "often")
        with pytest.raises(InvalidConfigError, match="PORTABILITY_PROGRESS_EVERY") as exc_info:
            load_config()
        assert exc_info.value.value == "often"
