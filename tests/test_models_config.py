"""Tests for the configuration models and their defaults."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mkcd.models.config import Config, ProfileConfig, default_config_path, default_profiles


class TestConfigDefaults:
    """Built-in defaults every fresh configuration starts with."""

    def test_core_defaults(self):
        """Core section ships the documented defaults."""
        config = Config()
        assert config.core.default_profile == "default"
        assert config.core.history_limit == 100
        assert config.core.temp_dir == "/tmp/mkcd"
        assert config.core.editor_timeout == 0
        assert config.core.backup_enabled is False

    def test_git_defaults(self):
        config = Config()
        assert config.git.default_branch == "main"
        assert config.git.default_remote_name == "origin"
        assert config.git.auto_init is False

    def test_safety_defaults(self):
        """Forbidden system prefixes and depth limit are on by default."""
        config = Config()
        assert config.safety.max_depth == 10
        assert config.safety.forbidden_paths == ["/", "/usr", "/etc", "/var", "/bin", "/sbin"]

    def test_templates_directory_is_expanded(self):
        assert not Config().templates.directory.startswith("~")

    def test_builtin_profiles(self):
        """default, dev, nodejs and python profiles exist."""
        profiles = default_profiles()
        assert set(profiles) == {"default", "dev", "nodejs", "python"}
        assert profiles["nodejs"].touch == ("package.json", "index.js")
        assert profiles["nodejs"].gitignore == "node"
        assert profiles["python"].touch == ("main.py", "requirements.txt")
        assert profiles["default"] == ProfileConfig()


class TestConfigStrictness:
    """Unknown keys and wrong types are rejected."""

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"coer": {}})

    def test_unknown_profile_key_rejected(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"profiles": {"x": {"gti": True}}})

    def test_profile_is_frozen(self):
        """Profiles are immutable settings layers."""
        profile = ProfileConfig(git=True)
        with pytest.raises(ValidationError):
            profile.git = False


class TestProfileDescribe:
    """Feature summaries used in listings."""

    def test_basic_profile(self):
        assert ProfileConfig().describe() == "Basic profile"

    def test_lists_enabled_features(self):
        profile = ProfileConfig(git=True, readme=True, template="python")
        assert profile.describe() == "Git, README, Template:python"


class TestDefaultConfigPath:
    """Location of the configuration file."""

    def test_env_override(self, monkeypatch, tmp_path):
        """MKCD_CONFIG overrides the per-user default."""
        monkeypatch.setenv("MKCD_CONFIG", str(tmp_path / "custom.yaml"))
        assert default_config_path() == tmp_path / "custom.yaml"

    def test_per_user_default(self, monkeypatch):
        monkeypatch.delenv("MKCD_CONFIG", raising=False)
        path = default_config_path()
        assert path.name == "mkcd.yaml"
        assert path.parent == Path("~/.config/mkcd").expanduser()
