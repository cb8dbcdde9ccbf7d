"""Tests for configuration loading and merging."""

import json

from core.config import load_env_config, load_file_config, merge_config


class TestEnvConfig:
    """Test MAILAUDIT_* environment variables."""

    def test_defaults(self, monkeypatch):
        for name in ("MAILAUDIT_VERBOSE", "MAILAUDIT_FORMAT", "MAILAUDIT_NAMESERVER", "MAILAUDIT_DNS_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        cfg = load_env_config()

        assert cfg["verbose"] is False
        assert cfg["output_format"] == "text"
        assert cfg["nameserver"] is None
        assert cfg["dns_timeout"] is None

    def test_values(self, monkeypatch):
        monkeypatch.setenv("MAILAUDIT_VERBOSE", "yes")
        monkeypatch.setenv("MAILAUDIT_NAMESERVER", "1.1.1.1")
        monkeypatch.setenv("MAILAUDIT_FORMAT", "JSON")
        monkeypatch.setenv("MAILAUDIT_DNS_TIMEOUT", "2.5")

        cfg = load_env_config()

        assert cfg["verbose"] is True
        assert cfg["nameserver"] == "1.1.1.1"
        assert cfg["output_format"] == "json"
        assert cfg["dns_timeout"] == 2.5

    def test_invalid_values_ignored(self, monkeypatch):
        monkeypatch.setenv("MAILAUDIT_FORMAT", "pdf")
        monkeypatch.setenv("MAILAUDIT_HTTP_TIMEOUT", "soon")

        cfg = load_env_config()

        assert cfg["output_format"] == "text"
        assert cfg["http_timeout"] is None


class TestFileConfig:
    """Test JSON config files."""

    def test_key_mapping(self, tmp_path):
        path = tmp_path / "mailaudit.json"
        path.write_text(json.dumps({"server": "9.9.9.9", "selector": "s1", "format": "markdown", "dns_timeout": "3", "quiet": 1}))

        cfg = load_file_config(str(path))

        assert cfg == {
            "nameserver": "9.9.9.9",
            "dkim_selector": "s1",
            "output_format": "markdown",
            "dns_timeout": 3.0,
            "quiet": True,
        }

    def test_missing_or_broken_file(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")

        assert load_file_config("") == {}
        assert load_file_config(str(tmp_path / "nope.json")) == {}
        assert load_file_config(str(broken)) == {}

    def test_non_object_ignored(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        assert load_file_config(str(path)) == {}


def test_merge_precedence():
    env = {"nameserver": "8.8.8.8", "verbose": False, "output_format": "text"}
    file_cfg = {"nameserver": "9.9.9.9", "output_format": None}
    cli = {"nameserver": "1.1.1.1"}

    merged = merge_config(env, file_cfg, cli)

    assert merged == {"nameserver": "1.1.1.1", "verbose": False, "output_format": "text"}
