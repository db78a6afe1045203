"""
Unit tests for configuration management.
"""
import json


def test_fixed_constants():
    from lightpersist.config import CONFIGURATION_NAME, COOKIE_NAME, COOKIE_PATH

    assert CONFIGURATION_NAME == "light_persist"
    assert COOKIE_NAME == "psd_"
    assert COOKIE_PATH == "/"


def test_environment_overrides_config_file(tmp_path, monkeypatch):
    from lightpersist import config as config_module

    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"LIGHT_PERSIST_BACKEND": "memory", "LOG_LEVEL": "DEBUG"}), encoding="utf-8")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    cfg = config_module.Config()

    assert cfg.get("LIGHT_PERSIST_BACKEND") == "memory"
    assert cfg.get("LOG_LEVEL") == "WARNING"
    assert cfg.get("MISSING", "fallback") == "fallback"


def test_missing_config_file_uses_defaults(tmp_path, monkeypatch):
    from lightpersist import config as config_module

    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "absent.json")
    monkeypatch.delenv("COOKIE_SAMESITE", raising=False)

    assert config_module.Config().get("COOKIE_SAMESITE", "Lax") == "Lax"
