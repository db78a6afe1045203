"""
Configuration management for LightPersist
"""
import os
import json
from typing import Dict, Any
from pathlib import Path

# Look for config.json in the same directory as this file
CONFIG_FILE = Path(__file__).with_name("config.json")

class Config:
    def __init__(self):
        self._config: Dict[str, Any] = {}
        self._load_config()
    
    def _load_config(self):
        """Load configuration from config.json if it exists"""
        if CONFIG_FILE.exists():
            with CONFIG_FILE.open("r", encoding="utf-8") as f:
                self._config = json.load(f)
    
    def get(self, key: str, default: str = "") -> str:
        """Get configuration value from environment or config file"""
        return os.getenv(key, self._config.get(key, default))

# Global config instance
config = Config()

# Fixed component constants, not overridable from env or config.json
CONFIGURATION_NAME = "light_persist"
COOKIE_NAME        = "psd_"
COOKIE_PATH        = "/"
COOKIE_LIFETIME    = 60 * 60 * 24 * 3650  # ten years, in seconds

# Configuration constants
BACKENDS              = ("file", "memory")
LIGHT_PERSIST_BACKEND   = config.get("LIGHT_PERSIST_BACKEND", "file").strip().lower()
LIGHT_PERSIST_CACHE_DIR = config.get(
    "LIGHT_PERSIST_CACHE_DIR",
    str(Path(__file__).resolve().parent.parent / "var" / "cache"),
).strip()

COOKIE_SECURE         = config.get("COOKIE_SECURE", "false").lower() == "true"
COOKIE_SAMESITE       = config.get("COOKIE_SAMESITE", "Lax").strip() or None

CORS_ORIGINS          = [o.strip() for o in config.get("CORS_ORIGINS", "*").split(",")]
LOG_LEVEL             = config.get("LOG_LEVEL", "INFO").strip().upper()

# Validate critical config
if LIGHT_PERSIST_BACKEND not in BACKENDS:
    raise RuntimeError(
        f"LIGHT_PERSIST_BACKEND must be one of {', '.join(BACKENDS)}, got {LIGHT_PERSIST_BACKEND!r}. "
        f"Looked in env and {CONFIG_FILE}"
    )
