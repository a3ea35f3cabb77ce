from pathlib import Path
from typing import Dict

from pydantic import ValidationError

from .domain.errors import ConfigError
from .domain.models import FormatSettings

CONFIG_DIR = Path.home() / ".sheetfmt"
CONFIG_FILE = CONFIG_DIR / "config"

# config file key -> FormatSettings field
CONFIG_KEYS = {
    "SHEETFMT_INDENT_WIDTH": "indent_width",
    "SHEETFMT_STRICT": "strict",
}

def read_config() -> Dict[str, str]:
    """read raw KEY=VALUE pairs; a missing or unreadable file reads as empty."""
    config = {}
    if not CONFIG_FILE.exists():
        return config
    
    try:
        with open(CONFIG_FILE, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line:
                    key, value = line.split("=", 1)
                    config[key] = value
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def load_settings() -> FormatSettings:
    """build formatting settings from the config file."""
    raw = read_config()
    values = {field: raw[key] for key, field in CONFIG_KEYS.items() if key in raw}
    try:
        return FormatSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid value in {CONFIG_FILE}: {e}") from e

def set_config_value(key: str, value: str):
    """set a config value, preserving other config values."""
    key = key.upper()
    if key not in CONFIG_KEYS:
        raise ConfigError(f"unknown config key '{key}', expected one of: {', '.join(CONFIG_KEYS)}")
    
    # validate before writing so a bad value never reaches the file
    try:
        FormatSettings(**{CONFIG_KEYS[key]: value})
    except ValidationError as e:
        raise ConfigError(f"invalid value for {key}: {value!r}") from e
    
    config = read_config()
    config[key] = value
    
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(CONFIG_FILE, "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise ConfigError(f"failed to write config file: {e}") from e
