"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB (db_folder,
log_level). Config lives in ~/.budget/config.json to avoid a bootstrapping problem.
"""
import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".budget"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_LOG_LEVEL = "INFO"


def load_config(config_file: Path | None = None) -> dict:
    """Returns {} on missing or corrupt file, never raises."""
    try:
        with open(config_file or CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict, config_file: Path | None = None) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = Path(config_file or CONFIG_FILE)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder(config_file: Path | None = None) -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config(config_file).get("db_folder")


def set_db_folder(path: str | None, config_file: Path | None = None) -> None:
    """Update db_folder in config and save."""
    config = load_config(config_file)
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config, config_file)


def get_log_level(config_file: Path | None = None) -> str:
    level = load_config(config_file).get("log_level") or DEFAULT_LOG_LEVEL
    return str(level).upper()
