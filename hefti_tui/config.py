# hefti_tui/config.py
# Description: Configuration management for the hefti_tui application.
#
# Imports
import copy
from datetime import date
import os
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional
#
# Third-Party Imports
from loguru import logger
#
#######################################################################################################################
#
# Functions:

# --- Path to the app's configuration file ---
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "hefti_tui" / "config.toml"
BASE_DATA_DIR = Path.home() / ".local" / "share" / "hefti_tui"

# --- Environment overrides (take precedence over the TOML file) ---
ENV_OVERRIDES = {
    "HEFTI_API_BASE_URL": ("api", "base_url"),
    "HEFTI_API_TOKEN": ("api", "token"),
}

CONFIG_TOML_CONTENT = """
# Configuration for hefti_tui
# This file is created with default values on first start.

[general]
log_level = "INFO" # DEBUG, INFO, WARNING, ERROR, CRITICAL

[api]
# Root of the entry backend. Requests go to <base_url>/entry and <base_url>/auth/login
base_url = "http://localhost:8000/api"
timeout = 30.0
# Leave username/password empty to skip login. A fixed token can be set instead.
username = ""
password = ""
token = ""

[sync]
# Seconds a single create/update/delete may take before it counts as failed
request_timeout = 10.0

[report]
# Monday the training started (YYYY-MM-DD). Enables report numbers in the weekly report.
training_start = ""

[logging]
log_filename = "hefti_tui.log"
file_log_level = "INFO"
rich_log_level = "DEBUG"
log_max_bytes = 10485760 # 10 MB
log_backup_count = 5
"""

try:
    DEFAULT_CONFIG_FROM_TOML: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)
except tomllib.TOMLDecodeError as e:
    logger.critical(f"FATAL: Could not parse internal CONFIG_TOML_CONTENT: {e}. Application cannot start correctly.")
    DEFAULT_CONFIG_FROM_TOML = {}


# --- Helper for deep merging dictionaries ---
def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update_dict into base_dict."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config.setdefault(section, {})[key] = value
            logger.debug(f"Config [{section}] {key} overridden by ${env_var}")
    return config


# --- Primary Configuration Loading Logic ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None

def load_settings(force_reload: bool = False) -> Dict[str, Any]:
    """
    Loads settings from ~/.config/hefti_tui/config.toml on top of the built-in defaults.
    If the file doesn't exist, it's created with default values.
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    loaded_config = copy.deepcopy(DEFAULT_CONFIG_FROM_TOML)

    if not DEFAULT_CONFIG_PATH.exists():
        logger.info(f"Config file not found at {DEFAULT_CONFIG_PATH}. Creating with default values.")
        try:
            DEFAULT_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(DEFAULT_CONFIG_PATH, "w", encoding="utf-8") as f:
                f.write(CONFIG_TOML_CONTENT)
            logger.info(f"Created default config file at {DEFAULT_CONFIG_PATH}")
        except OSError as e:
            logger.error(f"Could not create default config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")
    else:
        logger.info(f"Attempting to load config from: {DEFAULT_CONFIG_PATH}")
        try:
            with open(DEFAULT_CONFIG_PATH, "rb") as f:
                user_config_from_file = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config_from_file)
            logger.info(f"Successfully loaded and merged config from {DEFAULT_CONFIG_PATH}")
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")
        except OSError as e:
            logger.error(f"Could not read config file {DEFAULT_CONFIG_PATH}: {e}. Using internal defaults.")

    _CONFIG_CACHE = _apply_env_overrides(loaded_config)
    logger.debug(f"load_settings returning config with top-level keys: {list(_CONFIG_CACHE.keys())}")
    return _CONFIG_CACHE


# --- Setting Getter ---
def get_cli_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded configuration."""
    config = load_settings()
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


def _get_float_setting(section: str, key: str, default: float) -> float:
    value = get_cli_setting(section, key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Config [{section}] {key}={value!r} is not a number. Using default: {default}")
        return default


def get_api_base_url() -> str:
    return str(get_cli_setting("api", "base_url", DEFAULT_CONFIG_FROM_TOML["api"]["base_url"]))

def get_api_timeout() -> float:
    return _get_float_setting("api", "timeout", 30.0)

def get_sync_request_timeout() -> float:
    return _get_float_setting("sync", "request_timeout", 10.0)

def get_report_training_start() -> Optional[date]:
    value = get_cli_setting("report", "training_start", "")
    if isinstance(value, date):
        return value  # Unquoted TOML dates arrive already parsed
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning(f"Config [report] training_start={value!r} is not a YYYY-MM-DD date. Ignoring it.")
        return None


def get_api_credentials() -> Optional[Dict[str, str]]:
    """Returns username/password when both are configured, otherwise None."""
    username = get_cli_setting("api", "username", "") or ""
    password = get_cli_setting("api", "password", "") or ""
    if username and password:
        return {"username": username, "password": password}
    return None


# --- Log File Path Getter ---
def get_cli_log_file_path() -> Path:
    default_log_filename = DEFAULT_CONFIG_FROM_TOML.get("logging", {}).get("log_filename", "hefti_tui.log")
    log_filename = get_cli_setting("logging", "log_filename", default_log_filename)
    log_file_path = BASE_DATA_DIR / log_filename
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create log directory {log_file_path.parent}: {e}")
    return log_file_path

#
# End of hefti_tui/config.py
#######################################################################################################################
