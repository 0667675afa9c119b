import json
import logging
import os

from keys import DEFAULT_BINDINGS

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "sqlpeek")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "sqlpeek.log")

# default settings
KEYS_DEFAULT = {}
LOG_LEVEL_DEFAULT = "INFO"
UPDATE_CHECK_URL_DEFAULT = None
PAGE_SIZE_DEFAULT = None

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "KEYS": dict(KEYS_DEFAULT),
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "UPDATE_CHECK_URL": UPDATE_CHECK_URL_DEFAULT,
        "PAGE_SIZE": PAGE_SIZE_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logging.getLogger(__name__).warning("unreadable config %s: %s", CONFIG_JSON, exc)
        return cfg

    if not isinstance(data, dict):
        return cfg

    keys = data.get("keys")
    if isinstance(keys, dict):
        for action, names in keys.items():
            if action not in DEFAULT_BINDINGS:
                continue
            if isinstance(names, str):
                names = [names]
            if isinstance(names, list) and names and all(isinstance(n, str) for n in names):
                cfg["KEYS"][action] = list(names)

    level = data.get("log_level")
    if isinstance(level, str) and level.upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.upper()

    url = data.get("update_check_url")
    if isinstance(url, str) and url.startswith(("http://", "https://")):
        cfg["UPDATE_CHECK_URL"] = url

    page_size = data.get("page_size")
    if isinstance(page_size, int) and not isinstance(page_size, bool) and page_size > 0:
        cfg["PAGE_SIZE"] = page_size

    return cfg
