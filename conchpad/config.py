"""
Configuration for ConchPad.

Settings live in a plain `key=value` file, by default ~/conchpad/config/conchpad.conf
(the CONCHPAD_CONFIG environment variable points somewhere else). Blank lines and lines
starting with '#' are skipped. Key bindings are fixed and not configurable.
"""
import os
from dataclasses import dataclass

from conchpad import logger

DEFAULT_CONFIG_PATH = "~/conchpad/config/conchpad.conf"


@dataclass
class Config:
    tab_stop: int = 8
    quit_times: int = 2
    message_timeout: float = 5.0
    log_file: str = "conchpad.log"


_PARSERS = {
    "tab_stop": int,
    "quit_times": int,
    "message_timeout": float,
    "log_file": str,
}


def config_path() -> str:
    """Return the configuration file path, honouring CONCHPAD_CONFIG."""
    return os.path.expanduser(os.environ.get("CONCHPAD_CONFIG", DEFAULT_CONFIG_PATH))


def load_config(path: str = None) -> Config:
    """
    Load settings from `path` (default: config_path()).
    A missing file gives the defaults; unknown keys and bad values are logged and skipped.
    """
    config = Config()
    path = path or config_path()
    if not os.path.isfile(path):
        return config
    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.log(f"config: cannot read {path}: {e}")
        return config

    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            logger.log(f"config: {path}:{lineno}: expected key=value")
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        parser = _PARSERS.get(key)
        if parser is None:
            logger.log(f"config: {path}:{lineno}: unknown key '{key}'")
            continue
        try:
            parsed = parser(value)
        except ValueError:
            logger.log(f"config: {path}:{lineno}: bad value for '{key}': {value!r}")
            continue
        if parser is not str and parsed <= 0:
            logger.log(f"config: {path}:{lineno}: '{key}' must be positive")
            continue
        setattr(config, key, parsed)
    return config
