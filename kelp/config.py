"""
User configuration for the Kelp text editor.

Settings live in ~/kelp/config/kelp.conf (or the file named by $KELP_CONFIG) as
simple key=value lines. Blank lines and lines starting with '#' are ignored.
"""
import os
from dataclasses import dataclass, fields

from kelp import logger

CONFIG_PATH = "~/kelp/config/kelp.conf"

@dataclass
class Config:
    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: int = 5
    log_file: str = "~/kelp/kelp.log"

def config_path() -> str:
    """Return the config file location, honouring $KELP_CONFIG."""
    return os.path.expanduser(os.environ.get("KELP_CONFIG", CONFIG_PATH))

def load_config(path: str = None) -> Config:
    """
    Load settings from the config file.
    A missing file yields the defaults; unknown keys and bad values are logged and skipped.
    """
    config = Config()
    path = path or config_path()
    if not os.path.isfile(path):
        return config

    types = {f.name: f.type for f in fields(Config)}
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                logger.log(f"config {path}:{lineno}: expected key=value")
                continue
            key, value = (part.strip() for part in line.split("=", 1))
            if key not in types:
                logger.log(f"config {path}:{lineno}: unknown key '{key}'")
                continue
            if types[key] in (int, "int"):
                try:
                    value = int(value)
                except ValueError:
                    logger.log(f"config {path}:{lineno}: '{key}' needs an integer, got '{value}'")
                    continue
                if value < 1:
                    logger.log(f"config {path}:{lineno}: '{key}' must be positive")
                    continue
            setattr(config, key, value)
    return config
