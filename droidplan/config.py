import toml
import os
from .cli_logger import logger
from .errors import ConfigError

CONFIG_FILE = "droidplan.toml"

def load_config(path=".", strict=False):
    """
    Load droidplan.toml from ``path``.

    Returns an empty dict when the file is missing. Unreadable or malformed
    files are logged and return an empty dict, or raise ConfigError when
    ``strict`` is set.
    """
    config_path = os.path.join(path, CONFIG_FILE)
    logger.info(f"Loading configuration from {config_path}")
    if os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                return toml.load(f)
        except toml.TomlDecodeError as e:
            logger.error(f"Error decoding TOML file at {config_path}: {e}")
            logger.info("Please check the file's format for syntax errors.")
            if strict:
                raise ConfigError(f"Malformed {CONFIG_FILE}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file at {config_path}: {e}")
            logger.info("Please check file permissions.")
            if strict:
                raise ConfigError(f"Unreadable {CONFIG_FILE}: {e}") from e
    return {}

def save_config(config, path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    logger.info(f"Saving configuration to {config_path}")
    try:
        with open(config_path, "w") as f:
            toml.dump(config, f)
        return True
    except IOError as e:
        logger.error(f"Error saving configuration to {config_path}: {e}")
        logger.info("Please check file permissions and ensure the directory is writable.")
        return False
