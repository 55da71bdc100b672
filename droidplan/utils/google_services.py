import json
import os

from ..errors import ConfigError
from ..cli_logger import logger


def _table(value, where):
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a JSON object, got {type(value).__name__}.")
    return value


def get_registered_identities(services_conf):
    """
    Returns the application ids registered in a parsed google-services.json.
    """
    clients = services_conf.get("client", [])
    if not isinstance(clients, list):
        raise ConfigError(f"'client' must be a JSON array, got {type(clients).__name__}.")
    identities = set()
    for position, client in enumerate(clients):
        where = f"client[{position}]"
        # Missing sections are allowed; present ones must be objects.
        client_info = _table(_table(client, where).get("client_info", {}), f"{where}.client_info")
        android_info = _table(client_info.get("android_client_info", {}), f"{where}.client_info.android_client_info")
        package_name = android_info.get("package_name")
        if package_name:
            identities.add(str(package_name))
    return frozenset(identities)


def load_registered_identities(path):
    logger.info(f"Reading registered identities from {path}")
    if not os.path.exists(path):
        raise ConfigError(f"External service configuration not found at {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            services_conf = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Error decoding JSON file at {path}: {e}") from e
    except IOError as e:
        raise ConfigError(f"Error reading {path}: {e}") from e
    if not isinstance(services_conf, dict):
        raise ConfigError(f"Unexpected content in {path}: expected a JSON object.")
    try:
        return get_registered_identities(services_conf)
    except ConfigError as e:
        raise ConfigError(f"Unexpected content in {path}: {e}") from e
