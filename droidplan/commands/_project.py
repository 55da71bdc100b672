from .. import config as config_module
from ..errors import ConfigError
from ..layers import load_layers
from ..registry import PluginRegistry
from ..utils import load_registered_identities
from ..cli_logger import logger


def load_project(path):
    """
    Load droidplan.toml from ``path`` and build the registry.

    Returns ``(layers, registry, registered_identities)``. Any malformed layer
    raises a DroidPlanError, including a duplicate plugin name.
    """
    conf = config_module.load_config(path=path, strict=True)
    if not conf:
        raise ConfigError(
            f"No {config_module.CONFIG_FILE} found in {path}. Please run 'droidplan init' first."
        )
    layers = load_layers(conf, path=path)
    registry = PluginRegistry.from_activations(layers.plugins)
    registered = None
    if layers.service_config:
        registered = load_registered_identities(layers.service_config)
        logger.info(f"  - {len(registered)} identit{'y' if len(registered) == 1 else 'ies'} registered with the external service")
    return layers, registry, registered


def report_rejection(errors):
    logger.error(f"Build plan rejected with {len(errors)} error(s):")
    for error in errors:
        logger.error(str(error))
