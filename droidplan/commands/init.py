import click
import os
import sys
import toml
from .. import config as config_module
from ..decorators import handle_exceptions, EXIT_MALFORMED
from ..errors import ConfigError
from ..layers import load_layers
from ..cli_logger import logger


def _get_default_config():
    return {
        "app": {"version_code": 1, "version_name": "1.0"},
        "toolchain": {
            "compile_target_version": 35,
            "min_supported_version": 21,
            "target_version": 35,
            "native_toolchain_version": "27.0.12077973",
            "language_level": "11",
        },
        "plugins": [
            {"name": "com.android.application", "required_min_toolchain": 21, "ordered": True},
            {"name": "kotlin-android", "required_min_toolchain": 21, "ordered": True,
             "after": ["com.android.application"]},
            {"name": "dev.flutter.flutter-gradle-plugin", "required_min_toolchain": 21, "ordered": True,
             "after": ["com.android.application", "kotlin-android"]},
        ],
        "identity": {
            "canonical_id": "org.test.myapp",
            "effective_id": "org.test.myapp",
        },
        "variants": {
            "fallback": "debug",
            "debug": {"signing_ref": "debug"},
            "release": {},
        },
    }


def _prompt_for_input(prompt, default, validation_func=None, **kwargs):
    while True:
        value = click.prompt(prompt, default=default, **kwargs)
        if validation_func is None or validation_func(value):
            return value
        else:
            logger.warning(f"Invalid input for {prompt}. Please try again.")


def _prompt_for_config():
    conf = _get_default_config()
    toolchain = conf["toolchain"]

    canonical_id = _prompt_for_input("Application namespace (e.g., com.example.app)", conf["identity"]["canonical_id"])
    effective_id = _prompt_for_input("Published application id (leave as-is unless a legacy id is registered)", canonical_id)

    for key, label in (
        ("compile_target_version", "Compile SDK version"),
        ("min_supported_version", "Minimum SDK version"),
        ("target_version", "Target SDK version"),
    ):
        toolchain[key] = int(_prompt_for_input(label, str(toolchain[key]), validation_func=str.isdigit))
    toolchain["native_toolchain_version"] = _prompt_for_input("NDK version", toolchain["native_toolchain_version"])
    toolchain["language_level"] = _prompt_for_input("Java language level", toolchain["language_level"])

    conf["identity"] = {"canonical_id": canonical_id, "effective_id": effective_id}
    if click.confirm("Does this app use Firebase (google-services)?", default=False):
        conf["plugins"].append({"name": "com.google.gms.google-services", "required_min_toolchain": 21,
                                "min_supported_version": 23})
        conf["identity"]["service_config"] = "google-services.json"
    return conf


@click.command()
@click.option('--non-interactive', is_flag=True, help='Run in non-interactive mode using default values.')
@click.option('--config-file', type=click.Path(exists=True), help='Path to a TOML file with configuration values.')
@click.option('--force', is_flag=True, help='Overwrite an existing droidplan.toml.')
@click.pass_context
@handle_exceptions
def init(ctx, non_interactive, config_file, force):
    """Create a droidplan.toml descriptor for a project."""
    config_path = os.path.join(ctx.obj["path"], config_module.CONFIG_FILE)
    if os.path.exists(config_path) and not force:
        logger.error(f"Error: {config_path} already exists. Use --force to overwrite it.")
        sys.exit(EXIT_MALFORMED)

    logger.info("Initializing a new droidplan descriptor.")
    if config_file:
        logger.info(f"Loading configuration from {config_file}")
        try:
            with open(config_file, 'r') as f:
                conf = toml.load(f)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Error decoding TOML file at {config_file}: {e}") from e
    elif non_interactive:
        logger.info("Running in non-interactive mode with default values.")
        conf = _get_default_config()
    else:
        logger.info("Please provide the following details:")
        try:
            conf = _prompt_for_config()
        except click.Abort:
            logger.warning("\nInitialization aborted by user.")
            return

    # Refuse to write a descriptor that the other commands could not load.
    load_layers(conf, path=ctx.obj["path"])

    if config_module.save_config(conf, path=ctx.obj["path"]):
        logger.success(f"Descriptor saved to {config_path}")
        logger.info("Next steps: Run 'droidplan validate' to check it.")
    else:
        sys.exit(EXIT_MALFORMED)
