import click
import os
import json
from .. import config as config_module
from ..errors import ConfigError
from ..layers import load_layers
from ..cli_logger import logger


def _load(ctx):
    conf = config_module.load_config(path=ctx.obj["path"])
    if not conf:
        logger.error("Error: No droidplan.toml found. Please run 'droidplan init' first.")
    return conf


def _step(node, key):
    """Descend one level; list entries are addressed by index (plugins.0.name)."""
    if isinstance(node, list):
        return node[int(key)]
    return node[key]


def _coerce(value):
    if value.isdigit():
        return int(value)
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def _save_checked(ctx, conf):
    """Save ``conf`` only if it still loads into valid descriptor layers."""
    try:
        load_layers(conf, path=ctx.obj["path"])
    except ConfigError as e:
        logger.error(f"Error: the change would make droidplan.toml invalid: {e}")
        return False
    return config_module.save_config(conf, path=ctx.obj["path"])


@click.group()
@click.pass_context
def config(ctx):
    """View or edit the droidplan.toml descriptor."""
    pass

@config.command()
@click.pass_context
def view(ctx):
    """Print droidplan.toml as it is on disk."""
    if not _load(ctx):
        return
    config_file_path = os.path.join(ctx.obj["path"], config_module.CONFIG_FILE)
    with open(config_file_path, 'r') as f:
        click.echo(f.read())

@config.command()
@click.pass_context
def edit(ctx):
    """Open droidplan.toml in your default editor."""
    if not _load(ctx):
        return
    config_file_path = os.path.join(ctx.obj["path"], config_module.CONFIG_FILE)
    try:
        click.edit(filename=config_file_path)
    except click.ClickException as e:
        logger.error(f"Could not open an editor for droidplan.toml: {e}")
        logger.info("Check the EDITOR/VISUAL environment variables.")

@config.command(name="list")
@click.pass_context
def list_(ctx):
    """Print every configuration key and value as JSON."""
    conf = _load(ctx)
    if conf:
        click.echo(json.dumps(conf, indent=4))

@config.command()
@click.argument('key')
@click.pass_context
def get(ctx, key):
    """Get a value by dotted key, e.g. toolchain.compile_target_version."""
    conf = _load(ctx)
    if not conf:
        return
    value = conf
    try:
        for k in key.split('.'):
            value = _step(value, k)
    except (KeyError, IndexError, TypeError, ValueError):
        logger.error(f"Error: Key '{key}' not found in droidplan.toml")
        return
    click.echo(json.dumps(value) if isinstance(value, (dict, list)) else value)

@config.command(name="set")
@click.argument('key')
@click.argument('value')
@click.pass_context
def set_(ctx, key, value):
    """Set a value by dotted key. Digits and true/false are stored typed."""
    conf = _load(ctx)
    if not conf:
        return

    keys = key.split('.')
    d = conf
    try:
        for k in keys[:-1]:
            d = d.setdefault(k, {}) if isinstance(d, dict) else _step(d, k)
    except (IndexError, ValueError):
        logger.error(f"Error: Key '{key}' not found in droidplan.toml")
        return
    if not isinstance(d, dict):
        logger.error(f"Error: '{'.'.join(keys[:-1])}' is not a table")
        return
    d[keys[-1]] = _coerce(value)

    if _save_checked(ctx, conf):
        logger.info(f"Set '{key}' to '{value}'")

@config.command()
@click.argument('key')
@click.pass_context
def unset(ctx, key):
    """Remove a key from droidplan.toml."""
    conf = _load(ctx)
    if not conf:
        return

    keys = key.split('.')
    d = conf
    try:
        for k in keys[:-1]:
            d = _step(d, k)
        del d[keys[-1]]
    except (KeyError, IndexError, TypeError, ValueError):
        logger.error(f"Error: Key '{key}' not found in droidplan.toml")
        return
    if _save_checked(ctx, conf):
        logger.info(f"Unset '{key}'")
