import click
from ..decorators import handle_exceptions
from ..cli_logger import logger
from ._project import load_project

@click.command()
@click.pass_context
@handle_exceptions
def plugins(ctx):
    """List activated plugins in their activation order."""
    layers, registry, _ = load_project(ctx.obj["path"])
    if not len(registry):
        logger.info("No plugins are activated.")
        return

    logger.info("Activated plugins:")
    for position, plugin in enumerate(registry, start=1):
        details = [f"requires toolchain {plugin.required_min_toolchain}"]
        if plugin.min_supported_version is not None:
            details.append(f"min supported {plugin.min_supported_version}")
        if plugin.ordered and plugin.after:
            details.append(f"after {', '.join(plugin.after)}")
        logger.step_info(f"{position}. {plugin.name} ({'; '.join(details)})", indent=2)
