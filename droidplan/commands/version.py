import click
import importlib.metadata
from .. import __version__
from ..cli_logger import logger

@click.command()
def version():
    """Print the version of droidplan."""
    try:
        ver = importlib.metadata.version("droidplan")
    except importlib.metadata.PackageNotFoundError:
        logger.warning("droidplan is not installed as a distribution; reporting the source version.")
        ver = __version__
    click.echo(f"droidplan {ver}")
