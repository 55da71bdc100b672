import functools
import click
import sys # Import sys for sys.exc_info()
from .cli_logger import logger
from .errors import DroidPlanError

# Exit codes of the CLI.
EXIT_EMITTED = 0
EXIT_REJECTED = 1
EXIT_MALFORMED = 2
EXIT_INTERNAL = 3

def handle_exceptions(func):
    """A decorator to handle common exceptions for CLI commands."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("\nCommand aborted by user.")
            sys.exit(EXIT_INTERNAL)
        except DroidPlanError as e:
            logger.error(f"Error: {e}")
            sys.exit(EXIT_MALFORMED)
        except FileNotFoundError as e:
            logger.error(f"Error: File not found - {e}")
            logger.exception(*sys.exc_info()) # Log traceback for FileNotFoundError
            sys.exit(EXIT_MALFORMED)
        except (click.ClickException, click.exceptions.Exit):
            raise
        except Exception as e:
            logger.error(f"\nAn unexpected error occurred: {e}")
            logger.info("Please check the log file for more details and report this issue to the droidplan developers.")
            logger.exception(*sys.exc_info())
            sys.exit(EXIT_INTERNAL)
    return wrapper
