from .config import config
from .init import init
from .log import log
from .plugins import plugins
from .resolve import resolve
from .show import show
from .validate import validate
from .version import version
