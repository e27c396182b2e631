__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'conch'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

__import__("logging").getLogger(__name__).addHandler(__import__("logging").NullHandler())

from .app import *
from .commands import *
from .context import *
from .defaults import *
from .faults import *
from .flags import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Shell: App, LineReader, EndOfInput
__all__ += app.__all__  # type: ignore[attr-defined]
# Commands: ExitStatus, Command, command
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += context.__all__  # type: ignore[attr-defined]
__all__ += defaults.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += flags.__all__  # type: ignore[attr-defined]
