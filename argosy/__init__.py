__title__ = 'argosy'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .metadata import *
from .restrictions import *
from .factories import *
from .collation import *
from .printer import *
from .usage import *
from .dispatcher import *
from .faults import *

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
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the metadata model
__all__ += metadata.__all__  # type: ignore[attr-defined]
# Load the exposed API of the restrictions
__all__ += restrictions.__all__  # type: ignore[attr-defined]
# Load the exposed API of the restriction factory
__all__ += factories.__all__  # type: ignore[attr-defined]
# Load the exposed API of the collation domains
__all__ += collation.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage printer
__all__ += printer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage renderers
__all__ += usage.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help dispatcher
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
