__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'optable'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .options import *
from .table import *
from .values import *
from .matching import *
from .context import *
from .rendering import *
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
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the descriptors
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the option table
__all__ += table.__all__  # type: ignore[attr-defined]
# Load the exposed API of the value extractor
__all__ += values.__all__  # type: ignore[attr-defined]
# Load the exposed API of the matchers
__all__ += matching.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parse context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the renderers
__all__ += rendering.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
