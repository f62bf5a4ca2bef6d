"""pyquidquid: typed field extraction for loosely-typed nested data.

This package wraps decoded payloads (e.g. parsed JSON request bodies) in a
small fluent accessor that validates each field as it is read and reports
failures with the dotted path of the offending key.
"""

from .core.accessor import Quidquid, accessor_from
from .core.errors import FieldError, InvalidTypeError, MissingFieldError

__version__ = "0.2.0"
__license__ = "MIT"

__all__ = [
    "Quidquid",
    "accessor_from",
    "FieldError",
    "InvalidTypeError",
    "MissingFieldError",
    "__version__",
    "__license__",
]
