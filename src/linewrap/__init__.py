"""linewrap package root."""

from linewrap.exceptions import NeverRaise, NeverThrown, OperationCancelled
from linewrap.invariants import never

__all__ = [
    "__version__",
    "NeverRaise",
    "NeverThrown",
    "OperationCancelled",
    "never",
]

__version__ = "0.1.0"
