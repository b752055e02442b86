"""Port interfaces (Protocols).

Services depend only on these, never on concrete adapters.
"""

from .id_gen import RequestIdProvider, UuidRequestIdProvider
from .sources import ObjectSource, RuleSource

__all__ = [
    "ObjectSource",
    "RequestIdProvider",
    "RuleSource",
    "UuidRequestIdProvider",
]
