import logging
import threading
from typing import Dict, Optional

from .schema_info import SchemaInfo

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Map of collection name to SchemaInfo shared by every Mapper that uses it.

    One-to-many population needs to know which relation of the *target*
    model points back at the source model, information the source model
    cannot carry itself. The registry is where that lookup happens.
    Entries are immutable and the first registration of a collection wins.
    """
    _default: "SchemaRegistry | None" = None
    _default_lock = threading.Lock()

    def __init__(self) -> None:
        self._schemas: Dict[str, SchemaInfo] = {}
        self._lock = threading.Lock()

    @classmethod
    def default(cls) -> "SchemaRegistry":
        """Process-wide registry, created on first use."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls()
        return cls._default

    def register(self, info: SchemaInfo) -> bool:
        with self._lock:
            if info.collection_name in self._schemas:
                return False
            self._schemas[info.collection_name] = info
        logger.debug("Registered schema '%s' with %d relations", info.collection_name, len(info.relations))
        return True

    def lookup(self, collection_name: str) -> Optional[SchemaInfo]:
        with self._lock:
            return self._schemas.get(collection_name)

    def collection_names(self) -> list[str]:
        with self._lock:
            return list(self._schemas.keys())

    def __contains__(self, collection_name: object) -> bool:
        with self._lock:
            return collection_name in self._schemas

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)

    def __repr__(self):
        return f"<SchemaRegistry {self.collection_names()}>"
