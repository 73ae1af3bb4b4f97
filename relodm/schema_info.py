from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .errors import OperationNotImplemented
from .relation_info import RelationInfo, RelationKind


@dataclass(frozen=True)
class UniqueField:
    name: str
    convert: Optional[Callable[[Any], Any]] = None

    def query_value(self, value: Any) -> Any:
        if self.convert is not None:
            return self.convert(value)
        return value


@dataclass(frozen=True)
class SchemaInfo:
    """Relation metadata of one model, keyed in the registry by collection name."""
    collection_name: str
    relations: tuple[RelationInfo, ...] = field(default_factory=tuple)

    def get_relation(self, name: str) -> Optional[RelationInfo]:
        for rel in self.relations:
            if rel.field_name == name:
                return rel
        return None

    def get_relation_for_collection(self, kind: RelationKind, collection_name: str) -> Optional[RelationInfo]:
        """First relation of `kind` pointing at `collection_name`. Relations whose target is not defined are skipped."""
        for rel in self.relations:
            if rel.kind != kind:
                continue
            try:
                target_collection = rel.target_collection_name
            except OperationNotImplemented:
                continue
            if target_collection == collection_name:
                return rel
        return None
