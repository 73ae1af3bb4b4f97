import copy
import sys
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Type

from .errors import OperationNotImplemented

if TYPE_CHECKING:
    from relodm.model import Model


class RelationKind(str, Enum):
    """
    Type of the relation with another model.

    - one_to_one: the model stores the key of exactly one related document.
    - many_to_one: many documents of the model point at one related document.
    - one_to_many: reverse side of a many_to_one declared on the related model.
    """
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_ONE = "many_to_one"

    @classmethod
    def parse_str(cls, text: str) -> "RelationKind":
        for kind in cls:
            if kind.value == text:
                return kind
        raise OperationNotImplemented(f"Relation type '{text}' is not implemented")

    @property
    def is_to_one(self) -> bool:
        return self in (RelationKind.ONE_TO_ONE, RelationKind.MANY_TO_ONE)


class RelationInfo:
    """
    Static description of one relation field.

    The target model and its collection are resolved once, on first use, and
    cached here. Copies made by `bind` read through to the descriptor they
    were bound from.
    """
    _resolve_lock = threading.Lock()

    def __init__(
        self,
        field_name: str,
        kind: RelationKind,
        target: Any,  # model class or its name
        owner_cls: Optional[Type["Model"]] = None,
        collection: Optional[str] = None,
        field_value: Any = None,
    ):
        if target is None:
            raise ValueError(f"target is required for relation {field_name}")
        self.field_name = field_name
        self.kind = kind
        self.field_value = field_value
        self.owner_cls = owner_cls
        self._target_raw = target
        self._target_resolved: Optional[Type["Model"]] = target if isinstance(target, type) else None
        self._collection = collection
        self._origin: Optional["RelationInfo"] = None

    @property
    def target_type_name(self) -> str:
        if isinstance(self._target_raw, str):
            return self._target_raw
        return self._target_raw.__name__

    @property
    def target_cls(self) -> Type["Model"]:
        if self._origin is not None:
            return self._origin.target_cls
        if self._target_resolved is None:
            with self._resolve_lock:
                if self._target_resolved is None:
                    self._target_resolved = self._resolve_target()
        return self._target_resolved

    @property
    def target_collection_name(self) -> str:
        if self._origin is not None:
            return self._origin.target_collection_name
        if self._collection is None:
            self._collection = self.target_cls.get_collection_name()
        return self._collection

    @property
    def field_id(self) -> str:
        """Name of the foreign key field in the database (`<field_name>_id`)."""
        return f"{self.field_name}_id"

    def _resolve_target(self) -> Type["Model"]:
        from relodm.model_meta import ModelMeta
        name = self.target_type_name
        if self.owner_cls is not None:
            module = sys.modules.get(self.owner_cls.__module__)
            candidate = getattr(module, name, None) if module else None
            if isinstance(candidate, ModelMeta):
                return candidate
        candidate = ModelMeta.lookup_model(name)
        if candidate is None:
            raise OperationNotImplemented(f"Relation '{self.field_name}' target model '{name}' is not defined")
        return candidate

    def bind(self, value: Any) -> "RelationInfo":
        """Copy carrying `value` as the foreign key. Target resolution stays on this descriptor."""
        bound = copy.copy(self)
        bound.field_value = value
        bound._origin = self._origin or self
        return bound

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelationInfo):
            return NotImplemented
        return (
            self.field_name == other.field_name
            and self.kind == other.kind
            and self.target_type_name == other.target_type_name
            and self.field_value == other.field_value
        )

    def __hash__(self) -> int:
        return hash((self.field_name, self.kind, self.target_type_name))

    def __repr__(self):
        return f"<RelationInfo {self.field_name} {self.kind.value} -> {self.target_type_name}>"
