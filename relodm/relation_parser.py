from typing import TYPE_CHECKING, Type
from pydantic.fields import FieldInfo

from .relation_info import RelationInfo, RelationKind
from .util import unpack_extra

if TYPE_CHECKING:
    from relodm.model import Model


class RelationParser:
    def __init__(self, model_cls: Type["Model"]):
        self.model_cls = model_cls
        self.relations: list[RelationInfo] = []

    def parse(self) -> "RelationParser":
        """Collect the relation fields of the model, in declaration order"""
        fields = self.model_cls.model_fields
        for field_name, field_info in fields.items():
            if not isinstance(field_info, FieldInfo):
                continue

            extra = unpack_extra(field_info)
            if not extra.get("is_relation", False):
                continue

            kind = RelationKind.parse_str(extra["relation_kind"])
            rel_info = RelationInfo(
                field_name=field_name,
                kind=kind,
                target=extra["target"],
                owner_cls=self.model_cls,
                collection=extra.get("collection"),
            )
            if kind.is_to_one and rel_info.field_id not in fields:
                raise ValueError(
                    f"Relation '{field_name}' on model '{self.model_cls.__name__}' needs a "
                    f"'{rel_info.field_id}' field holding the foreign key."
                )
            self.relations.append(rel_info)
        return self
