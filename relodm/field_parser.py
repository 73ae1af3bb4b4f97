from typing import TYPE_CHECKING, Any, Dict, Optional, Type
from pydantic.fields import FieldInfo

from .schema_info import UniqueField
from .util import unpack_extra

if TYPE_CHECKING:
    from relodm.model import Model


class FieldParser:
    def __init__(self, model_cls: Type["Model"]):
        self.model_cls = model_cls
        self.primary_key: Optional[str] = None
        self.unique_fields: list[UniqueField] = []
        self.field_extras: Dict[str, Dict[str, Any]] = {}

    def parse(self) -> "FieldParser":
        for field_name, field_info in self.model_cls.model_fields.items():
            if not isinstance(field_info, FieldInfo):
                continue
            extra = unpack_extra(field_info)
            if not extra.get("is_model_field", False):
                continue
            self.field_extras[field_name] = extra
            if extra.get("is_relation", False):
                continue

            if extra.get("primary_key", False):
                if self.primary_key is not None:
                    raise ValueError(f"Primary key already defined on '{self.model_cls.__name__}': {self.primary_key}")
                self.primary_key = field_name

            if extra.get("unique", False):
                self.unique_fields.append(UniqueField(name=field_name, convert=extra.get("convert")))

        if self.primary_key is None:
            raise ValueError(f"No primary key defined for model '{self.model_cls.__name__}'. add a KeyField to the model.")
        return self
