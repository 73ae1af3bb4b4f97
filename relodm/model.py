import asyncio
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic_core import PydanticSerializationError
from typing import TYPE_CHECKING, Any, Self, Type

from .errors import DecodeError, EncodeError, NotRegistered, OperationNotImplemented
from .model_meta import ModelMeta
from .relation_info import RelationInfo
from .schema_info import SchemaInfo, UniqueField

if TYPE_CHECKING:
    from .mapper import Mapper
    from .store import MongoStore


class Model(BaseModel, metaclass=ModelMeta):
    """Base class for all ORM models."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    @classmethod
    def get_collection_name(cls) -> str:
        val = getattr(cls, "_collection_name", None)
        if isinstance(val, str):
            return val
        raise ValueError(f"Collection name not set for {cls.__name__}")

    @classmethod
    def get_schema_info(cls) -> SchemaInfo:
        info = getattr(cls, "_schema_info", None)
        if info is None:
            raise ValueError(f"{cls.__name__} is a base model and has no schema")
        return info

    @classmethod
    def get_primary_key(cls) -> str:
        return getattr(cls, "_primary_key")

    @classmethod
    def get_unique_fields(cls) -> tuple[UniqueField, ...]:
        return getattr(cls, "_unique_fields", ())

    @classmethod
    def bind(cls, mapper: "Mapper | None"):
        cls._mapper = mapper

    @classmethod
    def get_mapper(cls) -> "Mapper":
        mapper = getattr(cls, "_mapper", None)
        if mapper is None:
            raise NotRegistered(cls.get_collection_name())
        return mapper

    @property
    def primary_id(self) -> Any:
        return getattr(self, self.get_primary_key())

    def id_query(self) -> dict[str, Any]:
        return {"_id": self.primary_id}

    @model_validator(mode="after")
    def _sync_foreign_keys(self) -> Self:
        schema = getattr(type(self), "_schema_info", None)
        if schema is None:
            return self
        for rel in schema.relations:
            if not rel.kind.is_to_one:
                continue
            loaded = getattr(self, rel.field_name)
            if isinstance(loaded, Model) and getattr(self, rel.field_id) is None:
                setattr(self, rel.field_id, loaded.primary_id)
        return self

    # -------------------------
    # Relations
    # -------------------------
    def get_relations(self) -> list[RelationInfo]:
        """Relation descriptors of this instance, carrying the current foreign key values."""
        relations = []
        for rel in self.get_schema_info().relations:
            if rel.kind.is_to_one:
                loaded = getattr(self, rel.field_name)
                if isinstance(loaded, Model):
                    value = loaded.primary_id
                else:
                    value = getattr(self, rel.field_id)
                relations.append(rel.bind(value))
            else:
                relations.append(rel.bind(None))
        return relations

    def set_relation(self, field: str, value: Any):
        if self.get_schema_info().get_relation(field) is None:
            raise OperationNotImplemented(f"'{field}' is not a relation of {self.__class__.__name__}")
        setattr(self, field, value)

    # -------------------------
    # Document conversion
    # -------------------------
    def to_document(self) -> dict[str, Any]:
        relations = self.get_relations()
        try:
            dump = self.model_dump(exclude={rel.field_name for rel in relations})
        except PydanticSerializationError as e:
            raise EncodeError(f"Cannot encode {self.__class__.__name__}: {e}") from e
        document = {"_id": dump.pop(self.get_primary_key())}
        document.update(dump)
        for rel in relations:
            if rel.kind.is_to_one:
                document[rel.field_id] = rel.field_value
        return document

    @classmethod
    def from_document(cls: Type[Self], document: dict[str, Any]) -> Self:
        data = dict(document)
        if "_id" in data:
            data[cls.get_primary_key()] = data.pop("_id")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"Cannot decode {cls.__name__} document: {e}") from e

    # -------------------------
    # Hooks
    # -------------------------
    def before_create(self, store: "MongoStore") -> None:
        """Called before the document is inserted. May mutate the instance or raise to abort."""
        pass

    def before_update(self, store: "MongoStore") -> None:
        """Called before the document is replaced by `save`."""
        pass

    def before_delete(self, store: "MongoStore") -> bool:
        """Called before the document is removed. Returning False cancels the removal."""
        return True

    # -------------------------
    # Lifecycle
    # -------------------------
    def save(self) -> Self:
        return self.get_mapper().save(self)

    def remove(self) -> bool:
        return self.get_mapper().remove(self)

    def populate(self, field: str) -> Self:
        return self.get_mapper().populate(self, field)

    def check_unique(self) -> None:
        self.get_mapper().check_unique(self)

    async def asave(self) -> Self:
        return await asyncio.to_thread(self.save)

    async def aremove(self) -> bool:
        return await asyncio.to_thread(self.remove)

    async def apopulate(self, field: str) -> Self:
        return await asyncio.to_thread(self.populate, field)
