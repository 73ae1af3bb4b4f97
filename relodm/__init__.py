from .model import Model
from .fields import ModelField, KeyField, RelationField
from .relation_info import RelationInfo, RelationKind
from .schema_info import SchemaInfo, UniqueField
from .schema_registry import SchemaRegistry
from .store import MongoStore
from .mapper import Mapper
from .aio import AsyncMapper
from .connection import MongoConnectionManager
from .errors import (
    RelodmError,
    EncodeError,
    DecodeError,
    StoreError,
    DuplicatedSchemaField,
    OperationNotImplemented,
    NotRegistered,
    SchemaConflict,
)

__all__ = [
    "Model",
    "ModelField",
    "KeyField",
    "RelationField",
    "RelationInfo",
    "RelationKind",
    "SchemaInfo",
    "UniqueField",
    "SchemaRegistry",
    "MongoStore",
    "Mapper",
    "AsyncMapper",
    "MongoConnectionManager",
    "RelodmError",
    "EncodeError",
    "DecodeError",
    "StoreError",
    "DuplicatedSchemaField",
    "OperationNotImplemented",
    "NotRegistered",
    "SchemaConflict",
]
