import logging
import threading
from typing import Any, Dict, Optional, Type
from pydantic._internal._model_construction import ModelMetaclass

from .field_parser import FieldParser
from .relation_parser import RelationParser
from .schema_info import SchemaInfo
from .util import default_collection_name

logger = logging.getLogger(__name__)


class ModelMeta(ModelMetaclass, type):
    """
    Metaclass for all ORM models.
    - Parses key, unique and relation fields once, when the class is created.
    - Resolves the collection name (`_collection_name` or the pluralized snake_case class name).
    - Keeps a catalog of model classes by name so relations can name their target.
    """
    _catalog: Dict[str, Type] = {}
    _catalog_lock = threading.Lock()

    def __new__(cls, name, bases, dct, **kwargs):
        is_base = dct.pop("_is_base", False)
        collection_name = dct.pop("_collection_name", None)

        cls_obj = super().__new__(cls, name, bases, dct, **kwargs)

        # Skip base/abstract models
        if is_base or name == "Model":
            return cls_obj

        field_parser = FieldParser(cls_obj).parse()
        relation_parser = RelationParser(cls_obj).parse()

        cls_obj._collection_name = collection_name or default_collection_name(name)
        cls_obj._primary_key = field_parser.primary_key
        cls_obj._unique_fields = tuple(field_parser.unique_fields)
        cls_obj._schema_info = SchemaInfo(
            collection_name=cls_obj._collection_name,
            relations=tuple(relation_parser.relations),
        )
        cls_obj._mapper = None

        with cls._catalog_lock:
            existing = cls._catalog.get(name)
            cls._catalog[name] = cls_obj
        if existing is not None and existing is not cls_obj:
            logger.warning(
                "Model name '%s' defined in %s replaces the one in %s; string relation targets now resolve to the new class",
                name, cls_obj.__module__, existing.__module__,
            )
        return cls_obj

    @classmethod
    def lookup_model(cls, name: str) -> Optional[Type[Any]]:
        with cls._catalog_lock:
            return cls._catalog.get(name)
