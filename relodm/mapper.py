import logging
from typing import TYPE_CHECKING, Any, Callable, Mapping, Type, TypeVar

from pymongo.database import Database
from pymongo.results import InsertOneResult, UpdateResult

from .errors import NotRegistered, SchemaConflict
from .populate import populate
from .schema_registry import SchemaRegistry
from .store import MongoStore
from .unique import check_unique

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)

MODEL = TypeVar("MODEL", bound="Model")
R = TypeVar("R")


class Mapper:
    """
    Binds model classes to a store and runs every operation on them.

    ```python
    mapper = Mapper(MongoStore(client["blog"])).add_schema(Author).add_schema(Post)
    author = Author(username="nongoose").save()
    author.populate("posts")
    ```
    """

    def __init__(self, store: MongoStore, registry: SchemaRegistry | None = None):
        self.store = store
        self.registry = registry if registry is not None else SchemaRegistry.default()
        self.schemas: dict[str, Type["Model"]] = {}

    @classmethod
    def from_database(cls, database: Database, registry: SchemaRegistry | None = None) -> "Mapper":
        return cls(MongoStore(database), registry=registry)

    @classmethod
    def from_env(cls, registry: SchemaRegistry | None = None) -> "Mapper":
        from .connection import MongoConnectionManager
        return cls.from_database(MongoConnectionManager.get_database(), registry=registry)

    # -------------------------
    # Schemas
    # -------------------------
    def add_schema(self, model_cls: Type["Model"]) -> "Mapper":
        collection_name = model_cls.get_collection_name()
        existing = self.schemas.get(collection_name)
        if existing is model_cls:
            return self
        if existing is not None:
            raise SchemaConflict(collection_name, existing.__name__, model_cls.__name__)
        self.schemas[collection_name] = model_cls
        self.registry.register(model_cls.get_schema_info())
        model_cls.bind(self)
        logger.debug("Added schema %s (%s)", model_cls.__name__, collection_name)
        return self

    def is_registered(self, model_cls: Type["Model"]) -> bool:
        return self.schemas.get(model_cls.get_collection_name()) is model_cls

    def _collection(self, model_cls: Type["Model"]) -> str:
        collection_name = model_cls.get_collection_name()
        if self.schemas.get(collection_name) is not model_cls:
            raise NotRegistered(collection_name)
        return collection_name

    # -------------------------
    # Instance lifecycle
    # -------------------------
    def check_unique(self, instance: "Model") -> None:
        self._collection(type(instance))
        check_unique(instance, self.store)

    def save(self, instance: MODEL) -> MODEL:
        """
        Insert the instance if no document has its identity, otherwise replace it.

        `before_create` runs before an insert and `before_update` before a
        replace; both may mutate the instance and raise to abort the save.
        """
        collection = self._collection(type(instance))
        check_unique(instance, self.store)

        if self.store.find_one(collection, instance.id_query()) is not None:
            instance.before_update(self.store)
            self.store.replace_one(collection, instance.id_query(), instance.to_document(), upsert=True)
            logger.debug("Replaced %s in '%s'", instance.primary_id, collection)
        else:
            instance.before_create(self.store)
            self.store.insert_one(collection, instance.to_document())
            logger.debug("Inserted %s in '%s'", instance.primary_id, collection)
        return instance

    def create(self, instance: "Model") -> InsertOneResult:
        """Insert the instance without running hooks."""
        collection = self._collection(type(instance))
        check_unique(instance, self.store)
        return self.store.insert_one(collection, instance.to_document())

    def remove(self, instance: "Model") -> bool:
        """Delete the instance's document. Related documents are left alone."""
        collection = self._collection(type(instance))
        if not instance.before_delete(self.store):
            logger.debug("Removal of %s from '%s' cancelled by before_delete", instance.primary_id, collection)
            return False
        result = self.store.delete_one(collection, instance.id_query())
        return result.deleted_count == 1

    def populate(self, instance: MODEL, field: str) -> MODEL:
        self._collection(type(instance))
        return populate(instance, field, self.store, self.registry)

    # -------------------------
    # Queries
    # -------------------------
    def find_one(self, model_cls: Type[MODEL], conditions: Mapping[str, Any], **options) -> MODEL | None:
        document = self.store.find_one(self._collection(model_cls), conditions, **options)
        if document is None:
            return None
        return model_cls.from_document(document)

    def find_by_id(self, model_cls: Type[MODEL], id: Any) -> MODEL | None:
        return self.find_one(model_cls, {"_id": id})

    def find(self, model_cls: Type[MODEL], conditions: Mapping[str, Any] | None = None, **options) -> list[MODEL]:
        documents = self.store.find_many(self._collection(model_cls), conditions, **options)
        return [model_cls.from_document(doc) for doc in documents]

    def count(self, model_cls: Type["Model"], conditions: Mapping[str, Any] | None = None, **options) -> int:
        return self.store.count(self._collection(model_cls), conditions, **options)

    def update_many(self, model_cls: Type["Model"], conditions: Mapping[str, Any], update: Any, **options) -> UpdateResult:
        return self.store.update_many(self._collection(model_cls), conditions, update, **options)

    def aggregate(
        self,
        model_cls: Type["Model"],
        pipeline: list[Mapping[str, Any]],
        output: Callable[[dict[str, Any]], R] | None = None,
        **options,
    ) -> list[R] | list[dict[str, Any]]:
        documents = self.store.aggregate(self._collection(model_cls), pipeline, **options)
        if output is None:
            return list(documents)
        return [output(doc) for doc in documents]

    def find_by_id_and_remove(self, model_cls: Type[MODEL], id: Any) -> tuple[bool, MODEL | None]:
        return self.find_one_and_remove(model_cls, {"_id": id})

    def find_one_and_remove(self, model_cls: Type[MODEL], conditions: Mapping[str, Any], **options) -> tuple[bool, MODEL | None]:
        instance = self.find_one(model_cls, conditions, **options)
        if instance is None:
            return False, None
        return self.remove(instance), instance

    def find_and_remove(self, model_cls: Type[MODEL], conditions: Mapping[str, Any], **options) -> list[tuple[bool, MODEL]]:
        return [(self.remove(instance), instance) for instance in self.find(model_cls, conditions, **options)]

    def __repr__(self):
        return f"<Mapper {self.store.name} {list(self.schemas)}>"
