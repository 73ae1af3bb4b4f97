import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from bson.errors import InvalidDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from .errors import EncodeError, StoreError

logger = logging.getLogger(__name__)


def log_store_error(operation: str, collection: str, error: Exception, filter: Any = None):
    """Structured logging for store errors"""
    error_context = {
        'operation': operation,
        'collection': collection,
        'error_type': type(error).__name__,
        'error_message': str(error),
    }
    if filter is not None:
        error_context['filter'] = str(filter)[:200]
    logger.error(f"STORE_ERROR: {error_context}")


class MongoStore:
    """
    Blocking handle over a pymongo Database.

    Every driver failure is re-raised as StoreError and every BSON encoding
    failure as EncodeError. Filters, updates, pipelines and options are passed
    through to pymongo unchanged.
    """

    def __init__(self, database: Database):
        self.database = database

    @property
    def name(self) -> str:
        return self.database.name

    def collection(self, name: str):
        return self.database[name]

    @contextmanager
    def _wrap_errors(self, operation: str, collection: str, filter: Any = None):
        try:
            yield
        except InvalidDocument as e:
            log_store_error(operation, collection, e, filter)
            raise EncodeError(f"Cannot encode document for {operation} on '{collection}': {e}") from e
        except PyMongoError as e:
            log_store_error(operation, collection, e, filter)
            raise StoreError(f"{operation} on '{collection}' failed: {e}") from e

    def find_one(self, collection: str, filter: Mapping[str, Any], **options) -> dict[str, Any] | None:
        with self._wrap_errors("find_one", collection, filter):
            return self.collection(collection).find_one(filter, **options)

    def find_many(self, collection: str, filter: Mapping[str, Any] | None = None, **options) -> Iterator[dict[str, Any]]:
        with self._wrap_errors("find", collection, filter):
            cursor = self.collection(collection).find(filter or {}, **options)
            for document in cursor:
                yield document

    def insert_one(self, collection: str, document: Mapping[str, Any]) -> InsertOneResult:
        with self._wrap_errors("insert_one", collection):
            return self.collection(collection).insert_one(document)

    def replace_one(self, collection: str, filter: Mapping[str, Any], document: Mapping[str, Any], upsert: bool = True) -> UpdateResult:
        with self._wrap_errors("replace_one", collection, filter):
            return self.collection(collection).replace_one(filter, document, upsert=upsert)

    def delete_one(self, collection: str, filter: Mapping[str, Any]) -> DeleteResult:
        with self._wrap_errors("delete_one", collection, filter):
            return self.collection(collection).delete_one(filter)

    def count(self, collection: str, filter: Mapping[str, Any] | None = None, **options) -> int:
        with self._wrap_errors("count", collection, filter):
            return self.collection(collection).count_documents(filter or {}, **options)

    def update_many(self, collection: str, filter: Mapping[str, Any], update: Any, **options) -> UpdateResult:
        with self._wrap_errors("update_many", collection, filter):
            return self.collection(collection).update_many(filter, update, **options)

    def aggregate(self, collection: str, pipeline: list[Mapping[str, Any]], **options) -> Iterator[dict[str, Any]]:
        with self._wrap_errors("aggregate", collection):
            for document in self.collection(collection).aggregate(pipeline, **options):
                yield document

    def __repr__(self):
        return f"<MongoStore {self.database.name}>"
