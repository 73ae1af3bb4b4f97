import logging
from typing import TYPE_CHECKING

from .errors import DuplicatedSchemaField

if TYPE_CHECKING:
    from .model import Model
    from .store import MongoStore

logger = logging.getLogger(__name__)


def check_unique(instance: "Model", store: "MongoStore") -> None:
    """
    Probe the store for another document holding the value of any unique field.

    A document with the same identity is the instance itself being saved
    again and does not count. This is a best-effort check: two writers can
    still race between the probe and the write, a unique index on the
    collection is what actually guarantees uniqueness.
    """
    unique_fields = instance.get_unique_fields()
    if not unique_fields:
        return

    collection = instance.get_collection_name()
    primary_key = instance.get_primary_key()
    for field in unique_fields:
        value = getattr(instance, field.name)
        if value is None:
            continue
        storage_name = "_id" if field.name == primary_key else field.name
        document = store.find_one(collection, {storage_name: field.query_value(value)})
        if document is None:
            continue
        if document.get("_id") != instance.primary_id:
            logger.debug("Unique field '%s' of '%s' already taken by %s", field.name, collection, document.get("_id"))
            raise DuplicatedSchemaField(field.name, str(value))
