import logging
from typing import TYPE_CHECKING, TypeVar

from .errors import OperationNotImplemented
from .relation_info import RelationInfo, RelationKind

if TYPE_CHECKING:
    from .model import Model
    from .schema_registry import SchemaRegistry
    from .store import MongoStore

logger = logging.getLogger(__name__)

MODEL = TypeVar("MODEL", bound="Model")


def populate(instance: MODEL, field: str, store: "MongoStore", registry: "SchemaRegistry") -> MODEL:
    """
    Load the document(s) related through `field` and write them into the instance.

    Nothing to populate is not an error: an unknown field, an undefined
    target model, a missing foreign key, a missing related document or a
    one-to-many relation without a registered many-to-one counterpart all
    leave the instance untouched.
    Store and decoding errors propagate.
    """
    relation = next((rel for rel in instance.get_relations() if rel.field_name == field), None)
    if relation is None:
        logger.debug("%s has no relation '%s', nothing to populate", instance.__class__.__name__, field)
        return instance

    try:
        relation.target_collection_name
    except OperationNotImplemented as e:
        logger.debug("Cannot populate '%s': %s", field, e)
        return instance

    if relation.kind in (RelationKind.ONE_TO_ONE, RelationKind.MANY_TO_ONE):
        _populate_to_one(instance, relation, store)
    elif relation.kind == RelationKind.ONE_TO_MANY:
        _populate_to_many(instance, relation, store, registry)
    else:
        raise ValueError(f"Unsupported relation kind: {relation.kind}")
    return instance


def _populate_to_one(instance: "Model", relation: RelationInfo, store: "MongoStore"):
    if relation.field_value is None:
        logger.debug("Relation '%s' has no foreign key set", relation.field_name)
        return
    document = store.find_one(relation.target_collection_name, {"_id": relation.field_value})
    if document is None:
        logger.debug(
            "No document '%s' in '%s' for relation '%s'",
            relation.field_value, relation.target_collection_name, relation.field_name,
        )
        return
    instance.set_relation(relation.field_name, relation.target_cls.from_document(document))


def _populate_to_many(instance: "Model", relation: RelationInfo, store: "MongoStore", registry: "SchemaRegistry"):
    target_schema = registry.lookup(relation.target_collection_name)
    if target_schema is None:
        logger.debug("Collection '%s' is not registered, cannot resolve '%s'", relation.target_collection_name, relation.field_name)
        return

    reverse = target_schema.get_relation_for_collection(RelationKind.MANY_TO_ONE, instance.get_collection_name())
    if reverse is None:
        logger.debug(
            "'%s' has no many_to_one relation to '%s'",
            relation.target_collection_name, instance.get_collection_name(),
        )
        return

    documents = store.find_many(relation.target_collection_name, {reverse.field_id: instance.primary_id})
    target_cls = relation.target_cls
    instance.set_relation(relation.field_name, [target_cls.from_document(doc) for doc in documents])
