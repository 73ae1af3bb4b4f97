from pydantic import Field
from typing import TYPE_CHECKING, Any, Callable, Type
from pydantic_core import PydanticUndefined

from .relation_info import RelationKind

if TYPE_CHECKING:
    from .model import Model



def ModelField(
    default: Any = PydanticUndefined,
    *,
    unique: bool = False,
    convert: Callable[[Any], Any] | None = None,
    default_factory: Callable[[], Any] | None = None,
    description: str | None = None,
) -> Any:
    """
    Define a model field with ORM-specific metadata.

    Args:
        unique: check the store for another document with the same value before saving
        convert: applied to the value before it is used in the uniqueness query
    """
    extra = {}
    extra["is_model_field"] = True
    extra["unique"] = unique
    if convert is not None:
        if not unique:
            raise ValueError("convert can only be set on unique fields")
        extra["convert"] = convert

    params = {
        "json_schema_extra": extra,
        "description": description,
    }
    if default_factory is not None:
        params["default_factory"] = default_factory
        return Field(**params)
    return Field(default, **params)


def KeyField(
    default: Any = PydanticUndefined,
    *,
    default_factory: Callable[[], Any] | None = None,
    primary_key: bool = True,
    unique: bool = False,
    description: str | None = None,
) -> Any:
    """Define the identity field, stored as `_id`"""
    extra = {}
    extra["is_model_field"] = True
    extra["primary_key"] = primary_key
    extra["is_key"] = True
    extra["unique"] = unique
    params = {
        "json_schema_extra": extra,
        "description": description,
    }
    if default_factory is not None:
        params["default_factory"] = default_factory
        return Field(**params)
    return Field(default, **params)


def RelationField(
    default: Any = PydanticUndefined,
    *,
    one_to_one: "Type[Model] | str | None" = None,
    many_to_one: "Type[Model] | str | None" = None,
    one_to_many: "Type[Model] | str | None" = None,
    collection: str | None = None,
    description: str | None = None,
) -> Any:
    """
    Define a relation field with ORM-specific metadata.

    Exactly one of the kinds must be given, naming the related model either
    by class or by class name. One-to-one and many-to-one relations need a
    companion `<field>_id` field on the same model holding the foreign key.

    Args:
        one_to_one: related model, this model stores its key
        many_to_one: related model, this model stores its key
        one_to_many: related model, which declares a many_to_one back to this model
        collection: collection of the related model, when it cannot be derived from the class
    """
    kinds = [
        (RelationKind.ONE_TO_ONE, one_to_one),
        (RelationKind.MANY_TO_ONE, many_to_one),
        (RelationKind.ONE_TO_MANY, one_to_many),
    ]
    declared = [(kind, target) for kind, target in kinds if target is not None]
    if len(declared) != 1:
        raise ValueError("exactly one of one_to_one, many_to_one or one_to_many must be provided")
    kind, target = declared[0]

    extra = {}
    extra["is_model_field"] = True
    extra["is_relation"] = True
    extra["relation_kind"] = kind.value
    extra["target"] = target
    extra["collection"] = collection

    params = {
        "json_schema_extra": extra,
        "description": description,
        "exclude": True,
    }
    if default is PydanticUndefined:
        if kind == RelationKind.ONE_TO_MANY:
            return Field(default_factory=list, **params)
        default = None
    return Field(default, **params)
