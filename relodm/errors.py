


class RelodmError(Exception):
    pass


class EncodeError(RelodmError):
    pass


class DecodeError(RelodmError):
    pass


class StoreError(RelodmError):
    pass


class OperationNotImplemented(RelodmError):

    def __init__(self, message: str = "No implemented") -> None:
        super().__init__(message)


class DuplicatedSchemaField(RelodmError):

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Duplicated schema field ({field}): {value}")


class NotRegistered(RelodmError):

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name
        super().__init__(f"Schema is not associated to a Mapper instance ({collection_name})")


class SchemaConflict(RelodmError):

    def __init__(self, collection_name: str, existing: str, model_name: str) -> None:
        self.collection_name = collection_name
        self.existing = existing
        self.model_name = model_name
        super().__init__(f"Collection '{collection_name}' is already mapped to {existing}, cannot add {model_name}")
