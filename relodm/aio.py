import asyncio
from typing import TYPE_CHECKING, Any, Callable, Mapping, Type, TypeVar

from .mapper import Mapper

if TYPE_CHECKING:
    from .model import Model

MODEL = TypeVar("MODEL", bound="Model")
T = TypeVar("T")


class AsyncMapper:
    """
    Awaitable front for a Mapper.

    Each call runs the whole blocking operation in a worker thread, so a
    save or populate is never interleaved step by step with other work on
    the event loop.
    """

    def __init__(self, mapper: Mapper):
        self.mapper = mapper

    @property
    def store(self):
        return self.mapper.store

    @property
    def registry(self):
        return self.mapper.registry

    def add_schema(self, model_cls: Type["Model"]) -> "AsyncMapper":
        self.mapper.add_schema(model_cls)
        return self

    async def _run(self, fn: Callable[..., T], *args, **kwargs) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    async def save(self, instance: MODEL) -> MODEL:
        return await self._run(self.mapper.save, instance)

    async def create(self, instance: "Model"):
        return await self._run(self.mapper.create, instance)

    async def remove(self, instance: "Model") -> bool:
        return await self._run(self.mapper.remove, instance)

    async def populate(self, instance: MODEL, field: str) -> MODEL:
        return await self._run(self.mapper.populate, instance, field)

    async def check_unique(self, instance: "Model") -> None:
        await self._run(self.mapper.check_unique, instance)

    async def find_one(self, model_cls: Type[MODEL], conditions: Mapping[str, Any], **options) -> MODEL | None:
        return await self._run(self.mapper.find_one, model_cls, conditions, **options)

    async def find_by_id(self, model_cls: Type[MODEL], id: Any) -> MODEL | None:
        return await self._run(self.mapper.find_by_id, model_cls, id)

    async def find(self, model_cls: Type[MODEL], conditions: Mapping[str, Any] | None = None, **options) -> list[MODEL]:
        return await self._run(self.mapper.find, model_cls, conditions, **options)

    async def count(self, model_cls: Type["Model"], conditions: Mapping[str, Any] | None = None, **options) -> int:
        return await self._run(self.mapper.count, model_cls, conditions, **options)

    async def update_many(self, model_cls: Type["Model"], conditions: Mapping[str, Any], update: Any, **options):
        return await self._run(self.mapper.update_many, model_cls, conditions, update, **options)

    async def aggregate(self, model_cls: Type["Model"], pipeline: list[Mapping[str, Any]], output: Callable | None = None, **options) -> list:
        return await self._run(self.mapper.aggregate, model_cls, pipeline, output, **options)

    async def find_by_id_and_remove(self, model_cls: Type[MODEL], id: Any) -> tuple[bool, MODEL | None]:
        return await self._run(self.mapper.find_by_id_and_remove, model_cls, id)

    async def find_one_and_remove(self, model_cls: Type[MODEL], conditions: Mapping[str, Any], **options) -> tuple[bool, MODEL | None]:
        return await self._run(self.mapper.find_one_and_remove, model_cls, conditions, **options)

    async def find_and_remove(self, model_cls: Type[MODEL], conditions: Mapping[str, Any], **options) -> list[tuple[bool, MODEL]]:
        return await self._run(self.mapper.find_and_remove, model_cls, conditions, **options)
