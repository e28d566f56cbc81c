from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Protocol, TypeVar

from studydesk.models.common import ViewState
from studydesk.services.gateway import GatewayError, MutationResult
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.task_registry import ScopeClosedError, TaskScope

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Resource(Protocol[T]):
    key: str

    async def list(self) -> list[T]: ...

    async def delete(self, item_id: str) -> MutationResult[Any]: ...


class CollectionView(Generic[T]):
    """Fetch-and-render lifecycle for one collection.

    Loading -> Loaded | Empty | Error. A failed refetch keeps whatever items
    were already displayed.
    """

    def __init__(
        self,
        resource: Resource[T],
        bus: InvalidationBus,
        notifier: Notifier,
        label: str,
    ) -> None:
        self.resource = resource
        self.label = label
        self.state = ViewState.LOADING
        self.items: list[T] = []
        self.error: str | None = None
        self._bus = bus
        self._notifier = notifier
        self._scope = TaskScope(f"{label}-view")
        self._mounted = False

    @property
    def scope(self) -> TaskScope:
        return self._scope

    async def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self._bus.subscribe(self.resource.key, self, self.refresh)
        await self.refresh()

    async def refresh(self) -> None:
        self.state = ViewState.LOADING
        try:
            items = await self._scope.call(self.resource.list())
        except ScopeClosedError:
            return
        except GatewayError as e:
            logger.error("Fetching %s failed: %s", self.label, e.message)
            self.error = e.message
            self.state = ViewState.ERROR
            self._notifier.error(f"Failed to fetch {self.label}.")
            return
        self.items = list(items)
        self.error = None
        self.state = ViewState.LOADED if self.items else ViewState.EMPTY

    def find(self, item_id: str) -> T | None:
        for item in self.items:
            if getattr(item, "id", None) == item_id:
                return item
        return None

    def select(self, item_id: str) -> T | None:
        return self.find(item_id)

    async def remove(
        self, item_id: str, on_removed: Callable[[str], Awaitable[None]] | None = None
    ) -> bool:
        """Delete one item remotely, then drop exactly that item locally.

        ``on_removed`` runs after the local drop and before other views are
        told to refetch.
        """
        try:
            result = await self._scope.call(self.resource.delete(item_id))
        except ScopeClosedError:
            return False
        except GatewayError as e:
            logger.error("Deleting %s %s failed: %s", self.label, item_id, e.message)
            self._notifier.error(e.message or f"Failed to delete {self.label}.")
            return False
        self.items = [item for item in self.items if getattr(item, "id", None) != item_id]
        if self.state in (ViewState.LOADED, ViewState.EMPTY):
            self.state = ViewState.LOADED if self.items else ViewState.EMPTY
        if on_removed is not None:
            await on_removed(item_id)
        await self._bus.publish(result.invalidates, origin=self)
        return True

    async def close(self) -> None:
        self._bus.unsubscribe(self)
        await self._scope.close()
