from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from studydesk.flows.forms import FormValidationError
from studydesk.services.gateway import GatewayError, MutationResult
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.task_registry import ScopeClosedError, TaskScope

logger = logging.getLogger(__name__)


class TriggerState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class GenerationTrigger:
    """Fires one slow generation request at a time.

    While a request is in flight the trigger is disabled and further fires
    are no-ops. Success publishes the result's invalidations so the owning
    list refetches; failure leaves every collection as it was.
    """

    def __init__(
        self,
        generate: Callable[..., Awaitable[MutationResult[Any]]],
        bus: InvalidationBus,
        notifier: Notifier,
        scope: TaskScope,
        label: str,
        validate: Callable[..., dict[str, Any]] | None = None,
    ) -> None:
        self._generate = generate
        self._bus = bus
        self._notifier = notifier
        self._scope = scope
        self._validate = validate
        self.label = label
        self.state = TriggerState.IDLE
        self.rejected: str | None = None  # last validation message

    @property
    def disabled(self) -> bool:
        return self.state is TriggerState.IN_FLIGHT

    async def fire(self, **options: Any) -> MutationResult[Any] | None:
        if self.disabled:
            logger.info("Ignoring %s request while one is in flight", self.label)
            return None
        self.rejected = None
        if self._validate is not None:
            try:
                options = self._validate(**options)
            except FormValidationError as e:
                self.rejected = e.message
                self._notifier.error(e.message)
                return None

        self.state = TriggerState.IN_FLIGHT
        try:
            result = await self._scope.call(self._generate(**options))
        except ScopeClosedError:
            return None
        except GatewayError as e:
            logger.error("Generating %s failed: %s", self.label, e.message)
            self._notifier.error(e.message or f"Failed to generate {self.label}.")
            return None
        finally:
            self.state = TriggerState.IDLE

        self._notifier.success(f"{self.label.capitalize()} generated successfully!")
        await self._bus.publish(result.invalidates)
        return result
