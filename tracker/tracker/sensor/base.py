"""Sensor interface (port) for streaming position fixes."""

from __future__ import annotations

from typing import Callable, Hashable, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from tracker.core.models import Fix, SensorOptions

FixCallback = Callable[["Fix"], None]
ErrorCallback = Callable[[str], None]


class LocationSensor(Protocol):
    """Port: delivers fixes and failures to subscribed callbacks.

    The same callbacks may be subscribed again after an unsubscribe.
    """

    @property
    def available(self) -> bool: ...

    def subscribe(
        self,
        on_fix: FixCallback,
        on_error: ErrorCallback,
        options: SensorOptions,
    ) -> Hashable: ...

    def unsubscribe(self, handle: Hashable) -> None: ...
