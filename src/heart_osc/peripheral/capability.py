"""Interface the bridge needs from a Bluetooth stack.

:mod:`heart_osc.peripheral.bluetooth` implements it on top of bleak; tests
provide in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator, Protocol, Sequence


@dataclass(frozen=True, slots=True)
class Notification:
    """One value pushed by a subscribed characteristic."""

    characteristic_uuid: str
    payload: bytes


class BleCharacteristic(Protocol):
    @property
    def uuid(self) -> str: ...


class BlePeripheral(Protocol):
    @property
    def name(self) -> str | None: ...

    @property
    def services(self) -> frozenset[str]:
        """Advertised service UUIDs in lower-case 128-bit form."""
        ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def discover_services(self) -> None: ...

    def characteristics(self) -> Sequence[BleCharacteristic]: ...

    async def subscribe(self, characteristic: BleCharacteristic) -> None: ...

    def notifications(self) -> AsyncIterator[Notification]:
        """Yield notifications until the peripheral disconnects."""
        ...


class BleAdapter(Protocol):
    async def start_scan(self) -> None: ...

    async def peripherals(self) -> Sequence[BlePeripheral]: ...


class BleCapability(Protocol):
    async def adapters(self) -> Sequence[BleAdapter]: ...
