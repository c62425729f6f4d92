"""bleak implementation of the Bluetooth capability."""

import asyncio
from typing import Any, AsyncIterator, Sequence

from bleak import BleakClient, BleakScanner
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from heart_osc.peripheral.capability import Notification
from heart_osc.peripheral.errors import (AdapterAbsent, ConnectFailed,
                                         ServiceDiscoveryFailed,
                                         SubscribeFailed)
from heart_osc.utilities.logging import get_logger

CONNECT_TIMEOUT_SECONDS = 20.0
BLE_ERRORS = (BleakError, OSError, asyncio.TimeoutError)

logger = get_logger(__name__)


class BleakPeripheral:
    """A device seen by the scanner, connectable through ``BleakClient``."""

    __slots__ = ("device", "_name", "_services", "_client", "_notifications")

    def __init__(self, device: BLEDevice, advertisement: AdvertisementData) -> None:
        self.device = device
        self._name = advertisement.local_name or device.name
        self._services = frozenset(uuid.lower() for uuid in advertisement.service_uuids)
        self._client: BleakClient | None = None
        self._notifications: asyncio.Queue[Notification | None] = asyncio.Queue()

    def __repr__(self) -> str:
        return f"BleakPeripheral({self.device.address!r}, name={self._name!r})"

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def services(self) -> frozenset[str]:
        return self._services

    async def connect(self) -> None:
        self._notifications = asyncio.Queue()
        client = BleakClient(
            self.device,
            disconnected_callback=self._on_disconnect,
            timeout=CONNECT_TIMEOUT_SECONDS,
        )
        try:
            await client.connect()
        except BLE_ERRORS as exc:
            raise ConnectFailed(f"Could not connect to {self.device.address}") from exc
        self._client = client

    async def disconnect(self) -> None:
        client, self._client = self._client, None
        if client is None or not client.is_connected:
            return
        try:
            await client.disconnect()
        except BLE_ERRORS as exc:
            raise ConnectFailed(
                f"Could not disconnect from {self.device.address}"
            ) from exc

    async def discover_services(self) -> None:
        # bleak resolves the GATT table as part of connect()
        client = self._require_client()
        try:
            services = client.services
        except BleakError as exc:
            raise ServiceDiscoveryFailed(
                f"Services of {self.device.address} are not available"
            ) from exc
        logger.debug(
            "%s exposes services %s",
            self.device.address,
            ", ".join(service.uuid for service in services),
        )

    def characteristics(self) -> Sequence[BleakGATTCharacteristic]:
        client = self._require_client()
        try:
            return [
                characteristic
                for service in client.services
                for characteristic in service.characteristics
            ]
        except BleakError as exc:
            raise ServiceDiscoveryFailed(
                f"Services of {self.device.address} are not available"
            ) from exc

    async def subscribe(self, characteristic: BleakGATTCharacteristic) -> None:
        client = self._require_client()
        try:
            await client.start_notify(characteristic, self._on_notify)
        except BLE_ERRORS as exc:
            raise SubscribeFailed(
                f"Could not subscribe to {characteristic.uuid} on {self.device.address}"
            ) from exc

    async def notifications(self) -> AsyncIterator[Notification]:
        queue = self._notifications
        while True:
            notification = await queue.get()
            if notification is None:
                return
            yield notification

    def _require_client(self) -> BleakClient:
        if self._client is None:
            raise ConnectFailed(f"{self.device.address} is not connected")
        return self._client

    def _on_notify(self, sender: BleakGATTCharacteristic, data: bytearray) -> None:
        self._notifications.put_nowait(Notification(sender.uuid, bytes(data)))

    def _on_disconnect(self, client: BleakClient) -> None:
        logger.debug("%s dropped the connection", self.device.address)
        self._notifications.put_nowait(None)


class BleakAdapter:
    """One local radio, scanning continuously once started."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._scanner: BleakScanner | None = None

    def _scanner_kwargs(self) -> dict[str, Any]:
        # Only BlueZ understands the adapter keyword.
        return {"adapter": self.name} if self.name else {}

    async def start_scan(self) -> None:
        if self._scanner is not None:
            return
        scanner = BleakScanner(**self._scanner_kwargs())
        try:
            await scanner.start()
        except BLE_ERRORS as exc:
            raise AdapterAbsent(
                f"Bluetooth adapter {self.name or '(default)'} cannot scan"
            ) from exc
        self._scanner = scanner

    async def peripherals(self) -> Sequence[BleakPeripheral]:
        if self._scanner is None:
            return []
        return [
            BleakPeripheral(device, advertisement)
            for device, advertisement in self._scanner.discovered_devices_and_advertisement_data.values()
        ]

    async def stop_scan(self) -> None:
        scanner, self._scanner = self._scanner, None
        if scanner is not None:
            await scanner.stop()


class BleakCapability:
    """Expose the host's Bluetooth radio through bleak.

    bleak has no adapter listing, so the radio is probed by starting a scan;
    a radio that cannot scan is reported as absent.
    """

    def __init__(self, adapter_name: str | None = None) -> None:
        self.adapter_name = adapter_name

    async def adapters(self) -> list[BleakAdapter]:
        adapter = BleakAdapter(self.adapter_name)
        try:
            await adapter.start_scan()
        except AdapterAbsent as exc:
            logger.error("%s: %s", exc, exc.__cause__)
            return []
        return [adapter]
