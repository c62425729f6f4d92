"""Connection lifecycle for a single heart-rate sensor.

The manager cycles Scanning -> DeviceFound -> Connected -> Streaming ->
Disconnected -> Scanning forever. ``hr_connected=true`` is published when a
device is found and ``hr_connected=false`` once the session is over, so every
``hr_percent`` message is bracketed by the two.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Awaitable, Callable, NoReturn, Protocol

from heart_osc.peripheral.capability import (BleAdapter, BleCapability,
                                             BleCharacteristic, BlePeripheral)
from heart_osc.peripheral.discovery import (SCAN_SETTLE_SECONDS,
                                            find_heart_rate_device)
from heart_osc.peripheral.errors import (AdapterAbsent,
                                         CharacteristicNotFound,
                                         PublishFailed, SessionError,
                                         StreamEnded)
from heart_osc.peripheral.heart_rate import (HEART_RATE_MEASUREMENT_UUID,
                                             MAX_HEART_RATE, translate)
from heart_osc.utilities.env import Configuration
from heart_osc.utilities.logging import get_logger
from heart_osc.utilities.logging_control import get_logging_controller

RETRY_DELAY_SECONDS = 2.0
SAMPLE_LOG_KEY = "ble.heart_rate.sample"

logger = get_logger(__name__)


class ConnectionState(StrEnum):
    SCANNING = "scanning"
    DEVICE_FOUND = "device_found"
    CONNECTED = "connected"
    STREAMING = "streaming"
    DISCONNECTED = "disconnected"


class Publisher(Protocol):
    def publish_connected(self, connected: bool) -> None: ...

    def publish_percent(self, percentage: float) -> None: ...


@dataclass(frozen=True, slots=True)
class BridgeSettings:
    retry_delay_seconds: float = RETRY_DELAY_SECONDS
    scan_settle_seconds: float = SCAN_SETTLE_SECONDS
    max_heart_rate: int = MAX_HEART_RATE

    @classmethod
    def from_environment(cls) -> "BridgeSettings":
        return cls(
            retry_delay_seconds=Configuration.retry_delay_seconds(),
            scan_settle_seconds=Configuration.scan_settle_seconds(),
            max_heart_rate=Configuration.max_heart_rate(),
        )


@dataclass
class BridgeContext:
    """Process-scoped resources shared by every session."""

    adapter: BleAdapter
    publisher: Publisher
    settings: BridgeSettings = field(default_factory=BridgeSettings)


def _display_name(device: BlePeripheral) -> str:
    return device.name or "<unnamed>"


def _find_heart_rate_characteristic(device: BlePeripheral) -> BleCharacteristic:
    for characteristic in device.characteristics():
        if characteristic.uuid.lower() == HEART_RATE_MEASUREMENT_UUID:
            return characteristic
    raise CharacteristicNotFound(
        f"{_display_name(device)} has no heart rate measurement characteristic"
    )


class ConnectionManager:
    def __init__(
        self,
        context: BridgeContext,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.context = context
        self.state = ConnectionState.SCANNING
        self._sleep = sleep
        self._log_controller = get_logging_controller()

    def _transition(self, state: ConnectionState) -> None:
        logger.debug("Connection state %s -> %s", self.state, state)
        self.state = state

    async def run_forever(self) -> NoReturn:
        while True:
            await self.run_cycle()

    async def run_cycle(self) -> None:
        """Run one scan and, if a sensor turns up, one full session with it."""
        settings = self.context.settings
        self._transition(ConnectionState.SCANNING)

        device = await find_heart_rate_device(
            self.context.adapter,
            settle_seconds=settings.scan_settle_seconds,
            sleep=self._sleep,
        )
        if device is None:
            logger.info("Heart rate device not found, retrying...")
            await self._sleep(settings.retry_delay_seconds)
            return

        name = _display_name(device)
        self._transition(ConnectionState.DEVICE_FOUND)
        logger.info("Found heart rate device %s, connecting", name)

        try:
            self.context.publisher.publish_connected(True)
            await self._run_session(device)
        except StreamEnded:
            logger.info("Connection to %s closed, retrying...", name)
        except SessionError as exc:
            logger.warning(
                "Session with %s failed: %s, retrying...",
                name,
                exc,
                exc_info=exc.__cause__ is not None,
            )
        except Exception:
            # e.g. a dbus EOFError when bluetoothd restarts
            logger.exception("Unexpected error in session with %s, retrying...", name)

        self._transition(ConnectionState.DISCONNECTED)
        try:
            self.context.publisher.publish_connected(False)
        except PublishFailed as exc:
            logger.warning("Could not publish disconnect for %s: %s", name, exc)

        await self._sleep(settings.retry_delay_seconds)

    async def _run_session(self, device: BlePeripheral) -> NoReturn:
        await device.connect()
        self._transition(ConnectionState.CONNECTED)

        try:
            await device.discover_services()
            characteristic = _find_heart_rate_characteristic(device)
            await device.subscribe(characteristic)
            logger.info("Connected to heart rate device %s", _display_name(device))

            self._transition(ConnectionState.STREAMING)
            await self._stream(device)
        except Exception:
            await self._abandon(device)
            raise

        await device.disconnect()
        logger.info("Disconnected from device %s", _display_name(device))
        raise StreamEnded(f"{_display_name(device)} stopped sending notifications")

    async def _stream(self, device: BlePeripheral) -> None:
        max_heart_rate = self.context.settings.max_heart_rate
        async for notification in device.notifications():
            reading = translate(notification, max_heart_rate)
            if reading is None:
                logger.debug(
                    "Ignoring %d byte notification from %s",
                    len(notification.payload),
                    notification.characteristic_uuid,
                )
                continue

            self._log_controller.log(
                key=SAMPLE_LOG_KEY,
                logger=logger,
                level=logging.INFO,
                msg="Heart rate: %d BPM",
                args=(reading.bpm,),
            )
            self.context.publisher.publish_percent(reading.percentage)

    async def _abandon(self, device: BlePeripheral) -> None:
        # A failed session may leave the link up, which stops the sensor advertising.
        try:
            await device.disconnect()
        except Exception as exc:
            logger.debug("Disconnect after failure also failed: %s", exc)


async def run_bridge(
    capability: BleCapability,
    publisher: Publisher,
    settings: BridgeSettings,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> NoReturn:
    """Claim the first Bluetooth adapter and bridge heart rate to OSC forever."""
    adapters = await capability.adapters()
    if not adapters:
        raise AdapterAbsent("No Bluetooth adapter found")

    context = BridgeContext(adapter=adapters[0], publisher=publisher, settings=settings)
    await ConnectionManager(context, sleep=sleep).run_forever()
