import asyncio
from typing import Awaitable, Callable

from heart_osc.peripheral.capability import BleAdapter, BlePeripheral
from heart_osc.peripheral.heart_rate import HEART_RATE_SERVICE_UUID
from heart_osc.utilities.logging import get_logger

SCAN_SETTLE_SECONDS = 2.0

logger = get_logger(__name__)


def is_heart_rate_device(peripheral: BlePeripheral) -> bool:
    return HEART_RATE_SERVICE_UUID in peripheral.services


async def find_heart_rate_device(
    adapter: BleAdapter,
    *,
    settle_seconds: float = SCAN_SETTLE_SECONDS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> BlePeripheral | None:
    """Scan and return the first peripheral advertising the heart-rate service.

    ``None`` means nothing suitable is in range yet; callers retry later.
    """
    await adapter.start_scan()
    await sleep(settle_seconds)

    peripherals = await adapter.peripherals()
    logger.debug("Scan saw %d peripheral(s)", len(peripherals))
    for peripheral in peripherals:
        if is_heart_rate_device(peripheral):
            return peripheral
    return None
