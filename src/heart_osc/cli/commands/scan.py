import asyncio

import typer

from heart_osc.peripheral.bluetooth import BleakCapability, BleakPeripheral
from heart_osc.peripheral.discovery import (SCAN_SETTLE_SECONDS,
                                            is_heart_rate_device)
from heart_osc.peripheral.errors import AdapterAbsent
from heart_osc.utilities.env import Configuration
from heart_osc.utilities.logging import get_logger

logger = get_logger(__name__)


async def _scan(adapter_name: str | None, duration: float) -> list[BleakPeripheral]:
    adapters = await BleakCapability(adapter_name).adapters()
    if not adapters:
        raise AdapterAbsent("No Bluetooth adapter found")

    adapter = adapters[0]
    try:
        await asyncio.sleep(duration)
        return list(await adapter.peripherals())
    finally:
        await adapter.stop_scan()


def format_peripheral(peripheral: BleakPeripheral) -> str:
    marker = "*" if is_heart_rate_device(peripheral) else "-"
    services = ", ".join(sorted(peripheral.services)) or "no services advertised"
    return (
        f"{marker} {peripheral.name or '<unnamed>'} "
        f"({peripheral.device.address}): {services}"
    )


def scan_command(
    duration: float = typer.Option(
        SCAN_SETTLE_SECONDS * 2, "--duration", min=0.0, help="Seconds to scan for."
    ),
    adapter: str | None = typer.Option(None, "--adapter", help="Bluetooth adapter, e.g. hci0."),
) -> None:
    """List nearby BLE peripherals; heart-rate sensors are marked with '*'."""

    try:
        peripherals = asyncio.run(_scan(adapter or Configuration.ble_adapter(), duration))
    except AdapterAbsent as exc:
        logger.error("%s, exiting", exc)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Detected {len(peripherals)} peripheral(s).")
    for peripheral in peripherals:
        typer.echo(format_peripheral(peripheral))
