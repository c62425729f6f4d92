import asyncio
import dataclasses
from typing import Annotated

import typer

from heart_osc.osc.publisher import OscPublisher
from heart_osc.peripheral.bluetooth import BleakCapability
from heart_osc.peripheral.errors import AdapterAbsent
from heart_osc.peripheral.session import BridgeSettings, run_bridge
from heart_osc.utilities.env import Configuration
from heart_osc.utilities.logging import get_logger

logger = get_logger(__name__)


def run_command(
    osc_host: Annotated[
        str | None,
        typer.Option("--osc-host", help="Host receiving OSC messages [env: HEART_OSC_HOST]"),
    ] = None,
    osc_port: Annotated[
        int | None,
        typer.Option(
            "--osc-port",
            min=1,
            max=65535,
            help="UDP port receiving OSC messages [env: HEART_OSC_PORT]",
        ),
    ] = None,
    adapter: Annotated[
        str | None,
        typer.Option("--adapter", help="Bluetooth adapter, e.g. hci0 [env: HEART_OSC_BLE_ADAPTER]"),
    ] = None,
    max_heart_rate: Annotated[
        int | None,
        typer.Option(
            "--max-heart-rate",
            min=1,
            help="BPM reported as 100% [env: HEART_OSC_MAX_HEART_RATE]",
        ),
    ] = None,
    retry_delay: Annotated[
        float | None,
        typer.Option(
            "--retry-delay",
            min=0.0,
            help="Seconds to wait between connection attempts [env: HEART_OSC_RETRY_DELAY]",
        ),
    ] = None,
) -> None:
    """Bridge the first heart-rate sensor in range to OSC until interrupted."""

    settings = BridgeSettings.from_environment()
    if max_heart_rate is not None:
        settings = dataclasses.replace(settings, max_heart_rate=max_heart_rate)
    if retry_delay is not None:
        settings = dataclasses.replace(settings, retry_delay_seconds=retry_delay)

    host = osc_host or Configuration.osc_host()
    port = osc_port or Configuration.osc_port()
    try:
        publisher = OscPublisher(host, port)
    except OSError as exc:
        logger.error("Cannot open OSC destination %s:%d: %s, exiting", host, port, exc)
        raise typer.Exit(code=1) from exc
    capability = BleakCapability(adapter or Configuration.ble_adapter())

    try:
        asyncio.run(run_bridge(capability, publisher, settings))
    except AdapterAbsent as exc:
        logger.error("%s, exiting", exc)
        raise typer.Exit(code=1) from exc
