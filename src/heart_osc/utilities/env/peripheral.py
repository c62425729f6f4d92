from heart_osc.utilities.env.parsing import (_env_float, _env_int,
                                             _env_optional_str)

DEFAULT_MAX_HEART_RATE = 200
DEFAULT_RETRY_DELAY_SECONDS = 2.0
DEFAULT_SCAN_SETTLE_SECONDS = 2.0


class PeripheralConfiguration:
    @classmethod
    def ble_adapter(cls) -> str | None:
        """BlueZ adapter name such as ``hci0``; ``None`` lets bleak choose."""
        return _env_optional_str("HEART_OSC_BLE_ADAPTER")

    @classmethod
    def max_heart_rate(cls) -> int:
        return _env_int(
            "HEART_OSC_MAX_HEART_RATE", default=DEFAULT_MAX_HEART_RATE, minimum=1
        )

    @classmethod
    def retry_delay_seconds(cls) -> float:
        return _env_float(
            "HEART_OSC_RETRY_DELAY", default=DEFAULT_RETRY_DELAY_SECONDS, minimum=0.0
        )

    @classmethod
    def scan_settle_seconds(cls) -> float:
        return _env_float(
            "HEART_OSC_SCAN_SETTLE", default=DEFAULT_SCAN_SETTLE_SECONDS, minimum=0.0
        )
