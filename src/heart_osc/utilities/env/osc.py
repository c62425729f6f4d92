from heart_osc.utilities.env.parsing import _env_int, _env_str

DEFAULT_OSC_HOST = "127.0.0.1"
DEFAULT_OSC_PORT = 9000


class OscConfiguration:
    @classmethod
    def osc_host(cls) -> str:
        return _env_str("HEART_OSC_HOST", default=DEFAULT_OSC_HOST)

    @classmethod
    def osc_port(cls) -> int:
        return _env_int(
            "HEART_OSC_PORT", default=DEFAULT_OSC_PORT, minimum=1, maximum=65535
        )
