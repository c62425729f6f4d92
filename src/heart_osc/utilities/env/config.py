from heart_osc.utilities.env.osc import OscConfiguration
from heart_osc.utilities.env.peripheral import PeripheralConfiguration


class Configuration(
    OscConfiguration,
    PeripheralConfiguration,
):
    """Aggregate environment configuration helpers."""
