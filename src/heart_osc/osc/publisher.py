"""OSC output for the avatar heart-rate parameters."""

from pythonosc.osc_message_builder import BuildError
from pythonosc.udp_client import SimpleUDPClient

from heart_osc.peripheral.errors import PublishFailed
from heart_osc.utilities.logging import get_logger

HR_CONNECTED_ADDRESS = "/avatar/parameters/hr_connected"
HR_PERCENT_ADDRESS = "/avatar/parameters/hr_percent"

logger = get_logger(__name__)


class OscPublisher:
    """Send single-argument OSC messages as UDP datagrams to one destination.

    The underlying socket is opened once and reused for every message.
    """

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._client = SimpleUDPClient(host, port)
        logger.info("Publishing OSC messages to %s:%d", host, port)

    def publish(self, address: str, value: bool | float) -> None:
        try:
            self._client.send_message(address, value)
        except (OSError, ValueError, BuildError) as exc:
            raise PublishFailed(
                f"Could not send {address}={value!r} to {self.host}:{self.port}"
            ) from exc

    def publish_connected(self, connected: bool) -> None:
        self.publish(HR_CONNECTED_ADDRESS, connected)

    def publish_percent(self, percentage: float) -> None:
        self.publish(HR_PERCENT_ADDRESS, float(percentage))
