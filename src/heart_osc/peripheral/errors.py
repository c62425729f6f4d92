"""Failures raised by the heart-rate bridge.

Only :class:`AdapterAbsent` is fatal. Every :class:`SessionError` is caught by
the connection manager and turned into a disconnect followed by a new scan.
"""


class BridgeError(Exception):
    """Base class for every error raised by the bridge."""


class AdapterAbsent(BridgeError):
    """No Bluetooth adapter is available to this process."""


class SessionError(BridgeError):
    """A device session ended; the manager disconnects and rescans."""


class ConnectFailed(SessionError):
    pass


class ServiceDiscoveryFailed(SessionError):
    pass


class CharacteristicNotFound(SessionError):
    pass


class SubscribeFailed(SessionError):
    pass


class PublishFailed(SessionError):
    pass


class StreamEnded(SessionError):
    """The notification stream was exhausted without an error.

    Raised after the peripheral has been disconnected cleanly so the manager
    can tell it apart from a failure in its logs.
    """
