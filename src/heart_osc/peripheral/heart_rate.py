"""Heart Rate Measurement (0x2A37) decoding."""

from dataclasses import dataclass

from bleak.uuids import normalize_uuid_16

from heart_osc.peripheral.capability import Notification

HEART_RATE_SERVICE_UUID = normalize_uuid_16(0x180D)
HEART_RATE_MEASUREMENT_UUID = normalize_uuid_16(0x2A37)

MAX_HEART_RATE = 200
# byte 0 carries the flags; only the 8-bit value format is supported
BPM_OFFSET = 1


@dataclass(frozen=True, slots=True)
class HeartRateReading:
    bpm: int
    percentage: float


def parse_heart_rate(payload: bytes) -> int | None:
    """Return the 8-bit bpm value, or ``None`` if the payload is too short.

    The flags byte is not inspected, so sensors that report the 16-bit value
    format (flags bit 0 set) are read as their low byte.
    """
    if len(payload) <= BPM_OFFSET:
        return None
    return payload[BPM_OFFSET]


def heart_rate_percentage(bpm: int, max_heart_rate: int = MAX_HEART_RATE) -> float:
    return min(bpm / max_heart_rate, 1.0)


def translate(
    notification: Notification, max_heart_rate: int = MAX_HEART_RATE
) -> HeartRateReading | None:
    """Turn a heart-rate notification into a reading.

    Notifications from other characteristics and payloads without a bpm byte
    produce ``None``.
    """
    if notification.characteristic_uuid.lower() != HEART_RATE_MEASUREMENT_UUID:
        return None
    bpm = parse_heart_rate(notification.payload)
    if bpm is None:
        return None
    return HeartRateReading(bpm, heart_rate_percentage(bpm, max_heart_rate))
