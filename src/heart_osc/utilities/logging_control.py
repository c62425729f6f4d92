"""Sampling for log lines that would otherwise fire on every BLE notification."""

from __future__ import annotations

import logging
import os
import re
import time
from dataclasses import dataclass
from functools import cache
from typing import Callable, Sequence

LOG_RULES_ENV_VAR = "HEART_OSC_LOG_RULES"
DEFAULT_INTERVAL_ENV_VAR = "HEART_OSC_LOG_DEFAULT_INTERVAL"
DEFAULT_INTERVAL_SECONDS = 5.0
DEFAULT_FALLBACK_LEVEL = logging.DEBUG

_RULE_PATTERN = re.compile(
    r"^(?P<key>[^=]+)="
    r"(?P<interval>none|\d+(?:\.\d+)?)"
    r"(?::(?P<level>[A-Za-z]+))?$"
)


@dataclass(frozen=True)
class LogRule:
    """How often a keyed log line is promoted to its primary level."""

    interval_seconds: float | None
    level: int | None = None


class LoggingController:
    """Emit keyed log lines at most once per interval, demoting the rest."""

    def __init__(
        self,
        *,
        default_interval: float | None,
        rules: dict[str, LogRule] | None = None,
        fallback_level: int | None = DEFAULT_FALLBACK_LEVEL,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_interval = default_interval
        self._rules = rules or {}
        self._fallback_level = fallback_level
        self._monotonic = monotonic
        self._next_emit: dict[str, float] = {}

    def log(
        self,
        *,
        key: str,
        logger: logging.Logger,
        level: int,
        msg: str,
        args: Sequence[object] = (),
    ) -> bool:
        """Log ``msg`` under ``key``.

        Returns ``True`` when the line went out at the primary level and
        ``False`` when it was demoted to the fallback level (or dropped).
        """

        rule = self._rules.get(key, LogRule(self._default_interval))
        primary_level = rule.level or level

        if rule.interval_seconds is None:
            logger.log(primary_level, msg, *args)
            return True

        now = self._monotonic()
        if now >= self._next_emit.get(key, 0.0):
            self._next_emit[key] = now + rule.interval_seconds
            logger.log(primary_level, msg, *args)
            return True

        if self._fallback_level is not None:
            logger.log(self._fallback_level, msg, *args)
        return False


def _parse_interval(value: str) -> float | None:
    if value.lower() == "none":
        return None
    return float(value)


def _parse_level(name: str | None) -> int | None:
    if not name:
        return None
    resolved = getattr(logging, name.upper(), None)
    if isinstance(resolved, int):
        return resolved
    raise ValueError(f"Unknown log level {name!r}")


def parse_rules(raw_rules: str) -> dict[str, LogRule]:
    rules: dict[str, LogRule] = {}
    for chunk in filter(None, (part.strip() for part in raw_rules.split(","))):
        match = _RULE_PATTERN.match(chunk)
        if not match:
            raise ValueError(
                f"Invalid {LOG_RULES_ENV_VAR} entry {chunk!r}. "
                "Expected 'key=interval[:LEVEL]'."
            )
        rules[match.group("key").strip()] = LogRule(
            _parse_interval(match.group("interval")),
            _parse_level(match.group("level")),
        )
    return rules


@cache
def get_logging_controller() -> LoggingController:
    """Return the process-wide logging controller."""

    default_interval_raw = os.getenv(DEFAULT_INTERVAL_ENV_VAR)
    default_interval = (
        DEFAULT_INTERVAL_SECONDS
        if default_interval_raw is None
        else _parse_interval(default_interval_raw)
    )
    return LoggingController(
        default_interval=default_interval,
        rules=parse_rules(os.getenv(LOG_RULES_ENV_VAR, "")),
    )
