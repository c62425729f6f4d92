"""Environment configuration helpers."""

from heart_osc.utilities.env.config import Configuration as Configuration
