"""Telemetry and settings shared by every engine layer."""

from . import telemetry
from .settings import EngineSettings

__all__ = ["EngineSettings", "telemetry"]
