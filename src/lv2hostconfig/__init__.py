"""Declarative LV2 plugin host configuration."""

__version__ = "0.1.0"
