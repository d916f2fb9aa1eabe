"""HTTP API for Brain Relay."""

from brainrelay.api.app import create_app

__all__ = ["create_app"]
