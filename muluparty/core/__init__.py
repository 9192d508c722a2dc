"""Core module for the muluparty application."""

from .fanout import FanOutResult, fan_out
from .store import RemoteStore, get_store
from .types import APIResponse

__all__ = ["APIResponse", "FanOutResult", "RemoteStore", "fan_out", "get_store"]
