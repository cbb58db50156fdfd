"""Core listen loader components."""

from .defaults import build_default
from .item_builder import build_item
from .listen_spec import ListenSpec, SSLMode
from .matcher import match

__all__ = [
    "build_default",
    "build_item",
    "ListenSpec",
    "match",
    "SSLMode",
]
