"""Utility functions and helpers."""

from tunnel_listen.core.utils.utils import parse_number_validate, parse_port, validate_port

__all__ = ["parse_number_validate", "parse_port", "validate_port"]
