"""Common number and port parsing helpers."""

from typing import Final

from tunnel_listen.core.exceptions import InvalidPort

# Port constants
PORT_MAX_DIGITS: Final = 5
PORT_MIN: Final = 1
PORT_MAX: Final = 65535


def parse_number_validate(value: str, max_len: int, minimum: int, maximum: int) -> int | None:
    """Parse a bounded decimal number.

    Args:
        value: String to parse, digits only
        max_len: Maximum number of digits
        minimum: Smallest accepted value
        maximum: Largest accepted value

    Returns:
        int | None: The parsed number, or None if the string is not a
            decimal number within the bounds
    """
    if not value or len(value) > max_len or not (value.isascii() and value.isdigit()):
        return None
    number = int(value)
    if minimum <= number <= maximum:
        return number
    return None


def parse_port(port: str, title: str) -> int:
    """Parse a port number, raising InvalidPort with ``title`` on failure."""
    number = parse_number_validate(port, PORT_MAX_DIGITS, PORT_MIN, PORT_MAX)
    if number is None:
        raise InvalidPort(f"{title}: bad port number: {port}")
    return number


def validate_port(port: str, title: str) -> None:
    """Check that ``port`` is a valid port number."""
    parse_port(port, title)
