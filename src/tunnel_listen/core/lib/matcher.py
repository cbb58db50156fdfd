"""Directive matching for listen options."""

from tunnel_listen.core.options import Option

# A directive ending with this marker claims every option name starting with it
PREFIX_MARKER = "-"


def match(directive: str, option: Option) -> bool:
    """Return True if ``option`` is selected by ``directive``.

    ``listen`` matches only ``listen``; ``listen-`` matches ``listen-udp``,
    ``listen-tcp`` and so on.
    """
    if not directive or not option.size():
        return False
    if directive.endswith(PREFIX_MARKER):
        return option.ref(0).startswith(directive)
    return option.ref(0) == directive
