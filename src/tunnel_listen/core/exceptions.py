"""Custom exceptions for the listen configuration loader.

This module defines the exceptions raised while turning configuration
options into listen specifications. They provide specific error handling for:
- Missing or malformed option fields
- Invalid port numbers and thread counts
- Unsupported local socket combinations
- Missing directives

Every error is fatal to the load operation. The message names the offending
directive and field and is meant to be shown to the operator as is.

Example:
    try:
        listen = ListenList.load(options, "listen", LoadMode.NOMINAL, n_cores=4)
    except ListenError as e:
        console.print(f"[red]Configuration error: {e}")
"""


class TunnelConfigError(Exception):
    """Base exception for configuration errors."""


class OptionError(TunnelConfigError):
    """Raised when a configuration option cannot be used."""


class ListenError(OptionError):
    """Base exception for listen directive errors."""


class MalformedField(ListenError):
    """Raised when a required field is missing, too long or unparsable."""


class InvalidPort(ListenError):
    """Raised when a port is not a decimal number in 1-65535."""


class InvalidThreadCount(ListenError):
    """Raised when a thread count is non-numeric or outside 1-100."""


class UnsupportedMultiThreadLocal(ListenError):
    """Raised when a local socket asks for more than one thread."""


class UnsupportedSSLOnLocal(ListenError):
    """Raised when SSL is requested on a local socket."""


class UnrecognizedQualifier(ListenError):
    """Raised when the trailing qualifier is neither ``ssl`` nor ``!ssl``."""


class NoDirectivesFound(ListenError):
    """Raised when no directive matched and defaults are not allowed."""
