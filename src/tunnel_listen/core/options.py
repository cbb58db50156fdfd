"""Tokenized configuration options.

This module provides the option list consumed by the listen loader:
- Splitting configuration text into options, one per line
- Bounds- and length-checked access to positional fields
- Lookup of scalar options by name
- Tracking which options were consumed

Each option is an ordered sequence of string fields, field 0 being the
option name. Blank lines and lines starting with ``#`` or ``;`` are skipped,
fields are split shell-style so quoted paths may contain spaces.

Example:
    options = OptionList.parse("listen 0.0.0.0 1194 udp 2 ssl\\nport 443\\n")
    port = options.get_ptr("port")
    print(port.get(1, 16))
"""

import shlex
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from loguru import logger

from tunnel_listen.core.exceptions import MalformedField

COMMENT_PREFIXES = ("#", ";")


class Option:
    """A single configuration line split into fields."""

    def __init__(self, fields: Iterable[str], line: int = 0) -> None:
        self._fields = tuple(fields)
        self.line = line
        self.touched = False

    @property
    def name(self) -> str:
        return self._fields[0] if self._fields else ""

    def size(self) -> int:
        return len(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"Option({list(self._fields)!r})"

    def ref(self, index: int) -> str:
        """Return field ``index`` without any validation."""
        return self._fields[index]

    def get(self, index: int, max_len: int) -> str:
        """Return a required field.

        Args:
            index: Field position, 0 being the option name
            max_len: Maximum accepted length of the field

        Raises:
            MalformedField: If the field is missing or longer than ``max_len``
        """
        if index >= len(self._fields):
            raise MalformedField(f"{self.name}: missing field #{index}")
        return self._validate(index, max_len)

    def get_optional(self, index: int, max_len: int) -> str:
        """Return a field, or an empty string when it does not exist."""
        if index >= len(self._fields):
            return ""
        return self._validate(index, max_len)

    def touch(self) -> None:
        """Mark the option as consumed."""
        self.touched = True

    def _validate(self, index: int, max_len: int) -> str:
        value = self._fields[index]
        if len(value) > max_len:
            raise MalformedField(
                f"{self.name}: field #{index} is too long (max {max_len} characters)"
            )
        return value


class OptionList(Sequence[Option]):
    """Ordered collection of options with lookup by name."""

    def __init__(self, options: Iterable[Option] = ()) -> None:
        self._options = list(options)
        self._index: dict[str, list[int]] = {}
        for i, option in enumerate(self._options):
            if option.size():
                self._index.setdefault(option.name, []).append(i)

    @classmethod
    def parse(cls, text: str) -> "OptionList":
        """Tokenize configuration text into an option list."""
        options = []
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith(COMMENT_PREFIXES):
                continue
            try:
                fields = shlex.split(line, comments=True)
            except ValueError as e:
                raise MalformedField(f"line {lineno}: {e}") from e
            if fields:
                options.append(Option(fields, line=lineno))
        logger.debug(f"Parsed {len(options)} options")
        return cls(options)

    @classmethod
    def from_file(cls, path: str | Path) -> "OptionList":
        """Read and tokenize a configuration file."""
        path = Path(path)
        logger.debug(f"Reading configuration from {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedField(f"{path}: not valid UTF-8 text: {e.reason} at byte {e.start}") from e
        return cls.parse(text)

    def __getitem__(self, index):
        return self._options[index]

    def __len__(self) -> int:
        return len(self._options)

    def get_ptr(self, name: str) -> Option | None:
        """Return the last option called ``name``, or None."""
        indices = self._index.get(name)
        if not indices:
            return None
        return self._options[indices[-1]]

    def untouched(self) -> list[Option]:
        """Return the options nothing has consumed yet."""
        return [option for option in self._options if not option.touched]
