"""Listen list loading and the main entry point of the loader.

This module turns a configuration option list into the ordered list of
endpoints a tunneling server binds. It handles:
- Selecting the options that carry the listen directive
- Building one validated entry per matching option
- Falling back to legacy scalar options when allowed
- Aggregate queries over the resulting entries

The load mode decides what happens when no option matches the directive:
``NOMINAL`` fails, ``ALLOW_DEFAULT`` synthesizes one entry from ``proto``,
``lport``/``port`` and ``local``, ``ALLOW_EMPTY`` returns an empty list.

Example:
    from tunnel_listen.core.listen import ListenList, LoadMode
    from tunnel_listen.core.options import OptionList

    options = OptionList.from_file("server.conf")
    listen = ListenList.load(options, "listen", LoadMode.ALLOW_DEFAULT, n_cores=4)
    for spec in listen:
        print(spec)
    print(listen.total_threads())
"""

from collections.abc import Iterable, Sequence
from enum import Enum

from loguru import logger

from tunnel_listen.core.exceptions import NoDirectivesFound
from tunnel_listen.core.lib import ListenSpec, build_default, build_item, match
from tunnel_listen.core.lib.item_builder import LOCAL_MULTITHREAD
from tunnel_listen.core.options import OptionList


class LoadMode(Enum):
    NOMINAL = "nominal"
    ALLOW_DEFAULT = "allow-default"
    ALLOW_EMPTY = "allow-empty"


class ListenList(Sequence[ListenSpec]):
    """Immutable ordered list of listen entries."""

    def __init__(self, items: Iterable[ListenSpec] = ()) -> None:
        self._items = tuple(items)

    @classmethod
    def from_item(cls, item: ListenSpec) -> "ListenList":
        return cls((item,))

    @classmethod
    def load(
        cls,
        options: OptionList,
        directive: str,
        mode: LoadMode,
        n_cores: int,
        local_multithread: bool | None = None,
    ) -> "ListenList":
        """Load the listen entries selected by ``directive``.

        Args:
            options: Parsed configuration options
            directive: Directive name, a trailing ``-`` makes it a prefix
            mode: Behavior when no option matches
            n_cores: Core count used to expand ``*N`` thread specs
            local_multithread: Whether local sockets accept several threads,
                defaults to what the running platform supports

        Returns:
            ListenList: Entries in configuration order

        Raises:
            ListenError: If an entry is invalid, or nothing matched in
                ``NOMINAL`` mode
            ValueError: If ``n_cores`` is less than 1
        """
        if n_cores < 1:
            raise ValueError(f"core count must be at least 1, not {n_cores}")
        if local_multithread is None:
            local_multithread = LOCAL_MULTITHREAD

        n_listen = sum(1 for option in options if match(directive, option))
        if n_listen:
            logger.debug(f"Found {n_listen} {directive} directives")
            items = [
                build_item(option, n_cores, local_multithread)
                for option in options
                if match(directive, option)
            ]
            return cls(items)

        if mode is LoadMode.ALLOW_DEFAULT:
            logger.debug(f"No {directive} directives, using defaults")
            return cls.from_item(build_default(options))
        if mode is LoadMode.ALLOW_EMPTY:
            logger.debug(f"No {directive} directives")
            return cls()
        raise NoDirectivesFound(f"no {directive} directives found")

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ListenList):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"ListenList({list(self._items)!r})"

    def total_threads(self) -> int:
        """Sum of the worker threads of every entry."""
        return sum(item.n_threads for item in self._items)
