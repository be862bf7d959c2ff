# User-defined SQL Functions
#
# A registry of Python callables exposed to SQL. Only functions that were
# registered explicitly can be called from a query; there is no lookup by
# arbitrary name.
#
# Besides installing each function under its own name, install() adds a
# dispatcher:
#
#   SELECT call('lower_title', title) FROM pages
#
# which resolves 'lower_title' through the registry at query time.

import sqlite3
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

DISPATCHER_NAME = "call"


@dataclass(frozen=True)
class RegisteredFunction:
    """A callable plus the argument count SQLite should enforce (-1 = any)."""
    name: str
    func: Callable[..., Any]
    num_args: int = -1


class FunctionRegistry:
    """Name -> callable mapping installed onto SQLite connections.

    Names are case-insensitive, matching SQLite's own function lookup.
    """

    def __init__(self):
        self._functions: Dict[str, RegisteredFunction] = {}

    @staticmethod
    def _key(name: str) -> str:
        key = name.strip().lower()
        if not key:
            raise ValueError("Function name must not be empty")
        return key

    def register(self, name: str, func: Callable[..., Any], num_args: int = -1) -> None:
        """Register (or replace) a function under the given name."""
        if not callable(func):
            raise TypeError(f"{name!r} is not callable")
        key = self._key(name)
        if key == DISPATCHER_NAME:
            raise ValueError(f"{DISPATCHER_NAME!r} is reserved for the dispatcher")
        self._functions[key] = RegisteredFunction(key, func, num_args)

    def unregister(self, name: str) -> bool:
        """Remove a function. Returns True if it was registered."""
        return self._functions.pop(self._key(name), None) is not None

    def get(self, name: str) -> Optional[RegisteredFunction]:
        return self._functions.get(self._key(name))

    def names(self) -> List[str]:
        return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def call(self, name: str, *args: Any) -> Any:
        """Invoke a registered function by name.

        Raises:
            KeyError: if no function is registered under that name.
        """
        entry = self.get(name)
        if entry is None:
            raise KeyError(f"SQL function {name!r} is not registered")
        return entry.func(*args)

    def _dispatch(self, *args: Any) -> Any:
        if not args:
            return None
        name, rest = args[0], args[1:]
        if not isinstance(name, str):
            raise TypeError("First argument to call() must be a function name")
        return self.call(name, *rest)

    def install(self, conn: sqlite3.Connection) -> None:
        """Register every function, plus the dispatcher, on a connection."""
        for entry in self._functions.values():
            conn.create_function(entry.name, entry.num_args, entry.func)
        conn.create_function(DISPATCHER_NAME, -1, self._dispatch)
