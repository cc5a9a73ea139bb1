from __future__ import annotations

from typing import Any, Protocol


class Registry(Protocol):
    """
    Anything that accepts top-level configuration entries.

    Values may be nested dicts and lists. Interpreting dotted keys is up to the
    implementation.
    """

    def set(self, key: str, value: Any) -> None:
        ...
