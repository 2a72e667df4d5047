from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

Mutator = Callable[[dict[str, Any]], Any]


class DocumentAdapter(Protocol):
    """
    Minimal storage contract tables are built on: one JSON-like document,
    read live from memory and mutated through a serialized update that
    persists the whole document before it resolves.
    """

    @property
    def data(self) -> dict[str, Any]:
        """The live in-memory document (never None)."""
        ...

    def update(self, mutator: Mutator) -> Awaitable[None]:
        """Apply `mutator` with exclusive access, then persist the full document."""
        ...
