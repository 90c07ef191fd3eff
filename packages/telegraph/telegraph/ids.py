"""Identity generation service."""
from __future__ import annotations

import re


class IdGenerator:
    """Issues ``"{prefix}_{n}"`` ids from a monotonically increasing counter.

    Ids are never reused. Ids that enter the document from elsewhere
    (imports) can be reported with :meth:`observe` so the counter skips
    past them.
    """

    def __init__(self, prefix: str = "id", start: int = 0) -> None:
        if not prefix:
            raise ValueError("prefix must be non-empty")
        self._prefix = prefix
        self._counter = start
        self._pattern = re.compile(rf"^{re.escape(prefix)}_(\d+)$")

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def issued(self) -> int:
        return self._counter

    def next_id(self) -> str:
        self._counter += 1
        return f"{self._prefix}_{self._counter}"

    def observe(self, ident: str) -> None:
        match = self._pattern.match(ident)
        if match is not None:
            self._counter = max(self._counter, int(match.group(1)))
