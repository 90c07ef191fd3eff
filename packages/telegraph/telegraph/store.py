"""DocumentStore - holds the committed document snapshot."""
from __future__ import annotations

from typing import Any, Callable

from telegraph.ids import IdGenerator
from telegraph.types import Document

Reducer = Callable[..., Document]
Listener = Callable[[Document, Document], None]


class DocumentStore:
    """Single writer for a document.

    ``dispatch`` runs a pure reducer against the committed snapshot and
    commits its result. A reducer that raises leaves the snapshot untouched.
    Listeners are called as ``listener(previous, current)`` after each
    commit that changed the document.
    """

    def __init__(self, document: Document | None = None, ids: IdGenerator | None = None) -> None:
        self._state = document if document is not None else Document()
        self._ids = ids if ids is not None else IdGenerator()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> Document:
        return self._state

    @property
    def ids(self) -> IdGenerator:
        return self._ids

    def dispatch(self, reducer: Reducer, *args: Any, **kwargs: Any) -> Document:
        previous = self._state
        current = reducer(previous, *args, **kwargs)
        if current is not previous:
            self._commit(previous, current)
        return current

    def replace(self, document: Document) -> Document:
        """Swap in a whole document (imports, resets)."""
        previous = self._state
        if document is not previous:
            self._commit(previous, document)
        return document

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _commit(self, previous: Document, current: Document) -> None:
        self._state = current
        for listener in list(self._listeners):
            listener(previous, current)
