"""Presenters: transparent wrappers applied to locals before template access."""

from typing import Any


class Presenter:
    """Wrap an object, forwarding attribute access to it.

    Subclasses add presentation methods; everything they do not define is
    read from the wrapped object, so templates use a presenter exactly like
    the original value:

        class MapPresenter(Presenter):
            def count(self):
                return f"{len(self.locations)} locations"
    """

    def __init__(self, obj: Any):
        self._object = obj

    def __getattr__(self, name: str) -> Any:
        """Proxy attribute/method access to the wrapped object."""
        if name == "_object":
            raise AttributeError(name)
        return getattr(self._object, name)

    def __iter__(self):
        return iter(self._object)

    def __len__(self) -> int:
        return len(self._object)

    def __bool__(self) -> bool:
        return bool(self._object)

    def __str__(self) -> str:
        return str(self._object)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._object!r}>"

    @property
    def wrapped(self) -> Any:
        """The undecorated value."""
        return self._object
