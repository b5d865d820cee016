"""Abort-on-failure variants of fallible operations.

Every fallible operation raises a ``DocumentError`` subclass the caller can
handle. Call sites that treat such a failure as a programming error use the
``must`` form instead, which raises ``DocumentPanic``::

    doc.must.get_string("name")
    Document.must.from_bytes(raw)
    must(to_csv)(documents, ",")

This module is the only place ``DocumentPanic`` is raised.
"""
from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from .errors import DocumentError, DocumentPanic

F = TypeVar('F', bound=Callable[..., Any])


def must(func: F) -> F:
    @functools.wraps(func)
    def call(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DocumentError as exc:
            raise DocumentPanic(func.__name__, exc) from exc

    return call  # type: ignore[return-value]


class MustProxy:
    __slots__ = ('_target',)

    def __init__(self, target: Any):
        self._target = target

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._target, name)
        if not callable(attr):
            return attr
        return must(attr)

    def __repr__(self) -> str:
        return f"MustProxy({self._target!r})"


class MustDescriptor:
    """Exposes ``MustProxy`` on both the class (constructors) and instances."""

    def __get__(self, instance: Any, owner: type) -> MustProxy:
        return MustProxy(owner if instance is None else instance)
