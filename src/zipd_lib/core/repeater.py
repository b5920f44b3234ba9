# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Callable, Iterable
from typing import Any


class Repeater:
    """
    Execute a given function repeatedly for a collection of items,
    with optional per-exception handling and tracking of encountered errors.

    Attributes:
        items (list[Any]): List of items to process.
        encountered_errors (dict[int, BaseException]): A dictionary mapping
            item indices to exceptions encountered during execution.
        current_iteration (int): The index of the item currently being processed.

    Args:
        items (Iterable[Any]): Items to iterate over.
        func (Callable): Function to execute for each item. The item will be passed
            as the first argument, followed by any `*args` and `**kwargs`.
        *args (Any): Positional arguments forwarded to `func`.
        **kwargs (Any): Keyword arguments forwarded to `func`.
    """

    def __init__(
        self,
        items: Iterable[Any],
        func: Callable,
        *args: Any,
        **kwargs: Any,
    ):
        self.encountered_errors: dict[int, BaseException] = {}
        self.items = list(items)
        self.current_iteration = 0

        self._handlers: dict[type[BaseException], Callable[..., Any]] = {}
        self._func = func
        self._args = args
        self._kwargs = kwargs

    def onException(self, exc_type: type[BaseException], handler: Callable) -> None:
        """
        Register a handler function for a specific exception type.

        Handlers registered for a base class also catch its subclasses. When
        several registered types match, the most recently registered wins.

        Args:
            exc_type (type[BaseException]): The exception type to handle.
            handler (Callable): Function to call when `exc_type` is raised.
                The handler must accept two arguments:
                - BaseException: The caught exception instance.
                - Repeater: Reference to this `Repeater` instance.
        """
        self._handlers[exc_type] = handler

    def run(self) -> None:
        """
        Execute the target function for all items, invoking handlers for exceptions.

        Unhandled exceptions propagate normally and interrupt the iteration.

        Exceptions are recorded in `encountered_errors`, mapping the item's
        index to the raised exception instance.
        """
        for i, item in enumerate(self.items):
            self.current_iteration = i
            try:
                self._func(item, *self._args, **self._kwargs)
            except tuple(self._handlers.keys()) as e:
                self.encountered_errors[i] = e
                self._handlerFor(e)(e, self)

    def _handlerFor(self, exception: BaseException) -> Callable[..., Any]:
        """Return the handler registered for the exception's type or its closest base."""
        if (handler := self._handlers.get(type(exception))) is not None:
            return handler

        for exc_type, handler in reversed(self._handlers.items()):
            if isinstance(exception, exc_type):
                return handler

        # should never get here
        raise exception
