"""
Lifecycle callbacks for tablemodel models.

Callbacks are kept per (operation, timing) pair and run in the order they
were registered. Model methods can be marked as callbacks with the
``before`` and ``after`` decorators.
"""

import logging
from enum import Enum
from typing import Any, Callable, TypeVar, Union

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


class Operation(str, Enum):
    """Model operations that dispatch callbacks."""

    INIT = "init"
    CREATE = "create"
    SELECT = "select"
    UPDATE = "update"
    DELETE = "delete"


class Timing(str, Enum):
    """When a callback runs relative to its operation."""

    BEFORE = "before"
    AFTER = "after"


class CallbackRegistry:
    """
    Ordered callbacks keyed by (operation, timing).

    Registration order is invocation order. Callbacks are not deduplicated
    and their return values are ignored.

    Example:
        >>> registry = CallbackRegistry()
        >>> registry.register("create", "before", lambda data: data.setdefault("status", "new"))
        >>> registry.invoke(Operation.CREATE, Timing.BEFORE, {"name": "Alice"})
    """

    def __init__(self) -> None:
        self._callbacks: dict[tuple[Operation, Timing], list[Callable[..., Any]]] = {
            (operation, timing): []
            for operation in Operation
            for timing in Timing
        }

    def register(
        self,
        operation: Union[Operation, str],
        timing: Union[Timing, str],
        callback: Callable[..., Any],
    ) -> None:
        """
        Register a callback.

        Args:
            operation: Operation the callback belongs to
            timing: Run before or after the operation
            callback: Callable receiving the operation's arguments

        Raises:
            ValueError: If the operation or timing is unknown
        """
        self._callbacks[(Operation(operation), Timing(timing))].append(callback)

    def invoke(self, operation: Union[Operation, str], timing: Union[Timing, str], *args: Any) -> None:
        """Call every callback of (operation, timing) with ``args``."""
        try:
            callbacks = self._callbacks[(Operation(operation), Timing(timing))]
        except ValueError:
            # Unknown slots have nothing registered
            return
        if callbacks:
            logger.debug("Invoking %d %s %s callbacks", len(callbacks), timing, operation)
        for callback in callbacks:
            callback(*args)

    def get(self, operation: Union[Operation, str], timing: Union[Timing, str]) -> list[Callable[..., Any]]:
        """Get a copy of the callbacks of (operation, timing)."""
        return list(self._callbacks[(Operation(operation), Timing(timing))])

    def extend(self, other: "CallbackRegistry") -> None:
        """Append every callback of ``other`` after the ones already registered."""
        for key, callbacks in other._callbacks.items():
            self._callbacks[key].extend(callbacks)

    def copy(self) -> "CallbackRegistry":
        """Create an independent registry with the same callbacks."""
        registry = CallbackRegistry()
        registry.extend(self)
        return registry

    def __len__(self) -> int:
        return sum(len(callbacks) for callbacks in self._callbacks.values())


def before(operation: Union[Operation, str]) -> Callable[[F], F]:
    """
    Mark a model method to run before ``operation``.

    The method is bound to the model instance and receives the operation's
    arguments.

    Example:
        >>> class Users(Model):
        ...     @before("create")
        ...     def set_status(self, data):
        ...         data.setdefault("status", "new")
    """
    operation = Operation(operation)

    def decorator(func: F) -> F:
        setattr(func, '_callback_slot', (operation, Timing.BEFORE))  # type: ignore[attr-defined]
        return func
    return decorator


def after(operation: Union[Operation, str]) -> Callable[[F], F]:
    """
    Mark a model method to run after ``operation``.

    Example:
        >>> class Users(Model):
        ...     @after("delete")
        ...     def log_delete(self):
        ...         audit.record(self.table, "delete")
    """
    operation = Operation(operation)

    def decorator(func: F) -> F:
        setattr(func, '_callback_slot', (operation, Timing.AFTER))  # type: ignore[attr-defined]
        return func
    return decorator
