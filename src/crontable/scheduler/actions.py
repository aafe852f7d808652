"""Binding registration arguments into zero-argument actions."""

from __future__ import annotations

import functools
import inspect
import types
import typing
from collections.abc import Callable
from typing import Any

from crontable.errors import InvalidActionError

# Annotations that accept the builtin numeric types below them
_NUMERIC_TOWER: dict[type, tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}


def _action_name(action: Callable[..., Any]) -> str:
    return getattr(action, "__qualname__", None) or type(action).__name__


def _check_types(action: Callable[..., Any], bound: inspect.BoundArguments) -> None:
    """Check bound values against plain class annotations.

    Only functions and methods are inspected, and only annotations that are
    ordinary classes; generics, unions and unresolvable forward references
    are left to the caller.
    """
    if not (inspect.isfunction(action) or inspect.ismethod(action)):
        return

    try:
        hints = typing.get_type_hints(action)
    except (NameError, TypeError):
        return

    params = bound.signature.parameters
    for param_name, value in bound.arguments.items():
        if params[param_name].kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue

        hint = hints.get(param_name)
        if not isinstance(hint, type) or isinstance(hint, types.GenericAlias) or hint is object:
            continue

        try:
            if isinstance(value, hint) or isinstance(value, _NUMERIC_TOWER.get(hint, ())):
                continue
        except TypeError:
            # Non runtime-checkable protocols and the like
            continue

        msg = (
            f"param {param_name!r} of {_action_name(action)} should be "
            f"{hint.__name__}, not {type(value).__name__}"
        )
        raise InvalidActionError(msg)


def bind_action(action: Any, *args: Any, **kwargs: Any) -> Callable[[], Any]:
    """Capture registration arguments in a zero-argument callable.

    Args:
        action: Function (sync or async) or other callable to run.
        *args: Positional arguments passed on every run.
        **kwargs: Keyword arguments passed on every run.

    Returns:
        A callable taking no arguments.

    Raises:
        InvalidActionError: If ``action`` isn't callable, the arguments
            don't fit its signature, or a value doesn't match a plain
            class annotation.
    """
    if action is None or not callable(action):
        msg = f"cron job must be callable, got {type(action).__name__}"
        raise InvalidActionError(msg)

    try:
        signature = inspect.signature(action)
    except (TypeError, ValueError):
        # Some builtins don't expose a signature
        signature = None

    if signature is not None:
        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError as e:
            msg = f"arguments don't match {_action_name(action)}{signature}: {e}"
            raise InvalidActionError(msg) from e
        _check_types(action, bound)

    if not args and not kwargs:
        return action  # type: ignore[no-any-return]

    return functools.partial(action, *args, **kwargs)
