"""Shared application context for reusable dependencies."""
from __future__ import annotations

from typing import Any, Callable, Optional

_get_current_caller: Optional[Callable[..., Any]] = None


def configure(*, get_current_caller: Callable[..., Any]) -> None:
    """Register application-wide dependencies required by modular routers."""

    global _get_current_caller

    _get_current_caller = get_current_caller


def _require(value: Optional[Any], name: str) -> Any:
    if value is None:
        raise RuntimeError(f"Application context has not been configured yet: {name}")
    return value


def get_current_caller(*args: Any, **kwargs: Any) -> Any:
    dependency = _require(_get_current_caller, "get_current_caller")
    return dependency(*args, **kwargs)
