"""Observability helpers for instrumenting closet tool calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from closet_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _form_summary(kwargs: dict) -> dict:
    """Filled fields of a tool form, with long text cut short and lists counted."""

    summary: dict = {}
    for key, value in kwargs.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple, set)):
            summary[f"{key}_count"] = len(value)
        elif isinstance(value, str) and len(value) > 40:
            summary[key] = value[:40] + "..."
        else:
            summary[key] = value
    return summary


def _result_status(result: object) -> str | None:
    """``status`` of a tool payload such as ``ok``, ``needs_review`` or ``not_found``."""

    if isinstance(result, dict):
        status = result.get("status")
        return str(status) if status is not None else None
    return None


def instrument_tool(
    tool_name: str,
    input_model: type[BaseModel] | None = None,
    on_validation_error: Callable[[ValidationError], R] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a tool to emit structured logs and validate its keyword arguments.

    When ``input_model`` is given, keyword arguments are validated and replaced
    by the model's dump. A validation failure is handed to
    ``on_validation_error`` when provided, otherwise re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()

            if input_model:
                try:
                    kwargs = input_model.model_validate(kwargs).model_dump()
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "tool_validation_failed",
                        tool=tool_name,
                        fields=[".".join(str(part) for part in error["loc"]) for error in exc.errors()],
                    )
                    if on_validation_error:
                        return on_validation_error(exc)
                    raise

            log_event(LOGGER, logging.INFO, "tool_call_started", tool=tool_name, form=_form_summary(kwargs))
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "tool_call_failed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    exc_info=True,
                )
                raise
            status = _result_status(result)
            log_event(
                LOGGER,
                logging.WARNING if status == "needs_review" else logging.INFO,
                "tool_call_completed",
                tool=tool_name,
                correlation_id=correlation_id,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                result_status=status,
            )
            return result

        return wrapper


    return decorator


__all__ = ["instrument_tool"]
