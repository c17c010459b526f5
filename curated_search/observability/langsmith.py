"""LangSmith tracing for routing decisions (env-controlled).

Tracing is off unless ``LANGSMITH_TRACING=true``. When off, ``traceable``
returns the wrapped function untouched so routing stays free of tracing
overhead.
"""

from __future__ import annotations

import atexit
import os
from collections.abc import Callable
from typing import Any, Literal, cast

from langsmith import Client as LangSmithClient
from langsmith import traceable as _ls_traceable

_RunType = Literal["tool", "chain", "llm", "retriever", "embedding", "prompt", "parser"]

_client: LangSmithClient | None = None


def tracing_enabled() -> bool:
    return os.getenv("LANGSMITH_TRACING", "").strip().lower() == "true"


def _project() -> str:
    return os.getenv("LANGSMITH_PROJECT", "curated-search")


def get_client() -> LangSmithClient | None:
    global _client
    if not tracing_enabled():
        return None
    if _client is None:
        _client = LangSmithClient()
        atexit.register(flush)
    return _client


def traceable(
    name: str | None = None,
    run_type: str = "chain",
    **kwargs: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a routing step; no-op unless tracing is enabled at import time."""
    if not tracing_enabled():

        def passthrough(fn: Callable[..., Any]) -> Callable[..., Any]:
            return fn

        return passthrough

    return _ls_traceable(  # type: ignore[call-overload]
        name=name,
        run_type=cast("_RunType", run_type),
        project_name=kwargs.pop("project_name", None) or _project(),
        client=kwargs.pop("client", None) or get_client(),
        **kwargs,
    )


def flush() -> None:
    if _client is not None:
        _client.flush()
