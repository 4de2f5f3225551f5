"""Invoke helpers — call sync or async submitters uniformly.

Submission callables can be ``def`` or ``async def``. Anything that calls
a user-provided submitter goes through ``invoke`` so the sync/async check
lives in exactly one place.

Usage::

    from stepform._internal.invoke import invoke

    payload = await invoke(on_submit, values)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
