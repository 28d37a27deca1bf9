import inspect
from typing import Any, Callable


async def maybe_await(func: Callable, *args, **kwargs) -> Any:
    """Call ``func`` and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
