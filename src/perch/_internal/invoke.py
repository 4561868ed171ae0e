"""Invoke helpers — call sync or async callables uniformly.

Route handlers, default handlers and lifespan hooks can be ``def`` or
``async def``. This module keeps the sync/async check in one place.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        class Shop(Application):
            @get("/health")
            def health(self, request):
                return HTTPResponse.text("ok")

            @get("/items/([0-9]+)")
            async def item(self, request, item_id):
                return HTTPResponse.json(await load(item_id))
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
