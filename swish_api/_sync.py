from typing import Awaitable, TypeVar
import asyncio
import concurrent.futures

T = TypeVar("T")


def run_sync(awaitable: Awaitable[T]) -> T:
    """
    Run a Swish coroutine to completion from synchronous code.

    - No running event loop: uses asyncio.run()
    - Event loop already running (Jupyter/IPython, async frameworks): the
      coroutine gets its own loop in a worker thread, since the running
      loop cannot be blocked on from inside itself
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(awaitable)  # type: ignore[arg-type]

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(asyncio.run, awaitable)  # type: ignore[arg-type]
        return future.result()
