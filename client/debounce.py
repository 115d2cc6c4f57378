import asyncio
from typing import Any, Awaitable, Callable


class Debouncer:
    """Runs only the latest call, once no newer call arrived for `delay` seconds"""

    def __init__(self, delay: float = 0.5) -> None:
        self.delay = delay
        self._task: asyncio.Task | None = None

    def call(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> asyncio.Task:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(func, *args, **kwargs))
        return self._task

    async def _run(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        await asyncio.sleep(self.delay)
        return await func(*args, **kwargs)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()
