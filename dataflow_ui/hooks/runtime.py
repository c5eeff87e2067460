"""
Background Event Loop
Hosts the hooks for a Streamlit session.

Streamlit reruns the page script on short-lived threads, so the hooks
can't live on any one of them. Each browser session gets one asyncio loop
running forever in a daemon thread; the page script hands work to it and
reads the hooks' state back.
"""

import asyncio
import threading
from typing import Any, Callable, Coroutine, Optional, TypeVar

R = TypeVar("R")


class BackgroundLoop:
    def __init__(self, name: str = "dataflow-hooks"):
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "BackgroundLoop":
        if self.is_running:
            return self
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        self._ready.wait()
        return self

    def _run(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._ready.set()
        try:
            self._loop.run_forever()
        finally:
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            if pending:
                self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()

    def run(self, coro: Coroutine[Any, Any, R], timeout: Optional[float] = None) -> R:
        """Run a coroutine on the loop and block for its result"""
        if not self.is_running:
            raise RuntimeError("BackgroundLoop is not running")
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout)

    def call(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        """Run a plain callable on the loop thread and block for its result"""
        async def _invoke() -> R:
            return fn(*args, **kwargs)
        return self.run(_invoke())

    def stop(self) -> None:
        if not self.is_running:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._thread = None
