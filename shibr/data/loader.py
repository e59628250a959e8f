from __future__ import annotations

import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Generic, Optional, TypeVar

from shibr.logging import get_logger

T = TypeVar("T")


class LoaderTimeoutError(TimeoutError):
    """The shared load did not finish within the loader's time budget."""


class SingleFlightLoader(Generic[T]):
    """
    Process-wide, lazily created resource.
    - The first caller starts the load on a background thread; every caller
      (including the first) waits on the same in-flight result.
    - The result is resolved or rejected exactly once per attempt. A failed
      attempt is forgotten so the next caller starts a fresh one.
    - Waiting is bounded by ``timeout`` seconds. A load that outlives the
      budget keeps running and is still memoized when it completes.
    """

    def __init__(self, factory: Callable[[], T], timeout: float = 10.0, name: str = "resource") -> None:
        self._factory = factory
        self._timeout = timeout
        self._name = name
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None
        self._value: Optional[T] = None
        self._loaded = False
        self.logger = get_logger(__name__)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self) -> T:
        with self._lock:
            if self._loaded:
                return self._value
            if self._inflight is None:
                self._inflight = Future()
                threading.Thread(
                    target=self._run, args=(self._inflight,), name=f"load-{self._name}", daemon=True
                ).start()
            inflight = self._inflight

        try:
            return inflight.result(timeout=self._timeout)
        except FutureTimeoutError as e:
            raise LoaderTimeoutError(
                f"Loading {self._name} did not finish within {self._timeout:g} seconds"
            ) from e

    def _run(self, inflight: Future) -> None:
        self.logger.info(f"Loading {self._name}")
        try:
            value = self._factory()
        except Exception as e:
            self.logger.error(f"Loading {self._name} failed: {e}")
            with self._lock:
                self._inflight = None
            inflight.set_exception(e)
            return

        with self._lock:
            self._value = value
            self._loaded = True
            self._inflight = None
        self.logger.info(f"Loaded {self._name}")
        inflight.set_result(value)

    def close(self) -> None:
        """Drop the memoized value, calling its ``close()`` if it has one."""
        with self._lock:
            value, loaded = self._value, self._loaded
            self._value = None
            self._loaded = False
        if loaded and hasattr(value, "close"):
            value.close()
