import asyncio
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class AsyncRecurringJob(ABC):
    """
    Base class for recurring asynchronous background jobs.

    Subclasses must implement `run_once()`. The first run starts immediately;
    each next run starts `interval_seconds` after the previous one completed
    (fixed delay), so runs of one job never overlap. Exceptions raised by
    `run_once()` are logged and the schedule continues.
    """

    def __init__(self, interval_seconds: float, name: str | None = None, logger: logging.Logger | None = None):
        """
        Args:
            interval_seconds: Delay between the end of one run and the start of the next.
            name: Label used in log lines (defaults to the class name).
            logger: Logger to report to (defaults to this module's logger).
        """
        self._interval = float(interval_seconds)
        self._name = name or self.__class__.__name__
        self._task: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None
        self._stopping: bool = False
        self.logger = logger or logging.getLogger(__name__)

    # ----------------------------------------------------------------------
    # Required implementation in subclasses
    # ----------------------------------------------------------------------
    @abstractmethod
    async def run_once(self) -> None:
        """
        The operation that should be executed once per loop.
        Subclasses must implement this method.
        """
        ...

    # ----------------------------------------------------------------------
    # Internal background loop
    # ----------------------------------------------------------------------
    async def _run_once_safely(self) -> None:
        try:
            await self.run_once()
        except Exception as e:
            self.logger.exception(f"[{self._name}] exception in run_once: {e}")

    async def _loop(self) -> None:
        """Internal loop executed inside the background task."""
        self.logger.debug(f"[{self._name}] loop started (interval={self._interval}s)")

        try:
            while not self._stopping:
                # Shielded: cancelling the job stops future runs but lets the current one finish
                self._inflight = asyncio.ensure_future(self._run_once_safely())
                await asyncio.shield(self._inflight)
                self._inflight = None

                if self._stopping:
                    break
                if self._interval > 0:
                    await asyncio.sleep(self._interval)
        except asyncio.CancelledError:
            self.logger.debug(f"[{self._name}] task cancelled")

        self.logger.debug(f"[{self._name}] loop stopped")

    # ----------------------------------------------------------------------
    # Public API: start & stop
    # ----------------------------------------------------------------------
    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_stopping(self) -> bool:
        """True once cancel/stop was requested, even while a run is still in flight."""
        return self._stopping

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """
        Start the recurring job in the background.

        Returns:
            asyncio.Task: The background task handle.
        """
        if self._task and not self._task.done():
            self.logger.warning(f"[{self._name}] already running")
            return self._task

        self._stopping = False
        self._task = asyncio.create_task(self._loop(), name=self._name)
        return self._task

    def cancel(self) -> None:
        """
        Stop future runs without waiting.
        A run already in flight is allowed to complete.
        """
        self._stopping = True
        if self._task and not self._task.done():
            self._task.cancel()

    async def stop(self) -> None:
        """
        Stop the background job and wait for the task and any in-flight run to finish.
        Safe to call even if the job is not running.
        """
        self.cancel()

        task, inflight = self._task, self._inflight
        self._task = None
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if inflight is not None and not inflight.done():
            await inflight
        self._inflight = None
