import logging
import time


class RateLimitFilter(logging.Filter):
    """
    Rate limit filter to prevent log spam.
    Only allows the same log message once per period.
    """

    def __init__(self, period_sec: float = 2.0):
        super().__init__()
        self.period = period_sec
        self._last: dict[tuple, float] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        key = (record.name, record.levelno, record.getMessage())
        now = time.monotonic()
        last = self._last.get(key)
        if last is not None and now - last < self.period:
            return False
        self._last[key] = now
        return True


def install_rate_limit(logger: logging.Logger, period_sec: float = 2.0) -> logging.Logger:
    """Attach a RateLimitFilter to `logger` once."""
    if not any(isinstance(f, RateLimitFilter) for f in logger.filters):
        logger.addFilter(RateLimitFilter(period_sec))
    return logger


def quiet_pymodbus_logs(level=logging.WARNING, rate_limit_sec: float = 2.0):
    pymodbus_log = logging.getLogger("pymodbus.logging")
    pymodbus_log.setLevel(level)
    install_rate_limit(pymodbus_log, rate_limit_sec)

    async_log = logging.getLogger("asyncio")
    async_log.setLevel(logging.ERROR)
