import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from modlink.schema.logging_config_schema import LOG_LEVEL_MAP, LoggingConfig

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class ISO8601Formatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        dt: datetime = datetime.fromtimestamp(record.created)
        return dt.isoformat(timespec="seconds")


def resolve_log_level(name: str | int) -> int:
    if isinstance(name, int):
        return name
    return LOG_LEVEL_MAP.get(str(name).strip().upper(), logging.INFO)


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """
    Configure the root logger from `config`.

    Handlers are only attached once per process, so calling this again (e.g.
    after a config reload) only adjusts the level.
    """
    config = config or LoggingConfig()
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level_no)

    if any(getattr(h, "_modlink", False) for h in root_logger.handlers):
        return root_logger

    formatter = ISO8601Formatter(fmt=LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler._modlink = True
    root_logger.addHandler(console_handler)

    if config.to_file:
        Path(config.dir).mkdir(parents=True, exist_ok=True)
        rotating_handler = TimedRotatingFileHandler(
            filename=str(Path(config.dir) / f"{config.base_filename}.log"),
            when=config.when,
            interval=1,
            backupCount=config.backup_count,
            encoding="utf-8",
            utc=False,
        )
        rotating_handler.setFormatter(formatter)
        rotating_handler._modlink = True
        root_logger.addHandler(rotating_handler)

    return root_logger
