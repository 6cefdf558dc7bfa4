import logging
from typing import Any, Callable

from modlink.device.base import DeviceDriver
from modlink.exception import DeviceConnectionError
from modlink.model.enum.connection_status_enum import ConnectionStatus
from modlink.schema.device_config_schema import DeviceConfig

StatusListener = Callable[[ConnectionStatus], None]


class ConnectionLifecycle:
    """
    Owns the single client of one device and its connection status.

    The status is advisory: dispatchers never check it, and a connection that
    drops mid-session shows up as TransportErrors on reads/writes while the
    status keeps its last startup value.
    """

    def __init__(self, driver: DeviceDriver, logger: logging.Logger | None = None):
        self.driver = driver
        self.logger = logger or logging.getLogger("ConnectionLifecycle")
        self.client: Any = None
        self._status: ConnectionStatus = ConnectionStatus.DISCONNECTED
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    def add_status_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    async def start(self, config: DeviceConfig) -> ConnectionStatus:
        """
        Create and connect the client.

        Raises:
            DeviceConnectionError: client creation or connect raised; status is ERROR.
        """
        if self.client is not None:
            await self.stop()

        self._set_status(ConnectionStatus.CONNECTING)
        uri: str = self.driver.instance_uri(config)

        try:
            self.client = self.driver.create_io_client(config)
            await self.client.connect()
        except Exception as e:
            self.logger.error(f"[Connection] Failed to connect to {uri}: {e}")
            self._set_status(ConnectionStatus.ERROR)
            raise DeviceConnectionError(f"Failed to connect to {uri}: {e}", device_id=config.name) from e

        if self.client.connected:
            self.logger.info(f"[Connection] Connected to {uri}")
            self._set_status(ConnectionStatus.CONNECTED)
        else:
            self.logger.warning(f"[Connection] Client for {uri} reports not connected")
            self._set_status(ConnectionStatus.DISCONNECTED)
        return self._status

    async def stop(self) -> None:
        """Close the client. Safe to call when never started or twice."""
        client, self.client = self.client, None
        if client is None:
            return

        try:
            client.close()
        finally:
            self._set_status(ConnectionStatus.STOPPED)

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self._status:
            return
        self.logger.info(f"[Connection] status {self._status} -> {status}")
        self._status = status

        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                self.logger.warning(f"[Connection] status listener failed: {e}")
