import asyncio
from typing import Any, Awaitable, Callable

from pymodbus.exceptions import ModbusException
from pymodbus.pdu.pdu import ModbusPDU

from modlink.exception import DeviceTimeoutError, TransportError


async def invoke_modbus_call(call: Callable[..., Awaitable[ModbusPDU]], action: str, **kwargs: Any) -> ModbusPDU:
    """
    Await one pymodbus client call and normalize its failures.

    Error responses, pymodbus exceptions, socket errors and any other
    client-side failure become TransportError; timeouts become
    DeviceTimeoutError.
    """
    try:
        resp: ModbusPDU = await call(**kwargs)
    except (asyncio.TimeoutError, TimeoutError) as e:
        raise DeviceTimeoutError(f"{action} timed out: {e}") from e
    except (ModbusException, OSError) as e:
        raise TransportError(f"{action} failed: {e}") from e
    except Exception as e:
        # e.g. struct.error while pymodbus packs an out-of-range request
        raise TransportError(f"{action} rejected by client: {e}") from e

    if resp is None:
        raise TransportError(f"{action} returned no response")
    if resp.isError():
        raise TransportError(f"{action} error response: {resp}")
    return resp


def require_client(connection: Any) -> Any:
    """Borrow the live client from a connection holder for a single call."""
    client = getattr(connection, "client", None)
    if client is None:
        raise TransportError("no Modbus client (connection not started)")
    return client
