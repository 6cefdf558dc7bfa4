import pytest

from modlink.device.modbus.driver import ModbusRtuDriver, ModbusTcpDriver, get_driver
from modlink.exception import DeviceConfigError
from modlink.schema.device_config_schema import DeviceConfig


@pytest.mark.parametrize("transport, driver_cls", [("tcp", ModbusTcpDriver), (" RTU ", ModbusRtuDriver)])
def test_get_driver(transport, driver_cls):
    assert isinstance(get_driver(transport), driver_cls)


def test_get_driver_unknown_transport():
    with pytest.raises(DeviceConfigError):
        get_driver("ascii")


def test_instance_uri():
    assert ModbusTcpDriver().instance_uri(DeviceConfig(host="10.1.2.3", port=1502)) == "modbus-tcp://10.1.2.3:1502"
    assert ModbusRtuDriver().instance_uri(DeviceConfig(transport="rtu", path="/dev/ttyS0")) == "modbus-rtu:///dev/ttyS0"


def test_rtu_driver_requires_path():
    with pytest.raises(DeviceConfigError):
        ModbusRtuDriver().create_io_client(DeviceConfig(transport="rtu"))


@pytest.mark.asyncio
async def test_tcp_driver_builds_unconnected_client():
    client = ModbusTcpDriver().create_io_client(DeviceConfig(host="127.0.0.1", port=1502, connection_timeout_millis=500))

    assert client.connected is False
    client.close()
