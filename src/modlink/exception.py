"""Modbus Link Exception Definitions"""


class ModlinkError(Exception):
    """Base exception for the modlink system"""

    pass


class DeviceError(ModlinkError):
    """Base class for device-related exceptions"""

    def __init__(self, message: str, device_id: str | None = None):
        super().__init__(message)
        self.device_id = device_id


class DeviceConnectionError(DeviceError):
    """Connection could not be established at startup"""

    pass


class DeviceConfigError(DeviceError):
    """Device or link configuration error"""

    pass


class TransportError(DeviceError):
    """A single read/write call failed (error response, I/O error)"""

    pass


class DeviceTimeoutError(TransportError):
    """Device response timeout"""

    pass


class UnsupportedOperationError(ModlinkError):
    """Register type is not valid for the requested operation"""

    def __init__(self, message: str, register_type=None):
        super().__init__(message)
        self.register_type = register_type


class ParameterError(ModlinkError):
    """Parameter-related exception"""

    pass


class InvalidArgumentError(ParameterError):
    """Value cannot be used for the requested write"""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value


class CoercionError(ParameterError):
    """Decoded value cannot be coerced to the attribute's declared type"""

    def __init__(self, message: str, value=None, target_type=None):
        super().__init__(message)
        self.value = value
        self.target_type = target_type
