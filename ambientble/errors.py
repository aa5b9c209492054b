"""Exceptions raised by ambientble."""


class AmbientBleError(Exception):
    """Base error for ambientble."""


class DiscoveryError(AmbientBleError):
    """The BLE adapter is unavailable or no fixtures could be found."""


class ConnectError(AmbientBleError):
    """A candidate fixture could not be connected."""


class CharacteristicNotFound(AmbientBleError):
    """A connected fixture does not expose the control characteristic."""


class WriteError(AmbientBleError):
    """A command frame could not be written to a fixture."""


class CaptureError(AmbientBleError):
    """The camera could not be opened or a frame could not be read."""


class EmptyFrame(AmbientBleError):
    """A video frame held no usable color samples."""


class ProtocolError(AmbientBleError):
    """A command frame could not be built."""


class InvalidOperandLength(ProtocolError):
    """The opcode and operands leave no room for padding and checksum."""
