"""Domain-specific errors for roomectl.

Every error carries a stable ``code`` used in structured CLI output and the
process ``exit_code`` the CLI terminates with.
"""


class RoomectlError(Exception):
    """Base error for roomectl."""

    code = "Error"
    exit_code = 1


class InvalidArgumentError(RoomectlError):
    """Raised when a MAC address, channel, or action is malformed."""

    code = "InvalidArgument"
    exit_code = 2


class AdapterNotFoundError(RoomectlError):
    """Raised when no adapter (or not the requested one) is available."""

    code = "AdapterNotFound"
    exit_code = 3


class AdapterNotPoweredError(RoomectlError):
    """Raised when the selected adapter is powered off."""

    code = "AdapterNotPowered"
    exit_code = 4


class SessionError(RoomectlError):
    """Base for transient connection-phase failures retried within the attempt budget."""

    code = "SessionError"
    exit_code = 11


class DiscoveryError(SessionError):
    """Raised when discovery cannot be started or stopped."""

    code = "DiscoveryFailed"


class DeviceNotFoundError(SessionError):
    """Raised when the target device is not visible to the adapter."""

    code = "DeviceNotFound"


class DiscoveryTimeoutError(DeviceNotFoundError):
    """Raised when the target device is not observed before the locator timeout."""

    code = "Timeout"


class PairingFailedError(SessionError):
    """Raised when pairing with the device fails."""

    code = "PairingFailed"


class ConnectionFailedError(SessionError):
    """Raised when a GATT connection cannot be established."""

    code = "ConnectionFailed"


class ConnectionExhaustedError(RoomectlError):
    """Raised when every connection attempt in the budget failed."""

    code = "ConnectionExhausted"
    exit_code = 5

    def __init__(self, message: str, *, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ServiceNotFoundError(RoomectlError):
    """Raised when the device does not expose the switch GATT service."""

    code = "ServiceNotFound"
    exit_code = 6


class CharacteristicNotFoundError(RoomectlError):
    """Raised when the switch service lacks the command characteristic."""

    code = "CharacteristicNotFound"
    exit_code = 7


class WriteFailedError(RoomectlError):
    """Raised when writing the command characteristic fails."""

    code = "WriteFailed"
    exit_code = 8


class StatusQueryUnsupportedError(RoomectlError):
    """Raised for status queries; the switch's state read protocol is unknown."""

    code = "StatusQueryUnsupported"
    exit_code = 9


class ProfileLoadError(RoomectlError):
    """Raised when reading a protocol profile fails."""

    code = "ProfileLoadError"
    exit_code = 10


class ProfileValidationError(RoomectlError):
    """Raised when a protocol profile does not conform to schema or semantics."""

    code = "ProfileValidationError"
    exit_code = 10
