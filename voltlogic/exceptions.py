from __future__ import annotations


class VoltLogicError(Exception): ...


class DecodeError(VoltLogicError): ...


class InvalidFormat(DecodeError): ...


class Truncated(DecodeError):
    def __init__(self, message: str, offset: int):
        super().__init__(message)
        self.offset = offset


class VoltageOutOfRange(DecodeError):
    def __init__(self, message: str, offset: int, voltage: float):
        super().__init__(message)
        self.offset = offset
        self.voltage = voltage


class FileUnreadable(VoltLogicError):
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class StatsError(VoltLogicError): ...


class EmptyInput(StatsError): ...


class UnsortedInput(StatsError): ...


def require(condition: bool, message: str, exc: type[VoltLogicError] = VoltLogicError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
