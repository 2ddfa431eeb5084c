"""
Exceptions raised by the red zone batch job and the accident importer.
"""


class RedZoneError(Exception):
    """Base exception for red zone processing errors."""
    pass


class SourceReadError(RedZoneError):
    """Raised when the accident point set cannot be read."""
    pass


class SinkWriteError(RedZoneError):
    """Raised when stored red zones cannot be replaced.

    ``phase`` is ``"delete"`` when clearing the previous zones failed and
    ``"insert"`` when writing the new ones failed.
    """

    def __init__(self, phase: str, message: str):
        super().__init__(f"Red zone {phase} failed: {message}")
        self.phase = phase


class DatasetNotFoundError(RedZoneError):
    """Raised when an accident CSV dataset does not exist."""
    pass
