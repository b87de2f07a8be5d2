"""Custom exceptions for the file agent."""


class TransportError(Exception):
    """Raised when a request to the model endpoint fails."""
    pass


class DriveError(Exception):
    """Raised when a conversation drive stops on a transport failure.

    ``turns`` holds the sequence accumulated up to the failure, ``iteration``
    the 1-based loop iteration at which it happened.
    """

    def __init__(self, message: str, iteration: int, turns: list):
        super().__init__(message)
        self.iteration = iteration
        self.turns = turns


class DriveCancelledError(DriveError):
    """Raised when a drive is aborted through its cancel event."""
    pass


class ToolArgumentError(Exception):
    """Raised when a tool call carries malformed or missing arguments."""
    pass


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass
