"""Domain exceptions for the scan flow."""


class AnalysisError(Exception):
    """Base class for failures of a single analysis call."""


class ConfigurationError(AnalysisError):
    """Raised when the model credential is missing."""


class TransportError(AnalysisError):
    """Raised when the model provider cannot be reached or fails."""


class MalformedResponseError(AnalysisError):
    """Raised when the provider returns no text or text that doesn't fit."""


class DeviceAccessError(Exception):
    """Raised when the capture device is denied or unavailable."""


class InvalidTransitionError(Exception):
    """Raised when a trigger is not accepted in the current view state."""

    def __init__(self, trigger: str, state: str) -> None:
        super().__init__(f"Cannot {trigger} while {state}")
        self.trigger = trigger
        self.state = state
