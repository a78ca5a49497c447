"""
Settlers Server Error Hierarchy

Exception hierarchy for the savegame and handshake layers.
All custom exceptions inherit from SettlersError for easy catching and filtering.

Usage:
    from settlers.errors import ConstraintViolationError, UnsupportedOperationError

    try:
        game = model.resume_play()
    except ConstraintViolationError as e:
        logger.warning(f"Can't resume: {e.message}, constraint: {e.constraint}")
"""

from typing import Any

__all__ = [
    "ConfigurationError",
    "ConstraintViolationError",
    "InvalidArgumentError",
    # Game state errors
    "InvalidStateError",
    "MalformedEncodingError",
    # Savegame errors
    "SavedGameLoadError",
    # Base error
    "SettlersError",
    "UnsupportedOperationError",
    # Validation errors
    "ValidationError",
]


class SettlersError(Exception):
    """Base exception for all settlers server errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "SETTLERS_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Game State Errors
# =============================================================================


class InvalidStateError(SettlersError):
    """Operation attempted while the game is in a state that forbids it.

    Raised when snapshotting a game which hasn't left initial placement.

    Attributes:
        required_state: Name of the minimum or exact state required
        current_state: Name of the state the game was actually in
    """
    code: str = "INVALID_STATE"

    def __init__(
        self,
        message: str,
        required_state: str | None = None,
        current_state: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.required_state = required_state
        self.current_state = current_state
        if required_state:
            self.context["required_state"] = required_state
        if current_state:
            self.context["current_state"] = current_state


class UnsupportedOperationError(InvalidStateError):
    """Caller bug: operation isn't supported in the current lifecycle phase.

    Raised by SavedGameModel.resume_play when its game isn't LOADING.
    Not recoverable by retrying the same call.
    """
    code: str = "UNSUPPORTED_OPERATION"


class ConstraintViolationError(SettlersError):
    """A resumption constraint rejected the loaded game.

    Attributes:
        constraint: The constraint object which failed
    """
    code: str = "CONSTRAINT_VIOLATION"

    def __init__(
        self,
        message: str,
        constraint: Any | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.constraint = constraint
        if constraint is not None:
            self.context["constraint"] = getattr(constraint, "name", repr(constraint))


# =============================================================================
# Savegame Errors
# =============================================================================


class SavedGameLoadError(SettlersError):
    """Saved game data can't be loaded.

    Raised for unparseable files, a model version newer than this server
    supports, an unrecognized game state, or a seat count which doesn't
    match the game's max players.
    """
    code: str = "SAVEGAME_LOAD_ERROR"

    def __init__(
        self,
        message: str,
        model_version: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if model_version is not None:
            self.context["model_version"] = model_version


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SettlersError):
    """Base class for validation errors."""
    code: str = "VALIDATION_ERROR"


class MalformedEncodingError(ValidationError):
    """Encoded input doesn't follow its framing rules.

    Raised for a server features list which isn't wrapped in separators,
    or a game options string which can't be parsed.
    """
    code: str = "MALFORMED_ENCODING"

    def __init__(
        self,
        message: str,
        encoded: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.encoded = encoded
        if encoded is not None:
            self.context["encoded"] = encoded


class InvalidArgumentError(ValidationError):
    """Required argument was empty or missing."""
    code: str = "INVALID_ARGUMENT"

    def __init__(
        self,
        message: str,
        argument: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if argument:
            self.context["argument"] = argument


class ConfigurationError(ValidationError):
    """Invalid configuration."""
    code: str = "CONFIGURATION_ERROR"
