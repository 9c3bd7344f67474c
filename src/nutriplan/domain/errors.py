"""Error types raised by the nutrition core."""


class NutriplanError(Exception):
    """Base class for application errors."""


class ValidationError(NutriplanError):
    """Raised when user input is invalid; nothing has been mutated.

    Attributes:
        message: human-readable message suitable for showing to the user
        field: name of the offending field, when known
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly payload."""
        payload: dict[str, object] = {"message": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class PersistenceError(NutriplanError):
    """Raised by a state repository when loading or saving fails."""
