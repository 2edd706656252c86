# app/services/errors.py
"""
Error taxonomy for recipe generation and rescaling.

Each error carries the HTTP status and machine-readable code that the
exception handlers in main.py put on the wire. The message is what the user
sees, verbatim.
"""


class RecipeServiceError(Exception):
    status_code: int = 500
    code: str = "RECIPE_SERVICE_ERROR"
    default_message: str = "Something went wrong in the kitchen."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RecipeServiceError):
    """Blank ingredient input, rejected before any network call."""

    status_code = 400
    code = "EMPTY_INGREDIENTS"
    default_message = "Please provide some ingredients."


class MalformedResponseError(RecipeServiceError):
    """The model answered, but not with something we can use."""

    status_code = 502
    code = "MALFORMED_RESPONSE"
    default_message = "The AI chef returned a recipe we could not read. Please try again."


class ServiceUnavailableError(RecipeServiceError):
    status_code = 503
    code = "SERVICE_UNAVAILABLE"
    default_message = "Failed to communicate with the AI chef. Please try again later."
