"""
Exception types shared across the invoice check pipeline.

Messages on InvoiceCheckError subclasses are user-facing (Dutch) and safe to
return to the client. ReplyFormatError carries parser detail and stays on the
server side.
"""

GENERIC_ERROR_MESSAGE = "Er ging iets mis"


class InvoiceCheckError(Exception):
    """Base class for failures whose message may be shown to the user."""

    default_message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class OperationTimeoutError(InvoiceCheckError):
    """An awaited operation did not finish before its deadline."""


class OcrError(InvoiceCheckError):
    """Text extraction through Document Intelligence failed."""

    default_message = "Kan PDF niet verwerken. Controleer of het bestand geldig is."


class FieldExtractionError(InvoiceCheckError):
    """The LLM did not return usable invoice fields after all attempts."""

    default_message = "Kan factuur niet analyseren. Probeer het opnieuw."


class ReplyFormatError(Exception):
    """An LLM reply could not be parsed or did not match the field schema."""
