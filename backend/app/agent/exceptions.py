class PipelineError(Exception):
    """Base class for every failure a report pipeline can surface."""

    kind = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(PipelineError):
    """The generation capability has no usable credential."""

    kind = "configuration"


class TransportError(PipelineError):
    """A call to the model provider or the record store failed."""

    kind = "transport"


class ResponseValidationError(PipelineError):
    """The provider answered, but the answer does not match the expected shape."""

    kind = "validation"


class PersistenceError(PipelineError):
    """A validated result could not be saved. Never fatal for the caller."""

    kind = "persistence"


class AuthenticationError(PipelineError):
    """No authenticated identity was supplied for a write."""

    kind = "authentication"


GENERATION_UNCONFIGURED_MESSAGE = (
    "AI features are disabled because the LLM API key is not configured."
)
INVALID_RESPONSE_MESSAGE = "Invalid response format from API."
