# person_extractor/utils/exceptions.py
from typing import Any, List, Optional


class PersonExtractorException(Exception):
    """Base exception for the person extraction pipeline."""
    pass


class ProviderInvocationError(PersonExtractorException):
    """Raised when the LLM provider fails (Auth, Rate Limit, Network, etc.)."""
    pass


class JsonParseError(PersonExtractorException):
    """Raised when a provider's structured response is not valid JSON."""

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


class ProviderRegistryError(PersonExtractorException):
    """Raised when the provider registry is misused."""
    pass


class UnknownProviderError(ProviderRegistryError):
    """Raised when a provider name is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Provider '{name}' is not registered")
        self.name = name


class NoProviderRegisteredError(ProviderRegistryError):
    """Raised when no provider name was given and no default exists."""

    def __init__(self):
        super().__init__("No LLM provider is registered")


class UnparsableResponseError(PersonExtractorException):
    """Raised when no parse strategy could recover JSON from a raw response."""

    def __init__(self, raw_response: Optional[str], message: str = "Could not extract JSON from LLM response"):
        super().__init__(message)
        self.raw_response = raw_response


class SchemaValidationError(PersonExtractorException):
    """Raised when extracted data fails validation/schema checks."""

    def __init__(self, errors: List[Any], data: Any = None):
        first = errors[0] if errors else None
        detail = f": {first}" if first is not None else ""
        super().__init__(f"Extracted data failed schema validation{detail}")
        self.errors = errors
        self.data = data


class ConfigurationError(PersonExtractorException):
    """Raised when config is missing or invalid."""
    pass
