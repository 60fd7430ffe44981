# person_extractor/providers/base.py
import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from person_extractor.utils.exceptions import JsonParseError

# Recognized generation options. Anything else is ignored by providers.
OPTION_KEYS = ("system_prompt", "temperature", "max_tokens", "model", "response_format")

# camelCase spellings accepted from JS-style callers
_OPTION_ALIASES = {
    "systemPrompt": "system_prompt",
    "maxTokens": "max_tokens",
    "responseFormat": "response_format",
}

STRUCTURED_SYSTEM_PROMPT = (
    "You are a specialized assistant for extracting historical biographical information. "
    "Output valid JSON only."
)
TEXT_SYSTEM_PROMPT = (
    "You are a specialized assistant for extracting historical biographical information. "
    "Answer with the requested JSON and nothing else."
)


@dataclass(frozen=True)
class CredentialStatus:
    """Result of a provider credential check."""

    ok: bool
    detail: str


def clean_options(options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Keep the recognized option keys, mapping camelCase aliases and dropping None values."""
    cleaned: Dict[str, Any] = {}
    for key, value in (options or {}).items():
        key = _OPTION_ALIASES.get(key, key)
        if key in OPTION_KEYS and value is not None:
            cleaned[key] = value
    return cleaned


def check_api_key(env_vars, prefix: str) -> CredentialStatus:
    """Check that the first set variable of `env_vars` holds a key starting with `prefix`."""
    for var in env_vars:
        value = os.getenv(var)
        if value:
            if not value.startswith(prefix):
                return CredentialStatus(
                    ok=False,
                    detail=f"{var} has invalid format (should start with {prefix})",
                )
            return CredentialStatus(ok=True, detail=f"{var} is set and has the correct format")

    names = " or ".join(env_vars)
    return CredentialStatus(ok=False, detail=f"{names} environment variable is not set")


class LLMProvider(ABC):
    """Capability interface every LLM backend implements."""

    structured_system_prompt: str = STRUCTURED_SYSTEM_PROMPT
    text_system_prompt: str = TEXT_SYSTEM_PROMPT

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = dict(config or {})
        self.api_key = self.config.get("api_key")
        self.model = self.config.get("model")

    @abstractmethod
    async def generate_response(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Send a prompt to the backend and return the raw text.

        Args:
            prompt: The final instruction string.
            options: Generation options (see OPTION_KEYS).

        Raises:
            ProviderInvocationError: network, auth or quota failures.
        """

    async def generate_json(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """Generate a response in JSON mode and parse it."""
        request = dict(options or {})
        request["response_format"] = "json"
        text = await self.generate_response(prompt, request)
        try:
            return json.loads(text)
        except (TypeError, json.JSONDecodeError) as e:
            raise JsonParseError(f"Invalid JSON from {self.provider_display_name()}: {e}", raw_response=text) from e

    def resolve_options(self, mode: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Merge this backend's option policy for `mode` ("json" or "text") with caller options.

        Caller options win, except the structured-mode system prompt which is always applied.
        """
        caller = clean_options(options)
        if mode == "json":
            resolved = {**caller, "system_prompt": self.structured_system_prompt, "response_format": "json"}
        else:
            resolved = {"system_prompt": self.text_system_prompt, **caller}
            resolved.pop("response_format", None)
        return resolved

    @classmethod
    def check_credentials(cls) -> CredentialStatus:
        """Default implementation for providers that don't need an API key."""
        return CredentialStatus(ok=True, detail="No API key required for this provider")

    @classmethod
    def provider_display_name(cls) -> str:
        return "Base LLM"
