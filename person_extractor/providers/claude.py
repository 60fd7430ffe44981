# person_extractor/providers/claude.py
import os
from typing import Any, Dict, Optional

from anthropic import (
    APIConnectionError,
    AnthropicError,
    AsyncAnthropic,
    InternalServerError,
    RateLimitError,
)
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from config.settings import Config
from person_extractor.providers.base import CredentialStatus, LLMProvider, check_api_key, clean_options
from person_extractor.utils.exceptions import ConfigurationError, ProviderInvocationError
from person_extractor.utils.logger import logger

_TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class ClaudeProvider(LLMProvider):
    # No native JSON mode: response_format is ignored and the prompt carries the contract
    structured_system_prompt = (
        "You are a specialized assistant for extracting historical biographical information. "
        "Output valid JSON only. Do not wrap it in markdown code blocks and do not add explanations."
    )

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self.api_key = self.api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ConfigurationError(
                "Anthropic API key is required. Set it in the provider options or as ANTHROPIC_API_KEY."
            )

        self.timeout = self.config.get("timeout", Config.LLM_TIMEOUT)
        self.client = self.config.get("client") or AsyncAnthropic(api_key=self.api_key, timeout=self.timeout)

        self.model_name = self.model or Config.CLAUDE_MODEL
        self.temperature = self.config.get("temperature", Config.LLM_TEMPERATURE)
        self.max_tokens = self.config.get("max_tokens", 4096)

    @classmethod
    def check_credentials(cls) -> CredentialStatus:
        return check_api_key(["ANTHROPIC_API_KEY"], "sk-ant-")

    @classmethod
    def provider_display_name(cls) -> str:
        return "Claude"

    async def generate_response(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        opts = clean_options(options)
        request = {
            "model": opts.get("model", self.model_name),
            "temperature": opts.get("temperature", self.temperature),
            "max_tokens": opts.get("max_tokens", self.max_tokens),
            "messages": [{"role": "user", "content": prompt}],
        }
        if opts.get("system_prompt"):
            request["system"] = opts["system_prompt"]

        try:
            logger.info(f"Sending request to Claude: {request['model']}")
            response = await self._create(request)
        except AnthropicError as e:
            logger.error(f"Error calling Anthropic Claude API: {e}")
            raise ProviderInvocationError(f"Claude API error: {e}") from e

        if response.stop_reason == "max_tokens":
            logger.warning(f"Claude response was truncated (max_tokens={request['max_tokens']})")

        return "".join(block.text for block in response.content if getattr(block, "type", None) == "text")

    @retry(
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        stop=stop_after_attempt(Config.API_RETRY_COUNT),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _create(self, request: Dict[str, Any]):
        return await self.client.messages.create(**request)
