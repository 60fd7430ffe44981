# person_extractor/providers/openai.py
import os
from typing import Any, Dict, Optional

from openai import APIConnectionError, AsyncOpenAI, InternalServerError, OpenAIError, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from config.settings import Config
from person_extractor.providers.base import CredentialStatus, LLMProvider, check_api_key, clean_options
from person_extractor.utils.exceptions import ConfigurationError, ProviderInvocationError
from person_extractor.utils.logger import logger

_TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class OpenAIProvider(LLMProvider):
    # json_object mode only returns objects, so ask for the wrapper explicitly
    structured_system_prompt = (
        "You are a specialized assistant for extracting historical biographical information. "
        "Output valid JSON only: a JSON object with a \"persons\" array of person objects, "
        "even if there's only one person."
    )

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self.api_key = self.api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ConfigurationError(
                "OpenAI API key is required. Set it in the provider options or as OPENAI_API_KEY."
            )

        self.timeout = self.config.get("timeout", Config.LLM_TIMEOUT)
        self.client = self.config.get("client") or AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)

        self.model_name = self.model or Config.OPENAI_MODEL
        self.temperature = self.config.get("temperature", Config.LLM_TEMPERATURE)
        self.max_tokens = self.config.get("max_tokens", 2048)
        self.debug_llm = bool(self.config.get("debug_llm", False)) or os.getenv("PERSON_EXTRACTOR_DEBUG_LLM") == "1"

    @classmethod
    def check_credentials(cls) -> CredentialStatus:
        return check_api_key(["OPENAI_API_KEY"], "sk-")

    @classmethod
    def provider_display_name(cls) -> str:
        return "OpenAI"

    async def generate_response(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Uses the OpenAI chat completions API.
        JSON mode is requested natively when response_format is "json".
        """
        opts = clean_options(options)
        request = {
            "model": opts.get("model", self.model_name),
            "temperature": opts.get("temperature", self.temperature),
            "max_tokens": opts.get("max_tokens", self.max_tokens),
            "messages": [
                {"role": "system", "content": opts.get("system_prompt", "You are a helpful assistant.")},
                {"role": "user", "content": prompt},
            ],
        }
        if opts.get("response_format") == "json":
            request["response_format"] = {"type": "json_object"}

        try:
            logger.info(f"Sending request to OpenAI: {request['model']}")
            resp = await self._create(request)
        except OpenAIError as e:
            logger.error(f"OpenAI API Error: {e}")
            raise ProviderInvocationError(f"OpenAI API error: {e}") from e

        choice = resp.choices[0]
        if choice.finish_reason == "length":
            logger.warning(f"OpenAI response was truncated (max_tokens={request['max_tokens']})")

        response_text = (choice.message.content or "").strip()
        if self.debug_llm:
            logger.info(f"[LLM DEBUG] raw response preview={response_text[:1000]!r}")
        return response_text

    @retry(
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        stop=stop_after_attempt(Config.API_RETRY_COUNT),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _create(self, request: Dict[str, Any]):
        return await self.client.chat.completions.create(**request)
