import os
from typing import Any, Dict, Optional

import google.genai as genai
from google.genai import errors, types
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from config.settings import Config
from person_extractor.providers.base import CredentialStatus, LLMProvider, check_api_key, clean_options
from person_extractor.utils.exceptions import ConfigurationError, ProviderInvocationError
from person_extractor.utils.logger import logger


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, errors.ServerError):
        return True
    return isinstance(exc, errors.ClientError) and getattr(exc, "code", None) == 429


class GeminiProvider(LLMProvider):
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        # 1. Get API Key
        self.api_key = self.api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ConfigurationError("Gemini/Google API Key is missing.")

        # 2. Configure the client
        self.client = self.config.get("client") or genai.Client(api_key=self.api_key)

        # 3. Set Model
        self.model_name = self.model or Config.GEMINI_MODEL

        # 4. Store configuration
        self.temperature = self.config.get("temperature", Config.LLM_TEMPERATURE)
        self.max_output_tokens = self.config.get("max_tokens", 8192)

    @classmethod
    def check_credentials(cls) -> CredentialStatus:
        return check_api_key(["GEMINI_API_KEY", "GOOGLE_API_KEY"], "AIza")

    @classmethod
    def provider_display_name(cls) -> str:
        return "Gemini"

    async def generate_response(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Uses Google Gemini to generate a response.
        JSON mode maps to response_mime_type="application/json".
        """
        opts = clean_options(options)
        model = opts.get("model", self.model_name)
        generation_config = types.GenerateContentConfig(
            system_instruction=opts.get("system_prompt"),
            temperature=opts.get("temperature", self.temperature),
            max_output_tokens=opts.get("max_tokens", self.max_output_tokens),
            response_mime_type="application/json" if opts.get("response_format") == "json" else None,
        )

        try:
            logger.info(f"Sending request to Gemini: {model}")
            response = await self._generate(model, prompt, generation_config)
        except errors.APIError as e:
            logger.error(f"Gemini API Error: {str(e)}")
            raise ProviderInvocationError(f"Gemini API error: {str(e)}") from e

        if not response or not response.text:
            raise ProviderInvocationError("Gemini returned an empty response")

        return response.text.strip()

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(Config.API_RETRY_COUNT),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def _generate(self, model: str, prompt: str, generation_config):
        return await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=generation_config,
        )
