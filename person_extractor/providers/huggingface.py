# person_extractor/providers/huggingface.py
import os
from typing import Any, Dict, Optional

from huggingface_hub import AsyncInferenceClient
from huggingface_hub.errors import HfHubHTTPError, InferenceTimeoutError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from config.settings import Config
from person_extractor.providers.base import CredentialStatus, LLMProvider, check_api_key, clean_options
from person_extractor.utils.exceptions import ConfigurationError, ProviderInvocationError
from person_extractor.utils.logger import logger


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, InferenceTimeoutError):
        return True
    response = getattr(exc, "response", None) if isinstance(exc, HfHubHTTPError) else None
    status = getattr(response, "status_code", None)
    return status == 429 or (status is not None and status >= 500)


class HuggingFaceProvider(LLMProvider):
    structured_system_prompt = (
        "You are a strict data extraction assistant for historical biographical information. "
        "Return ONLY valid JSON. Do not write code blocks."
    )

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.api_key = self.api_key or os.getenv("HUGGINGFACE_API_KEY") or os.getenv("HF_API_TOKEN")
        if not self.api_key:
            raise ConfigurationError("Hugging Face API Key is missing.")
        self.timeout = self.config.get("timeout", Config.LLM_TIMEOUT)
        self.client = self.config.get("client") or AsyncInferenceClient(api_key=self.api_key, timeout=self.timeout)
        self.model_id = self.model or Config.HF_MODEL
        self.temperature = self.config.get("temperature", Config.LLM_TEMPERATURE)
        self.max_tokens = self.config.get("max_tokens", 4096)

    @classmethod
    def check_credentials(cls) -> CredentialStatus:
        return check_api_key(["HUGGINGFACE_API_KEY", "HF_API_TOKEN"], "hf_")

    @classmethod
    def provider_display_name(cls) -> str:
        return "Hugging Face"

    async def generate_response(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Uses the HuggingFace inference chat_completion endpoint.
        response_format is ignored; most hosted models have no JSON mode.
        """
        opts = clean_options(options)
        messages = []
        if opts.get("system_prompt"):
            messages.append({"role": "system", "content": opts["system_prompt"]})
        messages.append({"role": "user", "content": prompt})

        model = opts.get("model", self.model_id)
        try:
            logger.info(f"Sending request to Hugging Face: {model}")
            response = await self._chat(
                model=model,
                messages=messages,
                max_tokens=opts.get("max_tokens", self.max_tokens),
                temperature=opts.get("temperature", self.temperature),
            )
        except (HfHubHTTPError, InferenceTimeoutError) as e:
            logger.error(f"Hugging Face API Error: {str(e)}")
            raise ProviderInvocationError(f"Hugging Face API error: {str(e)}") from e

        return (response.choices[0].message.content or "").strip()

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(Config.API_RETRY_COUNT),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def _chat(self, **kwargs):
        return await self.client.chat_completion(**kwargs)
