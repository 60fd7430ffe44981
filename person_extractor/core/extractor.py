# person_extractor/core/extractor.py
from typing import Any, Dict, List, Optional

from config.settings import load_config
from person_extractor.core.normalizer import normalize_persons, normalize_response
from person_extractor.core.prompts import PERSON_EXTRACTION_PROMPT, build_prompt
from person_extractor.core.schemas import ExtractionResult
from person_extractor.core.validator import validate_persons
from person_extractor.providers.base import LLMProvider, clean_options
from person_extractor.providers.registry import ProviderRegistry
from person_extractor.utils.exceptions import ProviderRegistryError, UnparsableResponseError
from person_extractor.utils.logger import logger


class ExtractionEngine:
    """
    Turns document text into validated person records.

    One `extract` call builds the prompt, resolves a provider, tries the
    provider's structured (JSON) mode, falls back once to free text plus
    normalization, then validates. Nothing is kept between calls, so several
    documents can be extracted concurrently with one engine.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        config: Optional[Dict[str, Any]] = None,
        template: str = PERSON_EXTRACTION_PROMPT,
    ):
        self.registry = registry
        self.config = config if config is not None else load_config()
        self.template = template

    async def extract(
        self,
        document_text: str,
        provider_name: Optional[str] = None,
        provider: Optional[LLMProvider] = None,
        provider_options: Optional[Dict[str, Any]] = None,
    ) -> ExtractionResult:
        """
        Extract all persons mentioned in `document_text`.

        Args:
            document_text: Plain text of the document (may be empty).
            provider_name: Registered provider to construct; default provider if omitted.
            provider: Ready provider instance; takes precedence over `provider_name`.
            provider_options: Generation options (model, temperature, max_tokens, system_prompt).

        Raises:
            UnknownProviderError, NoProviderRegisteredError: registry misuse.
        """
        prompt = build_prompt(document_text, self.template)
        if provider is not None:
            llm = provider
        else:
            try:
                llm = self._create_provider(provider_name)
            except ProviderRegistryError:
                raise
            except Exception as e:
                logger.error(f"Could not create provider '{provider_name or self.registry.default_provider}': {e}")
                return ExtractionResult.provider_failure(f"Error extracting person data: {e}")
        label = provider_name or type(llm).__name__

        logger.info(f"Extracting persons with {label} ({len(document_text)} chars of document text)")

        persons = await self._structured_attempt(llm, prompt, provider_options)
        if persons is None:
            try:
                persons = await self._text_attempt(llm, prompt, provider_options)
            except UnparsableResponseError as e:
                logger.error(f"Could not parse text response from {label}: {(e.raw_response or '')[:500]!r}")
                return ExtractionResult.parse_failure(
                    f"Error extracting person data: {e}", raw_response=e.raw_response
                )
            except Exception as e:
                logger.error(f"Text generation failed for {label}: {e}")
                return ExtractionResult.provider_failure(f"Error extracting person data: {e}")

        outcome = validate_persons(persons)
        if not outcome.valid:
            logger.error(f"Validation errors: {[str(err) for err in outcome.errors]}")
            return ExtractionResult.validation_failure(outcome.errors, outcome.data)

        logger.info(f"Extracted {len(persons)} person(s) with {label}")
        return ExtractionResult.ok(persons)

    def _create_provider(self, provider_name: Optional[str]) -> LLMProvider:
        name = provider_name if provider_name is not None else self.registry.default_provider
        backend_options = (self.config.get("llm") or {}).get(name) or {}
        return self.registry.create(provider_name, backend_options)

    async def _structured_attempt(
        self, llm: LLMProvider, prompt: str, options: Optional[Dict[str, Any]]
    ) -> Optional[List[Any]]:
        """Returns the normalized records, or None when the fallback should run."""
        try:
            data = await llm.generate_json(prompt, _resolve(llm, "json", options))
        except Exception as e:
            logger.warning(f"Failed to get JSON directly, parsing text response instead: {e}")
            return None
        return normalize_persons(data)

    async def _text_attempt(
        self, llm: LLMProvider, prompt: str, options: Optional[Dict[str, Any]]
    ) -> List[Any]:
        text = await llm.generate_response(prompt, _resolve(llm, "text", options))
        return normalize_response(text)


def _resolve(llm: Any, mode: str, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    # caller-supplied providers are duck-typed and may not carry an option policy
    resolver = getattr(llm, "resolve_options", None)
    if resolver is None:
        resolved = clean_options(options)
        if mode == "json":
            resolved["response_format"] = "json"
        return resolved
    return resolver(mode, options)


async def extract_persons_from_document(
    document_text: str,
    registry: ProviderRegistry,
    config: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> ExtractionResult:
    """Convenience wrapper running a one-off ExtractionEngine."""
    return await ExtractionEngine(registry, config=config).extract(document_text, **kwargs)
