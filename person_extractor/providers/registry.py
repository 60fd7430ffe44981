"""
Provider Registry
=================
Catalog of LLM provider constructors keyed by name.

Lifecycle: build one registry at process start, register the mock provider
first so a default always exists, then register whichever live backends can
be imported. Registration is not locked; finish it before running concurrent
extractions.
"""

import importlib
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from config.settings import Config
from person_extractor.providers.base import CredentialStatus, LLMProvider
from person_extractor.providers.mock import MockLLMProvider
from person_extractor.utils.exceptions import NoProviderRegisteredError, UnknownProviderError
from person_extractor.utils.logger import logger

ProviderFactory = Callable[[Dict[str, Any]], LLMProvider]

# name -> (module, class) for backends whose SDK may be missing
OPTIONAL_PROVIDERS = {
    "openai": ("person_extractor.providers.openai", "OpenAIProvider"),
    "claude": ("person_extractor.providers.claude", "ClaudeProvider"),
    "gemini": ("person_extractor.providers.gemini", "GeminiProvider"),
    "huggingface": ("person_extractor.providers.huggingface", "HuggingFaceProvider"),
}


@dataclass(frozen=True)
class ProviderRegistration:
    name: str
    provider_class: Type[LLMProvider]
    factory: ProviderFactory


class ProviderRegistry:
    """Maps provider names to their capability class and factory."""

    def __init__(self):
        self._entries: Dict[str, ProviderRegistration] = {}
        self.default_provider: Optional[str] = None

    def register(self, name: str, provider_class: Type[LLMProvider], factory: ProviderFactory) -> None:
        """Register (or replace) a provider. The first registration becomes the default."""
        self._entries[name] = ProviderRegistration(name=name, provider_class=provider_class, factory=factory)
        if not self.default_provider:
            self.default_provider = name

    def set_default(self, name: str) -> None:
        if name not in self._entries:
            raise UnknownProviderError(name)
        self.default_provider = name

    def create(self, name: Optional[str] = None, options: Optional[Dict[str, Any]] = None) -> LLMProvider:
        """Return a new provider instance for `name`, or for the default provider."""
        provider_name = name if name is not None else self.default_provider
        if provider_name is None:
            raise NoProviderRegisteredError()

        entry = self._entries.get(provider_name)
        if entry is None:
            raise UnknownProviderError(provider_name)

        return entry.factory(dict(options or {}))

    def check_credentials(self, name: str) -> CredentialStatus:
        return self._get(name).provider_class.check_credentials()

    def display_name(self, name: str) -> str:
        return self._get(name).provider_class.provider_display_name()

    def providers(self) -> List[str]:
        """Registered provider names, in registration order."""
        return list(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def _get(self, name: str) -> ProviderRegistration:
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownProviderError(name)
        return entry


def register_mock(registry: ProviderRegistry) -> bool:
    registry.register("mock", MockLLMProvider, MockLLMProvider)
    return True


def register_optional_provider(registry: ProviderRegistry, name: str) -> bool:
    """
    Import a live backend lazily and register it.

    Returns False instead of raising when the backend's SDK is absent or broken,
    so one missing dependency cannot stop the others from registering.
    """
    module_path, class_name = OPTIONAL_PROVIDERS[name]
    try:
        module = importlib.import_module(module_path)
        provider_class = getattr(module, class_name)
    except Exception as e:
        logger.warning(f"{name} provider could not be registered: {e}")
        return False

    registry.register(name, provider_class, provider_class)
    return True


def register_openai(registry: ProviderRegistry) -> bool:
    return register_optional_provider(registry, "openai")


def register_claude(registry: ProviderRegistry) -> bool:
    return register_optional_provider(registry, "claude")


def register_gemini(registry: ProviderRegistry) -> bool:
    return register_optional_provider(registry, "gemini")


def register_huggingface(registry: ProviderRegistry) -> bool:
    return register_optional_provider(registry, "huggingface")


def register_all_providers(registry: ProviderRegistry) -> Dict[str, bool]:
    return {
        "openai": register_openai(registry),
        "claude": register_claude(registry),
        "gemini": register_gemini(registry),
        "huggingface": register_huggingface(registry),
    }


def build_registry(default_provider: Optional[str] = None, include_live: bool = True) -> ProviderRegistry:
    """Construct a registry with the mock provider first and, optionally, every importable live backend."""
    registry = ProviderRegistry()
    register_mock(registry)

    if include_live:
        results = register_all_providers(registry)
        logger.info(f"Live provider registration: {results}")

    wanted = default_provider or Config.DEFAULT_LLM_PROVIDER
    if wanted in registry:
        registry.set_default(wanted)
    else:
        logger.warning(f"Provider '{wanted}' is not registered; default stays '{registry.default_provider}'")

    logger.info(f"Available LLM providers: {', '.join(registry.providers())}")
    logger.info(f"Default provider: {registry.default_provider}")
    return registry
