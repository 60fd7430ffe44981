# person_extractor/providers/mock.py
import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from person_extractor.providers.base import CredentialStatus, LLMProvider
from person_extractor.utils.logger import logger

DEFAULT_MOCK_PERSON = {
    "first_name": "John",
    "middle_names": "William",
    "last_name": "Smith",
    "gender": "Male",
    "birth_date": "1850-03-15",
    "birth_place": "London, England",
    "death_date": "1920-11-23",
    "death_place": "Adelaide, Australia",
    "age_at_death": "70 years",
    "burial_place": "Adelaide Cemetery",
}


class MockLLMProvider(LLMProvider):
    """
    Deterministic provider returning canned responses.

    Lookup order: exact prompt match in `mock_responses`, then (in record mode)
    the `real_provider`, then `default_response`, then a fixed sample person.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.mock_responses: Dict[str, str] = dict(self.config.get("mock_responses") or {})
        self.default_response: Optional[str] = self.config.get("default_response")
        self.record_mode = bool(self.config.get("record_mode", False))
        self.record_dir = Path(self.config["record_dir"]) if self.config.get("record_dir") else None
        self.real_provider: Optional[LLMProvider] = self.config.get("real_provider")

        if self.config.get("replay_dir"):
            self.load_mock_responses(self.config["replay_dir"])

    @classmethod
    def check_credentials(cls) -> CredentialStatus:
        return CredentialStatus(ok=True, detail="No API key required for mock LLM provider")

    @classmethod
    def provider_display_name(cls) -> str:
        return "Mock"

    async def generate_response(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        logger.debug(f"MockLLM received prompt: {prompt[:100]!r}")

        if prompt in self.mock_responses:
            return self.mock_responses[prompt]

        if self.record_mode and self.real_provider is not None and self.record_dir is not None:
            response = await self.real_provider.generate_response(prompt, options)
            self.record_response(prompt, response)
            return response

        if self.default_response is not None:
            return self.default_response

        return json.dumps(DEFAULT_MOCK_PERSON)

    def record_response(self, prompt: str, response: str) -> Path:
        """Write a prompt/response pair to the record directory for later replay."""
        self.record_dir.mkdir(parents=True, exist_ok=True)
        digest = hashlib.sha256(prompt.encode("utf-8")).hexdigest()[:20]
        file_path = self.record_dir / f"mock_response_{digest}.json"

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(
                {
                    "prompt": prompt,
                    "response": response,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
                f,
                indent=2,
                ensure_ascii=False,
            )

        self.mock_responses[prompt] = response
        logger.info(f"Recorded mock response to {file_path}")
        return file_path

    def load_mock_responses(self, directory) -> int:
        """Load recorded prompt/response pairs from `directory`; returns how many were loaded."""
        loaded = 0
        for file_path in sorted(Path(directory).glob("*.json")):
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if "prompt" in data and "response" in data:
                self.mock_responses[data["prompt"]] = data["response"]
                loaded += 1

        logger.info(f"Loaded {loaded} mock responses from {directory}")
        return loaded
