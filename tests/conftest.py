"""Shared fixtures and fake providers for the extraction tests."""
from __future__ import annotations

import json
from typing import Any

import pytest

from person_extractor.providers.base import LLMProvider
from person_extractor.providers.registry import ProviderRegistry, register_mock
from person_extractor.utils.exceptions import ProviderInvocationError

PERSONS = [
    {"first_name": "Bridget", "last_name": "Baker", "gender": "Female", "birth_date": "1848-01-01"},
    {"first_name": "Thomas", "middle_names": None, "last_name": "Baker", "gender": "Male"},
]


class ScriptedProvider(LLMProvider):
    """Provider whose structured and text calls are scripted per test.

    A scripted value that is an exception instance is raised instead of returned.
    Every call is recorded as (method, prompt, options).
    """

    def __init__(self, json_result: Any = None, text_result: Any = None, config: dict | None = None):
        super().__init__(config)
        self.json_result = json_result
        self.text_result = text_result
        self.calls: list[tuple[str, str, dict]] = []

    async def generate_json(self, prompt, options=None):
        self.calls.append(("json", prompt, dict(options or {})))
        if isinstance(self.json_result, BaseException):
            raise self.json_result
        return self.json_result

    async def generate_response(self, prompt, options=None):
        self.calls.append(("text", prompt, dict(options or {})))
        if isinstance(self.text_result, BaseException):
            raise self.text_result
        return self.text_result

    @classmethod
    def provider_display_name(cls) -> str:
        return "Scripted"


class TextOnlyProvider(LLMProvider):
    """Provider exercising the default generate_json path over canned text."""

    def __init__(self, text: str):
        super().__init__({})
        self.text = text
        self.requests: list[dict] = []

    async def generate_response(self, prompt, options=None):
        self.requests.append(dict(options or {}))
        return self.text


@pytest.fixture
def persons():
    """Two valid person records."""
    return [dict(p) for p in PERSONS]


@pytest.fixture
def persons_json(persons):
    return json.dumps({"persons": persons})


@pytest.fixture
def registry():
    """Registry holding only the mock provider."""
    reg = ProviderRegistry()
    register_mock(reg)
    return reg


@pytest.fixture
def failing_structured_provider():
    """Structured call always throws; free text returns a single bare record."""
    return ScriptedProvider(
        json_result=ProviderInvocationError("json mode unavailable"),
        text_result='{"first_name":"X","last_name":"Y"}',
    )
