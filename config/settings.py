"""
Person Extractor Configuration
==============================
Centralized configuration for the extraction pipeline.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Centralized configuration for the person extraction pipeline."""

    # ============================================================================
    # LLM CONFIGURATION
    # ============================================================================

    # Provider used when a caller does not name one. API keys are read by each
    # provider from its own environment variables at construction time.
    DEFAULT_LLM_PROVIDER: str = os.getenv("DEFAULT_LLM_PROVIDER", "mock")

    # Model names
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")
    CLAUDE_MODEL: str = os.getenv("CLAUDE_MODEL", "claude-3-opus-20240229")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    HF_MODEL: str = os.getenv("HF_MODEL", "mistralai/Mistral-7B-Instruct-v0.3")

    # Generation defaults
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.1"))
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "60"))

    # Retry settings (applied inside each live provider)
    API_RETRY_COUNT: int = int(os.getenv("API_RETRY_COUNT", "3"))

    # ============================================================================
    # FILE PATHS
    # ============================================================================

    BASE_DIR: Path = Path(__file__).parent.parent
    CONFIG_PATH: Path = Path(os.getenv("PERSON_EXTRACTOR_CONFIG", str(BASE_DIR / "config" / "config.yaml")))

    # ============================================================================
    # LOGGING CONFIGURATION
    # ============================================================================

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ============================================================================
    # VALIDATION
    # ============================================================================

    @classmethod
    def validate(cls):
        """Validate configuration settings."""
        errors = []

        if not cls.DEFAULT_LLM_PROVIDER:
            errors.append("DEFAULT_LLM_PROVIDER must not be empty")

        if not (0.0 <= cls.LLM_TEMPERATURE <= 2.0):
            errors.append(f"LLM_TEMPERATURE must be between 0 and 2 (current: {cls.LLM_TEMPERATURE})")

        if cls.LLM_TIMEOUT <= 0:
            errors.append(f"LLM_TIMEOUT must be positive (current: {cls.LLM_TIMEOUT})")

        if cls.API_RETRY_COUNT < 1:
            errors.append(f"API_RETRY_COUNT must be at least 1 (current: {cls.API_RETRY_COUNT})")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))


def load_config(path=None) -> Dict[str, Any]:
    """Load the YAML configuration; missing sections come back as empty dicts."""
    config_path = Path(path) if path else Config.CONFIG_PATH
    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    data["logging"] = data.get("logging") or {}
    data["llm"] = data.get("llm") or {}
    return data
