"""Test utilities for real LLM testing."""

import os
import pytest
from typing import Optional
from dotenv import load_dotenv
from dream_oracle.infrastructure.llm.openai_llm import OpenAILLM


class LLMTestHelper:
    """Helper class for opt-in tests against a real OpenAI-compatible endpoint."""

    @staticmethod
    def load_test_env() -> None:
        """Load environment variables from the project's .env file, if any."""
        load_dotenv(override=False)

    @staticmethod
    def check_api_key() -> Optional[str]:
        """Return the OpenAI API key, or None if it is not configured."""
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            return None
        return api_key

    @staticmethod
    def skip_if_no_api_key() -> str:
        """Skip test if API key is not available, otherwise return the key."""
        api_key = LLMTestHelper.check_api_key()
        if not api_key:
            pytest.skip("OPENAI_API_KEY not available")
        return api_key

    @staticmethod
    def create_test_llm(model: str = "gpt-4o-mini") -> OpenAILLM:
        """Create a test LLM instance with the configured API key."""
        api_key = LLMTestHelper.skip_if_no_api_key()
        return OpenAILLM(api_key=api_key, model=model, base_url=os.getenv("LLM_BASE_URL"))


# Load environment on import
LLMTestHelper.load_test_env()


@pytest.fixture
def test_llm():
    """Pytest fixture for a cheap live LLM."""
    return LLMTestHelper.create_test_llm()


def requires_llm(func):
    """Decorator that marks a test as requiring LLM and skips if not available."""
    return pytest.mark.skipif(
        not LLMTestHelper.check_api_key(),
        reason="OPENAI_API_KEY not available"
    )(func)


def llm_integration_test(func):
    """Decorator for LLM integration tests - adds marker and timeout."""
    return pytest.mark.asyncio(pytest.mark.timeout(60)(requires_llm(func)))
