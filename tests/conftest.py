import pytest
from typing import List, Optional
from fastapi.testclient import TestClient

from main import app
from app.core.dependencies import get_generation_provider
from app.repositories.interfaces.generation_provider import IGenerationProvider


class FakeProvider(IGenerationProvider):
    """Records prompts and answers with canned text (or raises)"""

    def __init__(self, text: Optional[str] = "ok", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    async def generate_text(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text

    def is_configured(self) -> bool:
        return True


@pytest.fixture
def fake_provider():
    provider = FakeProvider()
    app.dependency_overrides[get_generation_provider] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_generation_provider, None)


@pytest.fixture
def test_client():
    """Synchronous test client for simple tests"""
    return TestClient(app)
