from abc import ABC, abstractmethod
from typing import Optional


class IGenerationProvider(ABC):
    """Interface for the upstream text-generation provider"""

    @abstractmethod
    async def generate_text(self, prompt: str) -> Optional[str]:
        """Send a prompt and return the first candidate's text (None if absent)"""
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials for the provider are present"""
        pass
