from functools import lru_cache
from fastapi import Depends

from app.config.settings import Settings, settings
from app.repositories.interfaces.generation_provider import IGenerationProvider
from app.repositories.implementations.gemini_provider import GeminiProvider
from app.services.generation_gateway import GenerationGateway
from app.services.http_probe import HttpProbe


class Container:
    """Dependency injection container.

    Configuration is handed in once at construction; the services it builds
    hold their own copies and never read the environment while serving.
    """

    def __init__(self, config: Settings):
        self.config = config

    @lru_cache()
    def generation_provider(self) -> IGenerationProvider:
        """Get generation provider instance (singleton)"""
        return GeminiProvider(
            api_key=self.config.gemini_api_key,
            model=self.config.gemini_model,
            base_url=self.config.gemini_base_url,
            timeout=self.config.gemini_timeout_seconds,
        )

    def generation_gateway(self, provider: IGenerationProvider) -> GenerationGateway:
        """Get generation gateway instance"""
        return GenerationGateway(provider=provider)

    @lru_cache()
    def http_probe(self) -> HttpProbe:
        """Get API probe instance (singleton)"""
        return HttpProbe(
            timeout=self.config.probe_timeout_seconds,
            follow_redirects=self.config.probe_follow_redirects,
        )


# Global container instance
container = Container(settings)


# Dependency providers for FastAPI
def get_generation_provider() -> IGenerationProvider:
    """FastAPI dependency for the generation provider"""
    return container.generation_provider()


def get_generation_gateway(
    provider: IGenerationProvider = Depends(get_generation_provider),
) -> GenerationGateway:
    """FastAPI dependency for the generation gateway"""
    return container.generation_gateway(provider)


def get_http_probe() -> HttpProbe:
    """FastAPI dependency for the API probe"""
    return container.http_probe()
