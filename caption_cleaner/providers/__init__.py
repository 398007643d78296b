"""Transcript provider registry.

WHY: The transcript source is a deployment choice (free scraping vs. a
paid API or a scraping proxy). One lookup by name lets the HTTP layer
stay provider-agnostic.

HOW: PROVIDERS maps names to provider *classes*; get_provider() picks one
by explicit name, then TRANSCRIPT_PROVIDER, then "youtube-transcript".

RULES:
- Unknown names raise ValueError listing the available providers
- A new instance is returned on every call
"""

from __future__ import annotations

from typing import List, Optional

from caption_cleaner import config
from caption_cleaner.providers.base import BaseProvider, ProviderError, ProviderResult
from caption_cleaner.providers.oxylabs import OxylabsProvider
from caption_cleaner.providers.supadata import SupadataProvider
from caption_cleaner.providers.youtube_transcript import YoutubeTranscriptProvider

PROVIDERS: dict[str, type[BaseProvider]] = {
    "youtube-transcript": YoutubeTranscriptProvider,
    "supadata": SupadataProvider,
    "oxylabs": OxylabsProvider,
}


def get_provider(name: Optional[str] = None) -> BaseProvider:
    """Instantiate a provider by name (defaults to TRANSCRIPT_PROVIDER)."""
    name = name or config.TRANSCRIPT_PROVIDER or "youtube-transcript"
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise ValueError(
            "Unknown transcript provider: {}. Available: {}".format(
                name, ", ".join(PROVIDERS)
            )
        )
    return provider_cls()


def register_provider(name: str, provider_cls: type[BaseProvider]) -> None:
    PROVIDERS[name] = provider_cls


def list_providers() -> List[str]:
    return list(PROVIDERS)


__all__ = [
    "BaseProvider",
    "ProviderError",
    "ProviderResult",
    "PROVIDERS",
    "get_provider",
    "list_providers",
    "register_provider",
]
