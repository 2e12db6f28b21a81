"""Pick the cheapest available model for title generation."""

import logging
import re
from typing import Any

from ..config import Settings
from ..host.client import HostClient
from ..host.models import ModelRef, ProviderCatalogEntry

logger = logging.getLogger(__name__)

# Ordered by preference: fast (often free) > flash > haiku > other cheap tiers
CHEAP_MODEL_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        "fast",
        "flash",
        "haiku",
        "mini",
        "instant",
        "small",
        "lite",
        "turbo",
        "8b",
        "7b",
    )
]


def model_ids(models: Any) -> list[str]:
    """Model ids from a list of ids/objects or from a mapping keyed by id."""
    if isinstance(models, dict):
        return [key for key in models if isinstance(key, str)]
    if not isinstance(models, (list, tuple)):
        return []

    ids: list[str] = []
    for model in models:
        if isinstance(model, dict):
            model = model.get("id") or model.get("name")
        if isinstance(model, str):
            ids.append(model)
    return ids


def find_cheapest_from_models(models: Any) -> str | None:
    """The first id matching the highest-priority pattern, else the first id."""
    ids = model_ids(models)
    if not ids:
        return None

    more = "..." if len(ids) > 10 else ""
    logger.debug(f"Available models: {', '.join(ids[:10])}{more}")

    for pattern in CHEAP_MODEL_PATTERNS:
        for model_id in ids:
            if pattern.search(model_id):
                logger.debug(f"Found cheap model by pattern {pattern.pattern}: {model_id}")
                return model_id

    logger.debug(f"No cheap model pattern matched, using first: {ids[0]}")
    return ids[0]


def order_providers(
    providers: list[ProviderCatalogEntry],
    connected: list[str],
    preferred: str | None = None,
) -> list[ProviderCatalogEntry]:
    """Preferred provider first, then connected ones, then the rest."""
    connected_set = set(connected)
    ordered = [p for p in providers if p.id in connected_set]
    ordered += [p for p in providers if p.id not in connected_set]
    if preferred:
        ordered.sort(key=lambda p: p.id != preferred)
    return ordered


async def find_cheapest_model(client: HostClient, settings: Settings) -> ModelRef | None:
    """Resolve the model used for titles.

    An explicit model setting wins without any lookup. Otherwise the host's
    catalog is searched, keeping connected providers first so the user's
    current login is reused.
    """
    override = settings.model_override
    if override:
        logger.debug(f"Using configured model: {override}")
        return override

    connected = await client.list_connected_providers()
    logger.debug(f"Connected providers: {', '.join(connected) or 'none'}")

    providers = await client.list_providers_with_models()
    logger.debug(f"Found {len(providers)} providers")

    for provider in order_providers(providers, connected, settings.provider):
        if not provider.id:
            continue
        model_id = find_cheapest_from_models(provider.models)
        if model_id:
            logger.debug(f"Selected {provider.id}/{model_id}")
            return ModelRef(provider_id=provider.id, model_id=model_id)

    logger.debug("No models found in any provider")
    return None
