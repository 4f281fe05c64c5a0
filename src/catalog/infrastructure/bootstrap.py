"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from catalog.infrastructure.config import Settings, get_settings
from catalog.infrastructure.persistence.json_product_store import JsonProductStore


def product_store(settings: Settings | None = None) -> JsonProductStore:
    settings = settings or get_settings()
    return JsonProductStore(settings.data_dir / "products.json")
