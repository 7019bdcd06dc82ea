"""OpenFoodFacts resolver implementation."""

from __future__ import annotations

import asyncio
import logging

import httpx

from allergen_lens.config import DEFAULT_RESOLVER_URL
from allergen_lens.resolvers.base import BaseResolver
from allergen_lens.schema import normalize_tag

SEARCH_PATH = "/cgi/search.pl"


class OpenFoodFactsResolver(BaseResolver):
    """Looks up allergen tags of the first matching OpenFoodFacts product."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str = DEFAULT_RESOLVER_URL,
        timeout_sec: float = 5.0,
    ):
        """Initialize OpenFoodFacts resolver.

        Args:
            client: Shared HTTP client. A short-lived client is opened per
                lookup when omitted.
            base_url: OpenFoodFacts host.
            timeout_sec: Upper bound for one lookup, including connect and read.
        """
        self.logger = logging.getLogger(__name__)
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec

    async def resolve(self, ingredient: str) -> frozenset[str] | None:
        try:
            payload = await asyncio.wait_for(self._search(ingredient), timeout=self.timeout_sec)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self.logger.warning("openfoodfacts lookup timed out for %r", ingredient)
            return None
        except httpx.HTTPError as exc:
            self.logger.warning("openfoodfacts lookup failed for %r: %s", ingredient, exc)
            return None
        except ValueError:
            self.logger.warning("openfoodfacts returned malformed JSON for %r", ingredient)
            return None
        except Exception as exc:
            self.logger.warning("openfoodfacts lookup failed for %r: %r", ingredient[:80], exc)
            return None

        return self._extract_tags(payload, ingredient)

    async def _search(self, ingredient: str) -> object:
        url = f"{self.base_url}{SEARCH_PATH}"
        params = {
            "search_terms": ingredient,
            "search_simple": "1",
            "action": "process",
            "json": "1",
        }
        if self.client is not None:
            response = await self.client.get(url, params=params, timeout=self.timeout_sec)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_sec) as client:
                response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    def _extract_tags(self, payload: object, ingredient: str) -> frozenset[str] | None:
        products = payload.get("products") if isinstance(payload, dict) else None
        if not isinstance(products, list) or not products:
            self.logger.debug("openfoodfacts has no product for %r", ingredient)
            return None

        first = products[0]
        raw_tags = first.get("allergens_tags") if isinstance(first, dict) else None
        if not isinstance(raw_tags, list):
            self.logger.debug("openfoodfacts product for %r carries no allergen tags", ingredient)
            return None

        tags = {normalize_tag(tag) for tag in raw_tags if isinstance(tag, str)}
        return frozenset(tag for tag in tags if tag)
