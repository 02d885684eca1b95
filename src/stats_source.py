"""
MODRES - Stats Source
Raw mod template definitions from the trade API static data.

Fetches stat definitions (GET /api/trade/data/stats), caches them to disk for
24h, and converts them into the {category: [(id, text)]} mapping the template
store loads. Falls back to an expired cache when the API is unreachable.
"""

import json
import time
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import requests

from config import (
    TRADE_STATS_URL,
    TRADE_STATS_CACHE_FILE,
    STATS_CACHE_MAX_AGE,
    STATS_REQUEST_TIMEOUT,
    USER_AGENT,
)
from mod_templates import ModCategory

logger = logging.getLogger(__name__)


def definitions_from_stats(data: dict) -> Dict[str, List[Tuple[str, str]]]:
    """Convert a trade API stats payload to {category: [(id, text), ...]}.

    The payload looks like:
        {"result": [{"label": "Explicit", "entries": [
            {"id": "explicit.stat_3299347043", "text": "+# to maximum Life", "type": "explicit"},
        ]}]}

    The category comes from the stat ID prefix ("explicit.stat_..."), or the
    group label when the ID has none. Groups the catalog doesn't model
    (fractured, veiled, ...) are skipped.
    """
    known = {c.value for c in ModCategory}
    definitions: Dict[str, List[Tuple[str, str]]] = {}
    seen = set()
    skipped = 0

    for group in data.get("result", []):
        group_label = group.get("label", "")
        for entry in group.get("entries", []):
            stat_id = entry.get("id", "")
            stat_text = entry.get("text", "")
            if not stat_id or not stat_text:
                continue

            category = stat_id.split(".")[0] if "." in stat_id else group_label.lower()
            if category not in known:
                skipped += 1
                continue

            if (stat_id, stat_text) in seen:
                continue
            seen.add((stat_id, stat_text))
            definitions.setdefault(category, []).append((stat_id, stat_text))

    if skipped:
        logger.debug(f"Skipped {skipped} stats of unsupported categories")
    return definitions


class StatsSource:
    """
    Stat definitions from disk cache or the trade API.

    Usage:
        source = StatsSource()
        data = source.load()   # raw payload, or None if unavailable
    """

    def __init__(self, cache_file: Path = TRADE_STATS_CACHE_FILE, url: str = TRADE_STATS_URL,
                 max_age: int = STATS_CACHE_MAX_AGE, session: Optional[requests.Session] = None):
        self.cache_file = Path(cache_file)
        self.url = url
        self.max_age = max_age
        self._session = session or requests.Session()

    def load(self) -> Optional[dict]:
        """Fresh disk cache, else the API, else a stale disk cache."""
        data = self._load_from_disk()
        if data is not None:
            return data

        data = self._fetch_from_api()
        if data is not None:
            return data

        data = self._load_from_disk(allow_stale=True)
        if data is None:
            logger.warning("StatsSource: no stat definitions available")
        return data

    def _load_from_disk(self, allow_stale: bool = False) -> Optional[dict]:
        """Load cached stat definitions from disk."""
        try:
            if not self.cache_file.exists():
                return None

            age = time.time() - self.cache_file.stat().st_mtime
            if age > self.max_age and not allow_stale:
                logger.debug("Stats cache expired, will re-fetch")
                return None

            with open(self.cache_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            if allow_stale and age > self.max_age:
                logger.warning(f"StatsSource: using stale stats cache ({age / 3600:.1f}h old)")
            else:
                logger.info(f"StatsSource: loaded stats from disk cache {self.cache_file}")
            return data
        except (OSError, ValueError) as e:
            logger.warning(f"StatsSource: disk cache load failed: {e}")
            return None

    def _fetch_from_api(self) -> Optional[dict]:
        """Fetch stat definitions from the trade API and refresh the disk cache."""
        try:
            logger.info("StatsSource: fetching stat definitions from trade API...")
            resp = self._session.get(
                self.url,
                timeout=STATS_REQUEST_TIMEOUT,
                headers={"User-Agent": USER_AGENT},
            )
            if resp.status_code != 200:
                logger.warning(f"StatsSource: trade stats API returned HTTP {resp.status_code}")
                return None
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"StatsSource: API fetch failed: {e}")
            return None

        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, "w", encoding="utf-8") as f:
                json.dump(data, f)
        except OSError as e:
            logger.warning(f"StatsSource: could not write stats cache: {e}")

        return data


def load_definitions(source: StatsSource) -> Dict[str, List[Tuple[str, str]]]:
    """Raw definitions from a StatsSource ({} when nothing could be loaded)."""
    data = source.load()
    if data is None:
        return {}
    definitions = definitions_from_stats(data)
    total = sum(len(entries) for entries in definitions.values())
    logger.info(f"StatsSource: {total} stat definitions in {len(definitions)} categories")
    return definitions
