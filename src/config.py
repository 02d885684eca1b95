"""
MODRES (Mod Resolver) - Configuration
All tunable constants in one place.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

# ─────────────────────────────────────────────
# Paths
# ─────────────────────────────────────────────
APP_DIR = Path(__file__).resolve().parent.parent
RESOURCES_DIR = APP_DIR / "resources"

# ─────────────────────────────────────────────
# Version
# ─────────────────────────────────────────────
_version_file = RESOURCES_DIR / "VERSION"
APP_VERSION = _version_file.read_text().strip() if _version_file.exists() else "dev"

# ─────────────────────────────────────────────
# Trade API (static stat definitions)
# ─────────────────────────────────────────────
TRADE_API_BASE = os.environ.get("MODRES_TRADE_API_BASE", "https://www.pathofexile.com/api/trade")
TRADE_STATS_URL = f"{TRADE_API_BASE}/data/stats"
USER_AGENT = f"MODRES/{APP_VERSION}"
STATS_REQUEST_TIMEOUT = 15  # seconds

# Local cache directory
CACHE_DIR = Path(os.environ.get(
    "MODRES_CACHE_DIR",
    Path(os.path.expanduser("~")) / ".modres" / "cache",
))
TRADE_STATS_CACHE_FILE = CACHE_DIR / "trade_stats.json"
STATS_CACHE_MAX_AGE = 86400  # 24 hours

# ─────────────────────────────────────────────
# Mod Templates
# ─────────────────────────────────────────────
# Marker standing for "a number goes here" in template texts,
# e.g. "Adds # to # Physical Damage"
PLACEHOLDER_MARKER = "#"

# Curated literal prefixes used to shard the catalog into buckets.
# Order matters: see the header of the file.
MOD_TEXT_PREFIXES_FILE = RESOURCES_DIR / "mod_text_prefixes.txt"

# Tie-break between templates of different categories matching the same text,
# most specific first. An explicit roll should never be reported as a pseudo
# aggregate of the same wording.
_DEFAULT_CATEGORY_PRIORITY = "explicit,crafted,enchant,implicit,pseudo"
CATEGORY_PRIORITY = tuple(
    name.strip().lower()
    for name in os.environ.get("MODRES_CATEGORY_PRIORITY", _DEFAULT_CATEGORY_PRIORITY).split(",")
    if name.strip()
)

# ─────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────
LOG_LEVEL = os.environ.get("MODRES_LOG_LEVEL", "INFO")
LOG_FILE = Path(os.path.expanduser("~")) / ".modres" / "modres.log"
