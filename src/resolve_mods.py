"""
MODRES - Command line entry point
Builds the mod catalog and resolves mod text lines.

Usage:
    python resolve_mods.py "+42 to maximum Life" "Adds 5 to 12 Physical Damage"
    python resolve_mods.py < mods.txt                # one mod line per input line
    python resolve_mods.py --stats-file stats.json   # local trade API stats dump
    python resolve_mods.py --check-prefixes          # verify prefix list ordering
"""

import sys
import os
import json
import logging
import argparse

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import APP_VERSION, LOG_FILE, LOG_LEVEL
from mod_catalog import build_catalog
from mod_errors import CatalogBuildError, ModLookupError
from mod_prefixes import find_order_violations, load_prefix_rules
from mod_resolver import ModResolver
from stats_source import StatsSource, definitions_from_stats, load_definitions

logger = logging.getLogger("modres")


def setup_logging(debug: bool = False):
    """Configure logging.

    Console (stderr) shows warnings only so results on stdout stay readable.
    --debug turns on DEBUG for both (bucket sizes, unmatched lines).
    """
    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if debug else logging.WARNING)
    console.setFormatter(logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S"))

    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG if debug else LOG_LEVEL)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else LOG_LEVEL)
    root_logger.addHandler(console)
    root_logger.addHandler(file_handler)


def check_prefixes() -> int:
    rules = load_prefix_rules()
    violations = find_order_violations(rules)
    for earlier, later in violations:
        print(f"line #{later.rank}: {later.literal!r} starts with {earlier.literal!r} (#{earlier.rank})")
    print(f"{len(rules)} prefixes, {len(violations)} ordering violation(s)")
    return 1 if violations else 0


def format_result(resolver: ModResolver, text: str) -> str:
    try:
        mod = resolver.resolve(text)
    except ModLookupError as e:
        return f"{text!r} → {type(e).__name__}: {e}"
    values = ", ".join(str(v) for v in mod.values)
    return f"{text!r} → {mod.template_id} ({mod.category.value}) [{values}]"


def main():
    parser = argparse.ArgumentParser(
        description=f"MODRES {APP_VERSION} - resolve item mod texts to trade stat ids",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python resolve_mods.py "+42 to maximum Life"
  python resolve_mods.py --stats-file stats.json < mods.txt
        """
    )
    parser.add_argument("texts", nargs="*", help="Mod lines (default: read from stdin)")
    parser.add_argument(
        "--stats-file", "-f",
        help="Trade API stats JSON to load instead of the cache/API",
    )
    parser.add_argument(
        "--check-prefixes",
        action="store_true",
        help="Check the prefix list ordering and exit",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    setup_logging(debug=args.debug)

    if args.check_prefixes:
        sys.exit(check_prefixes())

    if args.stats_file:
        with open(args.stats_file, "r", encoding="utf-8") as f:
            definitions = definitions_from_stats(json.load(f))
    else:
        definitions = load_definitions(StatsSource())
    if not definitions:
        logger.critical("No stat definitions available")
        sys.exit(1)

    try:
        catalog = build_catalog(definitions)
    except CatalogBuildError as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)
    resolver = ModResolver(catalog)

    texts = args.texts or (line.rstrip("\n") for line in sys.stdin)
    for text in texts:
        if text.strip():
            print(format_result(resolver, text))


if __name__ == "__main__":
    main()
