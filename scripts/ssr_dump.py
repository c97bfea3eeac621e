#!/usr/bin/env python3
"""Preload resource keys and print the serialized cache.

Mimics what a server render does before injecting cache state into a
page: every key is fetched once into a fresh store, then the whole store
is serialized.  Useful for checking what a client would hydrate from.

Usage
-----
::

    export CACHINGFETCH_BASE_URL="http://localhost:3000"
    python scripts/ssr_dump.py /api/people /api/missing

Options::

    --base-url URL       Override CACHINGFETCH_BASE_URL
    --output FILE        Write the serialized cache to FILE instead of stdout
    --pretty             Indent the output (no longer byte-identical to serialize())
    --debug              Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from cachingfetch import CachingFetchClient, CachingFetchConfig  # noqa: E402


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Preload resource keys into a fresh cache and print its serialized form.",
    )
    parser.add_argument("keys", nargs="+", help="Resource keys (URLs) to preload")
    parser.add_argument("--base-url", help="Prefix for relative keys (overrides CACHINGFETCH_BASE_URL)")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides = {"base_url": args.base_url} if args.base_url else {}
    config = CachingFetchConfig.from_env(**overrides)

    async with CachingFetchClient(config) as client:
        await asyncio.gather(*(client.preload(key) for key in args.keys))
        result = client.encode()

    failed = {
        key: entry.failure
        for key in args.keys
        if (entry := client.store.get(key)) is not None and entry.failure is not None
    }
    for key, failure in failed.items():
        print(f"{key}: {failure.message}", file=sys.stderr)

    text = result.text
    if args.pretty:
        text = json.dumps(json.loads(text), indent=2, sort_keys=True, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Cache written to {args.output}", file=sys.stderr)
    else:
        print(text)

    if not result.ok:
        print(result.error, file=sys.stderr)
        return 2
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
