"""Print a rewind summary as JSON.

Usage: python -m rewind --period week [--source sql|rest]
"""

import argparse
import asyncio
import json
import sys

from rewind.aggregator.pipeline import run_rewind
from rewind.core.logging import get_logger, setup_logging
from rewind.core.settings import get_settings
from rewind.core.time import Period


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Build a Crackd rewind digest")
    ap.add_argument("--period", choices=[p.value for p in Period], default=Period.WEEK.value)
    ap.add_argument("--source", choices=["sql", "rest"], default=None,
                    help="data source (defaults to REWIND_DATA_SOURCE)")
    ap.add_argument("--compact", action="store_true", help="single-line JSON")
    args = ap.parse_args(argv)

    setup_logging("rewind")
    logger = get_logger("rewind.cli")

    settings = get_settings()
    if args.source:
        settings = settings.model_copy(update={"data_source": args.source})

    summary = asyncio.run(run_rewind(args.period, settings=settings))
    logger.info(f"Rewind ready: {summary.total_captions} captions")

    json.dump(summary.to_dict(), sys.stdout, indent=None if args.compact else 2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
