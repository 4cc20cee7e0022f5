from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import List, Optional

from dotenv import load_dotenv

from .core.scheduler import ShipScheduler
from .core.shipper import LogShipper
from .core.types import ShipperConfig


logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    ap = argparse.ArgumentParser(
        description="Ship buffered NDJSON log events to an ingestion server.",
        epilog="Unset options fall back to LOGSHIP_* environment variables (a .env file is loaded).",
    )
    ap.add_argument("--server-url", help="Ingestion server base URL (LOGSHIP_SERVER_URL)")
    ap.add_argument(
        "--buffer-base",
        help="Buffer base file name, e.g. logs/buffer; files are logs/buffer*.json (LOGSHIP_BUFFER_BASE)",
    )
    ap.add_argument("--api-key", help="Optional API key header value (LOGSHIP_API_KEY)")
    ap.add_argument("--batch-limit", type=int, help="Events per POST (LOGSHIP_BATCH_LIMIT, default 50)")
    ap.add_argument("--period", type=float, help="Seconds between ticks (LOGSHIP_PERIOD_SECONDS, default 2)")
    ap.add_argument("--timeout", type=float, help="HTTP timeout seconds (LOGSHIP_TIMEOUT_SECONDS, default 15)")
    ap.add_argument("--once", action="store_true", help="Drain what is buffered now, then exit")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = ShipperConfig.from_env(
            server_url=args.server_url,
            buffer_base_file_name=args.buffer_base,
            api_key=args.api_key or None,
            batch_posting_limit=args.batch_limit,
            period_seconds=args.period,
            timeout_seconds=args.timeout,
        )
    except ValueError as e:
        ap.error(f"invalid configuration: {e}")
    if config is None:
        ap.error("--server-url and --buffer-base are required (or set LOGSHIP_SERVER_URL / LOGSHIP_BUFFER_BASE)")

    shipper = LogShipper(config)
    try:
        if args.once:
            result = shipper.tick()
            logger.info(f"Shipped {result.events} event(s) in {result.batches} batch(es): {result.status.value}")
            return 0 if result.ok else 1

        scheduler = ShipScheduler(shipper.tick, config.period_seconds)
        stop = threading.Event()

        def _on_signal(signum, frame) -> None:
            logger.info(f"Received signal {signum}; shutting down")
            stop.set()

        signal.signal(signal.SIGINT, _on_signal)
        signal.signal(signal.SIGTERM, _on_signal)

        scheduler.start()
        try:
            while not stop.wait(1.0):
                pass
        finally:
            scheduler.shutdown()
        return 0
    finally:
        shipper.uploader.close()


if __name__ == "__main__":
    raise SystemExit(main())
