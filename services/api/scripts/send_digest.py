#!/usr/bin/env python3
"""Digest job for an external scheduler (cron, container job).

Use this instead of the in-process scheduler (DIGEST_SCHEDULER_ENABLED=false)
when the API runs with several replicas and no Redis.

Behavior:
- Without DIGEST_FREQUENCY: send whatever digest is due today
  (weekly on Sundays, monthly on the last day of the month)
- With DIGEST_FREQUENCY=Weekly|Monthly: force that digest for the window
  ending at the next midnight UTC

Run (local / cron):
  cd services/api
  python -m scripts.send_digest

Optional env vars:
  DIGEST_FREQUENCY="Weekly"
"""

import asyncio
import logging
import os
import sys
from dataclasses import asdict
from datetime import datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sharenow.services.digest import run_due_digests, send_digest  # noqa: E402
from sharenow.services.notifier import TeamsNotifier  # noqa: E402
from sharenow.services.teams import DIGEST_FREQUENCIES, DIGEST_FREQUENCY_WEEKLY  # noqa: E402
from sharenow.stores.postgres import close_db, init_db, ping_db  # noqa: E402
from sharenow.stores.redis import close_redis, init_redis  # noqa: E402

logger = logging.getLogger("uvicorn.error")


def _forced_window(frequency: str, now: datetime) -> tuple[datetime, datetime]:
    end = datetime.combine((now + timedelta(days=1)).date(), datetime.min.time(), tzinfo=timezone.utc)
    if frequency == DIGEST_FREQUENCY_WEEKLY:
        return end - timedelta(days=7), end
    return end - relativedelta(months=1), end


async def main() -> None:
    # Initialize shared connections (same as API lifespan, but for a one-off run)
    await init_db()
    await ping_db()
    try:
        await init_redis()
    except Exception:
        # Runs unguarded without Redis; fine for a single scheduled job.
        logger.warning("Redis init failed, digest windows are not locked", exc_info=True)

    try:
        notifier = TeamsNotifier.from_settings()
        frequency = os.getenv("DIGEST_FREQUENCY", "").strip().capitalize()

        if frequency:
            if frequency not in DIGEST_FREQUENCIES:
                raise SystemExit(f"DIGEST_FREQUENCY must be one of {DIGEST_FREQUENCIES}")
            start, end = _forced_window(frequency, datetime.now(timezone.utc))
            results = [await send_digest(start, end, frequency, notifier)]
        else:
            results = await run_due_digests(notifier)

        # Final output for job logs (single JSON-ish blob)
        print({"ok": True, "runs": [asdict(r) for r in results]})
    finally:
        await close_redis()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
