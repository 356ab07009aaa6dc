"""Mark confirmed reservations whose stay has ended as completed.

Meant to be run once a day from cron or a scheduler:
    python -m scripts.complete_stays [--today YYYY-MM-DD]
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from staylocal.database import async_session_factory, engine
from staylocal.services.reservation_service import complete_finished_stays

logger = logging.getLogger("scripts.complete_stays")


async def run(today: date) -> int:
    async with async_session_factory() as session:
        try:
            completed = await complete_finished_stays(session, today)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    await engine.dispose()
    return len(completed)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser(description="Complete finished stays")
    parser.add_argument("--today", type=date.fromisoformat, default=date.today())
    args = parser.parse_args()

    count = asyncio.run(run(args.today))
    logger.info("%d reservation(s) completed", count)


if __name__ == "__main__":
    main()
