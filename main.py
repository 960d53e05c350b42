"""
Pregnancy Planner — Entry Point.

`python main.py` loads the published events and logs where the pregnancy
stands today plus the next few milestones.
"""

import asyncio
import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from planner.core.planner_service import PlannerService
from planner.data.db import SettingsDB

logger = logging.getLogger("planner")


async def main() -> None:
    service = PlannerService(settings_port=SettingsDB())
    await service.load_events()
    if service.status.error:
        logger.error("Startup load failed: %s", service.status.error)

    progress = service.progress()
    logger.info(
        "Week %d, Day %d · %s · month %s (%s)",
        progress.week_number,
        progress.day_of_week,
        progress.trimester,
        progress.pregnancy_month,
        progress.range_label,
    )
    for event in service.store.upcoming():
        logger.info("Upcoming: %s %s [%s]", event.date, event.title, event.type)


if __name__ == "__main__":
    asyncio.run(main())
