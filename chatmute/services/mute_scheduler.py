"""
ChatMute - Mute Scheduler Service
=================================

Background sweep that clears expired mutes and saves when anything changed.

DESIGN:
    Runs as an asyncio task ticking every MUTE_CHECK_INTERVAL seconds
    (30 by default). A tick never raises out of the loop: errors are
    logged and the next tick runs as usual. Stopping cancels the sleep;
    a sweep in progress is synchronous so it always completes first.
"""

import asyncio
from typing import Optional

from chatmute.core.constants import MUTE_CHECK_INTERVAL
from chatmute.core.logger import logger
from chatmute.services.mute_store import MuteStore
from chatmute.services.persistence import MutePersistence


# =============================================================================
# Mute Scheduler Service
# =============================================================================

class MuteScheduler:
    """
    Background service for mute expiration.

    Attributes:
        store: Mute store being swept.
        persistence: Saves the store after removals.
        interval: Seconds between sweeps.
        task: Background task reference.
        running: Whether the scheduler is active.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(
        self,
        store: MuteStore,
        persistence: MutePersistence,
        interval: float = MUTE_CHECK_INTERVAL,
    ) -> None:
        self.store = store
        self.persistence = persistence
        self.interval = interval
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """
        Start the sweep loop.

        Cancels any existing task before starting a new one.
        """
        if self.task and not self.task.done():
            self.task.cancel()

        self.running = True
        self.task = asyncio.create_task(self._scheduler_loop())

        logger.tree("Mute Scheduler Started", [
            ("Check Interval", f"{self.interval} seconds"),
            ("Status", "Running"),
        ], emoji="⏰")

    async def stop(self) -> None:
        """Stop the sweep loop."""
        self.running = False

        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        self.task = None
        logger.info("Mute Scheduler Stopped")

    # =========================================================================
    # Scheduler Loop
    # =========================================================================

    async def _scheduler_loop(self) -> None:
        """Sweep, then sleep, until stopped."""
        while self.running:
            try:
                self.sweep_once()
            except Exception as e:
                logger.error("Mute Scheduler Error", [
                    ("Error", str(e)[:100]),
                ])
            try:
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                break

    # =========================================================================
    # Mute Processing
    # =========================================================================

    def sweep_once(self) -> int:
        """
        Remove expired mutes and save if any were removed.

        Returns:
            Number of mutes removed.
        """
        removed = self.store.sweep_expired()
        if not removed:
            return 0

        saved = self.persistence.save()

        logger.tree("EXPIRED MUTES PROCESSED", [
            ("Removed", str(removed)),
            ("Remaining", str(len(self.store))),
            ("Saved", "Yes" if saved else "No"),
        ], emoji="⏰")

        return removed


__all__ = ["MuteScheduler"]
