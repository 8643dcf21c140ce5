"""Time-accumulator play loop driving a SnakeGame."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from .engine import SnakeGame
from .milestones import MilestoneMessageService, default_message
from .state import GameState, Status

logger = logging.getLogger(__name__)

Publisher = Callable[[dict[str, Any]], Awaitable[None]]

MILESTONE_LEVELS = {
    Status.EXPLODING_10: 10,
    Status.EXPLODING_20: 20,
}


class PlayLoop:
    """Runs the simulation for one session.

    Every frame the loop checks whether the score-derived tick interval has
    elapsed since the last tick and, if so, performs exactly one tick. Status
    changes trigger side effects: a milestone pause that resumes on a timer,
    a fire-and-forget flavor text lookup, and the game over message.
    """

    def __init__(
        self,
        game: SnakeGame,
        publish: Publisher,
        milestones: Optional[MilestoneMessageService] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.game = game
        self.publish = publish
        self.milestones = milestones or MilestoneMessageService(model=game.config.milestone_model)
        self.clock = clock
        self.milestone_text: str = ""
        self.last_update: float = clock()
        self.running: bool = False
        self._explosion_task: Optional[asyncio.Task] = None
        self._lookup_task: Optional[asyncio.Task] = None

    def is_due(self, now: float) -> bool:
        """True when more than the current tick interval has passed since the last tick."""
        return (now - self.last_update) * 1000.0 > self.game.interval_ms

    async def advance(self, now: Optional[float] = None) -> bool:
        """Run one frame of the loop.

        Args:
            now: Current clock reading in seconds (defaults to ``self.clock()``)

        Returns:
            True if a tick was performed
        """
        if now is None:
            now = self.clock()

        # Ticks are suspended outside PLAYING (milestone pause, game over)
        if self.game.status != Status.PLAYING or not self.is_due(now):
            return False

        state = self.game.step()
        self.last_update = now

        if state.status == Status.GAME_OVER:
            await self.publish({
                "type": "game_over",
                "state": state.to_dict(),
                "final_score": state.score,
            })
        elif state.status.is_exploding:
            await self._start_milestone(state)
        else:
            await self.publish_state(state)

        return True

    async def run(self) -> None:
        """Loop until the game is over or the loop is stopped."""
        self.running = True
        self.last_update = self.clock()
        frame_seconds = self.game.config.frame_interval_ms / 1000.0
        try:
            while self.running and not self.game.game_over:
                await self.advance()
                await asyncio.sleep(frame_seconds)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Play loop error")
        finally:
            self.running = False

    async def stop(self) -> None:
        """Stop the loop and cancel any pending milestone work."""
        self.running = False
        for task in (self._explosion_task, self._lookup_task):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._explosion_task = None
        self._lookup_task = None

    async def publish_state(self, state: Optional[GameState] = None) -> None:
        state = state or self.game.get_state()
        await self.publish({
            "type": "state_update",
            "state": state.to_dict(),
            "interval_ms": self.game.interval_ms,
            "milestone_text": self.milestone_text,
        })

    async def _start_milestone(self, state: GameState) -> None:
        level = MILESTONE_LEVELS[state.status]
        self.milestone_text = default_message(level)
        logger.info("Milestone %d reached", level)

        self._explosion_task = asyncio.create_task(self._resume_after_explosion(state.status))
        self._lookup_task = asyncio.create_task(self._lookup_message(level))

        await self.publish_state(state)
        await self.publish({"type": "milestone", "level": level, "text": self.milestone_text})

    async def _resume_after_explosion(self, status: Status) -> None:
        await asyncio.sleep(self.game.config.explosion_duration_ms / 1000.0)
        if not self.game.finish_explosion(status):
            return
        self.last_update = self.clock()
        try:
            await self.publish_state()
        except Exception as e:
            logger.warning("Could not publish state after milestone: %s", e)

    async def _lookup_message(self, level: int) -> None:
        text = await self.milestones.get_milestone_message(level)
        if text == self.milestone_text:
            return
        self.milestone_text = text
        if not self.game.status.is_exploding:
            return
        try:
            await self.publish({"type": "milestone", "level": level, "text": text})
        except Exception as e:
            logger.warning("Could not publish milestone text: %s", e)
