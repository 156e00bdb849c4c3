"""RuckCore runner — one cooperative task drives ticks and queued events.

Configuration messages, step telemetry and UI events are queued and
handled between ticks, so an update never interleaves with a refresh.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable

from ruckcore.config import settings
from ruckcore.engine.core import Engine
from ruckcore.engine.models import LifetimeTotalsResponse, RenderOutput
from ruckcore.storage import FileStore

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigMessage:
    payload: dict[str, Any]


@dataclass(frozen=True, slots=True)
class StepTelemetry:
    day_steps: int


@dataclass(frozen=True, slots=True)
class HeartRate:
    bpm: int | None


@dataclass(frozen=True, slots=True)
class SelectProfile:
    index: int


@dataclass(frozen=True, slots=True)
class BackNavigation:
    pass


Event = ConfigMessage | StepTelemetry | HeartRate | SelectProfile | BackNavigation


class EngineLoop:
    def __init__(
        self,
        engine: Engine,
        clock: Callable[[], int] = lambda: int(time.time()),
        tick_interval_s: float | None = None,
        on_render: Callable[[RenderOutput], None] | None = None,
        on_lifetime: Callable[[LifetimeTotalsResponse], None] | None = None,
    ):
        self.engine = engine
        self.clock = clock
        self.tick_interval_s = tick_interval_s if tick_interval_s is not None else settings.tick_interval_s
        self.on_render = on_render
        self.on_lifetime = on_lifetime
        self.day_steps: int | None = None
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._stopped = False

    def post(self, event: Event) -> None:
        self._queue.put_nowait(event)

    def stop(self) -> None:
        self._stopped = True

    def tick(self) -> RenderOutput | None:
        output = self.engine.render(self.clock(), self.day_steps)
        if output is not None and self.on_render is not None:
            self.on_render(output)
        return output

    def handle(self, event: Event) -> None:
        now = self.clock()
        if isinstance(event, ConfigMessage):
            response = self.engine.apply_config(event.payload, now, self.day_steps)
            if response is not None and self.on_lifetime is not None:
                self.on_lifetime(response)
        elif isinstance(event, StepTelemetry):
            self.day_steps = event.day_steps
        elif isinstance(event, HeartRate):
            self.engine.heart_rate = event.bpm
        elif isinstance(event, SelectProfile):
            self.engine.select_profile(event.index, now, self.day_steps)
        elif isinstance(event, BackNavigation):
            self.engine.commit("back")
            self.stop()
            return
        self.tick()

    async def _next_event(self, deadline: float) -> Event | None:
        """Next queued event, or None once the tick deadline has passed."""
        if not self._queue.empty():
            return self._queue.get_nowait()
        timeout = deadline - asyncio.get_running_loop().time()
        if timeout <= 0:
            return None
        try:
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    async def run(self, max_ticks: int | None = None) -> None:
        """Tick at the configured interval until stopped, then commit once.

        Queued events are drained before a due tick.
        """
        loop = asyncio.get_running_loop()
        self.engine.start_session(self.clock(), self.day_steps)
        ticks = 0
        next_tick = loop.time()
        try:
            while not self._stopped:
                event = await self._next_event(next_tick)
                if event is not None:
                    self.handle(event)
                    continue
                self.tick()
                ticks += 1
                next_tick += self.tick_interval_s
                if max_ticks is not None and ticks >= max_ticks:
                    break
        finally:
            self.engine.commit("shutdown")


def main() -> None:
    configure_logging()
    engine = Engine.load(FileStore(settings.storage_dir))

    def log_render(output: RenderOutput) -> None:
        logger.info(
            "%s  pace %s  dist %s  time %s  steps %d  kcal %d (%d/h)  walk %d (%d/h)  hr %s",
            output.time_label,
            output.pace_label,
            output.distance_label,
            output.elapsed_label,
            output.steps,
            output.kcal_total,
            output.kcal_per_hour,
            output.walk_kcal_total,
            output.walk_kcal_per_hour,
            output.heart_rate_label,
        )

    runner = EngineLoop(engine, on_render=log_render)
    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
