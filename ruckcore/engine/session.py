"""Session tracking: NotStarted → Active → Committed.

A session starts at launch and on every profile switch. Its totals are
folded into the lifetime counters exactly once, however many times commit
is invoked (back navigation followed by shutdown, for example).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ruckcore.engine import metabolic
from ruckcore.engine.speed import MAX_SPEED_MMPS, RESAMPLE_INTERVAL_S, SpeedEstimator
from ruckcore.engine.state import EngineConfig, LifetimeTotals
from ruckcore.engine.units import distance_unit

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    not_started = "not_started"
    active = "active"
    committed = "committed"


@dataclass(frozen=True, slots=True)
class SessionReading:
    elapsed_s: int  # scaled by the time-acceleration factor
    steps: int
    steps_day_total: int
    distance_mm: int
    speed_mmps: int
    pace_s: int | None  # seconds per km/mi; None before any distance
    unit_mm: int
    unit_label: str
    kcal_per_hour: int
    kcal_total: int
    walk_kcal_per_hour: int
    walk_kcal_total: int


class SessionTracker:
    def __init__(
        self,
        totals: LifetimeTotals,
        resample_interval_s: int = RESAMPLE_INTERVAL_S,
        max_speed_mmps: int = MAX_SPEED_MMPS,
        velocity_correction: bool = True,
    ):
        self.totals = totals
        self.speed = SpeedEstimator(resample_interval_s, max_speed_mmps)
        self.velocity_correction = velocity_correction
        self.status = SessionStatus.not_started
        self.start_time = 0
        self.steps_baseline: int | None = None
        self.distance_mm = 0
        self.calories_kcal = 0
        self.last_reading: SessionReading | None = None

    @property
    def active(self) -> bool:
        return self.status == SessionStatus.active

    def start(self, now: int, day_steps: int | None = None) -> None:
        """Begin a fresh session; an in-progress one is discarded, not committed."""
        self.start_time = now
        self.steps_baseline = day_steps
        self.speed.reset()
        self.distance_mm = 0
        self.calories_kcal = 0
        self.last_reading = None
        self.status = SessionStatus.active
        logger.info("Session started at %d (step baseline %s)", now, day_steps)

    def refresh(self, now: int, day_steps: int | None, config: EngineConfig) -> SessionReading | None:
        """Recompute the session from the clock and cumulative day steps.

        Outside the Active state the last reading is returned unchanged.
        """
        if not self.active:
            return self.last_reading

        scale = config.time_scale_factor
        elapsed_s = max(1, now - self.start_time) * scale

        if self.steps_baseline is None and day_steps is not None:
            self.steps_baseline = day_steps
        baseline = self.steps_baseline or 0

        if config.sim_steps_enabled:
            steps = elapsed_s * config.sim_steps_spm // 60
            steps_day_total = baseline + steps
        elif day_steps is not None:
            steps = max(0, day_steps - baseline)
            steps_day_total = max(0, day_steps)
        else:
            steps = 0
            steps_day_total = 0

        stride_mm = config.stride_mm()
        distance_mm = steps * stride_mm
        speed_mmps = self.speed.update(now, steps, stride_mm, scale)

        unit_mm, unit_label = distance_unit(config.use_imperial)
        pace_s = elapsed_s * unit_mm // distance_mm if distance_mm > 0 else None

        profile = config.profiles.active_profile()
        mass = config.body_mass_kg1000()
        metabolic_mw = metabolic.pandolf_metabolic_mw(
            mass,
            config.load_kg1000(),
            speed_mmps,
            profile.grade_percent,
            profile.terrain_factor,
            velocity_correction=self.velocity_correction,
        )
        kcal_per_hour = metabolic.pandolf_kcal_per_hour(metabolic_mw)
        walk_kcal_per_hour = metabolic.walking_kcal_per_hour(mass, speed_mmps, profile.grade_percent)

        reading = SessionReading(
            elapsed_s=elapsed_s,
            steps=steps,
            steps_day_total=steps_day_total,
            distance_mm=distance_mm,
            speed_mmps=speed_mmps,
            pace_s=pace_s,
            unit_mm=unit_mm,
            unit_label=unit_label,
            kcal_per_hour=kcal_per_hour,
            kcal_total=metabolic.kcal_over(kcal_per_hour, elapsed_s),
            walk_kcal_per_hour=walk_kcal_per_hour,
            walk_kcal_total=metabolic.kcal_over(walk_kcal_per_hour, elapsed_s),
        )
        self.distance_mm = reading.distance_mm
        self.calories_kcal = reading.kcal_total
        self.last_reading = reading
        logger.debug("Session refresh: %s", reading)
        return reading

    def commit(self, reason: str) -> bool:
        """Fold session totals into the lifetime counters once.

        Lifetime distance is kept in whole meters, so the sub-meter remainder
        is dropped and a session under 1 m with no calories adds nothing.
        Returns True only when the lifetime totals changed.
        """
        if self.status == SessionStatus.committed:
            logger.debug("Commit (%s) ignored: session already committed", reason)
            return False

        distance_m = max(0, self.distance_mm // 1000)
        calories = max(0, self.calories_kcal)
        self.status = SessionStatus.committed

        if distance_m == 0 and calories == 0:
            logger.info("Session committed (%s) with nothing to add", reason)
            return False

        self.totals.add(distance_m, calories)
        logger.info(
            "Session committed (%s): +%d m, +%d kcal → lifetime %d m, %d kcal",
            reason,
            distance_m,
            calories,
            self.totals.distance_m,
            self.totals.calories_kcal,
        )
        return True
