"""Rate-limited speed estimate from cumulative step counts."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

RESAMPLE_INTERVAL_S = 5
MAX_SPEED_MMPS = 5000


class SpeedEstimator:
    """Low-pass speed filter: resample at most once per interval, hold in between.

    Elapsed time is multiplied by ``time_scale`` so an accelerated clock
    (simulated steps) reaches the resample gate in fewer real seconds.
    """

    def __init__(
        self,
        resample_interval_s: int = RESAMPLE_INTERVAL_S,
        max_speed_mmps: int = MAX_SPEED_MMPS,
    ):
        self.resample_interval_s = resample_interval_s
        self.max_speed_mmps = max_speed_mmps
        self.last_time: int | None = None
        self.last_steps = 0
        self.speed_mmps = 0

    def reset(self) -> None:
        self.last_time = None
        self.last_steps = 0
        self.speed_mmps = 0

    def update(self, now: int, steps: int, stride_mm: int, time_scale: int = 1) -> int:
        """Feed a sample and return the current speed in mm/s."""
        if self.last_time is None:
            self.last_time = now
            self.last_steps = steps
            return self.speed_mmps

        scaled_elapsed = (now - self.last_time) * time_scale
        if scaled_elapsed >= self.resample_interval_s:
            delta_steps = max(0, steps - self.last_steps)
            speed = delta_steps * stride_mm // scaled_elapsed
            if speed > self.max_speed_mmps:
                logger.debug("Clamping speed %d mm/s to %d", speed, self.max_speed_mmps)
                speed = self.max_speed_mmps
            self.speed_mmps = max(speed, 0)
            self.last_time = now
            self.last_steps = steps
        return self.speed_mmps
