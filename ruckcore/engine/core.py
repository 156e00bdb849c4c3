"""Engine — the single owner of config, profiles, session and lifetime totals.

Every operation is synchronous bounded integer work. Persistence is
fire-and-forget through the optional KeyValueStore.
"""

from __future__ import annotations

import logging
from typing import Any

from ruckcore import storage
from ruckcore.config import Settings, settings as default_settings
from ruckcore.engine.applier import apply_patch
from ruckcore.engine.models import ConfigPatch, LifetimeTotalsResponse, RenderOutput
from ruckcore.engine.profiles import InvalidIndex
from ruckcore.engine.render import build_render_output
from ruckcore.engine.session import SessionReading, SessionTracker
from ruckcore.engine.state import EngineConfig, LifetimeTotals

logger = logging.getLogger(__name__)


class Engine:
    def __init__(
        self,
        config: EngineConfig | None = None,
        totals: LifetimeTotals | None = None,
        store: storage.KeyValueStore | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or default_settings
        self.config = config or EngineConfig()
        self.config.simulated_time_scale = self.settings.simulated_time_scale
        self.totals = totals or LifetimeTotals()
        self.store = store
        self.session = SessionTracker(
            self.totals,
            resample_interval_s=self.settings.resample_interval_s,
            max_speed_mmps=self.settings.max_speed_mmps,
            velocity_correction=self.settings.pandolf_velocity_correction,
        )
        self.heart_rate: int | None = None

    @classmethod
    def load(cls, store: storage.KeyValueStore, settings: Settings | None = None) -> Engine:
        """Build an engine from persisted records (defaults where absent)."""
        return cls(
            config=storage.load_settings(store),
            totals=storage.load_lifetime(store),
            store=store,
            settings=settings,
        )

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(self, now: int, day_steps: int | None = None) -> None:
        self.session.start(now, day_steps)

    def refresh(self, now: int, day_steps: int | None = None) -> SessionReading | None:
        return self.session.refresh(now, day_steps, self.config)

    def render(self, now: int, day_steps: int | None = None) -> RenderOutput | None:
        """Refresh and format; None before the first session starts."""
        reading = self.refresh(now, day_steps)
        if reading is None:
            return None
        return build_render_output(
            reading,
            self.config.profiles,
            now,
            self.settings.default_tz,
            clock_24h=self.settings.clock_24h,
            heart_rate=self.heart_rate,
        )

    def select_profile(self, index: int, now: int, day_steps: int | None = None) -> bool:
        """Switch profile and restart the session. An invalid index is ignored."""
        try:
            self.config.profiles.set_active(index)
        except InvalidIndex as exc:
            logger.warning("Profile selection ignored: %s", exc)
            return False
        logger.info("Active profile → %d (%s)", index, self.config.profiles.display_name(index))
        self._save_settings()
        self.start_session(now, day_steps)
        return True

    def commit(self, reason: str) -> bool:
        changed = self.session.commit(reason)
        if changed and self.store is not None:
            storage.save_lifetime(self.store, self.totals)
        return changed

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def apply_config(
        self,
        message: dict[str, Any] | ConfigPatch,
        now: int,
        day_steps: int | None = None,
    ) -> LifetimeTotalsResponse | None:
        """Apply a sparse configuration message.

        Returns the lifetime totals only when the message asks for them.
        """
        patch = message if isinstance(message, ConfigPatch) else ConfigPatch.model_validate(message)
        result = apply_patch(self.config, patch)
        self.config.profiles.normalize()

        switched = False
        if result.active_profile is not None and result.active_profile != self.config.profiles.active_index():
            switched = self.select_profile(result.active_profile, now, day_steps)
        if result.changed and not switched:
            self._save_settings()

        if result.request_lifetime_totals:
            return self.lifetime_response()
        return None

    def lifetime_response(self) -> LifetimeTotalsResponse:
        return LifetimeTotalsResponse(
            lifetime_distance_m=self.totals.distance_m,
            lifetime_calories=self.totals.calories_kcal,
        )

    def _save_settings(self) -> None:
        if self.store is not None:
            storage.save_settings(self.store, self.config)
