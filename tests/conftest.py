"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest

from ruckcore.config import Settings
from ruckcore.engine.core import Engine
from ruckcore.engine.profiles import Profile, ProfileStore
from ruckcore.engine.state import EngineConfig, LifetimeTotals
from ruckcore.storage import MemoryStore

T0 = 1_771_156_800  # 2026-02-15 12:00:00 UTC


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeClock:
    """Deterministic integer clock; advance() moves it forward."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> int:
        self.now += seconds
        return self.now


def make_config(
    weight_value: int = 800,
    ruck_weight_value: int = 136,
    terrain_factor: int = 100,
    grade_percent: int = 0,
    sim_steps_enabled: bool = True,
    sim_steps_spm: int = 122,
    **overrides,
) -> EngineConfig:
    """80.0 kg walker, 13.6 kg ruck, 78.0 cm stride unless overridden."""
    profiles = ProfileStore(
        profiles=[
            Profile(ruck_weight_value=ruck_weight_value, terrain_factor=terrain_factor, grade_percent=grade_percent),
            Profile(ruck_weight_value=80, terrain_factor=120),
            Profile(ruck_weight_value=120, terrain_factor=150),
        ]
    )
    fields = dict(
        weight_value=weight_value,
        stride_value=780,
        sim_steps_enabled=sim_steps_enabled,
        sim_steps_spm=sim_steps_spm,
        profiles=profiles,
    )
    fields.update(overrides)
    return EngineConfig(**fields)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        default_tz="UTC",
        clock_24h=True,
        simulated_time_scale=10,
        resample_interval_s=5,
        max_speed_mmps=5000,
        pandolf_velocity_correction=True,
    )


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def engine(test_settings, memory_store) -> Engine:
    return Engine(
        config=make_config(),
        totals=LifetimeTotals(),
        store=memory_store,
        settings=test_settings,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
