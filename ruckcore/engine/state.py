"""Mutable engine state, owned by an Engine instance, never module-global."""

from __future__ import annotations

from dataclasses import dataclass, field

from ruckcore.engine.fixed_point import saturating_add
from ruckcore.engine.profiles import ProfileStore
from ruckcore.engine.units import Unit, length_to_mm, mass_to_kg1000


@dataclass
class EngineConfig:
    weight_value: int = 800  # tenths
    weight_unit: int = Unit.metric
    ruck_weight_unit: int = Unit.metric
    stride_value: int = 780  # tenths
    stride_unit: int = Unit.metric
    sim_steps_enabled: bool = True
    sim_steps_spm: int = 122
    profiles: ProfileStore = field(default_factory=ProfileStore)
    simulated_time_scale: int = 10  # Not persisted; comes from Settings

    @property
    def time_scale_factor(self) -> int:
        return self.simulated_time_scale if self.sim_steps_enabled else 1

    @property
    def use_imperial(self) -> bool:
        """Display units follow the body-mass unit."""
        return self.weight_unit == Unit.imperial

    def body_mass_kg1000(self) -> int:
        return mass_to_kg1000(self.weight_value, self.weight_unit)

    def load_kg1000(self) -> int:
        return mass_to_kg1000(self.profiles.active_profile().ruck_weight_value, self.ruck_weight_unit)

    def stride_mm(self) -> int:
        return length_to_mm(self.stride_value, self.stride_unit)


@dataclass
class LifetimeTotals:
    distance_m: int = 0
    calories_kcal: int = 0

    def add(self, distance_m: int, calories_kcal: int) -> None:
        self.distance_m = saturating_add(self.distance_m, distance_m)
        self.calories_kcal = saturating_add(self.calories_kcal, calories_kcal)
