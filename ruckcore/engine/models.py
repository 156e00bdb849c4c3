"""Message contracts at the engine boundary — Pydantic v2 models.

ConfigPatch is a sparse update: every field is optional and only present
fields are applied. A malformed field is dropped on its own; the rest of
the message still applies.
"""

from __future__ import annotations

import logging
import re
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from ruckcore.engine.profiles import TerrainType

logger = logging.getLogger(__name__)

UnitTag = Annotated[int, Field(ge=0, le=1)]
ProfileName = Annotated[str, StringConstraints(strip_whitespace=True)]

_PROFILE_KEY = re.compile(r"profile(\d+)_(\w+)")


class _SparseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_malformed(cls, value: Any, handler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.warning("Dropping malformed config field %s=%r", info.field_name, value)
            return None


class ProfilePatch(_SparseModel):
    ruck_weight_value: int | None = None
    terrain_factor: int | None = None
    terrain_type: TerrainType | None = None
    grade_percent: int | None = None
    name: ProfileName | None = None


class ConfigPatch(_SparseModel):
    weight_value: int | None = None
    weight_unit: UnitTag | None = None
    ruck_weight_unit: UnitTag | None = None
    stride_length_value: int | None = None
    stride_length_unit: UnitTag | None = None
    sim_steps_enabled: bool | None = None
    sim_steps_spm: Annotated[int, Field(ge=0)] | None = None
    active_profile: int | None = None
    request_lifetime_totals: bool | None = None
    profiles: dict[int, ProfilePatch] | None = None  # keyed by 0-based slot

    @model_validator(mode="before")
    @classmethod
    def _group_profile_keys(cls, data: Any) -> Any:
        """Fold flat ``profileN_field`` message keys into per-slot patches."""
        if not isinstance(data, dict):
            return data
        flat = dict(data)
        grouped: dict[int, dict[str, Any]] = {}
        for key in list(flat):
            match = _PROFILE_KEY.fullmatch(str(key))
            if match is None:
                continue
            slot = int(match.group(1)) - 1
            grouped.setdefault(slot, {})[match.group(2)] = flat.pop(key)
        if grouped:
            flat["profiles"] = grouped
        return flat

    def present_fields(self) -> set[str]:
        return {name for name, value in self if value is not None}


class RenderOutput(BaseModel):
    """Values the presentation layer draws on every tick."""

    time_label: str
    pace_label: str  # "12:34/km" or "--:--/km"
    pace_value: str  # "12:34" or "--:--"
    distance_label: str  # "1.23km"
    elapsed_label: str  # "m:ss", minutes unbounded
    steps: int = 0
    steps_day_total: int = 0
    kcal_per_hour: int = 0
    kcal_total: int = 0
    walk_kcal_per_hour: int = 0
    walk_kcal_total: int = 0
    heart_rate_label: str = "--"
    profile_name: str = ""
    terrain_label: str = ""


class LifetimeTotalsResponse(BaseModel):
    lifetime_distance_m: int = Field(ge=0)
    lifetime_calories: int = Field(ge=0)
