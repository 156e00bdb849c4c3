"""Ruck profiles: three carry presets (load, terrain, grade) plus the active slot.

Terrain factors are bucketed so only a handful of terrain "feels" are ever
in effect: ≤110 → 1.00, ≤125 → 1.20, ≤140 → 1.30, else 1.50.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ruckcore.engine.fixed_point import tdiv

PROFILE_COUNT = 3
PROFILE_NAME_MAX_LEN = 32


class InvalidIndex(ValueError):
    """Profile slot outside [0, PROFILE_COUNT)."""


class TerrainType(str, Enum):
    road = "road"
    gravel = "gravel"
    mixed = "mixed"
    sand = "sand"
    snow = "snow"


TERRAIN_FACTOR_BY_TYPE: dict[TerrainType, int] = {
    TerrainType.road: 100,
    TerrainType.gravel: 120,
    TerrainType.mixed: 130,
    TerrainType.sand: 150,
    TerrainType.snow: 150,
}

TERRAIN_LABEL_BY_TYPE: dict[TerrainType, str] = {
    TerrainType.road: "Road",
    TerrainType.gravel: "Gravel",
    TerrainType.mixed: "Mixed",
    TerrainType.sand: "Sand",
    TerrainType.snow: "Snow",
}

TERRAIN_LABEL_BY_FACTOR: dict[int, str] = {
    100: "Road",
    120: "Gravel",
    130: "Mixed",
    150: "Sand",
}

# Shown when slot 0/1 has no custom name
BUILTIN_NAMES: dict[int, str] = {
    0: "Two Mabels, offroad",
    1: "One Mabel, roads and tracks",
}


def normalize_terrain_factor(raw_hundredths: int) -> int:
    if raw_hundredths <= 110:
        return 100
    if raw_hundredths <= 125:
        return 120
    if raw_hundredths <= 140:
        return 130
    return 150


def terrain_factor_for_type(terrain_type: TerrainType | str | None) -> int:
    """Factor for a terrain category; unknown categories count as mixed."""
    try:
        return TERRAIN_FACTOR_BY_TYPE[TerrainType(terrain_type)]
    except ValueError:
        return TERRAIN_FACTOR_BY_TYPE[TerrainType.mixed]


def _tenths(value: int, digits: int = 1) -> str:
    """Fixed-point integer → "12.3" style text (sign kept on the whole part)."""
    scale = 10**digits
    whole = tdiv(value, scale)
    return f"{whole}.{abs(value) % scale:0{digits}d}"


@dataclass(slots=True)
class Profile:
    ruck_weight_value: int  # tenths
    terrain_factor: int = 100  # hundredths
    grade_percent: int = 0  # tenths of a percent
    name: str = ""
    terrain_type: TerrainType | None = None


def default_profiles() -> list[Profile]:
    return [
        Profile(ruck_weight_value=136, terrain_factor=normalize_terrain_factor(200), name=BUILTIN_NAMES[0]),
        Profile(ruck_weight_value=80, terrain_factor=100, name=BUILTIN_NAMES[1]),
        Profile(ruck_weight_value=120, terrain_factor=150),
    ]


@dataclass
class ProfileStore:
    profiles: list[Profile] = field(default_factory=default_profiles)
    active: int = 0

    def active_index(self) -> int:
        """Stored index, or 0 when it does not name a valid slot. Never raises."""
        if 0 <= self.active < len(self.profiles):
            return self.active
        return 0

    def active_profile(self) -> Profile:
        return self.profiles[self.active_index()]

    def set_active(self, index: int) -> None:
        if not 0 <= index < len(self.profiles):
            raise InvalidIndex(f"Profile index {index} outside 0..{len(self.profiles) - 1}")
        self.active = index

    def get(self, index: int) -> Profile | None:
        if 0 <= index < len(self.profiles):
            return self.profiles[index]
        return None

    def set_name(self, index: int, name: str | None) -> None:
        """Store a custom name, trimmed to PROFILE_NAME_MAX_LEN UTF-8 bytes.

        The cut lands on a character boundary so the stored record decodes
        back to the same string. Out-of-range is ignored.
        """
        profile = self.get(index)
        if profile is None:
            return
        raw = (name or "").encode("utf-8")[:PROFILE_NAME_MAX_LEN]
        profile.name = raw.decode("utf-8", errors="ignore")

    def normalize(self) -> None:
        for profile in self.profiles:
            profile.terrain_factor = normalize_terrain_factor(profile.terrain_factor)

    def display_name(self, index: int) -> str:
        profile = self.get(index)
        if profile is not None and profile.name:
            return profile.name
        if index in BUILTIN_NAMES:
            return BUILTIN_NAMES[index]
        return f"Profile {index + 1}"

    def terrain_label(self, index: int) -> str:
        """Explicit terrain category wins over the numeric bucket."""
        profile = self.get(index)
        if profile is None:
            return ""
        if profile.terrain_type is not None:
            return TERRAIN_LABEL_BY_TYPE[profile.terrain_type]
        bucket = normalize_terrain_factor(profile.terrain_factor)
        return TERRAIN_LABEL_BY_FACTOR[bucket]

    def summary(self, index: int) -> tuple[str, str, str]:
        """(load, terrain, grade) as menu text, e.g. ("13.6", "1.50", "0.0")."""
        profile = self.get(index)
        if profile is None:
            return ("", "", "")
        return (
            _tenths(profile.ruck_weight_value),
            _tenths(profile.terrain_factor, digits=2),
            _tenths(profile.grade_percent),
        )
