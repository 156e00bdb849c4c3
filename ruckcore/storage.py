"""Durable key/value records for settings and lifetime totals.

Settings record (key 1), little-endian, fixed layout:
  8 × int32   weight, weight unit, ruck unit, stride, stride unit,
              sim steps enabled, sim steps/min, active profile
  3 × 3 int32 per profile: ruck weight, terrain factor, grade
  3 × 33s     profile names (NUL padded, UTF-8)
  3 × 8s      terrain types (NUL padded, empty = none)

Lifetime totals live in two separate int32 records (keys 2 and 3).
Storage failures are logged and never propagate; the engine keeps running
on its in-memory state.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Protocol

from ruckcore.engine.profiles import PROFILE_COUNT, Profile, ProfileStore, TerrainType
from ruckcore.engine.state import EngineConfig, LifetimeTotals

logger = logging.getLogger(__name__)

SETTINGS_KEY = 1
LIFETIME_DISTANCE_KEY = 2
LIFETIME_CALORIES_KEY = 3

NAME_FIELD_LEN = 33
TERRAIN_FIELD_LEN = 8

SETTINGS_FORMAT = "<8i" + "3i" * PROFILE_COUNT + f"{NAME_FIELD_LEN}s" * PROFILE_COUNT + f"{TERRAIN_FIELD_LEN}s" * PROFILE_COUNT
SETTINGS_SIZE = struct.calcsize(SETTINGS_FORMAT)
SCALAR_FORMAT = "<i"
SCALAR_SIZE = struct.calcsize(SCALAR_FORMAT)


class KeyValueStore(Protocol):
    def read(self, key: int) -> bytes | None: ...

    def write(self, key: int, data: bytes) -> None: ...


class MemoryStore:
    """In-process store for tests and for running without a disk."""

    def __init__(self, records: dict[int, bytes] | None = None):
        self.records = dict(records or {})

    def read(self, key: int) -> bytes | None:
        return self.records.get(key)

    def write(self, key: int, data: bytes) -> None:
        self.records[key] = bytes(data)


class FileStore:
    """One file per key under ``directory``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: int) -> Path:
        return self.directory / f"{key}.bin"

    def read(self, key: int) -> bytes | None:
        try:
            return self._path(key).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Failed to read record %d: %s", key, exc)
            return None

    def write(self, key: int, data: bytes) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(key).write_bytes(data)
        except OSError as exc:
            logger.warning("Failed to write record %d: %s", key, exc)


# ---------------------------------------------------------------------------
# Settings record
# ---------------------------------------------------------------------------

def _encode_text(text: str, size: int) -> bytes:
    raw = text.encode("utf-8")[: size - 1]
    return raw.ljust(size, b"\0")


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="ignore")


def encode_settings(config: EngineConfig) -> bytes:
    profiles = config.profiles.profiles
    values: list[int | bytes] = [
        config.weight_value,
        config.weight_unit,
        config.ruck_weight_unit,
        config.stride_value,
        config.stride_unit,
        int(config.sim_steps_enabled),
        config.sim_steps_spm,
        config.profiles.active,
    ]
    for p in profiles:
        values.extend([p.ruck_weight_value, p.terrain_factor, p.grade_percent])
    values.extend(_encode_text(p.name, NAME_FIELD_LEN) for p in profiles)
    values.extend(
        _encode_text(p.terrain_type.value if p.terrain_type else "", TERRAIN_FIELD_LEN) for p in profiles
    )
    return struct.pack(SETTINGS_FORMAT, *values)


def decode_settings(blob: bytes | None, defaults: EngineConfig | None = None) -> EngineConfig:
    """Decode a settings record over the built-in defaults.

    An absent record yields the defaults. A short record overlays only the
    prefix it covers. Terrain factors are normalized after decoding.
    """
    base = defaults or EngineConfig()
    if not blob:
        base.profiles.normalize()
        return base

    if len(blob) != SETTINGS_SIZE:
        logger.warning("Settings record is %d bytes, expected %d", len(blob), SETTINGS_SIZE)
    padded = blob[:SETTINGS_SIZE] + encode_settings(base)[len(blob):]
    fields = struct.unpack(SETTINGS_FORMAT, padded)

    ints = fields[: 8 + 3 * PROFILE_COUNT]
    names = fields[8 + 3 * PROFILE_COUNT : 8 + 4 * PROFILE_COUNT]
    terrains = fields[8 + 4 * PROFILE_COUNT :]

    profiles: list[Profile] = []
    for slot in range(PROFILE_COUNT):
        load, terrain, grade = ints[8 + 3 * slot : 11 + 3 * slot]
        terrain_text = _decode_text(terrains[slot])
        try:
            terrain_type = TerrainType(terrain_text) if terrain_text else None
        except ValueError:
            terrain_type = None
        profiles.append(
            Profile(
                ruck_weight_value=load,
                terrain_factor=terrain,
                grade_percent=grade,
                name=_decode_text(names[slot]),
                terrain_type=terrain_type,
            )
        )

    store = ProfileStore(profiles=profiles, active=ints[7])
    store.normalize()
    return EngineConfig(
        weight_value=ints[0],
        weight_unit=ints[1],
        ruck_weight_unit=ints[2],
        stride_value=ints[3],
        stride_unit=ints[4],
        sim_steps_enabled=bool(ints[5]),
        sim_steps_spm=ints[6],
        profiles=store,
        simulated_time_scale=base.simulated_time_scale,
    )


def load_settings(store: KeyValueStore, defaults: EngineConfig | None = None) -> EngineConfig:
    return decode_settings(store.read(SETTINGS_KEY), defaults)


def save_settings(store: KeyValueStore, config: EngineConfig) -> None:
    try:
        blob = encode_settings(config)
    except struct.error as exc:
        logger.warning("Settings not persisted, value out of range: %s", exc)
        return
    store.write(SETTINGS_KEY, blob)


# ---------------------------------------------------------------------------
# Lifetime totals
# ---------------------------------------------------------------------------

def _read_scalar(store: KeyValueStore, key: int) -> int:
    """Absent, short or negative records read as zero."""
    blob = store.read(key)
    if blob is None or len(blob) < SCALAR_SIZE:
        return 0
    (value,) = struct.unpack(SCALAR_FORMAT, blob[:SCALAR_SIZE])
    return max(0, value)


def load_lifetime(store: KeyValueStore) -> LifetimeTotals:
    return LifetimeTotals(
        distance_m=_read_scalar(store, LIFETIME_DISTANCE_KEY),
        calories_kcal=_read_scalar(store, LIFETIME_CALORIES_KEY),
    )


def save_lifetime(store: KeyValueStore, totals: LifetimeTotals) -> None:
    store.write(LIFETIME_DISTANCE_KEY, struct.pack(SCALAR_FORMAT, totals.distance_m))
    store.write(LIFETIME_CALORIES_KEY, struct.pack(SCALAR_FORMAT, totals.calories_kcal))
