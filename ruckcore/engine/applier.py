"""Apply a sparse ConfigPatch to the live EngineConfig."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ruckcore.engine.models import ConfigPatch, ProfilePatch
from ruckcore.engine.profiles import ProfileStore, normalize_terrain_factor, terrain_factor_for_type
from ruckcore.engine.state import EngineConfig

logger = logging.getLogger(__name__)

# patch field -> EngineConfig attribute
SCALAR_FIELDS: dict[str, str] = {
    "weight_value": "weight_value",
    "weight_unit": "weight_unit",
    "ruck_weight_unit": "ruck_weight_unit",
    "stride_length_value": "stride_value",
    "stride_length_unit": "stride_unit",
    "sim_steps_enabled": "sim_steps_enabled",
    "sim_steps_spm": "sim_steps_spm",
}


@dataclass(frozen=True, slots=True)
class ApplyResult:
    changed: bool
    active_profile: int | None = None  # requested slot; selection is the engine's job
    request_lifetime_totals: bool = False


def _apply_profile(profiles: ProfileStore, slot: int, patch: ProfilePatch) -> bool:
    profile = profiles.get(slot)
    if profile is None:
        logger.warning("Ignoring config for unknown profile slot %d", slot + 1)
        return False

    changed = False
    if patch.ruck_weight_value is not None:
        profile.ruck_weight_value = patch.ruck_weight_value
        changed = True
    if patch.grade_percent is not None:
        profile.grade_percent = patch.grade_percent
        changed = True
    if patch.terrain_type is not None:
        profile.terrain_type = patch.terrain_type
        # A bare category implies its factor
        profile.terrain_factor = terrain_factor_for_type(patch.terrain_type)
        changed = True
    if patch.terrain_factor is not None:
        profile.terrain_factor = normalize_terrain_factor(patch.terrain_factor)
        if patch.terrain_type is None:
            # A bare factor supersedes a stale category tag
            profile.terrain_type = None
        changed = True
    if patch.name is not None:
        profiles.set_name(slot, patch.name)
        changed = True
    return changed


def apply_patch(config: EngineConfig, patch: ConfigPatch) -> ApplyResult:
    """Overwrite only the fields present in ``patch``. Never raises."""
    changed = False
    for field_name, attr in SCALAR_FIELDS.items():
        value = getattr(patch, field_name)
        if value is not None:
            setattr(config, attr, value)
            changed = True

    for slot, profile_patch in (patch.profiles or {}).items():
        if _apply_profile(config.profiles, slot, profile_patch):
            changed = True

    if changed:
        logger.info("Applied config fields: %s", sorted(patch.present_fields()))

    return ApplyResult(
        changed=changed,
        active_profile=patch.active_profile,
        request_lifetime_totals=bool(patch.request_lifetime_totals),
    )
