"""Hardcoded body-type presets. Configuration only."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class BodyTypePreset:
    key: str
    label: str
    maintenance_multiplier: float  # kcal per kg of body weight
    protein_multiplier: float  # g per kg
    fat_ratio: float  # share of calories
    calorie_bias: float  # kcal


DEFAULT_BODY_TYPE = "muscular"

BODY_TYPES = MappingProxyType({
    "lean": BodyTypePreset(
        key="lean",
        label="Lean",
        maintenance_multiplier=31.0,
        protein_multiplier=2.2,
        fat_ratio=0.2,
        calorie_bias=-150.0,
    ),
    "muscular": BodyTypePreset(
        key="muscular",
        label="Muscular",
        maintenance_multiplier=33.0,
        protein_multiplier=2.4,
        fat_ratio=0.25,
        calorie_bias=150.0,
    ),
    "bulky": BodyTypePreset(
        key="bulky",
        label="Bulky",
        maintenance_multiplier=35.0,
        protein_multiplier=1.9,
        fat_ratio=0.28,
        calorie_bias=300.0,
    ),
})


def list_body_types() -> list[BodyTypePreset]:
    return list(BODY_TYPES.values())


def get_body_type(key: object) -> BodyTypePreset | None:
    if not isinstance(key, str):
        return None
    return BODY_TYPES.get(key)


def resolve_body_type(key: object) -> BodyTypePreset:
    """Preset for `key`; unrecognised keys fall back to the muscular preset."""
    return get_body_type(key) or BODY_TYPES[DEFAULT_BODY_TYPE]
