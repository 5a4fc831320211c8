# eco9/factors.py
# Impact multipliers per activity category and subtype.
# Declaration order matters: without an explicit subtype the first one listed wins.
from dataclasses import dataclass, asdict
from enum import Enum
from types import MappingProxyType


class ActivityCategory(str, Enum):
    TRANSPORT = "transport"
    ENERGY = "energy"
    WASTE = "waste"
    DIET = "diet"
    WATER = "water"


@dataclass(frozen=True)
class ImpactMultiplier:
    co2_factor: float
    water_factor: float
    per_unit: str = "unit"

    def as_dict(self):
        return asdict(self)


DEFAULT_MULTIPLIER = ImpactMultiplier(co2_factor=0.5, water_factor=0.1)

_MULTIPLIERS = {
    # transport (per mile)
    "transport": {
        "biking": ImpactMultiplier(0.4, 0.1, "mile"),
        "walking": ImpactMultiplier(0.3, 0.05, "mile"),
        "public_transport": ImpactMultiplier(0.2, 0.08, "mile"),
    },
    # energy
    "energy": {
        "solar": ImpactMultiplier(2.5, 0.5, "kwh"),
        "led_bulbs": ImpactMultiplier(0.1, 0.02, "hour"),
    },
    # waste (per kg)
    "waste": {
        "recycling": ImpactMultiplier(1.8, 0.3, "kg"),
        "composting": ImpactMultiplier(2.1, 0.4, "kg"),
    },
    # no subtype factors yet, these resolve to DEFAULT_MULTIPLIER
    "diet": {},
    "water": {},
}

MULTIPLIERS = MappingProxyType(
    {category: MappingProxyType(subtypes) for category, subtypes in _MULTIPLIERS.items()}
)


def subtypes_of(category):
    """Declared subtype names for a category, in declaration order."""
    return list(MULTIPLIERS.get(category, {}))


def table_as_dict():
    out = {
        category: {name: m.as_dict() for name, m in subtypes.items()}
        for category, subtypes in MULTIPLIERS.items()
    }
    out["default"] = DEFAULT_MULTIPLIER.as_dict()
    return out
