# eco9/impact.py
# Impact calculator: category/value -> estimated CO2 saved and water conserved.
import logging
import math
from dataclasses import dataclass, asdict

from .errors import InvalidArgumentError
from .factors import MULTIPLIERS, DEFAULT_MULTIPLIER, ImpactMultiplier

logger = logging.getLogger(__name__)

# largest activity value accepted at the boundary
MAX_VALUE = 1e12


@dataclass(frozen=True)
class ImpactResult:
    co2_saved: float
    water_conserved: float

    def as_dict(self):
        return asdict(self)


def round2(x: float) -> float:
    # half up, matching Math.round(x * 100) / 100 for negatives too
    scaled = x * 100
    if not math.isfinite(scaled):
        # overflow or nan, nothing left to round
        return x
    return math.floor(scaled + 0.5) / 100


def resolve_multiplier(category: str, subtype: str | None = None) -> ImpactMultiplier:
    """Pick the multiplier governing an activity.

    Known category: the requested subtype if declared, otherwise the first
    declared subtype. Unknown category or a category without subtypes gets
    DEFAULT_MULTIPLIER. Never raises.
    """
    subtypes = MULTIPLIERS.get(category)
    if not subtypes:
        logger.debug("No multipliers for category %r, using default", category)
        return DEFAULT_MULTIPLIER
    if subtype is not None:
        if subtype in subtypes:
            return subtypes[subtype]
        logger.warning(
            "Unknown subtype %r for category %r, using first declared",
            subtype, category, extra={"category": category},
        )
    return next(iter(subtypes.values()))


def calculate_impact(category: str, value: float, unit: str, subtype: str | None = None) -> ImpactResult:
    """Estimated savings for `value` units of an activity.

    `unit` is accepted but does not select the factor; callers pass `value`
    already expressed in the unit the multiplier uses.
    """
    m = resolve_multiplier(category, subtype)
    return ImpactResult(
        co2_saved=round2(value * m.co2_factor),
        water_conserved=round2(value * m.water_factor),
    )


def validate_value(value) -> float:
    """Boundary check before calculate_impact: finite and non-negative."""
    if isinstance(value, bool):
        raise InvalidArgumentError("value must be a number", field="value")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError("value must be a number", field="value")
    if not math.isfinite(v):
        raise InvalidArgumentError("value must be finite", field="value")
    if v < 0:
        raise InvalidArgumentError("value must not be negative", field="value")
    if v > MAX_VALUE:
        raise InvalidArgumentError(f"value must not exceed {MAX_VALUE:g}", field="value")
    return v
