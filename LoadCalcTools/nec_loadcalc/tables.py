"""NEC reference tables used by the load calculators.

Tables are immutable module constants. Threshold lookups never fail: keys
beyond the last row resolve to the last row.
"""
from __future__ import annotations

from dataclasses import dataclass
from math import inf, sqrt
from types import MappingProxyType
from typing import List, Sequence, Tuple

from .utils.rounding import round_half_up


@dataclass(frozen=True, slots=True)
class OccupancyLighting:
    va_per_sqft: float
    label: str


@dataclass(frozen=True, slots=True)
class DemandTier:
    """Apply *factor* to load up to the cumulative threshold *up_to_va*."""

    up_to_va: float
    factor: float


@dataclass(frozen=True, slots=True)
class DemandSchedule:
    label: str
    tiers: Tuple[DemandTier, ...]


@dataclass(frozen=True, slots=True)
class ConductorEntry:
    size: str
    ampacity: int


@dataclass(frozen=True, slots=True)
class GecEntry:
    max_conductor_size: str
    gec_size: str


# Table 220.42(A); the 125% continuous load factor of 210.20(A) is included.
LIGHTING_LOAD_TABLE = MappingProxyType({
    "automotive": OccupancyLighting(1.5, "Automotive Facility"),
    "convention_center": OccupancyLighting(1.4, "Convention Center"),
    "courthouse": OccupancyLighting(1.4, "Courthouse"),
    "dormitory": OccupancyLighting(1.5, "Dormitory"),
    "exercise_center": OccupancyLighting(1.4, "Exercise Center"),
    "fire_station": OccupancyLighting(1.3, "Fire Station"),
    "gymnasium": OccupancyLighting(1.7, "Gymnasium"),
    "health_care_clinic": OccupancyLighting(1.6, "Health Care Clinic"),
    "hospital": OccupancyLighting(1.6, "Hospital"),
    "hotel": OccupancyLighting(1.7, "Hotel/Motel"),
    "library": OccupancyLighting(1.5, "Library"),
    "manufacturing": OccupancyLighting(2.2, "Manufacturing Facility"),
    "motion_picture_theater": OccupancyLighting(1.6, "Motion Picture Theater"),
    "museum": OccupancyLighting(1.6, "Museum"),
    "office": OccupancyLighting(1.3, "Office"),
    "parking_garage": OccupancyLighting(0.3, "Parking Garage"),
    "penitentiary": OccupancyLighting(1.2, "Penitentiary"),
    "performing_arts_theater": OccupancyLighting(1.3, "Performing Arts Theater"),
    "police_station": OccupancyLighting(1.3, "Police Station"),
    "post_office": OccupancyLighting(1.6, "Post Office"),
    "religious": OccupancyLighting(2.2, "Religious Facility"),
    "restaurant": OccupancyLighting(1.5, "Restaurant"),
    "retail": OccupancyLighting(1.9, "Retail Store"),
    "school": OccupancyLighting(1.5, "School/University"),
    "sports_arena": OccupancyLighting(1.5, "Sports Arena"),
    "town_hall": OccupancyLighting(1.4, "Town Hall"),
    "transportation": OccupancyLighting(1.2, "Transportation Facility"),
    "warehouse": OccupancyLighting(1.2, "Warehouse"),
    "workshop": OccupancyLighting(1.7, "Workshop"),
})

# Table 220.45
LIGHTING_DEMAND_TABLE = MappingProxyType({
    "hotel": DemandSchedule("Hotels/Motels", (DemandTier(20000, 0.5), DemandTier(inf, 0.4))),
    "hospital": DemandSchedule("Hospitals", (DemandTier(50000, 0.4), DemandTier(inf, 0.2))),
    "warehouse": DemandSchedule("Storage/Warehouse", (DemandTier(12500, 1.0), DemandTier(inf, 0.5))),
    "default": DemandSchedule(
        "All Others (Office, Restaurant, Retail, School, etc.)", (DemandTier(inf, 1.0),)
    ),
})

DWELLING_LIGHTING_TIERS = (DemandTier(10000, 1.0), DemandTier(inf, 0.35))

RECEPTACLE_DEMAND_TIERS = (DemandTier(10000, 1.0), DemandTier(inf, 0.5))

# Table 220.56, keyed by number of units; six or more use the last factor.
KITCHEN_DEMAND_FACTORS = MappingProxyType({1: 1.0, 2: 1.0, 3: 0.9, 4: 0.8, 5: 0.7, 6: 0.65})

# Table 310.15(B)(16), 75 C copper
CONDUCTOR_TABLE = (
    ConductorEntry("14", 20),
    ConductorEntry("12", 25),
    ConductorEntry("10", 35),
    ConductorEntry("8", 50),
    ConductorEntry("6", 65),
    ConductorEntry("4", 85),
    ConductorEntry("3", 100),
    ConductorEntry("2", 115),
    ConductorEntry("1", 130),
    ConductorEntry("1/0", 150),
    ConductorEntry("2/0", 175),
    ConductorEntry("3/0", 200),
    ConductorEntry("4/0", 230),
    ConductorEntry("250", 255),
    ConductorEntry("300", 285),
    ConductorEntry("350", 310),
    ConductorEntry("400", 335),
    ConductorEntry("500", 380),
    ConductorEntry("600", 420),
    ConductorEntry("700", 460),
    ConductorEntry("750", 475),
)

CONDUCTOR_AMPACITIES = tuple(entry.ampacity for entry in CONDUCTOR_TABLE)

# Table 250.66
GEC_TABLE = (
    GecEntry("2", "8"),
    GecEntry("1", "6"),
    GecEntry("1/0", "6"),
    GecEntry("2/0", "4"),
    GecEntry("3/0", "4"),
    GecEntry("4/0", "2"),
    GecEntry("250", "2"),
    GecEntry("300", "2"),
    GecEntry("350", "2"),
    GecEntry("500", "1/0"),
    GecEntry("600", "1/0"),
    GecEntry("750", "2/0"),
    GecEntry("1000", "3/0"),
)

_AWG_ORDER = {
    "14": -14, "12": -12, "10": -10, "8": -8, "6": -6,
    "4": -4, "3": -3, "2": -2, "1": -1,
    "1/0": 0, "2/0": 1, "3/0": 2, "4/0": 3,
}

_GEC_AUGHT_CODES = {"1/0": 10, "2/0": 20, "3/0": 30}


def lighting_rate(building_type: str) -> OccupancyLighting:
    """Return the Table 220.42(A) row for *building_type* (0 VA if unlisted)."""
    return LIGHTING_LOAD_TABLE.get(building_type, OccupancyLighting(0.0, building_type))


def lighting_demand_schedule(building_type: str) -> DemandSchedule:
    return LIGHTING_DEMAND_TABLE.get(building_type, LIGHTING_DEMAND_TABLE["default"])


def tier_contributions(total_va: float, tiers: Sequence[DemandTier]) -> List[Tuple[float, int]]:
    """Split *total_va* across *tiers*, returning ``(portion, demand)`` pairs.

    Tiers are consumed in order, each up to its cumulative threshold; the last
    tier takes whatever remains. Demand is rounded per tier.
    """
    parts: List[Tuple[float, int]] = []
    remaining = max(total_va, 0)
    allocated = 0.0
    for index, tier in enumerate(tiers):
        if remaining <= 0:
            break
        last = index == len(tiers) - 1
        capacity = remaining if last or tier.up_to_va == inf else tier.up_to_va - allocated
        portion = min(remaining, max(capacity, 0))
        parts.append((portion, round_half_up(portion * tier.factor)))
        remaining -= portion
        allocated = tier.up_to_va
    return parts


def apply_tiered_demand(total_va: float, tiers: Sequence[DemandTier]) -> int:
    return sum(demand for _portion, demand in tier_contributions(total_va, tiers))


def apply_lighting_demand(total_va: float, building_type: str) -> int:
    """Table 220.45 demand for non-dwelling general lighting."""
    return apply_tiered_demand(total_va, lighting_demand_schedule(building_type).tiers)


def apply_receptacle_demand(total_va: float) -> int:
    """Table 220.44: first 10 kVA at 100%, remainder at 50%."""
    return apply_tiered_demand(total_va, RECEPTACLE_DEMAND_TIERS)


def kitchen_demand_factor(count: int) -> float:
    if count <= 2:
        return 1.0
    return KITCHEN_DEMAND_FACTORS.get(count, KITCHEN_DEMAND_FACTORS[6])


def conductor_for_amps(amps: float) -> ConductorEntry:
    """Return the smallest conductor whose ampacity covers *amps*."""
    for entry in CONDUCTOR_TABLE:
        if entry.ampacity >= amps:
            return entry
    return CONDUCTOR_TABLE[-1]


def conductor_order(size: str) -> float:
    """Sort key for conductor sizes: AWG ascending into kcmil."""
    if size in _AWG_ORDER:
        return _AWG_ORDER[size]
    return float(size)


def gec_size(conductor_size: str) -> str:
    """Table 250.66 grounding electrode conductor for a service conductor."""
    key = conductor_order(conductor_size)
    for entry in GEC_TABLE:
        if key <= conductor_order(entry.max_conductor_size):
            return entry.gec_size
    return GEC_TABLE[-1].gec_size


def gec_code(size: str) -> int:
    """Plain-integer answer for a GEC size ("1/0" -> 10, "2/0" -> 20, "3/0" -> 30)."""
    if size in _GEC_AUGHT_CODES:
        return _GEC_AUGHT_CODES[size]
    return int(size)


GEC_CODES = frozenset(gec_code(entry.gec_size) for entry in GEC_TABLE)


def service_amps(total_va: float, voltage: float, phases: int) -> float:
    if phases == 3:
        return total_va / (voltage * sqrt(3))
    return total_va / voltage
