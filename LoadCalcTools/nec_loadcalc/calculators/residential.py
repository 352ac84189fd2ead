"""Dwelling unit service calculation, NEC 220 Part III standard method."""
from __future__ import annotations

import logging
from functools import lru_cache
from math import ceil
from typing import List, Optional, Tuple

from ..coverage import QuickReferenceItem
from ..models import Appliance, HouseScenario
from ..motors import describe_conversion, motor_to_va
from ..steps import (
    Answers,
    CalculationStep,
    DerivedHint,
    StaticHint,
    catalog_at_least,
    catalog_exact,
    exactly,
    ids,
    prior,
    va,
    within,
)
from ..tables import (
    CONDUCTOR_AMPACITIES,
    DWELLING_LIGHTING_TIERS,
    GEC_CODES,
    conductor_for_amps,
    gec_code,
    gec_size,
    tier_contributions,
)
from ..utils.breakers import STANDARD_SERVICE_SIZES, next_standard_service
from ..utils.rounding import round_half_up

logger = logging.getLogger(__name__)

VA_PER_SQFT = 3
SMALL_APPLIANCE_VA = 2 * 1500
LAUNDRY_VA = 1500
DRYER_MINIMUM_VA = 5000
RANGE_COLUMN_C_VA = 8000
FIXED_APPLIANCE_DEMAND_COUNT = 4
FIXED_APPLIANCE_DEMAND_FACTOR = 0.75

# Steps that only apply when the scenario has equipment of these kinds
OPTIONAL_STEP_KINDS = {
    "dryer": ("dryer",),
    "range": ("range", "cooktop"),
    "water-heater": ("water_heater",),
    "hvac": ("cooling", "heating"),
    "other-loads": ("other",),
}

TOTAL_VA_COMPONENT_STEPS = (
    "net-lighting",
    "fixed-appliances",
    "dryer",
    "range",
    "water-heater",
    "hvac",
    "other-loads",
)


def conversion_step_id(appliance: Appliance) -> str:
    return f"convert-{appliance.id}"


def consuming_step_id(appliance: Appliance) -> Optional[str]:
    """The step whose answer includes *appliance*'s load, if any."""
    if appliance.fixed_in_place:
        return "fixed-appliances"
    if appliance.kind in ("cooling", "heating"):
        return "hvac"
    if appliance.kind == "other":
        return "other-loads"
    return None


def step_applies(step_id: str, scenario: HouseScenario) -> bool:
    kinds = OPTIONAL_STEP_KINDS.get(step_id)
    return kinds is None or bool(scenario.of_kind(*kinds))


def appliance_load(appliance: Appliance, answers: Answers) -> float:
    """Nameplate watts, or the converted VA stored for a motor."""
    if appliance.is_motor:
        return prior(answers, conversion_step_id(appliance))
    return appliance.watts


def appliance_display_value(appliance: Appliance) -> str:
    if appliance.is_motor:
        return f"{appliance.horsepower} HP @ {appliance.motor_voltage:g}V ({motor_to_va(appliance.motor):,} VA)"
    return f"{appliance.watts:,.0f} W"


def _motor_ids(appliances: Tuple[Appliance, ...]) -> Tuple[str, ...]:
    return tuple(conversion_step_id(a) for a in appliances if a.is_motor)


def _appliance_ids(*kinds: str):
    return lambda scenario: tuple(a.id for a in scenario.of_kind(*kinds))


def _listing(appliances: Tuple[Appliance, ...], answers: Answers) -> List[str]:
    lines = []
    for a in appliances:
        source = " (converted)" if a.is_motor else ""
        lines.append(f"• {a.name}: {va(appliance_load(a, answers))} VA{source}")
    return lines


# -- lighting -----------------------------------------------------------------

def _subtotal_tiers(answers: Answers):
    return tier_contributions(prior(answers, "subtotal"), DWELLING_LIGHTING_TIERS)


def _first_tier(scenario: HouseScenario, answers: Answers) -> float:
    parts = _subtotal_tiers(answers)
    return parts[0][1] if parts else 0


def _remainder_tiers(scenario: HouseScenario, answers: Answers) -> float:
    return sum(demand for _portion, demand in _subtotal_tiers(answers)[1:])


def _general_lighting_hint(scenario: HouseScenario, answers: Answers) -> str:
    load = scenario.square_footage * VA_PER_SQFT
    return f"{scenario.square_footage:,.0f} sq ft × {VA_PER_SQFT} VA/sq ft = {va(load)} VA"


def _subtotal_hint(scenario: HouseScenario, answers: Answers) -> str:
    parts = [prior(answers, k) for k in ("general-lighting", "small-appliance", "laundry")]
    return f"{va(parts[0])} + {va(parts[1])} + {va(parts[2])} = {va(sum(parts))} VA"


def _demand_hint(scenario: HouseScenario, answers: Answers) -> str:
    subtotal = prior(answers, "subtotal")
    first = _first_tier(scenario, answers)
    if subtotal <= 10000:
        return f"Subtotal {va(subtotal)} VA is within the first 10,000 VA, so all of it counts at 100%: {va(first)} VA"
    remainder = subtotal - 10000
    return (
        f"First 10,000 VA @ 100% = {va(first)} VA\n"
        f"Remainder: {va(subtotal)} - 10,000 = {va(remainder)} VA\n"
        f"{va(remainder)} × 35% = {va(_remainder_tiers(scenario, answers))} VA"
    )


# -- appliances ---------------------------------------------------------------

def _fixed_appliances(scenario: HouseScenario, answers: Answers) -> float:
    fixed = scenario.fixed_appliances
    total = sum(appliance_load(a, answers) for a in fixed)
    if len(fixed) >= FIXED_APPLIANCE_DEMAND_COUNT:
        return round_half_up(total * FIXED_APPLIANCE_DEMAND_FACTOR)
    return total


def _fixed_appliances_hint(scenario: HouseScenario, answers: Answers) -> str:
    fixed = scenario.fixed_appliances
    if not fixed:
        return "No fixed appliances - enter 0."
    total = sum(appliance_load(a, answers) for a in fixed)
    lines = [f"Fixed appliances ({len(fixed)}):"] + _listing(fixed, answers)
    lines.append(f"\nTotal: {va(total)} VA")
    if len(fixed) >= FIXED_APPLIANCE_DEMAND_COUNT:
        lines.append(
            f"\n{len(fixed)} appliances, so apply the 75% demand factor:\n"
            f"{va(total)} × 75% = {va(_fixed_appliances(scenario, answers))} VA"
        )
    else:
        lines.append("Fewer than 4 appliances: 100%")
    return "\n".join(lines)


def _dryer(scenario: HouseScenario, answers: Answers) -> float:
    nameplate = sum(a.watts for a in scenario.of_kind("dryer"))
    return max(nameplate, DRYER_MINIMUM_VA)


def _cooking_watts(scenario: HouseScenario) -> float:
    return sum(a.watts for a in scenario.of_kind("range", "cooktop"))


def _range(scenario: HouseScenario, answers: Answers) -> float:
    watts = _cooking_watts(scenario)
    if watts == 0:
        return 0
    if watts <= 12000:
        return RANGE_COLUMN_C_VA
    over_kw = ceil((watts - 12000) / 1000)
    return round_half_up(RANGE_COLUMN_C_VA * (1 + over_kw * 0.05))


def _range_hint(scenario: HouseScenario, answers: Answers) -> str:
    cooking = scenario.of_kind("range", "cooktop")
    watts = _cooking_watts(scenario)
    lines = [f"{a.name}: {a.watts:,.0f} W" for a in cooking]
    if len(cooking) > 1:
        lines.append(f"Combined: {watts:,.0f} W")
    if watts <= 12000:
        lines.append("\nTable 220.55 Column C: 8,000 VA for ranges not over 12 kW")
    else:
        over_kw = ceil((watts - 12000) / 1000)
        lines.append(
            f"\nExceeds 12 kW by {over_kw} kW (rounded up)\n"
            f"8,000 × (1 + {over_kw} × 5%) = 8,000 × {1 + over_kw * 0.05:.2f} = {va(_range(scenario, answers))} VA"
        )
    return "\n".join(lines)


def _water_heater(scenario: HouseScenario, answers: Answers) -> float:
    return sum(a.watts for a in scenario.of_kind("water_heater"))


def _hvac_loads(scenario: HouseScenario, answers: Answers) -> Tuple[float, float]:
    cooling = sum(appliance_load(a, answers) for a in scenario.of_kind("cooling"))
    heating = sum(appliance_load(a, answers) for a in scenario.of_kind("heating"))
    return cooling, heating


def _hvac(scenario: HouseScenario, answers: Answers) -> float:
    return max(_hvac_loads(scenario, answers))


def _hvac_hint(scenario: HouseScenario, answers: Answers) -> str:
    cooling, heating = _hvac_loads(scenario, answers)
    larger = "Heating" if heating >= cooling else "A/C"
    return (
        f"Heating: {va(heating)} VA\nA/C: {va(cooling)} VA\n\n"
        f"{larger} is larger: {va(max(cooling, heating))} VA"
    )


def _other_loads(scenario: HouseScenario, answers: Answers) -> float:
    return sum(appliance_load(a, answers) for a in scenario.of_kind("other"))


def _other_loads_hint(scenario: HouseScenario, answers: Answers) -> str:
    others = scenario.of_kind("other")
    lines = ["Other loads at 100%:"] + _listing(others, answers)
    lines.append(f"\nTotal: {va(_other_loads(scenario, answers))} VA")
    return "\n".join(lines)


# -- totals and service sizing ------------------------------------------------

def _total_requires(scenario: HouseScenario) -> Tuple[str, ...]:
    return tuple(s for s in TOTAL_VA_COMPONENT_STEPS if step_applies(s, scenario))


def _total_va(scenario: HouseScenario, answers: Answers) -> float:
    return sum(prior(answers, s) for s in _total_requires(scenario))


def _total_hint(scenario: HouseScenario, answers: Answers) -> str:
    titles = {step.id: step.title for step in RESIDENTIAL_STEPS}
    lines = [f"{titles[s]}: {va(prior(answers, s))} VA" for s in _total_requires(scenario)]
    lines.append(f"\nTotal: {va(_total_va(scenario, answers))} VA")
    return "\n".join(lines)


def raw_service_amps(scenario: HouseScenario, answers: Answers) -> float:
    return prior(answers, "total-va") / scenario.voltage


def _service_amps(scenario: HouseScenario, answers: Answers) -> float:
    return next_standard_service(raw_service_amps(scenario, answers))


def _service_amps_hint(scenario: HouseScenario, answers: Answers) -> str:
    total = prior(answers, "total-va")
    amps = raw_service_amps(scenario, answers)
    return (
        f"{va(total)} VA ÷ {scenario.voltage:g}V = {amps:.1f} A\n\n"
        f"Round up to the next standard size: {_service_amps(scenario, answers)}A"
    )


def _service_conductor(scenario: HouseScenario, answers: Answers) -> float:
    return conductor_for_amps(prior(answers, "service-amps")).ampacity


def _conductor_hint(scenario: HouseScenario, answers: Answers) -> str:
    amps = prior(answers, "service-amps")
    conductor = conductor_for_amps(amps)
    return (
        f"Service: {amps:g}A\n"
        f"Table 310.15(B)(16), 75°C Cu: {conductor.size} AWG/kcmil rated {conductor.ampacity}A\n\n"
        f"Enter the ampacity: {conductor.ampacity}"
    )


def _gec(scenario: HouseScenario, answers: Answers) -> float:
    conductor = conductor_for_amps(prior(answers, "service-conductor"))
    return gec_code(gec_size(conductor.size))


def _gec_hint(scenario: HouseScenario, answers: Answers) -> str:
    conductor = conductor_for_amps(prior(answers, "service-conductor"))
    size = gec_size(conductor.size)
    return (
        f"Service conductor: {conductor.size} AWG/kcmil ({conductor.ampacity}A)\n"
        f"Table 250.66: {conductor.size} → {size} AWG copper GEC\n\n"
        f"Enter: {gec_code(size)}"
    )


def _snap_conductor(amps: float) -> float:
    return conductor_for_amps(amps).ampacity


RESIDENTIAL_STEPS = (
    CalculationStep(
        id="general-lighting",
        title="General Lighting Load",
        prompt="Per 220.12, dwelling units use 3 VA per square foot. What's the general lighting load?",
        nec_reference="NEC 220.12",
        formula="Square Footage × 3 VA/sq ft",
        expected_answer=lambda scenario, answers: scenario.square_footage * VA_PER_SQFT,
        validate_answer=within(10),
        hint=DerivedHint(_general_lighting_hint),
        covers=ids("square-footage"),
    ),
    CalculationStep(
        id="small-appliance",
        title="Small Appliance Circuits",
        prompt="Per 220.52(A), include at least two small appliance branch circuits at 1,500 VA each. What's their load?",
        nec_reference="NEC 220.52(A)",
        formula="2 × 1,500 VA",
        expected_answer=lambda scenario, answers: SMALL_APPLIANCE_VA,
        validate_answer=exactly,
        hint=StaticHint("2 circuits × 1,500 VA = 3,000 VA"),
        covers=ids("small-appliance-1", "small-appliance-2"),
    ),
    CalculationStep(
        id="laundry",
        title="Laundry Circuit",
        prompt="Per 220.52(B), add the laundry branch circuit. What's its load?",
        nec_reference="NEC 220.52(B)",
        formula="1 × 1,500 VA",
        expected_answer=lambda scenario, answers: LAUNDRY_VA,
        validate_answer=exactly,
        hint=StaticHint("1 laundry circuit × 1,500 VA = 1,500 VA"),
        covers=ids("laundry"),
    ),
    CalculationStep(
        id="subtotal",
        title="Subtotal Before Demand",
        prompt="Add the general lighting, small appliance and laundry loads together before applying demand factors.",
        nec_reference="NEC 220.52",
        formula="General Lighting + Small Appliance + Laundry",
        expected_answer=lambda scenario, answers: sum(
            prior(answers, k) for k in ("general-lighting", "small-appliance", "laundry")
        ),
        validate_answer=within(10),
        hint=DerivedHint(_subtotal_hint),
        requires=ids("general-lighting", "small-appliance", "laundry"),
    ),
    CalculationStep(
        id="demand-first-10k",
        title="Demand: First 10,000 VA",
        prompt="The first 10,000 VA of the subtotal is taken at 100%. How much of the subtotal falls in this tier?",
        nec_reference="NEC 220.42",
        formula="First 10,000 VA @ 100%",
        expected_answer=_first_tier,
        validate_answer=exactly,
        hint=DerivedHint(_demand_hint),
        requires=ids("subtotal"),
    ),
    CalculationStep(
        id="demand-remainder",
        title="Demand: Remainder @ 35%",
        prompt="Whatever exceeds 10,000 VA is taken at 35%. What's the demand load for the remainder? Enter 0 if nothing exceeds 10,000 VA.",
        nec_reference="NEC 220.42",
        formula="(Subtotal - 10,000) × 35%",
        expected_answer=_remainder_tiers,
        validate_answer=within(50),
        hint=DerivedHint(_demand_hint),
        requires=ids("subtotal"),
    ),
    CalculationStep(
        id="net-lighting",
        title="Net General Lighting Load",
        prompt="Add the two demand tiers to get the net general lighting load.",
        nec_reference="NEC 220.42",
        formula="First tier + Remainder tier",
        expected_answer=lambda scenario, answers: prior(answers, "demand-first-10k") + prior(answers, "demand-remainder"),
        validate_answer=within(50),
        hint=StaticHint("Add the first-tier demand to the 35% remainder demand."),
        requires=ids("demand-first-10k", "demand-remainder"),
    ),
    CalculationStep(
        id="fixed-appliances",
        title="Fixed Appliances (220.53)",
        prompt=(
            "Add up the appliances fastened in place, using the motor values you converted. "
            "With four or more of them, apply a 75% demand factor."
        ),
        nec_reference="NEC 220.53",
        formula="Sum of fixed appliances (× 75% if 4 or more)",
        expected_answer=_fixed_appliances,
        validate_answer=within(100),
        hint=DerivedHint(_fixed_appliances_hint),
        requires=lambda scenario: _motor_ids(scenario.fixed_appliances),
        covers=lambda scenario: tuple(a.id for a in scenario.fixed_appliances),
    ),
    CalculationStep(
        id="dryer",
        title="Electric Dryer (220.54)",
        prompt="Per 220.54, use the dryer nameplate rating or 5,000 VA, whichever is larger.",
        nec_reference="NEC 220.54",
        formula="max(Nameplate, 5,000 VA)",
        expected_answer=_dryer,
        validate_answer=within(100),
        hint=StaticHint("Use the dryer watts from the equipment list, or 5,000 VA if the nameplate is less."),
        covers=_appliance_ids("dryer"),
    ),
    CalculationStep(
        id="range",
        title="Range/Cooking Equipment (Table 220.55)",
        prompt=(
            "Use Table 220.55 Column C. Combine the range and any separate cooktop: 8 kW if not over 12 kW, "
            "otherwise add 5% to 8 kW for each kW (or major fraction) over 12 kW."
        ),
        nec_reference="NEC Table 220.55",
        formula="8,000 × (1 + kW over 12 × 5%)",
        expected_answer=_range,
        validate_answer=within(200),
        hint=DerivedHint(_range_hint),
        covers=_appliance_ids("range", "cooktop"),
    ),
    CalculationStep(
        id="water-heater",
        title="Water Heater (220.51)",
        prompt="The water heater is a continuous fixed load taken at 100% of its nameplate.",
        nec_reference="NEC 220.51",
        formula="Nameplate × 100%",
        expected_answer=_water_heater,
        validate_answer=within(100),
        hint=StaticHint("Enter the water heater watts from the equipment list."),
        covers=_appliance_ids("water_heater"),
    ),
    CalculationStep(
        id="hvac",
        title="HVAC Load (220.60)",
        prompt="Heating and cooling are noncoincident loads. Compare the A/C load with the heating load and use the larger.",
        nec_reference="NEC 220.60",
        formula="Larger of: Heat OR A/C",
        expected_answer=_hvac,
        validate_answer=within(100),
        hint=DerivedHint(_hvac_hint),
        requires=lambda scenario: _motor_ids(scenario.of_kind("cooling", "heating")),
        covers=_appliance_ids("cooling", "heating"),
    ),
    CalculationStep(
        id="other-loads",
        title="Other Loads",
        prompt="Add any remaining equipment, such as a spa or EV charger, at 100%.",
        nec_reference="NEC 220.14",
        formula="Sum of remaining loads",
        expected_answer=_other_loads,
        validate_answer=within(100),
        hint=DerivedHint(_other_loads_hint),
        requires=lambda scenario: _motor_ids(scenario.of_kind("other")),
        covers=_appliance_ids("other"),
    ),
    CalculationStep(
        id="total-va",
        title="Total Calculated Load",
        prompt="Add up every calculated load from the previous steps. What's the total VA?",
        nec_reference="NEC 220.40",
        formula="Sum of all calculated loads",
        expected_answer=_total_va,
        validate_answer=within(500),
        hint=DerivedHint(_total_hint),
        requires=_total_requires,
    ),
    CalculationStep(
        id="service-amps",
        title="Service Size",
        prompt="Divide the total VA by the service voltage, then round up to the next standard size (100, 125, 150, 200, 225 or 400A).",
        nec_reference="NEC 230.42, 230.79",
        formula="Total VA ÷ Voltage → next standard size",
        expected_answer=_service_amps,
        validate_answer=catalog_at_least(STANDARD_SERVICE_SIZES, slack=25),
        hint=DerivedHint(_service_amps_hint),
        requires=ids("total-va"),
        store=next_standard_service,
    ),
    CalculationStep(
        id="service-conductor",
        title="Service Conductor (Table 310.15(B)(16))",
        prompt="Find the smallest 75°C copper conductor whose ampacity covers the service size. Enter its ampacity.",
        nec_reference="NEC Table 310.15(B)(16)",
        formula="Service amps → Table 310.15(B)(16) ampacity",
        expected_answer=_service_conductor,
        validate_answer=catalog_at_least(CONDUCTOR_AMPACITIES),
        hint=DerivedHint(_conductor_hint),
        requires=ids("service-amps"),
        store=_snap_conductor,
    ),
    CalculationStep(
        id="gec-size",
        title="GEC Sizing (Table 250.66)",
        prompt="Size the grounding electrode conductor from the service conductor. Enter the AWG number (10 for 1/0, 20 for 2/0, 30 for 3/0).",
        nec_reference="NEC Table 250.66",
        formula="Service conductor → Table 250.66 → GEC AWG",
        expected_answer=_gec,
        validate_answer=catalog_exact(GEC_CODES),
        hint=DerivedHint(_gec_hint),
        requires=ids("service-conductor"),
        store=int,
    ),
)


@lru_cache(maxsize=None)
def motor_conversion_step(appliance: Appliance) -> CalculationStep:
    """HP to VA conversion step for one motor appliance."""

    def expected(scenario: HouseScenario, answers: Answers) -> float:
        motor = scenario.appliance(appliance.id)
        if motor is None or not motor.is_motor:
            return 0
        return motor_to_va(motor.motor)

    def hint(scenario: HouseScenario, answers: Answers) -> str:
        motor = scenario.appliance(appliance.id)
        if motor is None or not motor.is_motor:
            return f"No {appliance.name} in this dwelling - enter 0."
        return describe_conversion(motor.motor)

    return CalculationStep(
        id=conversion_step_id(appliance),
        title=f"Convert {appliance.name} (HP to VA)",
        prompt=(
            f"Convert the {appliance.name} from horsepower: look up its full-load amps in "
            "Table 430.248, then multiply by the voltage."
        ),
        nec_reference="NEC Table 430.248",
        formula="Table 430.248 Amps × Voltage",
        expected_answer=expected,
        validate_answer=within(50),
        hint=DerivedHint(hint),
    )


def active_steps(scenario: HouseScenario) -> Tuple[CalculationStep, ...]:
    """Steps for *scenario* in dependency order.

    Equipment-specific steps are dropped when the scenario has no matching
    equipment, and each motor gets a conversion step just before the step
    that uses its load.
    """
    steps: List[CalculationStep] = []
    for step in RESIDENTIAL_STEPS:
        if not step_applies(step.id, scenario):
            logger.debug("%s: no equipment for step %s", scenario.id, step.id)
            continue
        for appliance in scenario.motors:
            if consuming_step_id(appliance) == step.id:
                steps.append(motor_conversion_step(appliance))
        steps.append(step)
    return tuple(steps)


QUICK_REFERENCE_ITEMS = (
    QuickReferenceItem("general-lighting", "General Lighting", "3 VA/sq ft (220.12)", "general-lighting"),
    QuickReferenceItem(
        "small-appliance", "Small Appliance + Laundry",
        "2 circuits @ 1,500 VA + 1 laundry @ 1,500 VA (220.52)", "laundry",
    ),
    QuickReferenceItem("lighting-demand", "Lighting Demand", "First 10 kVA: 100% | Remainder: 35%", "net-lighting"),
    QuickReferenceItem("motor-flc", "Motor FLC", "Table 430.248: HP → Amps (115V or 230V column)", "fixed-appliances"),
    QuickReferenceItem("fixed-appliances", "Fixed Appliances", "75% demand if 4+ appliances (220.53)", "fixed-appliances"),
    QuickReferenceItem("dryer", "Dryer", "5,000 VA minimum (220.54)", "dryer"),
    QuickReferenceItem("range", "Range/Cooking", "Table 220.55: 8 kW for ≤12 kW range", "range"),
    QuickReferenceItem("hvac", "HVAC", "Larger of heating OR cooling (220.60)", "hvac"),
    QuickReferenceItem("service-sizing", "Service Sizing", "Total VA ÷ Voltage → standard size", "service-amps"),
    QuickReferenceItem("conductor", "Conductor Sizing", "Table 310.15(B)(16): 75°C copper ampacity", "service-conductor"),
    QuickReferenceItem("gec", "GEC Sizing", "Table 250.66: based on service conductor size", "gec-size"),
)
