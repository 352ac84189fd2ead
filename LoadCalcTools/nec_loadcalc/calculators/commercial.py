"""Non-dwelling service calculation, NEC 220 Part IV."""
from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import List, Optional, Tuple

from ..coverage import QuickReferenceItem
from ..models import CommercialScenario, Motor
from ..motors import describe_conversion, motor_to_va
from ..steps import (
    Answers,
    CalculationStep,
    DerivedHint,
    catalog_at_least,
    catalog_exact,
    ids,
    prior,
    va,
    within,
)
from ..tables import (
    CONDUCTOR_AMPACITIES,
    GEC_CODES,
    apply_lighting_demand,
    apply_receptacle_demand,
    conductor_for_amps,
    gec_code,
    gec_size,
    kitchen_demand_factor,
    lighting_demand_schedule,
    lighting_rate,
    service_amps,
    tier_contributions,
)
from ..utils.rounding import round_half_up

LAMPHOLDER_VA = 600
RECEPTACLE_VA = 180
MULTIOUTLET_VA_PER_FT = 180
SHOW_WINDOW_VA_PER_FT = 200
SIGN_OUTLET_VA = 1200
LARGEST_MOTOR_FACTOR = 0.25

TOTAL_VA_COMPONENT_STEPS = (
    "lighting-demand",
    "hvac",
    "receptacle-demand",
    "kitchen-demand",
    "largest-motor-25",
)


@dataclass(frozen=True, slots=True)
class EquipmentDisplayItem:
    id: str
    name: str
    value: str
    category: str


def _phase_symbol(phase: int) -> str:
    return "3Ø" if phase == 3 else "1Ø"


def kitchen_ids(scenario: CommercialScenario) -> Tuple[str, ...]:
    return tuple(f"kitchen-{i}" for i in range(len(scenario.kitchen_equipment)))


def motor_ids(scenario: CommercialScenario) -> Tuple[str, ...]:
    return tuple(f"motor-{i}" for i in range(len(scenario.other_motors)))


def equipment_display_items(scenario: CommercialScenario) -> List[EquipmentDisplayItem]:
    """Flattened equipment card for a commercial scenario."""
    rate = lighting_rate(scenario.building_type)
    items = [
        EquipmentDisplayItem("square-footage", "Square Footage", f"{scenario.square_footage:,.0f} sq ft", "building"),
        EquipmentDisplayItem("building-type", "Building Type", rate.label, "building"),
        EquipmentDisplayItem("va-per-sqft", "VA per sq ft (Table 220.42(A))", f"{rate.va_per_sqft} VA/sq ft", "building"),
        EquipmentDisplayItem(
            "service-type", "Service", f"{scenario.voltage:g}V {_phase_symbol(scenario.phases)}", "building"
        ),
    ]
    if scenario.lampholders > 0:
        items.append(EquipmentDisplayItem(
            "lampholders", "Heavy-Duty Lampholders", f"{scenario.lampholders} × 600 VA", "outlets"
        ))
    items.append(EquipmentDisplayItem(
        "receptacles", "Receptacle Outlets", f"{scenario.receptacles} × 180 VA", "outlets"
    ))
    if scenario.multioutlet_assembly_feet > 0:
        items.append(EquipmentDisplayItem(
            "multioutlet", "Multioutlet Assembly", f"{scenario.multioutlet_assembly_feet:g} ft × 180 VA/ft", "outlets"
        ))
    if scenario.show_window_feet > 0:
        items.append(EquipmentDisplayItem(
            "show-window", "Show Window Lighting", f"{scenario.show_window_feet:g} ft × 200 VA/ft", "outlets"
        ))
    if scenario.has_sign_outlet:
        items.append(EquipmentDisplayItem("sign-outlet", "Sign Outlet (600.5(A))", "1,200 VA", "outlets"))

    for item_id, item in zip(kitchen_ids(scenario), scenario.kitchen_equipment):
        items.append(EquipmentDisplayItem(item_id, item.name, f"{item.watts:,.0f} W", "kitchen"))

    if scenario.ac_motor is not None:
        items.append(EquipmentDisplayItem("ac-motor", _motor_label(scenario.ac_motor), _motor_value(scenario.ac_motor), "hvac"))
    if scenario.heat_watts > 0:
        items.append(EquipmentDisplayItem("heat", "Electric Heat", f"{scenario.heat_watts:,.0f} W", "hvac"))
    for item_id, motor in zip(motor_ids(scenario), scenario.other_motors):
        items.append(EquipmentDisplayItem(item_id, _motor_label(motor), _motor_value(motor), "motors"))
    return items


def _motor_label(motor: Motor) -> str:
    return f"{motor.name} ({motor.horsepower} HP, {_phase_symbol(motor.phase)} @ {motor.voltage:g}V)"


def _motor_value(motor: Motor) -> str:
    return f"{motor.horsepower} HP ({motor_to_va(motor):,} VA)"


# -- lighting -----------------------------------------------------------------

def _lighting_load(scenario: CommercialScenario, answers: Answers) -> float:
    return round_half_up(scenario.square_footage * lighting_rate(scenario.building_type).va_per_sqft)


def _lighting_load_hint(scenario: CommercialScenario, answers: Answers) -> str:
    rate = lighting_rate(scenario.building_type)
    return (
        f"Building type: {rate.label}\n"
        f"Table 220.42(A): {rate.va_per_sqft} VA/sq ft (125% already included)\n\n"
        f"{scenario.square_footage:,.0f} sq ft × {rate.va_per_sqft} VA/sq ft = "
        f"{va(_lighting_load(scenario, answers))} VA"
    )


def _lighting_demand(scenario: CommercialScenario, answers: Answers) -> float:
    return apply_lighting_demand(prior(answers, "lighting-load"), scenario.building_type)


def _lighting_demand_hint(scenario: CommercialScenario, answers: Answers) -> str:
    load = prior(answers, "lighting-load")
    schedule = lighting_demand_schedule(scenario.building_type)
    lines = [f"Table 220.45 ({schedule.label}):"]
    for (portion, demand), tier in zip(tier_contributions(load, schedule.tiers), schedule.tiers):
        lines.append(f"{va(portion)} VA @ {tier.factor:.0%} = {va(demand)} VA")
    lines.append(f"\nDemand: {va(_lighting_demand(scenario, answers))} VA")
    return "\n".join(lines)


# -- HVAC and motors ----------------------------------------------------------

def _hvac(scenario: CommercialScenario, answers: Answers) -> float:
    ac_va = motor_to_va(scenario.ac_motor) if scenario.ac_motor is not None else 0
    return max(ac_va, scenario.heat_watts)


def _hvac_hint(scenario: CommercialScenario, answers: Answers) -> str:
    if scenario.ac_motor is None:
        if scenario.heat_watts > 0:
            return f"No A/C motor\nUse heating: {va(scenario.heat_watts)} VA"
        return "No A/C or heating - enter 0."
    ac_va = motor_to_va(scenario.ac_motor)
    larger = "Heating" if scenario.heat_watts >= ac_va else "A/C"
    return (
        f"{describe_conversion(scenario.ac_motor)}\n\n"
        f"Heating: {va(scenario.heat_watts)} W\n\n"
        f"{larger} is larger: {va(_hvac(scenario, answers))} VA"
    )


def _largest_motor(scenario: CommercialScenario) -> Optional[Tuple[Motor, int]]:
    loads = [(motor, motor_to_va(motor)) for motor in scenario.all_motors]
    if not loads:
        return None
    # first motor wins ties
    return max(loads, key=lambda pair: pair[1])


def _largest_motor_25(scenario: CommercialScenario, answers: Answers) -> float:
    largest = _largest_motor(scenario)
    if largest is None:
        return 0
    return round_half_up(largest[1] * LARGEST_MOTOR_FACTOR)


def _largest_motor_hint(scenario: CommercialScenario, answers: Answers) -> str:
    largest = _largest_motor(scenario)
    if largest is None:
        return "No motors - enter 0."
    lines = ["All motors:"]
    lines.extend(f"• {_motor_label(m)} → {motor_to_va(m):,} VA" for m in scenario.all_motors)
    motor, load = largest
    lines.append(
        f"\nLargest: {motor.name} at {load:,} VA\n"
        f"25% of {load:,} = {va(_largest_motor_25(scenario, answers))} VA"
    )
    return "\n".join(lines)


# -- outlets and kitchen ------------------------------------------------------

def _outlet_parts(scenario: CommercialScenario) -> List[Tuple[str, float]]:
    parts = []
    if scenario.lampholders > 0:
        parts.append((f"Lampholders: {scenario.lampholders} × 600 VA", scenario.lampholders * LAMPHOLDER_VA))
    parts.append((f"Receptacles: {scenario.receptacles} × 180 VA", scenario.receptacles * RECEPTACLE_VA))
    if scenario.multioutlet_assembly_feet > 0:
        parts.append((
            f"Multioutlet Assembly: {scenario.multioutlet_assembly_feet:g} ft × 180 VA",
            scenario.multioutlet_assembly_feet * MULTIOUTLET_VA_PER_FT,
        ))
    if scenario.show_window_feet > 0:
        parts.append((
            f"Show Window: {scenario.show_window_feet:g} ft × 200 VA",
            scenario.show_window_feet * SHOW_WINDOW_VA_PER_FT,
        ))
    if scenario.has_sign_outlet:
        parts.append(("Sign Outlet", SIGN_OUTLET_VA))
    return parts


def _outlet_loads(scenario: CommercialScenario, answers: Answers) -> float:
    return sum(load for _label, load in _outlet_parts(scenario))


def _outlet_loads_hint(scenario: CommercialScenario, answers: Answers) -> str:
    lines = [f"{label} = {va(load)} VA" for label, load in _outlet_parts(scenario)]
    lines.append(f"\nTotal: {va(_outlet_loads(scenario, answers))} VA")
    return "\n".join(lines)


def _receptacle_demand(scenario: CommercialScenario, answers: Answers) -> float:
    return apply_receptacle_demand(prior(answers, "outlet-loads"))


def _receptacle_demand_hint(scenario: CommercialScenario, answers: Answers) -> str:
    total = prior(answers, "outlet-loads")
    if total <= 10000:
        return f"Total outlet load: {va(total)} VA\n\nNot over 10 kVA → 100%\nDemand: {va(total)} VA"
    remainder = total - 10000
    return (
        f"Total outlet load: {va(total)} VA\n\n"
        f"First 10,000 VA @ 100% = 10,000 VA\n"
        f"Remainder: {va(remainder)} VA @ 50% = {va(round_half_up(remainder * 0.5))} VA\n\n"
        f"Demand: {va(_receptacle_demand(scenario, answers))} VA"
    )


def _kitchen_demand(scenario: CommercialScenario, answers: Answers) -> float:
    equipment = scenario.kitchen_equipment
    if not equipment:
        return 0
    total = sum(item.watts for item in equipment)
    return round_half_up(total * kitchen_demand_factor(len(equipment)))


def _kitchen_demand_hint(scenario: CommercialScenario, answers: Answers) -> str:
    equipment = scenario.kitchen_equipment
    if not equipment:
        return "No commercial kitchen equipment - enter 0."
    total = sum(item.watts for item in equipment)
    factor = kitchen_demand_factor(len(equipment))
    lines = [f"Kitchen equipment ({len(equipment)} items):"]
    lines.extend(f"• {item.name}: {item.watts:,.0f} W" for item in equipment)
    lines.append(
        f"\nTotal: {va(total)} W\n"
        f"Table 220.56: {len(equipment)} units → {factor:.0%} demand factor\n"
        f"{va(total)} × {factor:.0%} = {va(_kitchen_demand(scenario, answers))} VA"
    )
    return "\n".join(lines)


# -- totals and service sizing ------------------------------------------------

def _total_va(scenario: CommercialScenario, answers: Answers) -> float:
    return sum(prior(answers, s) for s in TOTAL_VA_COMPONENT_STEPS)


def _total_hint(scenario: CommercialScenario, answers: Answers) -> str:
    titles = {step.id: step.title for step in COMMERCIAL_STEPS}
    lines = [f"{titles[s]}: {va(prior(answers, s))} VA" for s in TOTAL_VA_COMPONENT_STEPS]
    lines.append(f"\nTotal: {va(_total_va(scenario, answers))} VA")
    return "\n".join(lines)


def _amps(scenario: CommercialScenario, answers: Answers) -> float:
    return service_amps(prior(answers, "total-va"), scenario.voltage, scenario.phases)


def _service_conductor(scenario: CommercialScenario, answers: Answers) -> float:
    return conductor_for_amps(_amps(scenario, answers)).ampacity


def _conductor_hint(scenario: CommercialScenario, answers: Answers) -> str:
    total = prior(answers, "total-va")
    amps = _amps(scenario, answers)
    conductor = conductor_for_amps(amps)
    if scenario.phases == 3:
        divisor = scenario.voltage * sqrt(3)
        formula = f"{va(total)} VA ÷ ({scenario.voltage:g}V × √3) = {va(total)} ÷ {divisor:.1f} = {amps:.1f} A"
    else:
        formula = f"{va(total)} VA ÷ {scenario.voltage:g}V = {amps:.1f} A"
    return (
        f"{formula}\n\nTable 310.15(B)(16), 75°C Cu:\n"
        f"Minimum conductor: {conductor.size} AWG/kcmil\nAmpacity: {conductor.ampacity}A\n\n"
        f"Enter the ampacity: {conductor.ampacity}"
    )


def _gec(scenario: CommercialScenario, answers: Answers) -> float:
    conductor = conductor_for_amps(prior(answers, "service-conductor"))
    return gec_code(gec_size(conductor.size))


def _gec_hint(scenario: CommercialScenario, answers: Answers) -> str:
    conductor = conductor_for_amps(prior(answers, "service-conductor"))
    size = gec_size(conductor.size)
    return (
        f"Service conductor: {conductor.size} AWG/kcmil ({conductor.ampacity}A)\n\n"
        f"Table 250.66:\n{conductor.size} conductor → {size} AWG GEC\n\n"
        f"Enter: {gec_code(size)}"
    )


def _snap_conductor(amps: float) -> float:
    return conductor_for_amps(amps).ampacity


COMMERCIAL_STEPS = (
    CalculationStep(
        id="lighting-load",
        title="General Lighting Load (Table 220.42(A))",
        prompt=(
            "Look up the VA per square foot for this building type in Table 220.42(A) and multiply by the "
            "square footage. The 125% continuous load multiplier is already included in the table values."
        ),
        nec_reference="NEC Table 220.42(A)",
        formula="Sq ft × VA/sq ft (from Table 220.42(A))",
        expected_answer=_lighting_load,
        validate_answer=within(50),
        hint=DerivedHint(_lighting_load_hint),
        covers=ids("square-footage", "building-type", "va-per-sqft"),
    ),
    CalculationStep(
        id="lighting-demand",
        title="Lighting Demand Factor (Table 220.45)",
        prompt=(
            "Apply the Table 220.45 demand factors for this occupancy. Most buildings stay at 100%; "
            "warehouses, hotels and hospitals have tiered reductions."
        ),
        nec_reference="NEC Table 220.45",
        formula="Lighting VA × demand factor(s)",
        expected_answer=_lighting_demand,
        validate_answer=within(50),
        hint=DerivedHint(_lighting_demand_hint),
        requires=ids("lighting-load"),
    ),
    CalculationStep(
        id="hvac",
        title="HVAC Load (220.60)",
        prompt=(
            "Use the larger of heating or cooling. Convert the A/C motor with Table 430.248 (single-phase) "
            "or Table 430.250 (three-phase), then compare it with the heating load."
        ),
        nec_reference="NEC 220.60, Table 430.248/430.250",
        formula="Larger of: A/C (HP → VA via FLC table) OR Heat",
        expected_answer=_hvac,
        validate_answer=within(100),
        hint=DerivedHint(_hvac_hint),
        covers=ids("ac-motor", "heat"),
    ),
    CalculationStep(
        id="outlet-loads",
        title="Outlet Loads (220.14)",
        prompt=(
            "Total the outlet loads: heavy-duty lampholders 600 VA each, receptacles 180 VA each, multioutlet "
            "assemblies 180 VA per foot, show windows 200 VA per foot, and 1,200 VA for a sign outlet."
        ),
        nec_reference="NEC 220.14, 600.5(A)",
        formula="Lampholders×600 + Recepts×180 + Multioutlet ft×180 + Show Window ft×200 + Sign 1,200",
        expected_answer=_outlet_loads,
        validate_answer=within(100),
        hint=DerivedHint(_outlet_loads_hint),
        covers=ids("lampholders", "receptacles", "multioutlet", "show-window", "sign-outlet"),
    ),
    CalculationStep(
        id="receptacle-demand",
        title="Receptacle Demand Factor (Table 220.44)",
        prompt="Apply Table 220.44 to the outlet total: the first 10 kVA at 100%, the remainder at 50%.",
        nec_reference="NEC Table 220.44",
        formula="First 10 kVA @ 100% + remainder @ 50%",
        expected_answer=_receptacle_demand,
        validate_answer=within(100),
        hint=DerivedHint(_receptacle_demand_hint),
        requires=ids("outlet-loads"),
    ),
    CalculationStep(
        id="kitchen-demand",
        title="Kitchen Equipment (Table 220.56)",
        prompt=(
            "Sum the commercial kitchen equipment and apply the Table 220.56 factor for the number of units. "
            "Enter 0 if there is no kitchen equipment."
        ),
        nec_reference="NEC Table 220.56",
        formula="Sum of equipment × demand factor (Table 220.56)",
        expected_answer=_kitchen_demand,
        validate_answer=within(100),
        hint=DerivedHint(_kitchen_demand_hint),
        covers=kitchen_ids,
    ),
    CalculationStep(
        id="largest-motor-25",
        title="Largest Motor +25% (220.50)",
        prompt=(
            "Add 25% of the largest motor load. Convert every motor, the A/C compressor included, "
            "with the FLC table for its phase and take 25% of the largest."
        ),
        nec_reference="NEC 220.50, Table 430.248/430.250",
        formula="Largest motor VA × 25%",
        expected_answer=_largest_motor_25,
        validate_answer=within(50),
        hint=DerivedHint(_largest_motor_hint),
        covers=motor_ids,
    ),
    CalculationStep(
        id="total-va",
        title="Total Calculated Load",
        prompt="Add the lighting demand, HVAC, receptacle demand, kitchen demand and the 25% motor addition.",
        nec_reference="NEC 220.40",
        formula="Sum of all demand loads",
        expected_answer=_total_va,
        validate_answer=within(500),
        hint=DerivedHint(_total_hint),
        requires=ids(*TOTAL_VA_COMPONENT_STEPS),
    ),
    CalculationStep(
        id="service-conductor",
        title="Service Conductor (Table 310.15(B)(16))",
        prompt=(
            "Divide the total VA by the voltage (single-phase) or by voltage × √3 (three-phase), then find "
            "the conductor in Table 310.15(B)(16), 75°C copper. Enter its ampacity."
        ),
        nec_reference="NEC Table 310.15(B)(16)",
        formula="Total VA ÷ service voltage → Table 310.15(B)(16) ampacity",
        expected_answer=_service_conductor,
        validate_answer=catalog_at_least(CONDUCTOR_AMPACITIES),
        hint=DerivedHint(_conductor_hint),
        requires=ids("total-va"),
        store=_snap_conductor,
    ),
    CalculationStep(
        id="gec-size",
        title="GEC Sizing (Table 250.66)",
        prompt=(
            "Size the grounding electrode conductor from the service conductor with Table 250.66. "
            "Enter the AWG number (10 for 1/0, 20 for 2/0, 30 for 3/0)."
        ),
        nec_reference="NEC Table 250.66",
        formula="Service conductor size → Table 250.66 → GEC AWG",
        expected_answer=_gec,
        validate_answer=catalog_exact(GEC_CODES),
        hint=DerivedHint(_gec_hint),
        requires=ids("service-conductor"),
        store=int,
    ),
)


def active_steps(scenario: CommercialScenario) -> Tuple[CalculationStep, ...]:
    """Every commercial scenario walks the same ten steps."""
    return COMMERCIAL_STEPS


QUICK_REFERENCE_ITEMS = (
    QuickReferenceItem(
        "lighting-load", "General Lighting",
        "Table 220.42(A): VA/sq ft × sq ft (125% already included)", "lighting-load",
    ),
    QuickReferenceItem(
        "lighting-demand", "Lighting Demand",
        "Table 220.45: Warehouse 100%/50%, Hotel 50%/40%, Hospital 40%/20%, others 100%", "lighting-demand",
    ),
    QuickReferenceItem(
        "hvac", "HVAC", "220.60: Larger of heating OR cooling (1Ø→430.248, 3Ø→430.250)", "hvac",
    ),
    QuickReferenceItem(
        "outlet-loads", "Outlet Loads",
        "220.14: Lampholders 600 VA, Recepts 180 VA, Show Window 200 VA/ft, Sign 1,200 VA", "outlet-loads",
    ),
    QuickReferenceItem(
        "receptacle-demand", "Receptacle Demand",
        "Table 220.44: First 10 kVA @ 100%, remainder @ 50%", "receptacle-demand",
    ),
    QuickReferenceItem(
        "kitchen-demand", "Kitchen Equipment",
        "Table 220.56: 1-2 units 100%, 3=90%, 4=80%, 5=70%, 6+=65%", "kitchen-demand",
    ),
    QuickReferenceItem("largest-motor", "Largest Motor", "220.50: Add 25% of largest motor load", "largest-motor-25"),
    QuickReferenceItem("conductor", "Conductor Sizing", "Table 310.15(B)(16): 75°C copper ampacity", "service-conductor"),
    QuickReferenceItem("gec", "GEC Sizing", "Table 250.66: Based on service conductor size", "gec-size"),
)
