"""Motor full-load current lookup and VA conversion (NEC 430.248 / 430.250)."""
from __future__ import annotations

from math import sqrt
from types import MappingProxyType
from typing import Tuple

from .models import Motor
from .utils.rounding import round_half_up

# Table 430.248, single-phase. Scenario voltages of 120/240 read the 115/230 columns.
SINGLE_PHASE_FLC = MappingProxyType({
    0.167: {"115V": 4.4, "230V": 2.2},   # 1/6 HP
    0.25: {"115V": 5.8, "230V": 2.9},
    0.333: {"115V": 7.2, "230V": 3.6},   # 1/3 HP
    0.5: {"115V": 9.8, "230V": 4.9},
    0.75: {"115V": 13.8, "230V": 6.9},
    1: {"115V": 16, "230V": 8},
    1.5: {"115V": 20, "230V": 10},
    2: {"115V": 24, "230V": 12},
    3: {"115V": 34, "230V": 17},
    5: {"115V": 56, "230V": 28},
    7.5: {"115V": 80, "230V": 40},
    10: {"115V": 100, "230V": 50},
})

# Table 430.250, three-phase induction motors.
THREE_PHASE_FLC = MappingProxyType({
    0.5: {"208V": 2.4, "230V": 2.2},
    0.75: {"208V": 3.5, "230V": 3.2},
    1: {"208V": 4.6, "230V": 4.2},
    1.5: {"208V": 6.6, "230V": 6},
    2: {"208V": 7.5, "230V": 6.8},
    3: {"208V": 10.6, "230V": 9.6},
    5: {"208V": 16.7, "230V": 15.2},
    7.5: {"208V": 24.2, "230V": 22},
    10: {"208V": 30.8, "230V": 28},
    15: {"208V": 46.2, "230V": 42},
    20: {"208V": 59.4, "230V": 54},
    25: {"208V": 74.8, "230V": 68},
    30: {"208V": 88, "230V": 80},
    40: {"208V": 114, "230V": 104},
    50: {"208V": 143, "230V": 130},
})


def motor_table_info(voltage: float, phase: int) -> Tuple[str, str]:
    """Return ``(table number, column)`` used for a motor of this voltage/phase."""
    if phase == 3:
        return "430.250", "208V" if voltage <= 208 else "230V"
    return "430.248", "115V" if voltage <= 120 else "230V"


def motor_full_load_current(horsepower: float, voltage: float, phase: int) -> float:
    """Full-load amps from the phase-appropriate table; 0 for untabulated HP."""
    table = THREE_PHASE_FLC if phase == 3 else SINGLE_PHASE_FLC
    _table_num, column = motor_table_info(voltage, phase)
    row = table.get(horsepower)
    if row is None:
        return 0
    return row[column]


def motor_to_va(motor: Motor) -> int:
    """Apparent power of *motor*: FLC x V for 1 phase, FLC x V x sqrt(3) for 3 phase."""
    flc = motor_full_load_current(motor.horsepower, motor.voltage, motor.phase)
    if motor.phase == 3:
        return round_half_up(flc * motor.voltage * sqrt(3))
    return round_half_up(flc * motor.voltage)


def describe_conversion(motor: Motor) -> str:
    """Worked text for converting *motor* to VA."""
    flc = motor_full_load_current(motor.horsepower, motor.voltage, motor.phase)
    va = motor_to_va(motor)
    table_num, column = motor_table_info(motor.voltage, motor.phase)
    phase_label = "three-phase" if motor.phase == 3 else "single-phase"
    root = " × √3" if motor.phase == 3 else ""
    return (
        f"{motor.name}: {motor.horsepower} HP, {phase_label} @ {motor.voltage}V\n"
        f"Table {table_num} ({column} column): {flc} A\n"
        f"{flc} A × {motor.voltage}V{root} = {va:,} VA"
    )
