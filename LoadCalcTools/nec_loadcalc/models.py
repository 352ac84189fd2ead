"""Data models for NEC load calculation scenarios."""
from dataclasses import dataclass
from typing import Optional, Tuple

from .utils.validation import ValidationError, non_negative

APPLIANCE_KINDS = (
    "circuit",
    "range",
    "cooktop",
    "dryer",
    "water_heater",
    "cooling",
    "heating",
    "appliance",
    "other",
)

MOTOR_LOAD_KINDS = ("cooling", "heating", "other")


@dataclass(frozen=True, slots=True)
class Motor:
    """A motor rated in horsepower."""

    name: str
    horsepower: float
    voltage: float
    phase: int = 1

    def __post_init__(self) -> None:
        non_negative(self.horsepower, "horsepower")
        if self.phase not in (1, 3):
            raise ValidationError("phase must be 1 or 3")


@dataclass(frozen=True, slots=True)
class Appliance:
    """A piece of dwelling equipment listed on the scenario card."""

    id: str
    name: str
    watts: float
    nec_reference: str
    kind: str = "appliance"
    fixed_in_place: bool = False
    # Motors are rated in HP and must be converted through the FLC tables
    horsepower: Optional[float] = None
    motor_voltage: Optional[float] = None

    def __post_init__(self) -> None:
        non_negative(self.watts, f"{self.id} watts")
        non_negative(self.horsepower, f"{self.id} horsepower")
        if self.kind not in APPLIANCE_KINDS:
            raise ValidationError(f"unknown appliance kind {self.kind!r}")
        if self.horsepower is not None and self.motor_voltage is None:
            raise ValidationError(f"{self.id} motor needs a voltage")
        # Motor VA is only summed by the fixed-appliance, HVAC and other-load steps
        if self.horsepower is not None and not (self.fixed_in_place or self.kind in MOTOR_LOAD_KINDS):
            raise ValidationError(
                f"{self.id} motor must be fixed in place or of kind {', '.join(MOTOR_LOAD_KINDS)}"
            )

    @property
    def is_motor(self) -> bool:
        return self.horsepower is not None

    @property
    def motor(self) -> Optional[Motor]:
        if not self.is_motor:
            return None
        return Motor(self.name, self.horsepower, self.motor_voltage, 1)


@dataclass(frozen=True, slots=True)
class HouseScenario:
    """A dwelling unit for the standard method calculation."""

    id: str
    name: str
    square_footage: float
    voltage: float
    appliances: Tuple[Appliance, ...]
    description: str = ""

    def __post_init__(self) -> None:
        non_negative(self.square_footage, "square footage")

    def appliance(self, appliance_id: str) -> Optional[Appliance]:
        return next((a for a in self.appliances if a.id == appliance_id), None)

    def of_kind(self, *kinds: str) -> Tuple[Appliance, ...]:
        return tuple(a for a in self.appliances if a.kind in kinds)

    @property
    def fixed_appliances(self) -> Tuple[Appliance, ...]:
        return tuple(a for a in self.appliances if a.fixed_in_place)

    @property
    def motors(self) -> Tuple[Appliance, ...]:
        return tuple(a for a in self.appliances if a.is_motor)


@dataclass(frozen=True, slots=True)
class KitchenEquipmentItem:
    name: str
    watts: float


@dataclass(frozen=True, slots=True)
class CommercialScenario:
    """A non-dwelling occupancy for the Part IV calculation."""

    id: str
    name: str
    building_type: str
    square_footage: float
    voltage: float
    phases: int
    lampholders: int = 0
    receptacles: int = 0
    multioutlet_assembly_feet: float = 0
    show_window_feet: float = 0
    has_sign_outlet: bool = False
    kitchen_equipment: Tuple[KitchenEquipmentItem, ...] = ()
    ac_motor: Optional[Motor] = None
    heat_watts: float = 0
    other_motors: Tuple[Motor, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        for name in (
            "square_footage",
            "lampholders",
            "receptacles",
            "multioutlet_assembly_feet",
            "show_window_feet",
            "heat_watts",
        ):
            non_negative(getattr(self, name), name.replace("_", " "))
        if self.phases not in (1, 3):
            raise ValidationError("phases must be 1 or 3")

    @property
    def all_motors(self) -> Tuple[Motor, ...]:
        """The A/C compressor (if any) followed by the other motors."""
        if self.ac_motor is None:
            return self.other_motors
        return (self.ac_motor,) + self.other_motors
