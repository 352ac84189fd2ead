"""Built-in practice scenarios."""
from types import MappingProxyType

from .models import Appliance, CommercialScenario, HouseScenario, KitchenEquipmentItem, Motor

# Present in every dwelling, accounted for by the small appliance and laundry steps
STANDARD_CIRCUITS = (
    Appliance("small-appliance-1", "Small Appliance Circuit 1", 1500, "220.52(A)", kind="circuit"),
    Appliance("small-appliance-2", "Small Appliance Circuit 2", 1500, "220.52(A)", kind="circuit"),
    Appliance("laundry", "Laundry Circuit", 1500, "220.52(B)", kind="circuit"),
)

HOUSE_SCENARIOS = (
    # 8,100 VA net lighting; 36,800 VA -> 153.3 A -> 200 A service
    HouseScenario(
        id="small",
        name="Small Home",
        square_footage=1200,
        voltage=240,
        description="A modest 1,200 sq ft home with basic electric appliances",
        appliances=STANDARD_CIRCUITS + (
            Appliance("range", "Electric Range", 8000, "Table 220.55", kind="range"),
            Appliance("dryer", "Electric Dryer", 5000, "220.54", kind="dryer"),
            Appliance("water-heater", "Water Heater", 4500, "220.51", kind="water_heater"),
            Appliance("dishwasher", "Dishwasher", 1200, "220.53", fixed_in_place=True),
            Appliance("ac", "A/C Condenser", 5000, "220.60", kind="cooling"),
            Appliance("heat", "Electric Heat", 10000, "220.60", kind="heating"),
        ),
    ),
    # 48,747 VA -> 203.1 A -> 225 A service
    HouseScenario(
        id="medium",
        name="Medium Home",
        square_footage=2000,
        voltage=240,
        description="A 2,000 sq ft home with modern appliances, a pool pump and a heat pump",
        appliances=STANDARD_CIRCUITS + (
            Appliance("range", "Electric Range", 12000, "Table 220.55", kind="range"),
            Appliance("dryer", "Electric Dryer", 5500, "220.54", kind="dryer"),
            Appliance("water-heater", "Water Heater", 5500, "220.51", kind="water_heater"),
            Appliance("dishwasher", "Dishwasher", 1500, "220.53", fixed_in_place=True),
            Appliance("disposal", "Disposal (1/2 HP @ 120V)", 0, "Table 430.248",
                      fixed_in_place=True, horsepower=0.5, motor_voltage=120),
            Appliance("microwave", "Microwave (built-in)", 1500, "220.53", fixed_in_place=True),
            Appliance("pool-pump", "Pool Pump (1 HP @ 240V)", 0, "Table 430.248",
                      fixed_in_place=True, horsepower=1, motor_voltage=240),
            Appliance("ac", "A/C (3 HP @ 240V)", 0, "Table 430.248",
                      kind="cooling", horsepower=3, motor_voltage=240),
            Appliance("heat", "Electric Heat", 15000, "220.60", kind="heating"),
        ),
    ),
    # 80,067 VA -> 333.6 A -> 400 A service
    HouseScenario(
        id="large",
        name="Large Home",
        square_footage=3500,
        voltage=240,
        description="A 3,500 sq ft home with premium appliances, a spa and an EV charger",
        appliances=STANDARD_CIRCUITS + (
            Appliance("range", "Electric Range (double oven)", 16000, "Table 220.55", kind="range"),
            Appliance("cooktop", "Separate Cooktop", 6000, "Table 220.55", kind="cooktop"),
            Appliance("dryer", "Electric Dryer", 6000, "220.54", kind="dryer"),
            Appliance("water-heater", "Water Heater (large)", 6000, "220.51", kind="water_heater"),
            Appliance("dishwasher", "Dishwasher", 1800, "220.53", fixed_in_place=True),
            Appliance("disposal", "Disposal (3/4 HP @ 120V)", 0, "Table 430.248",
                      fixed_in_place=True, horsepower=0.75, motor_voltage=120),
            Appliance("microwave", "Microwave (built-in)", 1800, "220.53", fixed_in_place=True),
            Appliance("wine-cooler", "Wine Cooler", 500, "220.53", fixed_in_place=True),
            Appliance("pool-pump", "Pool Pump (1.5 HP @ 240V)", 0, "Table 430.248",
                      fixed_in_place=True, horsepower=1.5, motor_voltage=240),
            Appliance("ac", "A/C (5 HP @ 240V)", 0, "Table 430.248",
                      kind="cooling", horsepower=5, motor_voltage=240),
            Appliance("heat", "Electric Heat (zoned)", 25000, "220.60", kind="heating"),
            Appliance("hot-tub", "Hot Tub/Spa", 6000, "680.44", kind="other"),
            Appliance("ev-charger", "EV Charger", 7200, "625.42", kind="other"),
        ),
    ),
    # No dryer or range (gas); 15,994 VA -> 66.6 A -> 100 A service
    HouseScenario(
        id="condo",
        name="Compact Condo",
        square_footage=850,
        voltage=240,
        description="An 850 sq ft condo with gas cooking and a shared laundry room",
        appliances=STANDARD_CIRCUITS + (
            Appliance("water-heater", "Water Heater", 4000, "220.51", kind="water_heater"),
            Appliance("dishwasher", "Dishwasher", 1200, "220.53", fixed_in_place=True),
            Appliance("disposal", "Disposal (1/3 HP @ 120V)", 0, "Table 430.248",
                      fixed_in_place=True, horsepower=0.333, motor_voltage=120),
            Appliance("ac", "A/C (2 HP @ 240V)", 0, "Table 430.248",
                      kind="cooling", horsepower=2, motor_voltage=240),
        ),
    ),
)

COMMERCIAL_SCENARIOS = (
    # 31,020 VA -> 129.2 A -> 1 AWG (130 A) -> 6 AWG GEC
    CommercialScenario(
        id="retail",
        name="Retail Store",
        building_type="retail",
        square_footage=3000,
        voltage=240,
        phases=1,
        description="A 3,000 sq ft retail store with show window displays and a single HVAC unit",
        receptacles=56,
        show_window_feet=30,
        has_sign_outlet=True,
        ac_motor=Motor("A/C Compressor", 5, 240, 1),
        heat_watts=10000,
    ),
    # 61,880 VA -> 171.7 A -> 2/0 AWG (175 A) -> 4 AWG GEC
    CommercialScenario(
        id="restaurant",
        name="Restaurant",
        building_type="restaurant",
        square_footage=4000,
        voltage=208,
        phases=3,
        description="A 4,000 sq ft restaurant on a 120/208V 3-phase service with a full kitchen",
        lampholders=10,
        receptacles=40,
        has_sign_outlet=True,
        kitchen_equipment=(
            KitchenEquipmentItem("Commercial Range", 8000),
            KitchenEquipmentItem("Deep Fryer", 6000),
            KitchenEquipmentItem("Convection Oven", 5500),
            KitchenEquipmentItem("Dishwasher", 4500),
            KitchenEquipmentItem("Steam Table", 3500),
            KitchenEquipmentItem("Reach-in Freezer", 2500),
        ),
        ac_motor=Motor("A/C Compressor", 7.5, 208, 3),
        heat_watts=22000,
        other_motors=(
            Motor("Walk-in Compressor", 2, 208, 1),
            Motor("Exhaust Fan", 1, 120, 1),
        ),
    ),
    # 96,000 VA -> 400 A -> 600 kcmil (420 A) -> 1/0 AWG GEC
    CommercialScenario(
        id="office",
        name="Office Building",
        building_type="office",
        square_footage=15000,
        voltage=240,
        phases=1,
        description="A 15,000 sq ft office building with multioutlet assemblies and large HVAC",
        receptacles=250,
        multioutlet_assembly_feet=60,
        has_sign_outlet=True,
        ac_motor=Motor("A/C Compressor", 10, 240, 1),
        heat_watts=40000,
        other_motors=(Motor("Elevator Motor", 7.5, 240, 1),),
    ),
    # 38,250 VA -> 159.4 A -> 2/0 AWG (175 A) -> 4 AWG GEC
    CommercialScenario(
        id="warehouse",
        name="Warehouse",
        building_type="warehouse",
        square_footage=15000,
        voltage=240,
        phases=1,
        description="A 15,000 sq ft warehouse with heavy-duty lampholders and dock motors",
        lampholders=24,
        receptacles=20,
        has_sign_outlet=True,
        ac_motor=Motor("A/C Compressor", 5, 240, 1),
        other_motors=(
            Motor("Conveyor Motor", 3, 240, 1),
            Motor("Dock Door Motor", 1.5, 240, 1),
        ),
    ),
)

HOUSE_SCENARIOS_BY_ID = MappingProxyType({s.id: s for s in HOUSE_SCENARIOS})
COMMERCIAL_SCENARIOS_BY_ID = MappingProxyType({s.id: s for s in COMMERCIAL_SCENARIOS})
