"""Residential walkthroughs against the documented worked answers."""

import pytest

from nec_loadcalc.calculators.residential import (
    QUICK_REFERENCE_ITEMS,
    RESIDENTIAL_STEPS,
    active_steps,
    appliance_display_value,
    motor_conversion_step,
)
from nec_loadcalc.evaluator import GuidedCalculation
from nec_loadcalc.models import Appliance, HouseScenario
from nec_loadcalc.scenarios import HOUSE_SCENARIOS, HOUSE_SCENARIOS_BY_ID, STANDARD_CIRCUITS

ALWAYS_PRESENT = {
    "general-lighting", "small-appliance", "laundry", "subtotal", "demand-first-10k",
    "demand-remainder", "net-lighting", "fixed-appliances", "total-va",
    "service-amps", "service-conductor", "gec-size",
}


def step_ids(scenario):
    return [step.id for step in active_steps(scenario)]


@pytest.fixture
def small():
    return HOUSE_SCENARIOS_BY_ID["small"]


class TestSmallHome:
    """The 1,200 sq ft golden walkthrough."""

    def test_step_order(self, small):
        assert step_ids(small) == [
            "general-lighting", "small-appliance", "laundry", "subtotal",
            "demand-first-10k", "demand-remainder", "net-lighting", "fixed-appliances",
            "dryer", "range", "water-heater", "hvac", "total-va",
            "service-amps", "service-conductor", "gec-size",
        ]

    def test_solution(self, small):
        answers = GuidedCalculation(small).solve()
        assert answers == {
            "general-lighting": 3600,
            "small-appliance": 3000,
            "laundry": 1500,
            "subtotal": 8100,
            "demand-first-10k": 8100,
            "demand-remainder": 0,
            "net-lighting": 8100,
            "fixed-appliances": 1200,
            "dryer": 5000,
            "range": 8000,
            "water-heater": 4500,
            "hvac": 10000,
            "total-va": 36800,
            "service-amps": 200,
            "service-conductor": 200,
            "gec-size": 4,
        }

    def test_hint_for_demand_under_threshold(self, small):
        calc = GuidedCalculation(small)
        answers = calc.solve()
        hint = calc.hint(calc.index_of("demand-first-10k"), answers)
        assert "8,100" in hint
        assert "100%" in hint


class TestGoldenTotals:
    @pytest.mark.parametrize("scenario_id,total,service,conductor,gec", [
        ("small", 36800, 200, 200, 4),
        ("medium", 48747, 225, 230, 2),
        ("large", 80067, 400, 420, 10),
        ("condo", 15994, 100, 100, 8),
    ])
    def test_service_chain(self, scenario_id, total, service, conductor, gec):
        answers = GuidedCalculation(HOUSE_SCENARIOS_BY_ID[scenario_id]).solve()
        assert answers["total-va"] == total
        assert answers["service-amps"] == service
        assert answers["service-conductor"] == conductor
        assert answers["gec-size"] == gec

    def test_medium_details(self):
        answers = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["medium"]).solve()
        assert answers["net-lighting"] == 10175
        assert answers["convert-disposal"] == 1176
        assert answers["convert-pool-pump"] == 1920
        assert answers["fixed-appliances"] == 4572
        assert answers["convert-ac"] == 4080
        assert answers["hvac"] == 15000

    def test_large_details(self):
        answers = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["large"]).solve()
        assert answers["demand-first-10k"] == 10000
        assert answers["demand-remainder"] == 1750
        assert answers["net-lighting"] == 11750
        assert answers["fixed-appliances"] == 6117
        assert answers["range"] == 12000
        assert answers["convert-ac"] == 6720
        assert answers["other-loads"] == 13200

    def test_condo_details(self):
        answers = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["condo"]).solve()
        assert answers["convert-disposal"] == 864
        assert answers["fixed-appliances"] == 2064
        assert answers["hvac"] == 2880


class TestStepFilter:
    def test_condo_omits_dryer_range_and_other(self):
        ids = step_ids(HOUSE_SCENARIOS_BY_ID["condo"])
        assert "dryer" not in ids
        assert "range" not in ids
        assert "other-loads" not in ids
        assert "water-heater" in ids

    def test_conversion_step_precedes_consumer(self):
        ids = step_ids(HOUSE_SCENARIOS_BY_ID["medium"])
        fixed = ids.index("fixed-appliances")
        assert ids[fixed - 2:fixed] == ["convert-disposal", "convert-pool-pump"]
        assert ids[ids.index("hvac") - 1] == "convert-ac"

    def test_no_motor_no_conversion(self, small):
        assert not [i for i in step_ids(small) if i.startswith("convert-")]

    def test_minimal_dwelling(self):
        bare = HouseScenario("bare", "Bare", 600, 240, STANDARD_CIRCUITS)
        assert set(step_ids(bare)) == ALWAYS_PRESENT

    def test_other_motor_reaches_total(self):
        fan = Appliance("attic-fan", "Attic Fan (1 HP @ 240V)", 0, "Table 430.248",
                        kind="other", horsepower=1, motor_voltage=240)
        house = HouseScenario("fan", "Fan", 600, 240, STANDARD_CIRCUITS + (fan,))
        ids = step_ids(house)
        assert ids[ids.index("other-loads") - 1] == "convert-attic-fan"
        answers = GuidedCalculation(house).solve()
        assert answers["convert-attic-fan"] == 1920
        assert answers["other-loads"] == 1920
        assert answers["total-va"] == answers["net-lighting"] + 1920

    @pytest.mark.parametrize("scenario", HOUSE_SCENARIOS, ids=lambda s: s.id)
    def test_every_motor_has_conversion_step(self, scenario):
        ids = step_ids(scenario)
        for appliance in scenario.motors:
            assert f"convert-{appliance.id}" in ids

    def test_cooktop_alone_keeps_range_step(self):
        cooktop = Appliance("cooktop", "Cooktop", 7000, "Table 220.55", kind="cooktop")
        house = HouseScenario("c", "C", 1000, 240, STANDARD_CIRCUITS + (cooktop,))
        assert "range" in step_ids(house)

    @pytest.mark.parametrize("scenario", HOUSE_SCENARIOS, ids=lambda s: s.id)
    def test_requires_only_earlier_steps(self, scenario):
        seen = set()
        for step in active_steps(scenario):
            assert set(step.requires(scenario)) <= seen, step.id
            seen.add(step.id)

    @pytest.mark.parametrize("scenario", HOUSE_SCENARIOS, ids=lambda s: s.id)
    def test_every_appliance_is_covered(self, scenario):
        steps = active_steps(scenario)
        covered = set()
        for step in steps:
            covered.update(step.covers(scenario))
        assert {a.id for a in scenario.appliances} <= covered

    @pytest.mark.parametrize("scenario", HOUSE_SCENARIOS, ids=lambda s: s.id)
    def test_step_ids_unique(self, scenario):
        ids = step_ids(scenario)
        assert len(ids) == len(set(ids))

    def test_static_steps_in_order(self):
        assert [s.id for s in RESIDENTIAL_STEPS][-3:] == ["service-amps", "service-conductor", "gec-size"]


class TestMotorConversionStep:
    def test_step_is_cached(self):
        disposal = HOUSE_SCENARIOS_BY_ID["medium"].appliance("disposal")
        assert motor_conversion_step(disposal) is motor_conversion_step(disposal)

    def test_missing_motor_expects_zero(self):
        disposal = HOUSE_SCENARIOS_BY_ID["medium"].appliance("disposal")
        step = motor_conversion_step(disposal)
        small = HOUSE_SCENARIOS_BY_ID["small"]
        assert step.expected_answer(small, {}) == 0
        assert "enter 0" in step.hint.render(small, {})

    def test_hint_shows_table_lookup(self):
        medium = HOUSE_SCENARIOS_BY_ID["medium"]
        step = motor_conversion_step(medium.appliance("ac"))
        assert "Table 430.248 (230V column): 17 A" in step.hint.render(medium, {})


class TestDisplayAndQuickReference:
    def test_motor_display_value(self):
        disposal = HOUSE_SCENARIOS_BY_ID["medium"].appliance("disposal")
        assert appliance_display_value(disposal) == "0.5 HP @ 120V (1,176 VA)"

    def test_plain_display_value(self):
        dishwasher = HOUSE_SCENARIOS_BY_ID["small"].appliance("dishwasher")
        assert appliance_display_value(dishwasher) == "1,200 W"

    def test_quick_reference_ids_unique(self):
        ids = [item.id for item in QUICK_REFERENCE_ITEMS]
        assert len(ids) == len(set(ids))
