"""Tests for answer checking, storage and coverage tracking."""

import pytest

from nec_loadcalc.calculators import residential
from nec_loadcalc.evaluator import (
    GuidedCalculation,
    Submission,
    expected,
    is_acceptable,
    stored_value,
    steps_for,
    submit,
)
from nec_loadcalc.scenarios import (
    COMMERCIAL_SCENARIOS,
    COMMERCIAL_SCENARIOS_BY_ID,
    HOUSE_SCENARIOS,
    HOUSE_SCENARIOS_BY_ID,
)
from nec_loadcalc.steps import StaticHint

ALL_SCENARIOS = HOUSE_SCENARIOS + COMMERCIAL_SCENARIOS


@pytest.fixture
def small():
    return GuidedCalculation(HOUSE_SCENARIOS_BY_ID["small"])


@pytest.fixture
def small_answers(small):
    return small.solve()


class TestAcceptance:
    @pytest.mark.parametrize("value", [None, True, float("nan"), float("inf"), "abc", ""])
    def test_unusable_input_rejected(self, small, small_answers, value):
        index = small.index_of("total-va")
        assert small.is_acceptable(index, value, small_answers) is False

    def test_thousands_separator_accepted(self, small, small_answers):
        assert small.is_acceptable(small.index_of("total-va"), "36,800", small_answers)

    def test_tolerance(self, small, small_answers):
        index = small.index_of("total-va")
        assert small.is_acceptable(index, 37300, small_answers)
        assert not small.is_acceptable(index, 37301, small_answers)

    def test_exact_steps(self, small):
        index = small.index_of("small-appliance")
        assert small.is_acceptable(index, 3000, {})
        assert not small.is_acceptable(index, 3001, {})

    def test_service_size_must_be_standard(self, small, small_answers):
        index = small.index_of("service-amps")
        assert small.is_acceptable(index, 200, small_answers)
        assert small.is_acceptable(index, 225, small_answers)
        assert not small.is_acceptable(index, 175, small_answers)
        assert not small.is_acceptable(index, 150, small_answers)

    def test_service_size_one_step_under_accepted(self):
        calc = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["medium"])
        answers = calc.solve()
        index = calc.index_of("service-amps")
        assert calc.expected(index, answers) == 225
        assert calc.is_acceptable(index, 200, answers)
        assert not calc.is_acceptable(index, 150, answers)

    def test_conductor_must_be_catalog_ampacity(self, small, small_answers):
        index = small.index_of("service-conductor")
        assert small.is_acceptable(index, 200, small_answers)
        assert small.is_acceptable(index, 230, small_answers)
        assert not small.is_acceptable(index, 210, small_answers)
        assert not small.is_acceptable(index, 175, small_answers)

    def test_gec_must_match(self, small, small_answers):
        index = small.index_of("gec-size")
        assert small.is_acceptable(index, 4, small_answers)
        assert not small.is_acceptable(index, 6, small_answers)
        assert not small.is_acceptable(index, 5, small_answers)

    def test_module_level_helper(self):
        step = residential.RESIDENTIAL_STEPS[1]
        assert is_acceptable(step, "3,000", 3000)
        assert not is_acceptable(step, "three thousand", 3000)


class TestStoredValue:
    def test_service_size_snaps_up(self, small, small_answers):
        assert small.stored_value(small.index_of("service-amps"), small_answers, 175) == 200

    def test_conductor_snaps_to_ampacity(self, small, small_answers):
        assert small.stored_value(small.index_of("service-conductor"), small_answers, 230) == 230

    def test_plain_value_kept(self, small):
        assert small.stored_value(small.index_of("general-lighting"), {}, "3,605") == 3605

    @pytest.mark.parametrize("value", ["abc", None, float("nan"), True])
    def test_non_numeric_stores_zero(self, small, value):
        assert small.stored_value(0, {}, value) == 0

    def test_non_numeric_catalog_step_stores_zero(self, small, small_answers):
        assert small.stored_value(small.index_of("service-amps"), small_answers, "lots") == 0

    @pytest.mark.parametrize("scenario", ALL_SCENARIOS, ids=lambda s: s.id)
    def test_solving_is_idempotent(self, scenario):
        calc = GuidedCalculation(scenario)
        assert calc.solve() == calc.solve()

    @pytest.mark.parametrize("scenario", ALL_SCENARIOS, ids=lambda s: s.id)
    def test_step_operations_are_repeatable(self, scenario):
        calc = GuidedCalculation(scenario)
        answers = calc.solve()
        for index in range(len(calc)):
            target = calc.expected(index, answers)
            first = (
                calc.expected(index, answers),
                calc.is_acceptable(index, target, answers),
                calc.stored_value(index, answers, target),
                calc.hint(index, answers),
            )
            second = (
                calc.expected(index, answers),
                calc.is_acceptable(index, target, answers),
                calc.stored_value(index, answers, target),
                calc.hint(index, answers),
            )
            assert first == second
            assert first[1] is True

    def test_stored_expected_is_stable(self, small, small_answers):
        for index, step in enumerate(small.steps):
            target = small.expected(index, small_answers)
            assert small.stored_value(index, small_answers, target) == small_answers[step.id]


class TestPriorAnswers:
    def test_missing_answers_read_as_zero(self, small):
        assert small.expected(small.index_of("subtotal"), {}) == 0
        assert small.expected(small.index_of("total-va"), {}) == 0

    def test_undeclared_answers_are_hidden(self, small):
        step = small.steps[small.index_of("subtotal")]
        scenario = small.scenario
        # net-lighting is not something subtotal reads
        assert expected(step, scenario, {"general-lighting": 100, "net-lighting": 9999}) == 100

    def test_later_steps_read_stored_answers(self, small):
        answers = {"subtotal": 15000}
        assert small.expected(small.index_of("demand-first-10k"), answers) == 10000
        assert small.expected(small.index_of("demand-remainder"), answers) == 1750

    def test_gec_reads_stored_conductor(self, small):
        assert small.expected(small.index_of("gec-size"), {"service-conductor": 420}) == 10


class TestSubmit:
    def test_accepted(self, small, small_answers):
        result = small.submit(small.index_of("service-conductor"), small_answers, "230")
        assert result == Submission(expected=200, accepted=True, stored=230)

    def test_rejected(self, small, small_answers):
        result = small.submit(small.index_of("total-va"), small_answers, "abc")
        assert result.accepted is False
        assert result.stored is None
        assert result.expected == 36800

    def test_module_level_submit(self):
        scenario = HOUSE_SCENARIOS_BY_ID["small"]
        step = residential.RESIDENTIAL_STEPS[0]
        assert submit(step, scenario, {}, 3600).stored == 3600
        assert stored_value(step, scenario, {}, 3600) == 3600


class TestHints:
    def test_static_hint(self, small):
        step = small.steps[small.index_of("small-appliance")]
        assert isinstance(step.hint, StaticHint)
        assert small.hint(small.index_of("small-appliance"), {}) == "2 circuits × 1,500 VA = 3,000 VA"

    def test_derived_hint_uses_prior_answers(self, small, small_answers):
        hint = small.hint(small.index_of("service-amps"), small_answers)
        assert "36,800 VA ÷ 240V = 153.3 A" in hint
        assert "200A" in hint

    def test_fixed_appliance_hint_applies_demand(self):
        calc = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["medium"])
        hint = calc.hint(calc.index_of("fixed-appliances"), calc.solve())
        assert "75%" in hint
        assert "4,572" in hint


class TestCoverage:
    def test_nothing_accounted_before_start(self, small):
        assert small.accounted_equipment(-1) == set()

    def test_accounted_grows_with_steps(self):
        calc = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["medium"])
        before = calc.accounted_equipment(calc.index_of("fixed-appliances") - 1)
        after = calc.accounted_equipment(calc.index_of("fixed-appliances"))
        assert "disposal" not in before
        assert {"dishwasher", "disposal", "microwave", "pool-pump"} <= after

    def test_everything_accounted_at_end(self, small):
        accounted = small.accounted_equipment(len(small) - 1)
        assert {a.id for a in small.scenario.appliances} <= accounted

    def test_quick_reference_covered_after_step(self, small):
        index = small.index_of("dryer")
        assert not small.quick_ref_covered("dryer", index)
        assert small.quick_ref_covered("dryer", index + 1)

    def test_quick_reference_absent_step_never_covered(self):
        calc = GuidedCalculation(HOUSE_SCENARIOS_BY_ID["condo"])
        assert not calc.quick_ref_covered("dryer", len(calc))

    def test_unknown_quick_reference(self, small):
        assert not small.quick_ref_covered("nope", len(small))

    def test_commercial_quick_reference(self):
        calc = GuidedCalculation(COMMERCIAL_SCENARIOS_BY_ID["retail"])
        assert calc.quick_ref_covered("largest-motor", calc.index_of("total-va"))


class TestDispatch:
    def test_unknown_scenario_type(self):
        with pytest.raises(TypeError):
            steps_for(object())

    def test_index_of_unknown_step(self, small):
        with pytest.raises(KeyError):
            small.index_of("nope")

    def test_worked_rows(self, small):
        rows = small.worked_rows()
        assert len(rows) == len(small)
        step, answer, hint = rows[-1]
        assert step.id == "gec-size"
        assert answer == 4
        assert "Table 250.66" in hint
