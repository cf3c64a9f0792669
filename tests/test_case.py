"""Tests for TestCase: assertions, output, timing and the resource guard."""

from pathlib import Path

import pytest

from caseledger.assertions.base import ComparisonKind, ResultKind
from caseledger.case import RC_VIOLATION_MESSAGE, CaseState
from caseledger.errors import ResourceViolationError
from caseledger.location import SourceLocation


def output(case) -> str:
    return case.stream.getvalue()


# --- scenarios ---


def test_math_scenario(make_case):
    def math(t):
        t.assert_eq(2 + 2, 4)
        t.assert_gt(1, 5)

    case = make_case(math)
    with case:
        case.run_tests()

    results = [(e.result, e.message) for e in case.infos]
    assert results == [
        (ResultKind.SUCCESS, "OK"),
        (ResultKind.ERROR, "Given values are not greater, expected greater"),
    ]
    assert case.errors == 1
    assert case.state is CaseState.COMPLETED
    text = output(case)
    assert "[SUCCESS]: " in text
    assert "[FAILED]: " in text
    assert "\n[SUMMARY]\nFile: test_math.py\nError/s: 1\n" in text


def test_double_deallocate_aborts(make_case):
    def leaky(t):
        x = t.allocate(list)
        t.deallocate(x)
        t.deallocate(x)
        t.assert_eq(1, 1)

    case = make_case(leaky)
    with pytest.raises(ResourceViolationError) as exc_info:
        with case:
            case.run_tests()

    assert exc_info.value.case is case
    assert case.state is CaseState.ABORTED
    assert case.resources.balance == -1
    last = case.infos.last()
    assert last.result is ResultKind.CRITICAL
    assert last.message == RC_VIOLATION_MESSAGE
    # the assertion after the second deallocate never ran
    assert [e.result for e in case.infos] == [ResultKind.CRITICAL]
    assert case.errors == 1

    text = output(case)
    assert "[CRITICAL]: " in text
    assert f"-> {RC_VIOLATION_MESSAGE}\n" in text
    assert text.count("[SUMMARY]") == 1
    assert text.endswith("ns\n")


# --- comparison properties ---


@pytest.mark.parametrize("a,b", [(1, 1), ("x", "x"), (2.5, 2.5), ([1], [1])])
def test_equal_pairs(case, a, b):
    assert case.assert_eq(a, b).result is ResultKind.SUCCESS
    assert case.assert_uneq(a, b).result is ResultKind.ERROR


@pytest.mark.parametrize("a,b", [(1, 2), ("a", "b"), (-1.5, 0), ((1, 2), (1, 3))])
def test_ordered_pairs(case, a, b):
    assert case.assert_lt(a, b).result is ResultKind.SUCCESS
    assert case.assert_leq(a, b).result is ResultKind.SUCCESS
    assert case.assert_gt(a, b).result is ResultKind.ERROR
    assert case.assert_geq(a, b).result is ResultKind.ERROR


def test_error_tally_counts_failures_only(case):
    for _ in range(3):
        case.assert_eq(1, 2)
    for _ in range(4):
        case.assert_eq(1, 1)

    assert case.errors == 3
    assert case.infos.error_count == 3
    assert len(case.infos) == 7


def test_repeated_assertion_produces_identical_entries(case):
    first = case.assert_leq(3, 2)
    second = case.assert_leq(3, 2)

    assert first is not second
    assert (first.result, first.message) == (second.result, second.message)


def test_assert_that_is_the_single_entry_point(case, mocker):
    spy = mocker.spy(case, "assert_that")
    case.assert_eq(1, 1)
    case.assert_uneq(1, 2)
    case.assert_gt(2, 1)
    case.assert_lt(1, 2)
    case.assert_geq(2, 2)
    case.assert_leq(2, 2)

    kinds = [call.args[0] for call in spy.call_args_list]
    assert kinds == [
        ComparisonKind.EQUAL,
        ComparisonKind.NOT_EQUAL,
        ComparisonKind.GREATER_THAN,
        ComparisonKind.LESS_THAN,
        ComparisonKind.GREATER_OR_EQUAL,
        ComparisonKind.LESS_OR_EQUAL,
    ]


def test_reserved_kind_records_nothing(case):
    assert case.assert_that(ComparisonKind.MEM_LEAK, 1, 2) is None
    assert len(case.infos) == 0
    assert case.errors == 0
    assert output(case) == ""


# --- output ---


def test_assertion_line_format(case):
    where = SourceLocation("suite.py", "check_sum", 12, 5)
    case.assert_eq(1, 1, location=where)
    case.assert_eq(1, 2, location=where)

    assert output(case).splitlines() == [
        "[SUCCESS]: (suite.py, 12:5:0ns) [check_sum] -> OK",
        "[FAILED]: (suite.py, 12:5:0ns) [check_sum] -> "
        "Given values are not equal, expected equal",
    ]


def test_summary_format(case):
    with case:
        pass

    # the fake clock advanced one step between declaration and summary
    assert output(case) == "\n[SUMMARY]\nFile: test_math.py\nError/s: 0\n100ns\n"


def test_assertion_captures_caller_location(case):
    def check_sum(t):
        t.assert_eq(1, 1)

    check_sum(case)

    loc = case.infos.last().location
    assert Path(loc.file_name).name == Path(__file__).name
    assert loc.function_name == "check_sum"
    assert loc.line > 0
    assert case.current_location == loc
    assert "[check_sum]" in output(case)


def test_declaration_location_is_kept(case):
    case.assert_eq(1, 1)
    declared = SourceLocation("test_math.py", "math", 1, 1)
    assert case.location == declared
    assert case.current_location != declared


# --- running and timing ---


def test_body_duration_is_tracked_separately(make_case):
    def body(t):
        t.assert_eq(1, 1)
        t.assert_eq(2, 2)

    case = make_case(body)
    case.run_tests()

    assert case.body_duration_ns == 100
    assert all(e.duration_ns == 0 for e in case.infos)


def test_body_without_assertions_is_still_timed(make_case):
    case = make_case(lambda t: None)
    case.run_tests()

    assert case.body_duration_ns == 100
    assert len(case.infos) == 0


def test_sub_functions_run_after_body_in_registration_order(make_case):
    calls = []

    def body(t):
        calls.append("body")

    def first(t):
        calls.append("first")
        t.assert_eq(1, 1)

    def second(t):
        calls.append("second")

    case = make_case(body)
    case.test_function(first)
    case.test_function(second)
    case.run_tests()

    assert calls == ["body", "first", "second"]
    fn_entries = case.infos.functions()
    assert [e.function for e in fn_entries] == [first, second]
    assert [e.duration_ns for e in fn_entries] == [100, 100]
    assert fn_entries[0].message.endswith("first")
    # assertion issued by a sub-function is not timed
    assert case.infos.last().duration_ns == 0


def test_state_moves_through_running(make_case):
    seen = []
    case = make_case(lambda t: seen.append(t.state))
    assert case.state is CaseState.DECLARED
    with case:
        case.run_tests()
    assert seen == [CaseState.RUNNING]
    assert case.state is CaseState.COMPLETED


def test_exception_in_body_still_prints_summary(make_case):
    def broken(t):
        t.assert_eq(1, 2)
        raise RuntimeError("boom")

    case = make_case(broken)
    with pytest.raises(RuntimeError, match="boom"):
        with case:
            case.run_tests()

    assert "Error/s: 1" in output(case)
    assert case.state is CaseState.RUNNING


# --- resource counter ---


def test_balanced_acquire_release_never_triggers_guard(case):
    with case:
        a = case.allocate(dict, size=1)
        b = case.allocate(list)
        case.deallocate(a)
        case.deallocate(b)

    assert a == {"size": 1}
    assert b == []
    assert case.resources.balance == 0
    assert case.errors == 0
    assert case.state is CaseState.COMPLETED
    assert len(case.rc_infos) == 2


def test_release_without_acquire_is_critical(case):
    with pytest.raises(ResourceViolationError):
        case.deallocate()

    assert case.resources.balance == -1
    assert case.infos.last().result is ResultKind.CRITICAL
    assert "[SUMMARY]" in output(case)


def test_negative_counter_is_caught_at_scope_exit(case):
    with pytest.raises(ResourceViolationError):
        with case:
            case.resources.release()

    assert case.state is CaseState.ABORTED
    assert output(case).count("[SUMMARY]") == 1


def test_unreleased_allocation_is_not_an_error(case):
    with case:
        case.allocate(object)

    assert case.resources.balance == 1
    assert case.errors == 0


def test_allocation_sites_are_recorded(case):
    def setup(t):
        t.allocate(list)

    setup(case)
    assert case.rc_infos[0].function_name == "setup"
    assert Path(case.rc_infos[0].file_name).name == Path(__file__).name


def test_tally_changes_when_drawn_not_when_recorded(case):
    entry = case.put_log(ResultKind.ERROR, "x")
    assert case.errors == 0
    assert case.infos.error_count == 1

    case.put(entry)
    assert case.errors == 1
    assert output(case).startswith("[FAILED]: ")


def test_summary_records_elapsed_time(case):
    with case:
        pass

    assert case.elapsed_ns == 100
    # later readings of the clock do not change the recorded value
    assert case.since_time() != case.elapsed_ns
    assert case.elapsed_ns == 100
