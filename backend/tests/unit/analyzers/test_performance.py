"""
Unit Tests for the Performance Tester and Simulated Test Runner
"""
import asyncio
import pytest
from unittest.mock import AsyncMock, Mock, patch

from sentinel.modules.analyzers import performance_tester
from sentinel.modules.analyzers.performance_tester import (
    PerfStatus,
    build_performance_results,
    run_performance_suite,
    run_with_timeout,
)
from sentinel.modules.analyzers.test_generator import (
    GeneratedTestCase,
    CaseCategory,
    CaseComplexity,
)
from sentinel.modules.analyzers.test_runner import run_tests, pass_rate, TestRunResult

NESTED_LOOP_CODE = (
    "for (let i = 0; i < items.length; i++) {\n"
    "  for (let j = 0; j < items.length; j++) {\n"
    "  }\n"
    "}"
)


def make_case(case_id: str) -> GeneratedTestCase:
    return GeneratedTestCase(
        id=case_id,
        input=[],
        expected_output=None,
        description="case",
        category=CaseCategory.EDGE_CASE,
        complexity=CaseComplexity.SIMPLE,
    )


class TestBuildPerformanceResults:
    """Test the canned benchmark rows"""

    def test_four_rows(self):
        """Test the suite always has perf-1..perf-4"""
        results = build_performance_results("")
        assert [r.id for r in results] == ["perf-1", "perf-2", "perf-3", "perf-4"]

    def test_plain_code_is_linear(self):
        """Test plain code passes with O(n)"""
        first = build_performance_results("")[0]

        assert first.complexity == "O(n)"
        assert first.status == PerfStatus.PASSED
        assert first.execution_time == 50

    def test_nested_loops_quadratic(self):
        """Test nested loops scale the time and warn"""
        first = build_performance_results(NESTED_LOOP_CODE)[0]

        assert first.complexity == "O(n²)"
        assert first.status == PerfStatus.WARNING
        assert first.execution_time == 400
        assert (first.before_time, first.after_time) == (1200, 450)

    def test_recursion_exponential(self):
        """Test function-with-return is treated as recursion"""
        first = build_performance_results("function f(n) { return f(n - 1); }")[0]
        assert first.complexity == "O(2ⁿ)"

    def test_large_data_memory_row(self):
        """Test array allocation flags the memory row"""
        memory = build_performance_results("const a = new Array(10);")[1]

        assert memory.status == PerfStatus.WARNING
        assert memory.improvement == "35% reduction possible"

    def test_real_rows_not_fallback(self):
        """Test real rows are distinguishable from fallback rows"""
        assert not any(r.is_fallback for r in build_performance_results("x"))


class TestRunWithTimeout:
    """Test the deadline race"""

    async def test_completes_within_deadline(self):
        """Test a fast suite returns the real rows"""
        results = await run_with_timeout(NESTED_LOOP_CODE, timeout=1.0, delay=0)

        assert len(results) == 4
        assert results[0].complexity == "O(n²)"

    async def test_timeout_uses_fallback(self):
        """Test a slow suite is replaced by the fixed fallback set"""
        results = await run_with_timeout("x", timeout=0.01, delay=0.2)

        assert [r.id for r in results] == ["fallback-1", "fallback-2", "fallback-3"]
        assert all(r.is_fallback for r in results)
        await asyncio.sleep(0.25)

    async def test_empty_result_uses_fallback(self):
        """Test an empty suite result counts as a failure"""
        with patch.object(performance_tester, "run_performance_suite", AsyncMock(return_value=[])):
            results = await run_with_timeout("x", timeout=1.0, delay=0)

        assert len(results) == 3
        assert all(r.is_fallback for r in results)

    async def test_suite_error_uses_basic_analysis(self):
        """Test an error while building rows yields the basic analysis row"""
        with patch.object(performance_tester, "build_performance_results", side_effect=RuntimeError("boom")):
            results = await run_performance_suite("x", delay=0)

        assert len(results) == 1
        assert results[0].test_name == "Basic Analysis"
        assert results[0].is_fallback is True

    async def test_result_to_dict(self):
        """Test status serializes as a plain string"""
        results = await run_with_timeout("x", timeout=1.0, delay=0)
        assert results[0].to_dict()["status"] == "passed"


class TestSimulatedRunner:
    """Test the simulated test runner"""

    async def test_pass_threshold(self):
        """Test a draw above 1 - pass probability passes"""
        rng = Mock()
        rng.random.side_effect = [0.9, 0.1, 0.5]
        cases = [make_case("a"), make_case("b"), make_case("c")]

        results = await run_tests(cases, rng=rng, delay=0)

        assert [r.test_case_id for r in results] == ["a", "b", "c"]
        assert [r.passed for r in results] == [True, False, True]
        assert pass_rate(results) == 67

    async def test_no_cases(self):
        """Test an empty run"""
        results = await run_tests([], delay=0)

        assert results == []
        assert pass_rate(results) == 0

    async def test_probability_one_always_passes(self):
        """Test pass probability 1.0"""
        rng = Mock()
        rng.random.return_value = 0.0001
        results = await run_tests([make_case("a")], rng=rng, delay=0, pass_probability=1.0)
        assert results[0].passed is True

    def test_pass_rate_rounding(self):
        """Test the rate is a rounded percentage"""
        results = [
            TestRunResult(test_case_id="a", passed=True, execution_time_ms=1.0),
            TestRunResult(test_case_id="b", passed=False, execution_time_ms=1.0),
        ]
        assert pass_rate(results) == 50
