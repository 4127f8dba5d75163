"""
Test Suite Analyzer - scores a project's stored test cases

Every insight, error and recommendation comes from an independent
threshold check; nothing is executed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sentinel.models.project import TestKind
from sentinel.models.test_case import TestPriority, TestStatus

MIN_COVERAGE = 45
MAX_COVERAGE = 95
BASE_COVERAGE = 60
PER_TEST_BONUS = 3
PER_HIGH_PRIORITY_BONUS = 5

LOW_TEST_COUNT = 5
GOOD_TEST_COUNT = 10
HIGH_PRIORITY_RATIO = 0.3
INCREASE_COVERAGE_BELOW = 70

STANDING_RECOMMENDATIONS = [
    {
        "title": "Continuous Integration",
        "description": "Integrate these tests into your CI/CD pipeline for automated validation.",
        "priority": "high",
    },
    {
        "title": "Test Documentation",
        "description": "Document test purposes and expected outcomes for team reference.",
        "priority": "medium",
    },
    {
        "title": "Regular Review",
        "description": "Schedule periodic reviews to update tests as requirements evolve.",
        "priority": "low",
    },
]


@dataclass
class SuiteAnalysis:
    coverage_level: int
    insights: List[Dict[str, str]] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    recommendations: List[Dict[str, str]] = field(default_factory=list)


def _value(enum_or_str: Any) -> Optional[str]:
    return getattr(enum_or_str, "value", enum_or_str)


def _titles_contain(test_cases: Sequence[Any], *needles: str) -> bool:
    return any(
        needle in (tc.title or "").lower()
        for tc in test_cases
        for needle in needles
    )


def coverage_level(total: int, high_priority: int) -> int:
    raw = BASE_COVERAGE + total * PER_TEST_BONUS + high_priority * PER_HIGH_PRIORITY_BONUS
    return min(MAX_COVERAGE, max(MIN_COVERAGE, raw))


class TestSuiteAnalyzer:
    """
    Scores any sequence of objects exposing `id`, `title`, `priority` and
    `status` (ORM rows in production, simple namespaces in tests).
    """
    __test__ = False

    def analyze(self, test_cases: Sequence[Any], test_kind: Optional[str]) -> SuiteAnalysis:
        kind = _value(test_kind)
        total = len(test_cases)
        high = sum(1 for tc in test_cases if _value(tc.priority) == TestPriority.HIGH.value)
        failed = [tc for tc in test_cases if _value(tc.status) == TestStatus.FAILED.value]

        result = SuiteAnalysis(coverage_level=coverage_level(total, high))

        if total < LOW_TEST_COUNT:
            result.insights.append({
                "type": "Coverage Gap",
                "message": "Low test count detected. Consider adding more test cases for better coverage.",
                "severity": "high",
            })
        elif total >= GOOD_TEST_COUNT:
            result.insights.append({
                "type": "Good Coverage",
                "message": "Excellent test coverage with comprehensive test scenarios.",
                "severity": "low",
            })

        if high < total * HIGH_PRIORITY_RATIO:
            result.insights.append({
                "type": "Priority Distribution",
                "message": "Consider marking more critical test cases as high priority.",
                "severity": "medium",
            })

        if kind == TestKind.UNIT.value:
            self._unit_checks(test_cases, result)
        elif kind == TestKind.INTEGRATION.value:
            self._integration_checks(test_cases, result)
        elif kind == TestKind.PERFORMANCE.value:
            self._performance_checks(result)

        for tc in failed:
            result.errors.append({
                "testId": str(tc.id),
                "message": f'Test "{tc.title}" is failing',
                "suggestion": "Review test expectations and verify implementation matches requirements",
            })

        result.recommendations.extend(dict(r) for r in STANDING_RECOMMENDATIONS)

        if result.coverage_level < INCREASE_COVERAGE_BELOW:
            result.recommendations.append({
                "title": "Increase Coverage",
                "description": "Add more test cases to cover additional scenarios and edge cases.",
                "priority": "high",
            })

        return result

    def _unit_checks(self, test_cases: Sequence[Any], result: SuiteAnalysis) -> None:
        if not _titles_contain(test_cases, "edge", "boundary"):
            result.errors.append({
                "testId": "general",
                "message": "Missing edge case tests",
                "suggestion": "Add test cases for boundary values and edge conditions",
            })
        if not _titles_contain(test_cases, "error", "invalid"):
            result.errors.append({
                "testId": "general",
                "message": "Missing error handling tests",
                "suggestion": "Add test cases for error conditions and invalid inputs",
            })

    def _integration_checks(self, test_cases: Sequence[Any], result: SuiteAnalysis) -> None:
        result.insights.append({
            "type": "Integration Testing",
            "message": "Integration tests should verify component interactions and data flow.",
            "severity": "low",
        })
        if not _titles_contain(test_cases, "end-to-end", "e2e"):
            result.recommendations.append({
                "title": "Add End-to-End Tests",
                "description": "Include complete workflow tests that verify the entire system integration.",
                "priority": "high",
            })

    def _performance_checks(self, result: SuiteAnalysis) -> None:
        result.insights.append({
            "type": "Performance Metrics",
            "message": "Performance tests should include response time, throughput, and resource usage metrics.",
            "severity": "low",
        })
        result.recommendations.append({
            "title": "Establish Baselines",
            "description": "Create performance baselines to track improvements and regressions over time.",
            "priority": "high",
        })
        result.recommendations.append({
            "title": "Load Testing",
            "description": "Test system behavior under various load conditions (normal, peak, stress).",
            "priority": "medium",
        })


test_suite_analyzer = TestSuiteAnalyzer()
