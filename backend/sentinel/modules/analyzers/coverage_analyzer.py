"""
Coverage Analyzer - fabricated coverage figures from test-case count

No test is executed; every percentage is clamped to [0, 100].
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Sized

from sentinel.modules.analyzers.base import best_effort, as_text

PER_TEST_COVERAGE = 15
BASE_COVERAGE_CAP = 80
FUNCTION_BONUS = 10
MISSING_BRANCHES = ["edge-case handling", "null input validation"]


def clamp_percent(value: float) -> int:
    return int(max(0, min(100, value)))


@dataclass
class CoverageReport:
    line_coverage: int = 0
    branch_coverage: int = 0
    function_coverage: int = 0
    uncovered_lines: List[int] = field(default_factory=list)
    missing_branches: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@best_effort("coverage", default=CoverageReport)
def analyze_test_coverage(code: str, test_cases: Sized) -> CoverageReport:
    code = as_text(code)
    lines = len(code.split("\n"))

    base = min(BASE_COVERAGE_CAP, len(test_cases) * PER_TEST_COVERAGE)
    line_coverage = clamp_percent(base + (FUNCTION_BONUS if "function" in code else 0))
    uncovered = max(0, lines - (lines * line_coverage) // 100)

    return CoverageReport(
        line_coverage=line_coverage,
        branch_coverage=clamp_percent(line_coverage - 10),
        function_coverage=clamp_percent(line_coverage + 5),
        uncovered_lines=list(range(1, uncovered + 1)),
        missing_branches=list(MISSING_BRANCHES),
    )
