"""
Performance Tester - canned benchmark rows scaled by line count

Nothing is timed or executed. `run_performance_suite` sleeps an artificial
delay and derives four rows from a few matcher booleans; `run_with_timeout`
races it against a deadline and substitutes a fixed fallback set when the
deadline passes or anything goes wrong.
"""

import asyncio
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from sentinel.core.logging_config import logger
from sentinel.modules.analyzers.base import as_text
from sentinel.modules.analyzers.patterns import NESTED_FOR_ANY

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_DELAY_SECONDS = 1.0


class PerfStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass
class PerformanceResult:
    id: str
    test_name: str
    execution_time: float
    memory_usage: float
    complexity: str
    status: PerfStatus
    improvement: Optional[str] = None
    before_time: Optional[float] = None
    after_time: Optional[float] = None
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


def basic_analysis_results() -> List[PerformanceResult]:
    """Single row returned when the suite itself fails"""
    return [
        PerformanceResult(
            id="fallback-1",
            test_name="Basic Analysis",
            execution_time=100,
            memory_usage=50,
            complexity="O(n)",
            improvement="Analysis completed",
            status=PerfStatus.PASSED,
            is_fallback=True,
        )
    ]


def timeout_fallback_results() -> List[PerformanceResult]:
    """Rows substituted when the suite misses its deadline or errors"""
    return [
        PerformanceResult(
            id="fallback-1",
            test_name="Basic Performance",
            execution_time=150,
            memory_usage=45,
            complexity="O(n)",
            improvement="No significant issues",
            status=PerfStatus.PASSED,
            is_fallback=True,
        ),
        PerformanceResult(
            id="fallback-2",
            test_name="Memory Analysis",
            execution_time=75,
            memory_usage=88,
            complexity="O(n)",
            improvement="Consider memory optimization",
            status=PerfStatus.WARNING,
            is_fallback=True,
        ),
        PerformanceResult(
            id="fallback-3",
            test_name="Execution Time",
            execution_time=230,
            memory_usage=32,
            complexity="O(n log n)",
            improvement="Could be optimized to O(n)",
            status=PerfStatus.WARNING,
            is_fallback=True,
        ),
    ]


def build_performance_results(code: str) -> List[PerformanceResult]:
    code = as_text(code)
    lines = len(code.split("\n"))
    nested = NESTED_FOR_ANY.detect(code)
    recursion = "function" in code and "return" in code
    large_data = "Array(" in code or "new Array" in code

    base_time = max(50, lines * 2)
    base_memory = max(10, lines * 0.5)

    if nested:
        complexity, improvement, before, after = "O(n²)", "O(n²) → O(n log n)", 1200, 450
    elif recursion:
        complexity, improvement, before, after = "O(2ⁿ)", "O(2ⁿ) → O(n)", 800, 300
    else:
        complexity, improvement, before, after = "O(n)", "Optimal", 200, 150

    return [
        PerformanceResult(
            id="perf-1",
            test_name="Time Complexity",
            execution_time=base_time * 8 if nested else base_time,
            memory_usage=base_memory,
            complexity=complexity,
            improvement=improvement,
            before_time=before,
            after_time=after,
            status=PerfStatus.WARNING if nested or recursion else PerfStatus.PASSED,
        ),
        PerformanceResult(
            id="perf-2",
            test_name="Memory Usage",
            execution_time=base_time * 0.7,
            memory_usage=base_memory * 4 if large_data else base_memory,
            complexity="O(n)" if large_data else "O(1)",
            improvement="35% reduction possible" if large_data else "Optimal",
            before_time=420 if large_data else 150,
            after_time=270 if large_data else 150,
            status=PerfStatus.WARNING if large_data else PerfStatus.PASSED,
        ),
        PerformanceResult(
            id="perf-3",
            test_name="Execution Speed",
            execution_time=base_time * 1.5,
            memory_usage=base_memory * 0.8,
            complexity="O(n log n)",
            improvement="O(n log n) → O(n)",
            before_time=680,
            after_time=320,
            status=PerfStatus.WARNING,
        ),
        PerformanceResult(
            id="perf-4",
            test_name="Algorithm Efficiency",
            execution_time=base_time,
            memory_usage=base_memory,
            complexity="O(n)",
            improvement="Optimal",
            status=PerfStatus.PASSED,
        ),
    ]


async def run_performance_suite(code: str, delay: float = DEFAULT_DELAY_SECONDS) -> List[PerformanceResult]:
    if delay > 0:
        await asyncio.sleep(delay)
    try:
        return build_performance_results(code)
    except Exception as e:
        logger.log_error_with_context(e, context="analyzer:performance", analyzer="performance")
        return basic_analysis_results()


async def run_with_timeout(
    code: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    delay: float = DEFAULT_DELAY_SECONDS,
) -> List[PerformanceResult]:
    """
    Race the suite against `timeout` seconds.

    The suite task is shielded so a timeout does not cancel it; whatever it
    produces afterwards is dropped.
    """
    task = asyncio.ensure_future(run_performance_suite(code, delay))
    try:
        results = await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        if not results:
            raise ValueError("No performance results returned")
    except asyncio.TimeoutError:
        logger.warning(f"[Performance] Suite exceeded {timeout}s, using fallback results")
        return timeout_fallback_results()
    except Exception as e:
        logger.log_error_with_context(e, context="analyzer:performance", analyzer="performance")
        return timeout_fallback_results()

    logger.log_analyzer_event("performance", "suite complete", findings=len(results))
    return results
