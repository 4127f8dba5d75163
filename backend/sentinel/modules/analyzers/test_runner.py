"""
Simulated test runner. Generated test cases are never executed; each one
"passes" with a fixed probability drawn from an injectable RNG.
"""

import asyncio
import random
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

from sentinel.core.logging_config import logger
from sentinel.modules.analyzers.test_generator import GeneratedTestCase

DEFAULT_PASS_RATE = 0.7
DEFAULT_DELAY_SECONDS = 0.1


@dataclass
class TestRunResult:
    __test__ = False

    test_case_id: str
    passed: bool
    execution_time_ms: float
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def run_tests(
    test_cases: Sequence[GeneratedTestCase],
    rng: Optional[random.Random] = None,
    delay: float = DEFAULT_DELAY_SECONDS,
    pass_probability: float = DEFAULT_PASS_RATE,
) -> List[TestRunResult]:
    rng = rng or random.Random()
    results: List[TestRunResult] = []

    for case in test_cases:
        started = time.perf_counter()
        try:
            if delay > 0:
                await asyncio.sleep(delay)
            passed = rng.random() > (1 - pass_probability)
            results.append(TestRunResult(
                test_case_id=case.id,
                passed=passed,
                execution_time_ms=(time.perf_counter() - started) * 1000,
            ))
        except Exception as e:
            results.append(TestRunResult(
                test_case_id=case.id,
                passed=False,
                execution_time_ms=(time.perf_counter() - started) * 1000,
                error=str(e) or "Test failed",
            ))

    logger.info(f"[TestRunner] {len(results)} tests run, {pass_rate(results)}% passed")
    return results


def pass_rate(results: Sequence[TestRunResult]) -> int:
    """Percentage of passing results; 0 for an empty run"""
    if not results:
        return 0
    passed = sum(1 for r in results if r.passed)
    return round(passed / len(results) * 100)
