"""
Session-level complexity profile: one "current -> suggested" pair for time
and one for space, derived from the same loose matchers as the rest of the
engine. Performance findings are enriched from this profile.
"""

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict

from sentinel.core.logging_config import logger
from sentinel.modules.analyzers.base import as_text
from sentinel.modules.analyzers.patterns import NESTED_FOR_ANY

FUNCTION_SIGNATURE = re.compile(r'function.*\([^)]*\)')
ARRAY_PIPELINE = re.compile(r'\[.*\].*\.map|\.filter|\.reduce')

# Higher is more efficient
COMPLEXITY_SCORES: Dict[str, int] = {
    "O(1)": 100,
    "O(log n)": 80,
    "O(n)": 60,
    "O(n log n)": 40,
    "O(n²)": 20,
    "O(2ⁿ)": 10,
    "O(n!)": 5,
}
UNKNOWN_SCORE = 50

NEXT_BEST: Dict[str, str] = {
    "O(n²)": "O(n log n)",
    "O(2ⁿ)": "O(n log n)",
    "O(n log n)": "O(n)",
    "O(n)": "O(1)",
}


@dataclass
class ComplexityEstimate:
    current: str
    suggested: str
    improvement: str


@dataclass
class ComplexityProfile:
    time_complexity: ComplexityEstimate
    space_complexity: ComplexityEstimate

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_profile() -> ComplexityProfile:
    return ComplexityProfile(
        time_complexity=ComplexityEstimate("O(n)", "O(log n)", "50% faster"),
        space_complexity=ComplexityEstimate("O(n)", "O(1)", "75% less memory"),
    )


def improved_complexity(current: str) -> str:
    return NEXT_BEST.get(current, current)


def improvement_percentage(current: str, suggested: str) -> str:
    """Relative score gain, e.g. O(n) -> O(1) is "67% improvement"."""
    current_score = COMPLEXITY_SCORES.get(current, UNKNOWN_SCORE)
    suggested_score = COMPLEXITY_SCORES.get(suggested, UNKNOWN_SCORE)
    gain = (suggested_score - current_score) / current_score * 100
    if gain > 0:
        return f"{round(gain)}% improvement"
    return "No improvement needed"


def classify_time_complexity(code: str) -> str:
    if NESTED_FOR_ANY.detect(code):
        return "O(n²)"
    if "function" in code and "return" in code and FUNCTION_SIGNATURE.search(code):
        return "O(2ⁿ)"
    if ARRAY_PIPELINE.search(code):
        return "O(n log n)"
    return "O(n)"


def _estimate(current: str) -> ComplexityEstimate:
    suggested = improved_complexity(current)
    return ComplexityEstimate(current, suggested, improvement_percentage(current, suggested))


def estimate_complexity_profile(code: str) -> ComplexityProfile:
    try:
        code = as_text(code)
        return ComplexityProfile(
            time_complexity=_estimate(classify_time_complexity(code)),
            space_complexity=_estimate("O(n)"),
        )
    except Exception as e:
        logger.log_error_with_context(e, context="analyzer:complexity-profile", analyzer="complexity-profile")
        return default_profile()
