"""
Memory Analyzer - keyword-count estimates and teardown-less registration checks
"""

import re
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any, Tuple

from sentinel.modules.analyzers.base import best_effort, as_text
from sentinel.modules.analyzers.patterns import (
    PatternMatcher,
    count_matches,
    LISTENER_LEAK,
    INTERVAL_LEAK,
    TIMEOUT_LEAK,
    LARGE_ARRAY_ALLOCATION,
    CLOSURE_RETENTION,
    NESTED_FOR_STRICT,
)

LOOP_KEYWORD = re.compile(r'for|while')
FUNCTION_OR_ARROW = re.compile(r'function\s+\w+|=>')
CALL_EXPRESSION = re.compile(r'\w+\(.*\)')

LEAK_CHECKS: List[Tuple[PatternMatcher, str]] = [
    (LISTENER_LEAK, "Potential event listener memory leak"),
    (INTERVAL_LEAK, "Potential interval memory leak"),
    (TIMEOUT_LEAK, "Potential timeout memory leak"),
    (LARGE_ARRAY_ALLOCATION, "Large array allocation detected"),
    (CLOSURE_RETENTION, "Potential closure memory retention"),
]


@dataclass
class MemoryProfile:
    heap_usage: int = 10
    stack_depth: int = 1
    garbage_collection: int = 1
    memory_leaks: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def estimate_heap_usage(code: str) -> int:
    usage = 0
    if "Array" in code:
        usage += 50
    if "Object" in code:
        usage += 30
    if "Map" in code or "Set" in code:
        usage += 40
    if "string" in code or "String" in code:
        usage += 20
    usage += count_matches(LOOP_KEYWORD, code) * 10
    return max(10, usage)


def estimate_stack_depth(code: str) -> int:
    depth = 1 + count_matches(FUNCTION_OR_ARROW, code)
    if "function" in code and CALL_EXPRESSION.search(code):
        depth += 2
    return max(1, depth)


def estimate_gc_cycles(code: str) -> int:
    cycles = 1
    if "new Array" in code or "JSON.parse" in code:
        cycles += 2
    if ".map" in code or ".filter" in code:
        cycles += 1
    if NESTED_FOR_STRICT.detect(code):
        cycles += 3
    return max(1, cycles)


def detect_memory_leaks(code: str) -> List[str]:
    return [label for matcher, label in LEAK_CHECKS if matcher.detect(code)]


@best_effort("memory", default=MemoryProfile)
def analyze_memory_usage(code: str) -> MemoryProfile:
    code = as_text(code)
    return MemoryProfile(
        heap_usage=estimate_heap_usage(code),
        stack_depth=estimate_stack_depth(code),
        garbage_collection=estimate_gc_cycles(code),
        memory_leaks=detect_memory_leaks(code),
    )
