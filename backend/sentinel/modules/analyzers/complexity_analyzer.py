"""
Complexity / Performance Analyzer - rule table over pattern matchers (NO parsing)

Rules run in a fixed priority order and each emits at most one Finding:

    nested loops -> repeated array iteration -> linear search in loop
                 -> unmemoized recursion -> string concatenation in loop

When nothing matches and the input is longer than a small threshold, a single
low-severity "looks fine" Finding is emitted instead.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import List

from sentinel.core.logging_config import logger
from sentinel.modules.analyzers.base import best_effort, as_text
from sentinel.modules.analyzers.findings import (
    Finding,
    FindingKind,
    Severity,
    ComplexityChange,
    Recommendations,
)
from sentinel.modules.analyzers.patterns import (
    PatternMatcher,
    NESTED_LOOPS,
    REPEATED_ARRAY_ITERATION,
    LINEAR_SEARCH_IN_LOOP,
    UNMEMOIZED_RECURSION,
    STRING_CONCAT_IN_LOOP,
)

LOOKS_FINE_MIN_LENGTH = 50


@dataclass(frozen=True)
class ComplexityRule:
    """One row of the rule table"""
    finding_id: str
    matcher: PatternMatcher
    kind: FindingKind
    severity: Severity
    message: str
    fix: str
    suggested_fix: str
    confidence: int
    time_complexity: ComplexityChange
    space_complexity: ComplexityChange
    recommendations: Recommendations
    explanation: str

    def to_finding(self, code: str) -> Finding:
        return Finding(
            id=self.finding_id,
            kind=self.kind,
            severity=self.severity,
            message=self.message,
            line_hint=self.matcher.line_of(code),
            code_snippet=self.matcher.locate(code),
            suggested_fix=self.suggested_fix,
            confidence=self.confidence,
            explanation=self.explanation,
            fix=self.fix,
            time_complexity=replace(self.time_complexity),
            space_complexity=replace(self.space_complexity),
            recommendations=Recommendations(
                algorithm=self.recommendations.algorithm,
                method=self.recommendations.method,
                libraries=list(self.recommendations.libraries),
                benefits=list(self.recommendations.benefits),
            ),
        )


COMPLEXITY_RULES: List[ComplexityRule] = [
    ComplexityRule(
        finding_id="complexity-1",
        matcher=NESTED_LOOPS,
        kind=FindingKind.TIME_COMPLEXITY,
        severity=Severity.HIGH,
        message="Nested loops causing O(n²) time complexity",
        fix="Use optimized algorithms or data structures",
        suggested_fix=(
            "// Optimized: Use single loop with early exit or different approach\n"
            "const seen = new Set();\n"
            "for (let i = 0; i < array.length; i++) {\n"
            "  if (seen.has(array[i])) continue;\n"
            "  // Process unique element\n"
            "  seen.add(array[i]);\n"
            "}"
        ),
        confidence=92,
        time_complexity=ComplexityChange(
            current="O(n²)",
            improved="O(n log n)",
            improvement="300% faster for n=1000",
            explanation="Nested loops process n² elements vs n log n for optimized algorithms",
        ),
        space_complexity=ComplexityChange(current="O(1)", improved="O(n)"),
        recommendations=Recommendations(
            algorithm="Divide and Conquer / Two Pointer Technique",
            method="Sorting + Single Pass / Hash Map lookup",
            libraries=["Lodash groupBy", "Map data structure"],
            benefits=["Faster execution", "Better scalability", "Efficient memory usage"],
        ),
        explanation=(
            "Nested loops are inefficient for large datasets. Consider using sorting "
            "combined with single pass, or hash maps for O(1) lookups."
        ),
    ),
    ComplexityRule(
        finding_id="complexity-2",
        matcher=REPEATED_ARRAY_ITERATION,
        kind=FindingKind.PERFORMANCE,
        severity=Severity.MEDIUM,
        message="Multiple array iterations increasing time complexity",
        fix="Combine operations into single iteration",
        suggested_fix=(
            "// Optimized: Single iteration with reduce\n"
            "const result = array.reduce((acc, item) => {\n"
            "  // Transform and filter in one pass\n"
            "  if (item.condition) {\n"
            "    acc.push(item.value);\n"
            "  }\n"
            "  return acc;\n"
            "}, []);"
        ),
        confidence=88,
        time_complexity=ComplexityChange(
            current="O(2n) → O(n) but 2x slower",
            improved="O(n) single iteration",
            improvement="50% faster",
            explanation="Multiple iterations process same data multiple times",
        ),
        space_complexity=ComplexityChange(current="O(n)", improved="O(n)"),
        recommendations=Recommendations(
            algorithm="Single Pass Aggregation",
            method="Array.reduce() or for-loop with accumulation",
            libraries=["Lodash transform", "Native Array methods"],
            benefits=["Reduced overhead", "Better cache performance", "Cleaner code"],
        ),
        explanation=(
            "Multiple array iterations create unnecessary overhead. Single iteration "
            "with accumulation is more efficient."
        ),
    ),
    ComplexityRule(
        finding_id="complexity-3",
        matcher=LINEAR_SEARCH_IN_LOOP,
        kind=FindingKind.ALGORITHM,
        severity=Severity.HIGH,
        message="Inefficient O(n²) array searching algorithm",
        fix="Use Set or Map for O(1) lookups",
        suggested_fix=(
            "// Optimized: Use Set for O(1) lookups\n"
            "const lookupSet = new Set(array);\n"
            "for (const item of data) {\n"
            "  if (lookupSet.has(item.value)) {\n"
            "    // Fast membership check\n"
            "  }\n"
            "}"
        ),
        confidence=95,
        time_complexity=ComplexityChange(
            current="O(n²)",
            improved="O(n)",
            improvement="1000% faster for n=1000",
            explanation="Nested searching vs hash-based constant time lookups",
        ),
        space_complexity=ComplexityChange(current="O(1)", improved="O(n)"),
        recommendations=Recommendations(
            algorithm="Hash-based Lookup",
            method="Set for membership, Map for key-value pairs",
            libraries=["JavaScript Set", "JavaScript Map", "Lodash keyBy"],
            benefits=["Constant time lookups", "Faster execution", "Better scalability"],
        ),
        explanation=(
            "Array.includes() inside loops creates O(n²) complexity. Sets provide "
            "O(1) membership testing."
        ),
    ),
    ComplexityRule(
        finding_id="complexity-4",
        matcher=UNMEMOIZED_RECURSION,
        kind=FindingKind.ALGORITHM,
        severity=Severity.MEDIUM,
        message="Recursive function without memoization causing exponential time",
        fix="Add memoization or use iterative approach",
        suggested_fix=(
            "// Optimized: Memoized recursion\n"
            "function fibonacci(n, memo = {}) {\n"
            "  if (n in memo) return memo[n];\n"
            "  if (n <= 2) return 1;\n"
            "  memo[n] = fibonacci(n - 1, memo) + fibonacci(n - 2, memo);\n"
            "  return memo[n];\n"
            "}"
        ),
        confidence=90,
        time_complexity=ComplexityChange(
            current="O(2^n) exponential",
            improved="O(n) linear with memoization",
            improvement="99% faster for n=40",
            explanation="Exponential recursion vs linear with caching",
        ),
        space_complexity=ComplexityChange(current="O(n)", improved="O(n)"),
        recommendations=Recommendations(
            algorithm="Dynamic Programming / Memoization",
            method="Cache results or use bottom-up iteration",
            libraries=["Custom memoizer", "Lodash memoize"],
            benefits=["Dramatic speed improvement", "Avoid stack overflow", "Reusable solutions"],
        ),
        explanation=(
            "Recursive functions without memoization recalculate the same values "
            "repeatedly. Caching results reduces complexity from exponential to linear."
        ),
    ),
    ComplexityRule(
        finding_id="complexity-5",
        matcher=STRING_CONCAT_IN_LOOP,
        kind=FindingKind.PERFORMANCE,
        severity=Severity.MEDIUM,
        message="String concatenation in loop causing O(n²) time complexity",
        fix="Use array join or template literals",
        suggested_fix=(
            "// Optimized: Array join for string building\n"
            "const parts = [];\n"
            "for (let i = 0; i < items.length; i++) {\n"
            "  parts.push(items[i]);\n"
            "}\n"
            "const result = parts.join('');"
        ),
        confidence=85,
        time_complexity=ComplexityChange(
            current="O(n²)",
            improved="O(n)",
            improvement="200% faster for large strings",
            explanation="String immutability causes repeated copying",
        ),
        space_complexity=ComplexityChange(current="O(n²)", improved="O(n)"),
        recommendations=Recommendations(
            algorithm="Array Joining",
            method="Array.push() + Array.join() or String.concat()",
            libraries=["Array methods", "StringBuilder pattern"],
            benefits=["Linear time complexity", "Less memory allocation", "Better performance"],
        ),
        explanation=(
            "String concatenation in loops creates new strings each time, causing "
            "O(n²) time and space complexity. Array joining is O(n)."
        ),
    ),
]


def looks_fine_finding() -> Finding:
    return Finding(
        id="optimization-1",
        kind=FindingKind.PERFORMANCE,
        severity=Severity.LOW,
        message="Code structure is good. Consider micro-optimizations",
        line_hint=1,
        code_snippet="// Your code shows good practices",
        suggested_fix="// Consider profiling for specific bottlenecks",
        confidence=75,
        explanation=(
            "Your code follows good practices. Use profiling tools to identify "
            "specific areas for improvement."
        ),
        fix="Review algorithm choices and data structures",
        time_complexity=ComplexityChange(
            current="O(n) - Good",
            improved="O(n) - Optimized",
            improvement="10-20% with micro-optimizations",
            explanation="Current complexity is efficient",
        ),
        recommendations=Recommendations(
            algorithm="Continue current approach",
            method="Profile and optimize hotspots",
            libraries=["Chrome DevTools", "Node.js profiler"],
            benefits=["Maintainable code", "Good performance", "Clean architecture"],
        ),
    )


def basic_mode_finding() -> Finding:
    """Fallback Finding used when the main complexity pass fails"""
    return Finding(
        id="fallback-1",
        kind=FindingKind.PERFORMANCE,
        severity=Severity.MEDIUM,
        message="Code analysis completed with basic mode",
        line_hint=1,
        code_snippet="// Your code is being analyzed",
        suggested_fix="// Consider performance optimizations",
        confidence=85,
        explanation="Basic pattern detection for code analysis.",
        fix="Review code for potential optimizations",
        time_complexity=ComplexityChange(current="O(n)", improved="O(log n)", improvement="60% faster"),
        space_complexity=ComplexityChange(current="O(n)", improved="O(1)", improvement="80% less memory"),
        is_fallback=True,
    )


def _analyze(code: str) -> List[Finding]:
    code = as_text(code)
    findings = [rule.to_finding(code) for rule in COMPLEXITY_RULES if rule.matcher.detect(code)]

    if not findings and len(code) > LOOKS_FINE_MIN_LENGTH:
        findings.append(looks_fine_finding())

    logger.log_analyzer_event("complexity", "analysis complete", findings=len(findings))
    return findings


def analyze_complexity_strict(code: str) -> List[Finding]:
    """Same as analyze_complexity but lets internal errors propagate"""
    return _analyze(code)


analyze_complexity = best_effort("complexity", default=list)(_analyze)


async def analyze_complexity_async(code: str, delay: float = 0.0) -> List[Finding]:
    """Complexity pass behind an artificial latency, like a remote model call"""
    if delay > 0:
        await asyncio.sleep(delay)
    return analyze_complexity_strict(code)
