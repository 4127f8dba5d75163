# Heuristic analysis engine

from sentinel.modules.analyzers.findings import (
    Finding,
    FindingKind,
    Severity,
    ComplexityChange,
    Recommendations,
)
from sentinel.modules.analyzers.complexity_analyzer import (
    analyze_complexity,
    analyze_complexity_strict,
    analyze_complexity_async,
    basic_mode_finding,
)
from sentinel.modules.analyzers.complexity_profile import (
    ComplexityProfile,
    estimate_complexity_profile,
)
from sentinel.modules.analyzers.security_analyzer import (
    SecurityIssue,
    scan_security_issues,
    security_findings,
)
from sentinel.modules.analyzers.quality_analyzer import QualityMetrics, calculate_quality_metrics
from sentinel.modules.analyzers.memory_analyzer import MemoryProfile, analyze_memory_usage
from sentinel.modules.analyzers.coverage_analyzer import CoverageReport, analyze_test_coverage
from sentinel.modules.analyzers.test_generator import GeneratedTestCase, generate_test_cases
from sentinel.modules.analyzers.performance_tester import (
    PerformanceResult,
    run_performance_suite,
    run_with_timeout,
)
from sentinel.modules.analyzers.language_support import (
    Language,
    detect_language,
    get_language_analysis,
)
from sentinel.modules.analyzers.test_runner import TestRunResult, run_tests, pass_rate

__all__ = [
    # Findings
    "Finding",
    "FindingKind",
    "Severity",
    "ComplexityChange",
    "Recommendations",
    # Complexity
    "analyze_complexity",
    "analyze_complexity_strict",
    "analyze_complexity_async",
    "basic_mode_finding",
    "ComplexityProfile",
    "estimate_complexity_profile",
    # Security / quality / memory
    "SecurityIssue",
    "scan_security_issues",
    "security_findings",
    "QualityMetrics",
    "calculate_quality_metrics",
    "MemoryProfile",
    "analyze_memory_usage",
    # Tests and coverage
    "CoverageReport",
    "analyze_test_coverage",
    "GeneratedTestCase",
    "generate_test_cases",
    "TestRunResult",
    "run_tests",
    "pass_rate",
    # Performance
    "PerformanceResult",
    "run_performance_suite",
    "run_with_timeout",
    # Languages
    "Language",
    "detect_language",
    "get_language_analysis",
]
