"""
Repair Orchestrator - drives one RepairSession through analyze / fix / reset

Flow:
    analyze()      → complexity (+ profile enrichment) → tests + coverage
                     → security (merged into findings) → quality → memory
    apply_fix(id)  → literal single-occurrence replace of the finding's snippet
    apply_all()    → every pending finding, in list order
    smart_repair() → pending findings by severity then confidence
    reset()        → original buffer back, every derived result cleared

Every analyzer is best-effort. Only the complexity step has a dedicated
fallback (`fallback-1`), used when it raises.
"""

import random
import re
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sentinel.core.config import settings
from sentinel.core.exceptions import FindingNotFoundError, CodeTooLargeError
from sentinel.core.logging_config import logger
from sentinel.modules.analyzers.complexity_analyzer import analyze_complexity_async, basic_mode_finding
from sentinel.modules.analyzers.complexity_profile import ComplexityProfile, estimate_complexity_profile
from sentinel.modules.analyzers.coverage_analyzer import analyze_test_coverage
from sentinel.modules.analyzers.findings import ComplexityChange, Finding, FindingKind
from sentinel.modules.analyzers.language_support import detect_language
from sentinel.modules.analyzers.memory_analyzer import analyze_memory_usage
from sentinel.modules.analyzers.performance_tester import PerformanceResult, run_with_timeout
from sentinel.modules.analyzers.quality_analyzer import calculate_quality_metrics
from sentinel.modules.analyzers.security_analyzer import scan_security_issues, security_findings
from sentinel.modules.analyzers.test_generator import generate_test_cases
from sentinel.modules.analyzers.test_runner import TestRunResult, run_tests
from sentinel.modules.repair.session import RepairSession, RepairHistoryEntry, OptimizationSummary
from sentinel.modules.repair.state_machine import RepairState

LEADING_INT = re.compile(r'^\s*(-?\d+)')


def enhance_findings(findings: List[Finding], profile: ComplexityProfile) -> List[Finding]:
    """Overlay the session complexity profile onto performance findings"""
    enhanced = []
    for finding in findings:
        if not finding.is_performance:
            enhanced.append(finding)
            continue

        previous = finding.time_complexity
        changes: Dict[str, Any] = {
            "time_complexity": ComplexityChange(
                current=profile.time_complexity.current,
                improved=profile.time_complexity.suggested,
                improvement=profile.time_complexity.improvement,
                explanation=previous.explanation if previous else "",
            )
        }
        if finding.kind == FindingKind.PERFORMANCE:
            changes["space_complexity"] = ComplexityChange(
                current=profile.space_complexity.current,
                improved=profile.space_complexity.suggested,
                improvement=profile.space_complexity.improvement,
            )
        enhanced.append(replace(finding, **changes))
    return enhanced


def performance_improvement(findings: List[Finding], fixed_count: int) -> str:
    performance_count = sum(1 for f in findings if f.is_performance)
    if performance_count == 0:
        return "No performance issues found"
    percent = min(fixed_count / performance_count * 100, 100)
    return f"~{round(percent)}% performance improvement"


def leading_int(text: Optional[str]) -> int:
    match = LEADING_INT.match(text or "")
    return int(match.group(1)) if match else 0


def report_filename(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"ai-code-repair-{now_ms}.json"


class RepairOrchestrator:
    """
    Operations over a single RepairSession.

    Delays and the RNG are injectable so tests run without sleeping.
    """

    def __init__(
        self,
        session: RepairSession,
        analysis_delay: Optional[float] = None,
        perf_delay: Optional[float] = None,
        perf_timeout: Optional[float] = None,
        test_delay: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.analysis_delay = settings.ANALYSIS_DELAY_SECONDS if analysis_delay is None else analysis_delay
        self.perf_delay = settings.PERF_TEST_DELAY_SECONDS if perf_delay is None else perf_delay
        self.perf_timeout = settings.PERF_TEST_TIMEOUT_SECONDS if perf_timeout is None else perf_timeout
        self.test_delay = settings.TEST_RUN_DELAY_SECONDS if test_delay is None else test_delay
        self.rng = rng or random.Random()

    @property
    def state(self) -> RepairState:
        return self.session.state

    # ==================== Editing ====================

    def edit(self, code: str) -> None:
        size = len(code.encode("utf-8"))
        if size > settings.MAX_CODE_SIZE_BYTES:
            raise CodeTooLargeError(size, settings.MAX_CODE_SIZE_BYTES)
        self.session.edit(code)

    # ==================== Analysis ====================

    async def analyze(self) -> List[Finding]:
        """
        Run every analyzer over the current buffer.

        Whitespace-only input is a no-op. When a newer analyze() starts before
        this one finishes, this run's results are discarded.
        """
        session = self.session
        code = session.current_code
        if not code.strip():
            return session.findings

        session.run_token += 1
        token = session.run_token
        session.machine.transition(RepairState.ANALYZING, reason=f"run {token}")
        session.clear_results()
        session.banner = None

        profile = estimate_complexity_profile(code)
        try:
            findings = await analyze_complexity_async(code, delay=self.analysis_delay)
            findings = enhance_findings(findings, profile)
        except Exception as e:
            logger.log_error_with_context(e, context="repair:analyze", session_id=session.id)
            session.banner = "Using basic analysis mode..."
            findings = [basic_mode_finding()]

        if token != session.run_token:
            logger.info(f"[Repair] Discarding superseded analysis run {token} for session {session.id}")
            return session.findings

        test_cases = generate_test_cases(code)
        coverage = analyze_test_coverage(code, test_cases)
        security_issues = scan_security_issues(code)
        findings.extend(security_findings(security_issues))

        session.findings = findings
        session.complexity_profile = profile
        session.test_cases = test_cases
        session.coverage_report = coverage
        session.security_issues = security_issues
        session.quality_metrics = calculate_quality_metrics(code)
        session.memory_profile = analyze_memory_usage(code)
        session.language = detect_language(code)
        session.machine.transition(RepairState.ANALYZED, reason=f"run {token}")

        logger.log_analyzer_event(
            "orchestrator", "analysis complete",
            findings=len(findings), session_id=session.id, language=session.language.value,
        )
        return findings

    # ==================== Fixes ====================

    def _substitute(self, finding: Finding) -> None:
        session = self.session
        snippet = finding.code_snippet
        if snippet and snippet in session.current_code:
            session.current_code = session.current_code.replace(snippet, finding.suggested_fix, 1)
        else:
            logger.debug(f"[Repair] Snippet for {finding.id} not present, buffer unchanged")
        session.applied_fix_ids.add(finding.id)

    def _record(self, action: str, issues_fixed: int) -> None:
        self.session.history.append(RepairHistoryEntry(action=action, issues_fixed=issues_fixed))

    def _refresh_summary(self) -> None:
        session = self.session
        applied = [f for f in session.findings if f.id in session.applied_fix_ids]
        session.optimization_summary = OptimizationSummary(
            improvements=[f"{f.kind.value}: {f.message}" for f in applied],
            issues_fixed=len(session.applied_fix_ids),
            performance_improvement=performance_improvement(session.findings, len(session.applied_fix_ids)),
            security_improvement=(
                "Security vulnerabilities addressed" if session.security_issues else "No security issues"
            ),
            quality_improvement="Code quality enhanced" if session.quality_metrics else "Quality maintained",
        )

    def apply_fix(self, finding_id: str) -> str:
        session = self.session
        finding = session.finding(finding_id)
        if finding is None:
            raise FindingNotFoundError(finding_id)
        if finding_id in session.applied_fix_ids:
            return session.current_code

        session.machine.transition(RepairState.REPAIRING, reason=f"apply {finding_id}")
        try:
            self._substitute(finding)
            self._record(f"Fixed {finding.kind.value} issue", 1)
            self._refresh_summary()
        finally:
            session.machine.transition(RepairState.ANALYZED)
        return session.current_code

    def apply_all(self) -> str:
        session = self.session
        pending = session.pending_findings()
        if not session.findings:
            return session.current_code

        session.machine.transition(RepairState.REPAIRING, reason="apply all")
        try:
            for finding in pending:
                self._substitute(finding)
            self._record("Applied all fixes", len(pending))
            self._refresh_summary()
        finally:
            session.machine.transition(RepairState.ANALYZED)
        return session.current_code

    def smart_repair(self) -> int:
        """Apply pending fixes most-severe first; returns how many were applied"""
        session = self.session
        ordered = sorted(
            session.pending_findings(),
            key=lambda f: (f.severity.rank, -f.confidence),
        )
        if not ordered:
            session.banner = "No issues left to repair!"
            return 0

        session.machine.transition(RepairState.REPAIRING, reason="smart repair")
        fixed = 0
        improvements: List[str] = []
        try:
            for finding in ordered:
                try:
                    self._substitute(finding)
                except Exception as e:
                    logger.warning(f"[Repair] Failed to fix issue {finding.id}: {e}")
                    continue
                fixed += 1
                improvements.append(f"{finding.kind.value}: {finding.message}")

            self._record("Smart repair completed", fixed)
            quality = session.quality_metrics
            session.optimization_summary = OptimizationSummary(
                improvements=improvements,
                issues_fixed=fixed,
                performance_improvement=performance_improvement(session.findings, fixed),
                security_improvement=(
                    "Security vulnerabilities patched" if session.security_issues
                    else "No security issues found"
                ),
                quality_improvement=(
                    f"Maintainability improved to {quality.maintainability_index + 10}/100" if quality
                    else "Quality metrics updated"
                ),
            )
        finally:
            session.machine.transition(RepairState.ANALYZED)

        session.banner = (
            f"Smart repair completed! Fixed {fixed} issues." if fixed
            else "No issues could be automatically fixed."
        )
        return fixed

    def reset(self) -> None:
        session = self.session
        session.current_code = session.original_code
        session.clear_results()
        session.history = []
        session.optimization_summary = None
        # Invalidate any analysis still in flight
        session.run_token += 1
        session.machine.transition(RepairState.IDLE, reason="reset")
        session.banner = "Reset to original code"

    # ==================== Simulated runs ====================

    async def run_performance_tests(self) -> List[PerformanceResult]:
        session = self.session
        results = await run_with_timeout(session.current_code, timeout=self.perf_timeout, delay=self.perf_delay)
        session.performance_results = results
        if results and all(r.is_fallback for r in results):
            session.banner = "Performance tests completed with demo data"
        else:
            session.banner = f"Performance testing completed! Analyzed {len(results)} metrics."
        return results

    async def run_tests(self) -> List[TestRunResult]:
        session = self.session
        session.test_results = await run_tests(
            session.test_cases,
            rng=self.rng,
            delay=self.test_delay,
            pass_probability=settings.TEST_RUN_PASS_RATE,
        )
        return session.test_results

    # ==================== Reporting ====================

    def metrics(self) -> Dict[str, int]:
        session = self.session
        findings = session.findings
        complexity = [f for f in findings if f.kind == FindingKind.TIME_COMPLEXITY]
        total_improvement = sum(
            leading_int(f.time_complexity.improvement if f.time_complexity else None) for f in complexity
        )
        applied = len(session.applied_fix_ids)

        return {
            "totalIssues": len(findings),
            "performanceIssues": sum(1 for f in findings if f.is_performance),
            "securityIssues": len(session.security_issues),
            "algorithmIssues": sum(1 for f in findings if f.kind == FindingKind.ALGORITHM),
            "testCoverage": session.coverage_report.line_coverage if session.coverage_report else 0,
            "qualityScore": session.quality_metrics.maintainability_index if session.quality_metrics else 0,
            "avgImprovement": round(total_improvement / len(complexity)) if complexity else 0,
            "fixedIssues": applied,
            "remainingIssues": len(findings) - applied,
        }

    def export_report(self, now_ms: Optional[int] = None) -> Tuple[str, Dict[str, Any]]:
        session = self.session
        report = {
            "originalCode": session.original_code,
            "repairedCode": session.current_code,
            "analysis": [f.to_dict() for f in session.findings],
            "appliedFixes": sorted(session.applied_fix_ids),
            "metrics": self.metrics(),
            "performanceResults": [r.to_dict() for r in session.performance_results],
            "testCases": [t.to_dict() for t in session.test_cases],
            "coverageReport": session.coverage_report.to_dict() if session.coverage_report else None,
            "securityIssues": [i.to_dict() for i in session.security_issues],
            "qualityMetrics": session.quality_metrics.to_dict() if session.quality_metrics else None,
            "memoryProfile": session.memory_profile.to_dict() if session.memory_profile else None,
            "repairHistory": [h.to_dict() for h in session.history],
            "optimizationSummary": (
                session.optimization_summary.to_dict() if session.optimization_summary else None
            ),
            "complexityData": session.complexity_profile.to_dict() if session.complexity_profile else None,
            "language": session.language.value,
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }
        return report_filename(now_ms), report
