"""
RepairSession - explicit holder for everything one code-repair workspace owns
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from sentinel.modules.analyzers.complexity_profile import ComplexityProfile
from sentinel.modules.analyzers.coverage_analyzer import CoverageReport
from sentinel.modules.analyzers.findings import Finding
from sentinel.modules.analyzers.language_support import Language
from sentinel.modules.analyzers.memory_analyzer import MemoryProfile
from sentinel.modules.analyzers.performance_tester import PerformanceResult
from sentinel.modules.analyzers.quality_analyzer import QualityMetrics
from sentinel.modules.analyzers.security_analyzer import SecurityIssue
from sentinel.modules.analyzers.test_generator import GeneratedTestCase
from sentinel.modules.analyzers.test_runner import TestRunResult
from sentinel.modules.repair.state_machine import RepairState, RepairStateMachine


@dataclass
class RepairHistoryEntry:
    action: str
    issues_fixed: int
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "action": self.action,
            "issues_fixed": self.issues_fixed,
        }


@dataclass
class OptimizationSummary:
    improvements: List[str] = field(default_factory=list)
    issues_fixed: int = 0
    performance_improvement: str = ""
    security_improvement: str = ""
    quality_improvement: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "improvements": list(self.improvements),
            "metrics": {
                "issuesFixed": self.issues_fixed,
                "performanceImprovement": self.performance_improvement,
                "securityImprovement": self.security_improvement,
                "qualityImprovement": self.quality_improvement,
            },
        }


@dataclass
class RepairSession:
    """
    State for one repair workspace.

    `original_code` is captured from the first non-empty buffer and is what
    `reset()` restores. `applied_fix_ids` must stay a subset of the ids in
    `findings`.
    """
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_id: Optional[str] = None
    original_code: str = ""
    current_code: str = ""
    findings: List[Finding] = field(default_factory=list)
    applied_fix_ids: Set[str] = field(default_factory=set)
    history: List[RepairHistoryEntry] = field(default_factory=list)
    test_cases: List[GeneratedTestCase] = field(default_factory=list)
    coverage_report: Optional[CoverageReport] = None
    security_issues: List[SecurityIssue] = field(default_factory=list)
    quality_metrics: Optional[QualityMetrics] = None
    memory_profile: Optional[MemoryProfile] = None
    performance_results: List[PerformanceResult] = field(default_factory=list)
    test_results: List[TestRunResult] = field(default_factory=list)
    complexity_profile: Optional[ComplexityProfile] = None
    optimization_summary: Optional[OptimizationSummary] = None
    language: Language = Language.JAVASCRIPT
    banner: Optional[str] = None
    run_token: int = 0
    machine: RepairStateMachine = field(default_factory=RepairStateMachine)
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_accessed: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if self.current_code and not self.original_code:
            self.original_code = self.current_code

    @property
    def state(self) -> RepairState:
        return self.machine.state

    def edit(self, code: str) -> None:
        """Replace the working buffer; the first non-empty edit becomes the original."""
        if not self.original_code and code:
            self.original_code = code
        self.current_code = code

    def touch(self) -> None:
        self.last_accessed = datetime.utcnow()

    def finding(self, finding_id: str) -> Optional[Finding]:
        return next((f for f in self.findings if f.id == finding_id), None)

    def pending_findings(self) -> List[Finding]:
        return [f for f in self.findings if f.id not in self.applied_fix_ids]

    def clear_results(self) -> None:
        self.findings = []
        self.applied_fix_ids = set()
        self.performance_results = []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "state": self.state.value,
            "original_code": self.original_code,
            "current_code": self.current_code,
            "findings": [f.to_dict() for f in self.findings],
            "applied_fix_ids": sorted(self.applied_fix_ids),
            "history": [h.to_dict() for h in self.history],
            "test_cases": [t.to_dict() for t in self.test_cases],
            "coverage_report": self.coverage_report.to_dict() if self.coverage_report else None,
            "security_issues": [i.to_dict() for i in self.security_issues],
            "quality_metrics": self.quality_metrics.to_dict() if self.quality_metrics else None,
            "memory_profile": self.memory_profile.to_dict() if self.memory_profile else None,
            "performance_results": [r.to_dict() for r in self.performance_results],
            "test_results": [r.to_dict() for r in self.test_results],
            "complexity_profile": self.complexity_profile.to_dict() if self.complexity_profile else None,
            "optimization_summary": (
                self.optimization_summary.to_dict() if self.optimization_summary else None
            ),
            "language": self.language.value,
            "banner": self.banner,
            "created_at": self.created_at.isoformat(),
        }
