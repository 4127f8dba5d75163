"""
Finding model shared by every analyzer and the repair orchestrator.

Findings are produced fresh on every analysis run and never persisted.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Any


class FindingKind(str, Enum):
    SECURITY = "security"
    PERFORMANCE = "performance"
    BUG = "bug"
    STYLE = "style"
    TIME_COMPLEXITY = "time-complexity"
    ALGORITHM = "algorithm"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Lower rank sorts first"""
        return SEVERITY_RANK[self]


SEVERITY_RANK: Dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}

PERFORMANCE_KINDS = frozenset({FindingKind.PERFORMANCE, FindingKind.TIME_COMPLEXITY})


@dataclass
class ComplexityChange:
    """A "current -> improved" Big-O pair with its canned improvement text"""
    current: str
    improved: str
    improvement: str = ""
    explanation: str = ""


@dataclass
class Recommendations:
    algorithm: str
    method: str
    libraries: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)


@dataclass
class Finding:
    """One reported issue or suggestion"""
    id: str
    kind: FindingKind
    severity: Severity
    message: str
    line_hint: int
    code_snippet: str
    suggested_fix: str
    confidence: int
    explanation: str
    fix: str = ""
    time_complexity: Optional[ComplexityChange] = None
    space_complexity: Optional[ComplexityChange] = None
    recommendations: Optional[Recommendations] = None
    cwe_id: Optional[str] = None
    is_fallback: bool = False

    @property
    def is_performance(self) -> bool:
        return self.kind in PERFORMANCE_KINDS

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        data["severity"] = self.severity.value
        return data
