"""
Security Analyzer - lexical checks for four classic vulnerability shapes

Each category is reported at most once with a fixed CWE identifier.
Issues can be turned into Findings so they join the repair workflow.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Any, Sequence

from sentinel.core.logging_config import logger
from sentinel.modules.analyzers.base import best_effort, as_text
from sentinel.modules.analyzers.findings import Finding, FindingKind, Severity
from sentinel.modules.analyzers.patterns import (
    PatternMatcher,
    SQL_CONCATENATION,
    XSS_SINK,
    DYNAMIC_CODE,
    SENSITIVE_LOGGING,
)


class VulnerabilityType(str, Enum):
    SQL_INJECTION = "sql-injection"
    XSS = "xss"
    CODE_INJECTION = "code-injection"
    DATA_LEAK = "data-leak"


@dataclass
class SecurityIssue:
    type: VulnerabilityType
    severity: Severity
    line: int
    description: str
    fix: str
    cwe_id: str
    snippet: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        data["severity"] = self.severity.value
        return data

    def to_finding(self) -> Finding:
        rule = SECURITY_RULES_BY_TYPE[self.type]
        return Finding(
            id=f"security-{self.type.value}",
            kind=FindingKind.SECURITY,
            severity=self.severity,
            message=self.description,
            line_hint=self.line,
            code_snippet=self.snippet,
            suggested_fix=rule.safe_replacement,
            confidence=rule.confidence,
            explanation=f"{self.cwe_id}: {self.fix}",
            fix=self.fix,
            cwe_id=self.cwe_id,
        )


@dataclass(frozen=True)
class SecurityRule:
    type: VulnerabilityType
    matcher: PatternMatcher
    severity: Severity
    description: str
    fix: str
    cwe_id: str
    safe_replacement: str
    confidence: int


SECURITY_RULES: List[SecurityRule] = [
    SecurityRule(
        type=VulnerabilityType.SQL_INJECTION,
        matcher=SQL_CONCATENATION,
        severity=Severity.CRITICAL,
        description="Potential SQL injection vulnerability - user input concatenated directly into SQL query",
        fix="Use parameterized queries or prepared statements",
        cwe_id="CWE-89",
        safe_replacement=(
            "// Parameterized query: values are bound, never concatenated\n"
            "const query = 'SELECT * FROM users WHERE id = ?';\n"
            "db.query(query, [userId]);"
        ),
        confidence=90,
    ),
    SecurityRule(
        type=VulnerabilityType.XSS,
        matcher=XSS_SINK,
        severity=Severity.HIGH,
        description="Potential Cross-Site Scripting (XSS) vulnerability",
        fix="Use textContent or proper input sanitization",
        cwe_id="CWE-79",
        safe_replacement="element.textContent = userInput;",
        confidence=85,
    ),
    SecurityRule(
        type=VulnerabilityType.CODE_INJECTION,
        matcher=DYNAMIC_CODE,
        severity=Severity.CRITICAL,
        description="Potential code injection vulnerability",
        fix="Avoid eval() and dynamic code execution with user input",
        cwe_id="CWE-94",
        safe_replacement="const value = JSON.parse(userInput);",
        confidence=88,
    ),
    SecurityRule(
        type=VulnerabilityType.DATA_LEAK,
        matcher=SENSITIVE_LOGGING,
        severity=Severity.MEDIUM,
        description="Potential sensitive data exposure in console logs",
        fix="Remove debug statements containing sensitive information",
        cwe_id="CWE-532",
        safe_replacement="// Sensitive value removed from logs",
        confidence=80,
    ),
]

SECURITY_RULES_BY_TYPE: Dict[VulnerabilityType, SecurityRule] = {r.type: r for r in SECURITY_RULES}


def _line_text(code: str, line: int) -> str:
    lines = code.split("\n")
    if 1 <= line <= len(lines):
        return lines[line - 1].strip()
    return ""


@best_effort("security", default=list)
def scan_security_issues(code: str) -> List[SecurityIssue]:
    """Return one issue per matched vulnerability category, in table order"""
    code = as_text(code)
    issues: List[SecurityIssue] = []

    for rule in SECURITY_RULES:
        if not rule.matcher.detect(code):
            continue
        line = rule.matcher.line_of(code)
        issues.append(SecurityIssue(
            type=rule.type,
            severity=rule.severity,
            line=line,
            description=rule.description,
            fix=rule.fix,
            cwe_id=rule.cwe_id,
            snippet=_line_text(code, line),
        ))

    if issues:
        logger.log_analyzer_event("security", "vulnerabilities detected", findings=len(issues))
    return issues


def security_findings(issues: Sequence[SecurityIssue]) -> List[Finding]:
    """Security issues as Findings; issues without a usable snippet are skipped"""
    return [issue.to_finding() for issue in issues if issue.snippet]
