"""
Quality Analyzer - token-count metrics and boolean code-smell checks
"""

import re
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any

from sentinel.modules.analyzers.base import best_effort, as_text
from sentinel.modules.analyzers.patterns import count_matches, NESTED_FOR_OPEN


DECISION_POINTS = [
    re.compile(r'if\s*\('),
    re.compile(r'for\s*\('),
    re.compile(r'while\s*\('),
    re.compile(r'case\s+'),
    re.compile(r'\?\s*:'),
    re.compile(r'&&|\|\|'),
]
BOOLEAN_OPERATOR = re.compile(r'&&|\|\|')
OPERATOR = re.compile(r'[=+\-*/<>!&|^~%]=?|=>|\+\+|--|&&|\|\||[{}()\[\];,:]')
OPERAND = re.compile(r'\b[a-zA-Z_][a-zA-Z0-9_]*\b')
BRANCH_KEYWORD = re.compile(r'if|for|while')
MAGIC_NUMBER = re.compile(r'\b\d{3,}\b')
REPEATED_WORD = re.compile(r'(\b\w+\b).*?\1')

LONG_METHOD_LINES = 50
COMPLEX_CONDITIONAL_OPERATORS = 3


@dataclass
class QualityMetrics:
    maintainability_index: int = 100
    cyclomatic_complexity: int = 1
    halstead_volume: int = 0
    cognitive_complexity: int = 0
    technical_debt: str = "Low (1-4 hours)"
    code_smells: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def cyclomatic_complexity(code: str) -> int:
    return 1 + sum(count_matches(p, code) for p in DECISION_POINTS)


def halstead_volume(code: str) -> int:
    """Simplified volume: operator tokens plus identifier tokens"""
    return count_matches(OPERATOR, code) + count_matches(OPERAND, code)


def cognitive_complexity(code: str) -> int:
    complexity = 0
    nesting = 0
    for line in code.split("\n"):
        if "{" in line or ("(" in line and BRANCH_KEYWORD.search(line)):
            nesting += 1
            complexity += nesting
        if "}" in line or ")" in line:
            nesting = max(0, nesting - 1)
    return complexity


def detect_code_smells(code: str) -> List[str]:
    smells = []
    if len(code.split("\n")) > LONG_METHOD_LINES:
        smells.append("Long Method")
    if count_matches(BOOLEAN_OPERATOR, code) > COMPLEX_CONDITIONAL_OPERATORS:
        smells.append("Complex Conditional")
    if NESTED_FOR_OPEN.detect(code):
        smells.append("Nested Loops")
    if MAGIC_NUMBER.search(code):
        smells.append("Magic Numbers")
    if REPEATED_WORD.search(code):
        smells.append("Possible Code Duplication")
    return smells


def maintainability_index(line_count: int, complexity: int, smell_count: int) -> int:
    score = 100
    if line_count > 100:
        score -= 20
    elif line_count > 50:
        score -= 10

    if complexity > 10:
        score -= 30
    elif complexity > 5:
        score -= 15

    score -= smell_count * 5
    return max(0, min(100, score))


def technical_debt(complexity: int, smell_count: int) -> str:
    hours = complexity * 0.5 + smell_count * 2
    if hours < 4:
        return "Low (1-4 hours)"
    if hours < 8:
        return "Medium (4-8 hours)"
    return "High (8+ hours)"


@best_effort("quality", default=QualityMetrics)
def calculate_quality_metrics(code: str) -> QualityMetrics:
    code = as_text(code)
    complexity = cyclomatic_complexity(code)
    smells = detect_code_smells(code)

    return QualityMetrics(
        maintainability_index=maintainability_index(len(code.split("\n")), complexity, len(smells)),
        cyclomatic_complexity=complexity,
        halstead_volume=halstead_volume(code),
        cognitive_complexity=cognitive_complexity(code),
        technical_debt=technical_debt(complexity, len(smells)),
        code_smells=smells,
    )
