"""
Language Support - keyword-based language detection and per-language
performance patterns
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Pattern

from sentinel.modules.analyzers.base import best_effort, as_text

NESTED_FOR = r'for\s*\([^)]*\)\s*\{[^}]*for\s*\([^)]*\)'


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    CPP = "cpp"


@dataclass
class LanguageConfig:
    name: str
    extension: str
    icon: str
    complexity_keywords: List[str] = field(default_factory=list)
    performance_patterns: List[Pattern] = field(default_factory=list)


def _patterns(*expressions: str) -> List[Pattern]:
    return [re.compile(e) for e in expressions]


_ECMASCRIPT_KEYWORDS = ["forEach", "map", "filter", "reduce", "includes", "indexOf"]

SUPPORTED_LANGUAGES: Dict[Language, LanguageConfig] = {
    Language.JAVASCRIPT: LanguageConfig(
        name="JavaScript",
        extension="js",
        icon="🟨",
        complexity_keywords=list(_ECMASCRIPT_KEYWORDS),
        performance_patterns=_patterns(r'\.forEach.*\.forEach', NESTED_FOR, r'\.includes.*for'),
    ),
    Language.TYPESCRIPT: LanguageConfig(
        name="TypeScript",
        extension="ts",
        icon="🔷",
        complexity_keywords=list(_ECMASCRIPT_KEYWORDS),
        performance_patterns=_patterns(r'\.forEach.*\.forEach', NESTED_FOR, r'\.includes.*for'),
    ),
    Language.PYTHON: LanguageConfig(
        name="Python",
        extension="py",
        icon="🐍",
        complexity_keywords=["for", "in", "range", "len", "append", "list comprehension"],
        performance_patterns=_patterns(
            r'for\s+\w+\s+in[^:]+:\s*for\s+\w+\s+in',
            r'\.append.*for',
            r'in\s+list.*for',
        ),
    ),
    Language.JAVA: LanguageConfig(
        name="Java",
        extension="java",
        icon="☕",
        complexity_keywords=["for", "forEach", "stream", "contains", "indexOf"],
        performance_patterns=_patterns(NESTED_FOR, r'\.stream\(\)\.forEach', r'\.contains.*for'),
    ),
    Language.CPP: LanguageConfig(
        name="C++",
        extension="cpp",
        icon="⚡",
        complexity_keywords=["for", "while", "vector", "push_back", "find"],
        performance_patterns=_patterns(NESTED_FOR, r'\.push_back.*for', r'std::find.*for'),
    ),
}

# Checked in order; the first hit wins
DETECTION_RULES = [
    (Language.PYTHON, lambda code: any(k in code for k in ("def ", "import ", "print("))),
    (Language.JAVA, lambda code: any(k in code for k in ("public class", "import java.", "System.out."))),
    (Language.CPP, lambda code: any(k in code for k in ("#include", "std::", "cout <<"))),
    (Language.TYPESCRIPT, lambda code: all(k in code for k in (":", "type", "interface"))),
]


def detect_language(code: str) -> Language:
    code = as_text(code)
    for language, matches in DETECTION_RULES:
        if matches(code):
            return language
    return Language.JAVASCRIPT


def get_language_config(language: Language) -> LanguageConfig:
    return SUPPORTED_LANGUAGES[Language(language)]


@best_effort("language", default=list)
def get_language_analysis(code: str, language: Language) -> List[str]:
    code = as_text(code)
    config = get_language_config(language)
    return [
        f"Detected {config.name} performance pattern: /{pattern.pattern}/"
        for pattern in config.performance_patterns
        if pattern.search(code)
    ]
