"""
Pattern Matchers - narrow lexical detectors over raw source text (NO parsing)

Every matcher implements the same small interface:

    matcher.detect(code) -> bool      # does the pattern occur at all?
    matcher.locate(code) -> str       # offending line (stripped) or a canned default
    matcher.line_of(code) -> int      # 1-based line hint, 1 when nothing is found

The expressions approximate the named smell; they are not semantic checks.
A test suite should treat them as "matches these fixtures". Swapping one for
a parser-backed implementation only requires honouring the same interface.
"""

import re
from typing import List, Pattern, Sequence, Tuple


def find_line_number(code: str, *needles: str) -> int:
    """Return the 1-based line of the first needle found, trying needles in order"""
    lines = code.split("\n")
    for needle in needles:
        for index, line in enumerate(lines):
            if needle in line:
                return index + 1
    return 1


def count_matches(pattern: Pattern, code: str) -> int:
    return len(pattern.findall(code))


class PatternMatcher:
    """
    Base class for all matchers.

    Subclasses override `detect`. Snippet extraction walks the lines and
    returns the first one accepted by `snippet_line`; line hints come from
    `line_needles`.
    """

    name: str = "pattern"
    line_needles: Tuple[str, ...] = ()
    default_snippet: str = ""

    def detect(self, code: str) -> bool:
        raise NotImplementedError

    def snippet_line(self, line: str) -> bool:
        return any(needle in line for needle in self.line_needles)

    def locate(self, code: str) -> str:
        for line in code.split("\n"):
            if self.snippet_line(line):
                return line.strip()
        return self.default_snippet

    def line_of(self, code: str) -> int:
        return find_line_number(code, *self.line_needles)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class RegexMatcher(PatternMatcher):
    """Detects when any of the given expressions is found"""

    def __init__(self, name: str, *patterns: str,
                 line_needles: Sequence[str] = (), default_snippet: str = ""):
        self.name = name
        self.patterns: List[Pattern] = [re.compile(p) for p in patterns]
        self.line_needles = tuple(line_needles)
        self.default_snippet = default_snippet

    def detect(self, code: str) -> bool:
        return any(p.search(code) for p in self.patterns)


class KeywordMatcher(PatternMatcher):
    """
    Detects a keyword that is not followed up by its counterpart.

    `present` must all occur, `absent` must all be missing.
    """

    def __init__(self, name: str, present: Sequence[str], absent: Sequence[str] = ()):
        self.name = name
        self.present = tuple(present)
        self.absent = tuple(absent)
        self.line_needles = self.present[:1]

    def detect(self, code: str) -> bool:
        return (all(k in code for k in self.present)
                and not any(k in code for k in self.absent))


# ==========================================
# Complexity / performance matchers
# ==========================================

class NestedLoopMatcher(PatternMatcher):
    """`for (...) { ... for (...)` or a while loop wrapping another loop"""

    name = "nested-loops"
    line_needles = ("for",)
    default_snippet = "for (let i = 0; i < n; i++) { for (let j = 0; j < n; j++) { ... } }"

    FOR_IN_FOR = re.compile(r'for\s*\([^)]*\)\s*\{[^}]*for\s*\([^)]*\)')
    LOOP_IN_WHILE = re.compile(r'while\s*\([^)]*\)\s*\{[^}]*(for|while)\s*\([^)]*\)')

    def detect(self, code: str) -> bool:
        return bool(self.FOR_IN_FOR.search(code) or self.LOOP_IN_WHILE.search(code))

    def snippet_line(self, line: str) -> bool:
        return "for" in line and "{" in line


class ArrayIterationMatcher(PatternMatcher):
    """More than `threshold` array-method passes over data"""

    name = "repeated-array-iteration"
    line_needles = (".forEach",)
    default_snippet = "array.forEach(...); array.map(...);"

    METHOD_CALL = re.compile(r'(\.forEach|\.map|\.filter|\.reduce)')
    METHOD_LINE = re.compile(r'\.(forEach|map|filter|reduce)')

    def __init__(self, threshold: int = 2):
        self.threshold = threshold

    def detect(self, code: str) -> bool:
        return count_matches(self.METHOD_CALL, code) > self.threshold

    def snippet_line(self, line: str) -> bool:
        return bool(self.METHOD_LINE.search(line))


class QuadraticSearchMatcher(PatternMatcher):
    """Linear membership search (`includes`/`indexOf`) in code that also loops"""

    name = "linear-search-in-loop"
    line_needles = (".includes", "indexOf")
    default_snippet = "if (array.includes(value)) { ... }"

    INCLUDES = re.compile(r'\.includes\(.*\)')
    INDEX_OF = re.compile(r'\.indexOf\(.*\)')

    def detect(self, code: str) -> bool:
        if "for" not in code:
            return False
        return bool(self.INCLUDES.search(code) or self.INDEX_OF.search(code))

    def snippet_line(self, line: str) -> bool:
        return ".includes" in line or ".indexOf" in line


class UnmemoizedRecursionMatcher(PatternMatcher):
    """A named function whose body calls something, with no memo/cache in sight"""

    name = "unmemoized-recursion"
    line_needles = ("function",)
    default_snippet = "function recursive(n) { return recursive(n-1) + recursive(n-2); }"

    FUNCTION_WITH_CALL = re.compile(r'function\s+\w+\([^)]*\)\s*\{[^}]*\w+\([^)]*\)')

    def detect(self, code: str) -> bool:
        if "memo" in code or "cache" in code:
            return False
        return bool(self.FUNCTION_WITH_CALL.search(code))

    def snippet_line(self, line: str) -> bool:
        return "function" in line and "(" in line


class LoopConcatenationMatcher(PatternMatcher):
    """`+=` or `x = y +` followed by a loop header on the same line"""

    name = "string-concatenation-in-loop"
    line_needles = ("+=",)
    default_snippet = 'str += "text";'

    CONCAT_BEFORE_FOR = re.compile(r'(\+=|=\s*\w+\s*\+).*for.*\(')
    CONCAT_BEFORE_WHILE = re.compile(r'(\+=|=\s*\w+\s*\+).*while.*\(')

    def detect(self, code: str) -> bool:
        return bool(self.CONCAT_BEFORE_FOR.search(code) or self.CONCAT_BEFORE_WHILE.search(code))

    def snippet_line(self, line: str) -> bool:
        return "+=" in line or ("+" in line and "for" in line)


# ==========================================
# Security matchers
# ==========================================

class SqlConcatenationMatcher(PatternMatcher):
    """SQL keyword present and something concatenated with `+`"""

    name = "sql-concatenation"
    line_needles = ("SELECT", "INSERT", "UPDATE")

    CONCAT_OPERAND = re.compile(r'\+\s*\w+')

    def detect(self, code: str) -> bool:
        if not any(keyword in code for keyword in self.line_needles):
            return False
        return "+" in code and bool(self.CONCAT_OPERAND.search(code))


class DynamicCodeMatcher(PatternMatcher):
    """eval, the Function constructor, or setTimeout fed a string"""

    name = "dynamic-code"
    line_needles = ("eval", "Function", "setTimeout")

    def detect(self, code: str) -> bool:
        return ("eval(" in code or "Function(" in code
                or ("setTimeout(" in code and '"' in code))


class SensitiveLoggingMatcher(PatternMatcher):
    name = "sensitive-logging"
    line_needles = ("console.log",)
    SENSITIVE_WORDS = ("password", "secret", "token")

    def detect(self, code: str) -> bool:
        return "console.log" in code and any(word in code for word in self.SENSITIVE_WORDS)


class AnyKeywordMatcher(PatternMatcher):
    """Detects when any of the needles appears"""

    def __init__(self, name: str, *needles: str):
        self.name = name
        self.line_needles = needles

    def detect(self, code: str) -> bool:
        return any(needle in code for needle in self.line_needles)


# ==========================================
# Memory matchers
# ==========================================

class LargeArrayAllocationMatcher(PatternMatcher):
    """`Array(n)` with a literal size above the threshold"""

    name = "large-array-allocation"
    line_needles = ("Array(",)

    ARRAY_SIZE = re.compile(r'Array\((\d+)\)')

    def __init__(self, threshold: int = 10000):
        self.threshold = threshold

    def detect(self, code: str) -> bool:
        if "Array(" not in code:
            return False
        match = self.ARRAY_SIZE.search(code)
        return bool(match) and int(match.group(1)) > self.threshold


# ==========================================
# Shared instances
# ==========================================

NESTED_LOOPS = NestedLoopMatcher()
REPEATED_ARRAY_ITERATION = ArrayIterationMatcher()
LINEAR_SEARCH_IN_LOOP = QuadraticSearchMatcher()
UNMEMOIZED_RECURSION = UnmemoizedRecursionMatcher()
STRING_CONCAT_IN_LOOP = LoopConcatenationMatcher()

SQL_CONCATENATION = SqlConcatenationMatcher()
XSS_SINK = AnyKeywordMatcher("xss-sink", "innerHTML", "document.write")
DYNAMIC_CODE = DynamicCodeMatcher()
SENSITIVE_LOGGING = SensitiveLoggingMatcher()

LISTENER_LEAK = KeywordMatcher("listener-leak", ["addEventListener"], ["removeEventListener"])
INTERVAL_LEAK = KeywordMatcher("interval-leak", ["setInterval"], ["clearInterval"])
TIMEOUT_LEAK = KeywordMatcher("timeout-leak", ["setTimeout", "function"], ["clearTimeout"])
CLOSURE_RETENTION = KeywordMatcher("closure-retention", ["function", "return function"])
LARGE_ARRAY_ALLOCATION = LargeArrayAllocationMatcher()

# Looser nested-loop shapes used by the estimators
NESTED_FOR_STRICT = RegexMatcher("nested-for", r'for\s*\([^)]*\)\s*\{[^}]*for\s*\([^)]*\)')
NESTED_FOR_OPEN = RegexMatcher("nested-for-open", r'for\s*\([^)]*\)\s*\{[^}]*for')
NESTED_FOR_ANY = RegexMatcher("nested-for-any", r'for.*\{[^}]*for')

