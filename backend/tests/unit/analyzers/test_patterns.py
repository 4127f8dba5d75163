"""
Unit Tests for Pattern Matchers

The matchers are lexical heuristics; these tests pin the fixtures they are
expected to flag and the ones they must leave alone.
"""
import pytest

from sentinel.modules.analyzers.patterns import (
    find_line_number,
    NESTED_LOOPS,
    REPEATED_ARRAY_ITERATION,
    LINEAR_SEARCH_IN_LOOP,
    UNMEMOIZED_RECURSION,
    STRING_CONCAT_IN_LOOP,
    SQL_CONCATENATION,
    XSS_SINK,
    DYNAMIC_CODE,
    SENSITIVE_LOGGING,
    LISTENER_LEAK,
    INTERVAL_LEAK,
    LARGE_ARRAY_ALLOCATION,
)

NESTED_LOOP_CODE = (
    "const pairs = [];\n"
    "for (let i = 0; i < items.length; i++) {\n"
    "  for (let j = 0; j < items.length; j++) {\n"
    "    pairs.push([items[i], items[j]]);\n"
    "  }\n"
    "}"
)


class TestFindLineNumber:
    """Test the shared line-hint helper"""

    def test_returns_one_based_line(self):
        """Test the first matching line is reported 1-based"""
        assert find_line_number("a\nb\nc", "c") == 3

    def test_needles_tried_in_order(self):
        """Test earlier needles win over earlier lines"""
        assert find_line_number("x = 1\ny = 2", "y", "x") == 2

    def test_missing_needle_defaults_to_first_line(self):
        """Test nothing found falls back to line 1"""
        assert find_line_number("a\nb", "zzz") == 1


class TestComplexityMatchers:
    """Test loop and recursion shapes"""

    def test_nested_for_loops_detected(self):
        """Test a for loop inside a for loop is flagged"""
        assert NESTED_LOOPS.detect(NESTED_LOOP_CODE) is True

    def test_nested_loop_snippet_and_line(self):
        """Test snippet is the outer loop header"""
        assert NESTED_LOOPS.locate(NESTED_LOOP_CODE) == "for (let i = 0; i < items.length; i++) {"
        assert NESTED_LOOPS.line_of(NESTED_LOOP_CODE) == 2

    def test_single_loop_not_nested(self):
        """Test one loop alone is not flagged"""
        assert NESTED_LOOPS.detect("for (let i = 0; i < n; i++) { total += i; }") is False

    def test_loop_inside_while_detected(self):
        """Test a loop wrapped by while is flagged"""
        assert NESTED_LOOPS.detect("while (queue.length) { for (const x of queue) { } }") is True

    def test_nested_loop_default_snippet(self):
        """Test canned snippet when no loop header is present"""
        assert NESTED_LOOPS.locate("const x = 1;") == NESTED_LOOPS.default_snippet

    def test_array_iteration_threshold(self):
        """Test more than two array passes are needed"""
        assert REPEATED_ARRAY_ITERATION.detect("a.map(f).filter(g)") is False
        assert REPEATED_ARRAY_ITERATION.detect("a.map(f).filter(g).reduce(h, 0)") is True

    def test_linear_search_requires_loop(self):
        """Test includes() only counts when the code also loops"""
        assert LINEAR_SEARCH_IN_LOOP.detect("if (ids.includes(id)) {}") is False
        assert LINEAR_SEARCH_IN_LOOP.detect("for (const x of xs) { if (ids.includes(x)) {} }") is True

    def test_recursion_without_memo_detected(self):
        """Test a function calling something without any cache"""
        code = "function fib(n) { return fib(n - 1) + fib(n - 2); }"
        assert UNMEMOIZED_RECURSION.detect(code) is True

    def test_recursion_with_memo_ignored(self):
        """Test the word memo suppresses the recursion check"""
        code = "function fib(n, memo = {}) { return fib(n - 1, memo); }"
        assert UNMEMOIZED_RECURSION.detect(code) is False

    def test_concatenation_before_loop_on_one_line(self):
        """Test += followed by a loop header on the same line"""
        assert STRING_CONCAT_IN_LOOP.detect("out += item; for (let i = 0; i < n; i++) {}") is True
        assert STRING_CONCAT_IN_LOOP.detect("out += item;") is False


class TestSecurityMatchers:
    """Test vulnerability shapes"""

    def test_sql_concatenation(self):
        """Test SQL keyword plus concatenated operand"""
        assert SQL_CONCATENATION.detect('"SELECT * FROM users WHERE id=" + userId') is True

    def test_sql_without_concatenation(self):
        """Test a constant query is not flagged"""
        assert SQL_CONCATENATION.detect('"SELECT * FROM users"') is False

    def test_xss_sink(self):
        """Test innerHTML and document.write are sinks"""
        assert XSS_SINK.detect("el.innerHTML = html;") is True
        assert XSS_SINK.detect("document.write(html);") is True
        assert XSS_SINK.detect("el.textContent = html;") is False

    @pytest.mark.parametrize("code", [
        "eval(input)",
        "new Function(body)",
        'setTimeout("tick()", 10)',
    ])
    def test_dynamic_code(self, code):
        """Test eval-like constructs"""
        assert DYNAMIC_CODE.detect(code) is True

    def test_sensitive_logging(self):
        """Test console.log with a sensitive word"""
        assert SENSITIVE_LOGGING.detect("console.log(user.password)") is True
        assert SENSITIVE_LOGGING.detect("console.log(user.name)") is False


class TestMemoryMatchers:
    """Test registration-without-teardown shapes"""

    def test_listener_without_removal(self):
        """Test addEventListener with no removeEventListener"""
        assert LISTENER_LEAK.detect("el.addEventListener('click', fn)") is True

    def test_listener_with_removal(self):
        """Test a matching removal clears the check"""
        code = "el.addEventListener('click', fn); el.removeEventListener('click', fn)"
        assert LISTENER_LEAK.detect(code) is False

    def test_interval_without_clear(self):
        """Test setInterval with no clearInterval"""
        assert INTERVAL_LEAK.detect("setInterval(tick, 1000)") is True

    def test_large_array_threshold(self):
        """Test only literal sizes above 10000 count"""
        assert LARGE_ARRAY_ALLOCATION.detect("new Array(20000)") is True
        assert LARGE_ARRAY_ALLOCATION.detect("new Array(100)") is False
        assert LARGE_ARRAY_ALLOCATION.detect("new Array(size)") is False
