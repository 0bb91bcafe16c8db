"""Test locating eval string literals in shell documents."""

from __future__ import annotations

from evaltext.literals import EvalLiteral, find_eval_literals
from evaltext.ranges import ContentRange


def contents(document: str) -> list[str]:
    return [lit.content for lit in find_eval_literals(document)]


class TestEvalCommand:
    def test_single_literal(self) -> None:
        literals = find_eval_literals('eval "echo hi"')
        assert literals == [EvalLiteral("echo hi", ContentRange(6, 7))]

    def test_range_matches_content(self) -> None:
        document = 'x=1\neval "echo \\$x"\n'
        (lit,) = find_eval_literals(document)
        assert lit.content_range.substring(document) == lit.content

    def test_multiple_arguments(self) -> None:
        literals = find_eval_literals('eval "a" "b"')
        assert [lit.content_range for lit in literals] == [
            ContentRange(6, 1),
            ContentRange(10, 1),
        ]

    def test_escaped_quote_does_not_close(self) -> None:
        assert contents('eval "say \\"hi\\""') == ['say \\"hi\\"']

    def test_empty_literal(self) -> None:
        assert find_eval_literals('eval ""') == [EvalLiteral("", ContentRange(6, 0))]

    def test_multiple_commands(self) -> None:
        assert contents('eval "a"\necho x\neval "b"') == ["a", "b"]


class TestCommandPosition:
    def test_not_eval(self) -> None:
        assert contents('echo "hi"') == []

    def test_eval_as_argument(self) -> None:
        assert contents('echo eval "x"') == []

    def test_eval_prefix_word(self) -> None:
        assert contents('evaluate "x"') == []

    def test_after_semicolon(self) -> None:
        assert contents('cd /tmp; eval "x"') == ["x"]

    def test_after_and(self) -> None:
        assert contents('true && eval "x"') == ["x"]

    def test_after_pipe(self) -> None:
        assert contents('cat f | eval "x"') == ["x"]

    def test_after_assignment_prefix(self) -> None:
        assert contents('FOO=1 eval "x"') == ["x"]

    def test_in_command_substitution(self) -> None:
        assert contents('out=$(eval "x")') == ["x"]

    def test_in_brace_group(self) -> None:
        assert contents('{ eval "x"; }') == ["x"]

    def test_after_then(self) -> None:
        assert contents('if true; then eval "x"; fi') == ["x"]

    def test_after_if(self) -> None:
        assert contents('if eval "x"; then :; fi') == ["x"]

    def test_after_else(self) -> None:
        assert contents('if true; then :; else eval "x"; fi') == ["x"]

    def test_after_do(self) -> None:
        assert contents('for i in 1; do eval "x"; done') == ["x"]

    def test_in_while_body_on_own_line(self) -> None:
        assert contents('while read l; do\n  eval "x"\ndone') == ["x"]

    def test_after_bang(self) -> None:
        assert contents('! eval "x"') == ["x"]

    def test_after_time(self) -> None:
        assert contents('time eval "x"') == ["x"]

    def test_after_double_quoted_assignment(self) -> None:
        assert contents('FOO="a b" eval "x"') == ["x"]

    def test_after_single_quoted_assignment(self) -> None:
        assert contents("FOO='a b' BAR=1 eval \"x\"") == ["x"]

    def test_assignment_value_is_not_a_literal(self) -> None:
        literals = find_eval_literals('FOO="a b" eval "x"')
        assert [lit.content_range for lit in literals] == [ContentRange(16, 1)]

    def test_reserved_word_as_argument(self) -> None:
        assert contents('echo then eval "x"') == []


class TestCommandEnd:
    def test_semicolon_ends_eval(self) -> None:
        assert contents('eval "a"; echo "b"') == ["a"]

    def test_newline_ends_eval(self) -> None:
        assert contents('eval\necho "x"') == []

    def test_line_continuation(self) -> None:
        assert contents('eval \\\n  "x"') == ["x"]


class TestSkipped:
    def test_single_quoted(self) -> None:
        assert contents("eval 'a' \"b\"") == ["b"]

    def test_single_quoted_may_hold_double_quote(self) -> None:
        assert contents("eval 'a\"' \"b\"") == ["b"]

    def test_comment(self) -> None:
        assert contents('# eval "x"\neval "y"') == ["y"]

    def test_hash_inside_word(self) -> None:
        assert contents('eval a#b "x"') == ["x"]


class TestUnterminated:
    def test_runs_to_end(self) -> None:
        literals = find_eval_literals('eval "abc')
        assert literals == [EvalLiteral("abc", ContentRange(6, 3), terminated=False)]

    def test_trailing_backslash(self) -> None:
        (lit,) = find_eval_literals('eval "abc\\')
        assert lit.content == "abc\\"
        assert not lit.terminated
