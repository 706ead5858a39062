"""Test match semantics of every node kind through Grammar.test."""

from __future__ import annotations

import pytest

from abnfc.ast import CaseInsensitiveString, CaseSensitiveString, Named, Repetition
from abnfc.errors import GrammarError, NestingTooDeepError
from abnfc.matcher import Match, Matcher


class TestCaseSensitivity:
    def test_single_quotes_exact(self, grammar):
        g = grammar("r = 'TeSt'")
        assert g.test("test") is None
        assert g.test("TeSt") == 4

    def test_double_quotes_fold_case(self, grammar):
        g = grammar('r = "test"')
        assert g.test("test") == 4
        assert g.test("TEST") == 4
        assert g.test("tEsT") == 4

    def test_uppercase_literal_folds(self, grammar):
        g = grammar('r = "GET"')
        assert g.test("get") == 3

    def test_numeric_literal_exact(self, grammar):
        g = grammar("r = %x61")
        assert g.test("a") == 1
        assert g.test("A") is None


class TestRepetition:
    def test_bounds(self, grammar):
        g = grammar('r = 2*3"a"')
        assert g.test("a") is None
        assert g.test("aa") == 2
        assert g.test("aaa") == 3
        assert g.test("aaaa") == 3

    def test_unbounded(self, grammar):
        g = grammar("r = *'a'")
        assert g.test("") == 0
        assert g.test("b") == 0
        assert g.test("aaaaab") == 5

    def test_exact_count(self, grammar):
        g = grammar("r = 3'a'")
        assert g.test("aa") is None
        assert g.test("aaaa") == 3

    def test_zero_length_child_terminates(self, grammar):
        g = grammar("r = *['a']")
        assert g.test("b") == 0
        assert g.test("aab") == 2

    def test_zero_length_child_parse_terminates(self, grammar):
        g = grammar("r = *['a']")
        assert g.parse("b") == Match(0, [None])
        assert g.parse("aab") == Match(2, ["a", "a", None])

    def test_zero_length_child_satisfies_minimum(self, grammar):
        g = grammar("r = 3*['a']")
        assert g.test("a") == 1

    def test_greedy_without_backtracking(self, grammar):
        g = grammar("r = *'a' 'a'")
        assert g.test("aaa") is None


class TestAlternation:
    def test_first_match_wins(self, grammar):
        g = grammar('r = "ab" / "a"')
        assert g.test("ab") == 2
        assert g.test("ac") == 1

    def test_order_matters(self, grammar):
        g = grammar('r = "a" / "ab"')
        assert g.test("ab") == 1

    def test_all_fail(self, grammar):
        g = grammar("r = 'a' / 'b'")
        assert g.test("c") is None


class TestSequence:
    def test_all_children(self, grammar):
        g = grammar("r = 'a' 'b' 'c'")
        assert g.test("abcd") == 3

    def test_no_partial_result(self, grammar):
        g = grammar("r = 'a' 'b'")
        assert g.test("ac") is None
        assert g.test("a") is None

    def test_optional(self, grammar):
        g = grammar("r = ['a'] 'b'")
        assert g.test("b") == 1
        assert g.test("ab") == 2


class TestReferences:
    def test_recursive_list(self, grammar):
        g = grammar("list = item [',' list]\nitem = 'x'")
        assert g.test("x,x,x") == 5
        assert g.test("x,x,") == 3

    def test_mutual_recursion(self, grammar):
        g = grammar("a = 'x' b / 'y'\nb = 'z' a")
        assert g.test("xzy") == 3
        assert g.test("xzxzy") == 5

    def test_left_recursion_fails_instead_of_looping(self, grammar):
        g = grammar("a = a 'x' / 'y'")
        assert g.test("yx") == 1

    def test_other_rule(self, grammar):
        g = grammar("a = b 'x'\nb = 'y'")
        assert g.test("y", rule="b") == 1
        assert g.test("y") is None

    def test_sample_grammar(self, sample):
        assert sample.test("ab") == 2
        assert sample.test("bbb") == 3
        # *rule2 accepts the empty match before later alternatives are tried
        assert sample.test("cdf") == 0
        assert sample.test("") == 0
        assert sample.test("cdf", rule="rule4-1") == 1


class TestInput:
    def test_start_index(self, grammar):
        g = grammar("r = 'ab'")
        assert g.test("xxab", 2) == 2
        assert g.test("xxab", 1) is None

    def test_past_end(self, grammar):
        g = grammar("r = 'a'")
        assert g.test("a", 1) is None

    def test_token_sequence(self, grammar):
        g = grammar('request = "GET" path\npath = \'/\' / \'/index\'')
        assert g.test(["get", "/index"]) == 2
        assert g.test(["GET", "/INDEX"]) is None

    def test_token_sequence_end(self, grammar):
        g = grammar("r = 'a' 'b'")
        assert g.test(["a"]) is None

    def test_fullmatch(self, grammar):
        g = grammar("r = 1*'a'")
        assert g.fullmatch("aaa")
        assert not g.fullmatch("aab")
        assert not g.fullmatch("b")


class TestMatcherDirect:
    def test_literal_nodes(self):
        m = Matcher({})
        assert m.test(CaseSensitiveString("ab"), "xab", 1) == 2
        assert m.test(CaseInsensitiveString("AB"), "ab", 0) == 2

    def test_empty_literal(self):
        assert Matcher({}).test(CaseSensitiveString(""), "abc", 0) == 0

    def test_unbounded_repetition_of_empty_literal(self):
        node = Repetition(0, None, CaseSensitiveString(""))
        assert Matcher({}).test(node, "abc", 0) == 0

    @pytest.mark.parametrize("text", ["", "abc"])
    def test_fresh_state_per_matcher(self, grammar, text):
        g = grammar("r = *'a'")
        m = Matcher(g.rules)
        assert m.test(Named("r"), text, 0) == m.test(Named("r"), text, 0)


class TestDeepRecursion:
    LIST = "list = item [',' list]\nitem = 'x'"

    def test_shallow_list(self, grammar):
        g = grammar(self.LIST)
        text = ",".join(["x"] * 50)
        assert g.test(text) == len(text)

    def test_long_list_test(self, grammar):
        g = grammar(self.LIST)
        with pytest.raises(NestingTooDeepError, match="nesting too deep while matching rule 'list'"):
            g.test(",".join(["x"] * 1000))

    def test_long_list_parse(self, grammar):
        g = grammar(self.LIST)
        with pytest.raises(NestingTooDeepError, match="nesting too deep while parsing rule 'list'"):
            g.parse(",".join(["x"] * 1000))

    def test_grammar_still_usable(self, grammar):
        g = grammar(self.LIST)
        with pytest.raises(NestingTooDeepError):
            g.test(",".join(["x"] * 1000))
        assert g.test("x,x,x") == 5

    def test_deeply_nested_groups(self, grammar):
        text = "r = " + "(" * 1000 + "'a'" + ")" * 1000
        with pytest.raises(NestingTooDeepError, match="resolving rule 'r'") as exc_info:
            grammar(text)
        assert isinstance(exc_info.value, GrammarError)
