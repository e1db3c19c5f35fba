import io
import unittest

from parselab.grammar import EPSILON, nonterminal, terminal
from parselab.notation import (
	NotationError,
	parse_compact_rules,
	parse_grammar_lines,
	read_compact_grammar,
	tokenize_input,
)


class CompactNotationTest(unittest.TestCase):

	def test_compact_rules(self):
		g = parse_compact_rules(["S -> aSb e"])
		S = nonterminal("S")
		self.assertEqual(g.start, S)
		rhs = [p.rhs for p in g.productions_for(S)]
		self.assertEqual(rhs, [(terminal("a"), S, terminal("b")), (EPSILON,)])

	def test_start_defaults_to_first_lhs_without_s(self):
		g = parse_compact_rules(["E -> E+T T", "T -> i"])
		self.assertEqual(g.start, nonterminal("E"))

	def test_read_count_prefixed(self):
		g = read_compact_grammar(io.StringIO("2\nS -> aA\nA -> b\nrest\n"))
		self.assertEqual(len(g.productions), 2)

	def test_bad_rules(self):
		with self.assertRaises(NotationError):
			parse_compact_rules(["S aSb"])
		with self.assertRaises(NotationError):
			parse_compact_rules(["s -> a"])
		with self.assertRaises(NotationError):
			read_compact_grammar(io.StringIO("x\n"))


class SpacedNotationTest(unittest.TestCase):

	def test_spaced_rules(self):
		g = parse_grammar_lines(start="E", lines=["# comment", "E -> T E'", "E' -> + T E' | eps", "T -> id"])
		self.assertEqual(g.nonterminals, {nonterminal("E"), nonterminal("E'"), nonterminal("T")})
		self.assertEqual(g.terminals, {terminal("+"), terminal("id")})
		self.assertTrue(g.productions_for(nonterminal("E'"))[1].is_epsilon)

	def test_missing_start(self):
		with self.assertRaises(NotationError):
			parse_grammar_lines(start="S", lines=["E -> id"])


class TokenizeTest(unittest.TestCase):

	def test_tokenize(self):
		g = parse_compact_rules(["S -> aSb e"])
		self.assertEqual(tokenize_input(g, "a b", compact=True), [terminal("a"), terminal("b")])
		g2 = parse_grammar_lines(start="E", lines=["E -> id + id"])
		self.assertEqual(tokenize_input(g2, "id + id", compact=False), [terminal("id"), terminal("+"), terminal("id")])


if __name__ == '__main__':
	unittest.main()
