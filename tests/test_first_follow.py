import unittest

from grammars import balanced, left_recursive_expr, right_recursive_expr

from parselab.first_follow import (
	compute_first_follow,
	compute_first_sets,
	compute_first_sets_with_trace,
	compute_follow_sets,
	compute_follow_sets_with_trace,
)
from parselab.grammar import END_MARKER, EPSILON, nonterminal, terminal


def names(symbols):
	return {s.name for s in symbols}


class FirstFollowTest(unittest.TestCase):

	def test_balanced(self):
		g = balanced()
		first, follow = compute_first_follow(g)
		S = nonterminal("S")
		self.assertEqual(first[S], {terminal("a"), EPSILON})
		self.assertEqual(follow[S], {terminal("b"), END_MARKER})

	def test_left_recursive_expression(self):
		ff = compute_first_follow(left_recursive_expr())
		E, T, F = nonterminal("E"), nonterminal("T"), nonterminal("F")
		for nt in (E, T, F):
			self.assertEqual(names(ff.first[nt]), {"(", "i"})
		self.assertEqual(names(ff.follow_of(E)), {"+", ")", "$"})
		self.assertEqual(names(ff.follow_of(T)), {"+", "*", ")", "$"})
		self.assertEqual(names(ff.follow_of(F)), {"+", "*", ")", "$"})

	def test_nullable_chain(self):
		g = right_recursive_expr()
		ff = compute_first_follow(g)
		Ep, Tp = nonterminal("E'"), nonterminal("T'")
		self.assertEqual(names(ff.first[Ep]), {"+", "ε"})
		self.assertEqual(names(ff.follow_of(Tp)), {"+", ")", "$"})
		self.assertEqual(ff.first_of([Tp, Ep]), {terminal("*"), terminal("+"), EPSILON})
		self.assertEqual(ff.first_of([]), {EPSILON})

	def test_recomputing_is_idempotent(self):
		g = right_recursive_expr()
		first1 = compute_first_sets(g)
		first2 = compute_first_sets(g)
		self.assertEqual(first1, first2)
		self.assertEqual(compute_follow_sets(g, first1), compute_follow_sets(g, first2))
		self.assertEqual(compute_first_follow(g).follow, compute_first_follow(g).follow)

	def test_sets_only_grow_across_passes(self):
		g = right_recursive_expr()
		first, first_passes = compute_first_sets_with_trace(g)
		follow, follow_passes = compute_follow_sets_with_trace(g, first)

		for final, passes in ((first, first_passes), (follow, follow_passes)):
			replay = {nt: set() for nt in g.nonterminals}
			for p in passes:
				self.assertTrue(p)
				for nt, added in p.items():
					for sym in added:
						self.assertNotIn(sym, replay[nt])
						replay[nt].add(sym)
			self.assertEqual(replay, final)


if __name__ == '__main__':
	unittest.main()
