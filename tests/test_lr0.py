import unittest

from grammars import balanced, left_recursive_expr

from parselab.grammar import AugmentedGrammar, nonterminal, terminal
from parselab.lr0 import Item, LR0Automaton, canonical_key, closure, goto


class ItemTest(unittest.TestCase):

	def test_item_equality_and_advance(self):
		E, i = nonterminal("E"), terminal("i")
		item = Item(E, (i,), 0)
		self.assertEqual(item, Item(E, (i,), 0))
		self.assertEqual(item.next_symbol, i)
		done = item.advance()
		self.assertTrue(done.is_reduce)
		self.assertIsNone(done.next_symbol)
		with self.assertRaises(ValueError):
			done.advance()
		self.assertEqual(str(done), "E -> i .")

	def test_canonical_key_ignores_order(self):
		E, i = nonterminal("E"), terminal("i")
		a, b = Item(E, (i,), 0), Item(E, (E, i), 1)
		self.assertEqual(canonical_key([a, b]), canonical_key([b, a, b]))

	def test_sort_key_ranks_kind_before_name(self):
		S = nonterminal("S")
		x_term, x_nt = terminal("x"), nonterminal("x")
		by_term, by_nt = Item(S, (x_term,), 0), Item(S, (x_nt,), 0)
		self.assertNotEqual(by_term.sort_key, by_nt.sort_key)
		self.assertEqual(canonical_key([by_nt, by_term]), (by_term, by_nt))
		self.assertEqual(canonical_key([by_term, by_nt]), (by_term, by_nt))


class AutomatonTest(unittest.TestCase):

	def test_closure_of_start(self):
		aug = AugmentedGrammar(left_recursive_expr())
		state = closure(aug, [Item(aug.start, (nonterminal("E"),), 0)])
		# Z, E (2), T (2), F (2)
		self.assertEqual(len(state), 7)
		self.assertTrue(all(item.dot == 0 for item in state))

	def test_goto_empty_when_nothing_moves(self):
		aug = AugmentedGrammar(left_recursive_expr())
		state = closure(aug, [Item(aug.start, (nonterminal("E"),), 0)])
		self.assertEqual(goto(aug, state, terminal(")")), ())
		moved = goto(aug, state, terminal("("))
		self.assertIn(Item(nonterminal("F"), (terminal("("), nonterminal("E"), terminal(")")), 1), moved)

	def test_expression_collection_size(self):
		automaton = LR0Automaton(AugmentedGrammar(left_recursive_expr()))
		self.assertEqual(len(automaton.build_states()), 12)

	def test_epsilon_production_is_reduce_item(self):
		automaton = LR0Automaton(AugmentedGrammar(balanced()))
		states = automaton.build_states()
		S = nonterminal("S")
		self.assertIn(Item(S, (), 0), states[0])

	def test_rebuild_is_canonical(self):
		g = left_recursive_expr()
		first = LR0Automaton(AugmentedGrammar(g)).build_states()
		second = LR0Automaton(AugmentedGrammar(g)).build_states()
		self.assertEqual(len(first), len(second))
		self.assertEqual(first, second)
		self.assertEqual(len(set(first)), len(first))

	def test_states_located_by_content(self):
		automaton = LR0Automaton(AugmentedGrammar(left_recursive_expr()))
		states = automaton.build_states()
		for idx, state in enumerate(states):
			self.assertEqual(automaton.state_of(reversed(state)), idx)
			for sym in automaton.augmented.symbols():
				target = automaton.goto_state(idx, sym)
				if target is not None:
					self.assertEqual(states[target], goto(automaton.augmented, state, sym))


if __name__ == '__main__':
	unittest.main()
