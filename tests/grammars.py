from __future__ import annotations

from parselab.grammar import Grammar
from parselab.notation import parse_compact_rules, parse_grammar_lines


def balanced() -> Grammar:
	"""S -> a S b | ε"""
	return parse_compact_rules(["S -> aSb e"])


def left_recursive_expr() -> Grammar:
	"""E -> E + T | T ; T -> T * F | F ; F -> ( E ) | i"""
	return parse_compact_rules(["E -> E+T T", "T -> T*F F", "F -> (E) i"])


def right_recursive_expr() -> Grammar:
	return parse_grammar_lines(
		start="E",
		lines=[
			"E  -> T E'",
			"E' -> + T E' | ε",
			"T  -> F T'",
			"T' -> * F T' | ε",
			"F  -> ( E ) | id",
		],
	)


def ambiguous_sum() -> Grammar:
	"""E -> E + E | i"""
	return parse_compact_rules(["E -> E+E i"])


def reduce_reduce() -> Grammar:
	"""S -> A a | B a ; A -> c ; B -> c"""
	return parse_compact_rules(["S -> Aa Ba", "A -> c", "B -> c"])


def accept_over_reduce() -> Grammar:
	"""S -> T | a ; T -> S"""
	return parse_compact_rules(["S -> T a", "T -> S"])


def accept_before_reduce() -> Grammar:
	"""s -> t | a ; t -> s, where t sorts after the synthetic start"""
	return parse_grammar_lines(start="s", lines=["s -> t | a", "t -> s"])
