from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Sequence, Set, Tuple

from parselab.grammar import END_MARKER, EPSILON, Grammar, Symbol

FirstSets = Dict[Symbol, Set[Symbol]]
FollowSets = Dict[Symbol, Set[Symbol]]
# One entry per pass: nonterminal -> symbols that pass added.
Working = List[Dict[Symbol, List[Symbol]]]


def first_of_sequence(seq: Sequence[Symbol], first: Dict[Symbol, Set[Symbol]], grammar: Grammar) -> Set[Symbol]:
	"""
	FIRST(seq) computed left-to-right.
	Returns terminals plus EPSILON (if the entire sequence can derive epsilon).
	"""
	if len(seq) == 0:
		return {EPSILON}

	out: Set[Symbol] = set()
	all_eps = True

	for sym in seq:
		if sym == EPSILON:
			out.add(EPSILON)
			continue
		if not grammar.is_nonterminal(sym):
			out.add(sym)
			all_eps = False
			break

		f = first.get(sym, set())
		out |= f - {EPSILON}
		if EPSILON in f:
			continue
		all_eps = False
		break

	if all_eps:
		out.add(EPSILON)
	return out


def _first_pass(grammar: Grammar, first: FirstSets) -> Dict[Symbol, List[Symbol]]:
	added: Dict[Symbol, List[Symbol]] = {}
	for p in grammar.productions:
		before = set(first[p.lhs])
		first[p.lhs] |= first_of_sequence(p.rhs, first, grammar)
		new = sorted(first[p.lhs] - before)
		if new:
			added.setdefault(p.lhs, []).extend(new)
	return added


def _follow_pass(grammar: Grammar, first: FirstSets, follow: FollowSets) -> Dict[Symbol, List[Symbol]]:
	added: Dict[Symbol, List[Symbol]] = {}
	for p in grammar.productions:
		rhs = list(p.rhs)
		for i, sym in enumerate(rhs):
			if not grammar.is_nonterminal(sym):
				continue

			before = set(follow[sym])
			beta = rhs[i + 1 :]
			first_beta = first_of_sequence(beta, first, grammar)

			follow[sym] |= first_beta - {EPSILON}
			if len(beta) == 0 or EPSILON in first_beta:
				follow[sym] |= follow[p.lhs]

			new = sorted(follow[sym] - before)
			if new:
				added.setdefault(sym, []).extend(new)
	return added


def compute_first_sets_with_trace(grammar: Grammar) -> Tuple[FirstSets, Working]:
	"""
	Compute FIRST sets and also return an iteration log.
	The log is a list of passes; each pass maps Nonterminal -> list of newly-added symbols.
	"""
	first: FirstSets = {nt: set() for nt in grammar.nonterminals}
	passes: Working = []

	while True:
		added = _first_pass(grammar, first)
		if not added:
			break
		passes.append(added)

	return first, passes


def compute_follow_sets_with_trace(grammar: Grammar, first: FirstSets) -> Tuple[FollowSets, Working]:
	follow: FollowSets = {nt: set() for nt in grammar.nonterminals}
	follow[grammar.start].add(END_MARKER)
	passes: Working = [{grammar.start: [END_MARKER]}]

	while True:
		added = _follow_pass(grammar, first, follow)
		if not added:
			break
		passes.append(added)

	return follow, passes


def compute_first_sets(grammar: Grammar) -> FirstSets:
	return compute_first_sets_with_trace(grammar)[0]


def compute_follow_sets(grammar: Grammar, first: FirstSets) -> FollowSets:
	return compute_follow_sets_with_trace(grammar, first)[0]


@dataclass(frozen=True)
class FirstFollow:
	"""FIRST/FOLLOW at their fixed point; unpacks as ``first, follow``."""

	first: Dict[Symbol, FrozenSet[Symbol]]
	follow: Dict[Symbol, FrozenSet[Symbol]]
	grammar: Grammar

	def first_of(self, seq: Sequence[Symbol]) -> FrozenSet[Symbol]:
		return frozenset(first_of_sequence(seq, self.first, self.grammar))  # type: ignore[arg-type]

	def follow_of(self, nt: Symbol) -> FrozenSet[Symbol]:
		return self.follow[nt]

	def __iter__(self) -> Iterator[Dict[Symbol, FrozenSet[Symbol]]]:
		return iter((self.first, self.follow))


def compute_first_follow(grammar: Grammar) -> FirstFollow:
	first = compute_first_sets(grammar)
	follow = compute_follow_sets(grammar, first)
	return FirstFollow(
		first={nt: frozenset(s) for nt, s in first.items()},
		follow={nt: frozenset(s) for nt, s in follow.items()},
		grammar=grammar,
	)
