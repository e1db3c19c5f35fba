from __future__ import annotations

from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence, Tuple

from parselab.first_follow import first_of_sequence
from parselab.grammar import END_MARKER, EPSILON, Grammar, Production, Symbol
from parselab.parsing import ParseResult, ParseStep, undeclared_symbol

LL1Table = Dict[Symbol, Dict[Symbol, Production]]
SymbolSets = Mapping[Symbol, AbstractSet[Symbol]]


class LL1Conflict(Exception):
	"""Two alternatives of one nonterminal claim the same table cell."""

	def __init__(self, nonterminal: Symbol, lookahead: Symbol, existing: Production, new: Production) -> None:
		self.nonterminal = nonterminal
		self.lookahead = lookahead
		self.existing = existing
		self.new = new
		self.message = f"Conflict at M[{nonterminal}, {lookahead}]: {existing} vs {new}"
		super().__init__(self.message)

	def __str__(self) -> str:
		return self.message


def _fill_ll1_table(grammar: Grammar, first: SymbolSets, follow: SymbolSets, *, stop_at_first: bool) -> Tuple[LL1Table, List[LL1Conflict]]:
	table: LL1Table = {nt: {} for nt in grammar.nonterminals}
	conflicts: List[LL1Conflict] = []

	def place(p: Production, lookahead: Symbol) -> None:
		existing = table[p.lhs].get(lookahead)
		if existing is not None and existing != p:
			conflict = LL1Conflict(p.lhs, lookahead, existing, p)
			if stop_at_first:
				raise conflict
			conflicts.append(conflict)
		else:
			table[p.lhs][lookahead] = p

	for p in grammar.productions:
		first_rhs = first_of_sequence(p.rhs, first, grammar)

		for a in sorted(first_rhs - {EPSILON}):
			place(p, a)

		if EPSILON in first_rhs:
			for b in sorted(follow[p.lhs]):
				place(p, b)

	return table, conflicts


def build_ll1_table(grammar: Grammar, first: SymbolSets, follow: SymbolSets) -> LL1Table:
	"""
	Predictive table: table[NonTerminal][TerminalOr$] = Production.

	Raises LL1Conflict on the first doubly claimed cell, i.e. when the
	grammar is not LL(1).
	"""
	return _fill_ll1_table(grammar, first, follow, stop_at_first=True)[0]


def find_ll1_conflicts(grammar: Grammar, first: SymbolSets, follow: SymbolSets) -> List[LL1Conflict]:
	"""Every LL(1) conflict of the grammar; empty means the grammar is LL(1)."""
	return _fill_ll1_table(grammar, first, follow, stop_at_first=False)[1]


class PredictiveParser:
	"""Table-driven LL(1) engine. Each call owns its own stack and cursor."""

	def __init__(self, grammar: Grammar, table: LL1Table) -> None:
		self.grammar = grammar
		self.table = table

	def parse(self, tokens: Sequence[Symbol]) -> bool:
		return self._run(tokens, trace=False).accepted

	def trace(self, tokens: Sequence[Symbol]) -> ParseResult:
		return self._run(tokens, trace=True)

	def _run(self, tokens: Sequence[Symbol], *, trace: bool) -> ParseResult:
		inp = list(tokens) + [END_MARKER]
		stack: List[Symbol] = [END_MARKER, self.grammar.start]
		steps: List[ParseStep] = []
		i = 0

		def snapshot(action: str) -> None:
			if not trace:
				return
			steps.append(
				ParseStep(
					stack=[s.name for s in stack],
					remaining_input=[s.name for s in inp[i:]],
					action=action,
				)
			)

		def reject(error: str) -> ParseResult:
			snapshot(f"reject: {error}")
			return ParseResult(accepted=False, error=error, steps=steps)

		snapshot("init")

		bad = undeclared_symbol(self.grammar, tokens)
		if bad is not None:
			return reject(f"Undeclared input symbol '{bad}'")

		while stack:
			top = stack.pop()
			cur = inp[i] if i < len(inp) else END_MARKER

			if top == END_MARKER:
				if cur == END_MARKER:
					snapshot("accept")
					return ParseResult(accepted=True, error=None, steps=steps)
				return reject(f"Unexpected '{cur}' after complete input")

			if not self.grammar.is_nonterminal(top):
				if top == cur:
					i += 1
					snapshot(f"match {cur}")
					continue
				return reject(f"Mismatch: expected '{top}' but found '{cur}'")

			prod: Optional[Production] = self.table.get(top, {}).get(cur)
			if prod is None:
				return reject(f"No rule for M[{top}, {cur}]")

			# Push RHS in reverse so its leftmost symbol ends up on top
			for sym in reversed(prod.body):
				stack.append(sym)
			snapshot(str(prod))

		return reject("Unexpected end of parse (stack exhausted).")
