from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple


class SymbolKind(Enum):
	TERMINAL = auto()
	NONTERMINAL = auto()
	EPSILON = auto()
	END_MARKER = auto()


@dataclass(frozen=True)
class Symbol:
	name: str
	kind: SymbolKind

	@property
	def sort_key(self) -> Tuple[int, str]:
		return (self.kind.value, self.name)

	def __lt__(self, other: "Symbol") -> bool:
		return self.sort_key < other.sort_key

	def __str__(self) -> str:
		return self.name


EPSILON = Symbol("ε", SymbolKind.EPSILON)
END_MARKER = Symbol("$", SymbolKind.END_MARKER)


def terminal(name: str) -> Symbol:
	return Symbol(name, SymbolKind.TERMINAL)


def nonterminal(name: str) -> Symbol:
	return Symbol(name, SymbolKind.NONTERMINAL)


@dataclass(frozen=True)
class Production:
	lhs: Symbol
	rhs: Tuple[Symbol, ...]

	@property
	def is_epsilon(self) -> bool:
		return len(self.rhs) == 1 and self.rhs[0] == EPSILON

	@property
	def body(self) -> Tuple[Symbol, ...]:
		"""RHS without epsilon markers; empty for the epsilon alternative."""
		return tuple(s for s in self.rhs if s != EPSILON)

	def __str__(self) -> str:
		return f"{self.lhs} -> " + " ".join(s.name for s in self.rhs)


class GrammarIllFormed(Exception):
	def __init__(self, missing: Iterable[Symbol], message: Optional[str] = None) -> None:
		self.missing = sorted(set(missing))
		self.message = message or "Nonterminals without productions: " + ", ".join(s.name for s in self.missing)
		super().__init__(self.message)

	def __str__(self) -> str:
		return self.message


class Grammar:
	"""
	Start symbol, nonterminal/terminal sets and the ordered alternatives of
	every nonterminal. The terminal set is recomputed on each change and
	`revision` is bumped so cached analyses can tell the grammar moved on.
	"""

	def __init__(self, start: Symbol) -> None:
		if start.kind is not SymbolKind.NONTERMINAL:
			raise ValueError(f"Start symbol must be a nonterminal: {start!r}")
		self.start = start
		self.nonterminals: Set[Symbol] = {start}
		self.terminals: Set[Symbol] = set()
		self.rules: Dict[Symbol, List[Production]] = {}
		self.revision = 0

	def add_production(self, lhs: Symbol, alternatives: Sequence[Sequence[Symbol]]) -> None:
		if lhs.kind is not SymbolKind.NONTERMINAL:
			raise ValueError(f"Left-hand side must be a nonterminal: {lhs!r}")

		prods: List[Production] = []
		for alt in alternatives:
			rhs = tuple(alt) if len(alt) else (EPSILON,)
			for sym in rhs:
				if sym == END_MARKER:
					raise ValueError("The end-marker cannot appear in a production")
			prods.append(Production(lhs, rhs))

		self.rules[lhs] = prods
		self.nonterminals.add(lhs)
		for p in prods:
			for sym in p.rhs:
				if sym.kind is SymbolKind.NONTERMINAL:
					self.nonterminals.add(sym)
		self._recompute_terminals()
		self.revision += 1

	def _recompute_terminals(self) -> None:
		terms: Set[Symbol] = set()
		for prods in self.rules.values():
			for p in prods:
				for sym in p.rhs:
					if sym == EPSILON or sym in self.nonterminals:
						continue
					terms.add(sym)
		self.terminals = terms

	def classify(self, symbol: Symbol) -> SymbolKind:
		if symbol == EPSILON:
			return SymbolKind.EPSILON
		if symbol == END_MARKER:
			return SymbolKind.END_MARKER
		if symbol in self.nonterminals:
			return SymbolKind.NONTERMINAL
		return SymbolKind.TERMINAL

	def is_terminal(self, symbol: Symbol) -> bool:
		return symbol in self.terminals

	def is_nonterminal(self, symbol: Symbol) -> bool:
		return symbol in self.nonterminals

	@property
	def productions(self) -> Tuple[Production, ...]:
		return tuple(p for prods in self.rules.values() for p in prods)

	def productions_for(self, lhs: Symbol) -> List[Production]:
		return list(self.rules.get(lhs, []))

	def symbols(self) -> List[Symbol]:
		"""Every symbol a goto can be taken over, in a fixed order."""
		return sorted(self.terminals) + [END_MARKER] + sorted(self.nonterminals)

	def symbol(self, name: str) -> Optional[Symbol]:
		# Terminals shadow a nonterminal of the same name
		for group in (self.terminals, self.nonterminals):
			for sym in group:
				if sym.name == name:
					return sym
		if name == END_MARKER.name:
			return END_MARKER
		return None

	def validate(self) -> None:
		missing: Set[Symbol] = set()
		if not self.rules.get(self.start):
			missing.add(self.start)
		for p in self.productions:
			for sym in p.rhs:
				if sym in self.nonterminals and not self.rules.get(sym):
					missing.add(sym)
		if missing:
			raise GrammarIllFormed(missing)

	def __str__(self) -> str:
		return "\n".join(str(p) for p in self.productions)


class AugmentedGrammar:
	"""
	Owned view over a grammar with the synthetic start production Z -> S.

	The wrapped grammar is left untouched so the LL(1) path can keep using it.
	"""

	def __init__(self, grammar: Grammar) -> None:
		self.grammar = grammar
		names = {s.name for s in grammar.nonterminals | grammar.terminals}
		name = "Z"
		while name in names:
			name += "'"
		self.start = nonterminal(name)
		self.start_production = Production(self.start, (grammar.start,))

	@property
	def original_start(self) -> Symbol:
		return self.grammar.start

	@property
	def nonterminals(self) -> Set[Symbol]:
		return self.grammar.nonterminals | {self.start}

	@property
	def terminals(self) -> Set[Symbol]:
		return self.grammar.terminals

	def is_nonterminal(self, symbol: Symbol) -> bool:
		return symbol == self.start or self.grammar.is_nonterminal(symbol)

	def productions_for(self, lhs: Symbol) -> List[Production]:
		if lhs == self.start:
			return [self.start_production]
		return self.grammar.productions_for(lhs)

	def symbols(self) -> List[Symbol]:
		return self.grammar.symbols()
