from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, TextIO, Tuple

from parselab.grammar import EPSILON, Grammar, Symbol, nonterminal, terminal

EPS_ALIASES = {"ε", "eps", "epsilon", "EPS", "EPSILON"}
# Compact notation: one character per symbol, uppercase is a nonterminal, `e` is epsilon.
COMPACT_EPS = "e"


class NotationError(Exception):
	def __init__(self, message: str, line: Optional[str] = None) -> None:
		self.message = message
		self.line = line
		super().__init__(message)

	def __str__(self) -> str:
		if self.line is None:
			return self.message
		return f"{self.message}: {self.line}"


def _split_rule(raw_line: str) -> Tuple[str, str]:
	if "->" not in raw_line:
		raise NotationError("Invalid production (missing '->')", raw_line)
	lhs, rhs = raw_line.split("->", 1)
	lhs = lhs.strip()
	if not lhs:
		raise NotationError("Invalid production (empty LHS)", raw_line)
	return lhs, rhs


def _is_comment(line: str) -> bool:
	return not line or line.startswith("#") or line.startswith("//")


def parse_grammar_lines(*, start: str, lines: Sequence[str]) -> Grammar:
	"""
	Parse a small CFG given as production lines, e.g.:

	  E  -> T E'
	  E' -> + T E' | ε
	  T  -> F T'

	Notes:
	- Nonterminals are inferred from LHS symbols.
	- Alternatives can be separated by '|'.
	- Epsilon can be written as 'ε', 'eps', or 'epsilon' (case-insensitive).
	- A later rule for the same LHS adds alternatives to the earlier ones.
	"""
	raw: Dict[str, List[List[str]]] = {}

	for raw_line in lines:
		line = (raw_line or "").strip()
		if _is_comment(line):
			continue
		lhs, rhs = _split_rule(line)
		alts = raw.setdefault(lhs, [])
		for alt in rhs.split("|"):
			alts.append([t for t in alt.split() if t.strip()])

	if not raw:
		raise NotationError("Grammar has no productions")
	if start not in raw:
		raise NotationError(f"Start symbol '{start}' has no productions")

	def to_symbol(tok: str) -> Symbol:
		if tok in EPS_ALIASES or tok.lower() in EPS_ALIASES:
			return EPSILON
		if tok in raw:
			return nonterminal(tok)
		return terminal(tok)

	grammar = Grammar(nonterminal(start))
	for lhs, alts in raw.items():
		grammar.add_production(nonterminal(lhs), [[to_symbol(t) for t in alt] for alt in alts])
	return grammar


def compact_symbol(ch: str) -> Symbol:
	if ch == COMPACT_EPS:
		return EPSILON
	if ch.isupper():
		return nonterminal(ch)
	return terminal(ch)


def parse_compact_rules(lines: Iterable[str], start: Optional[str] = None) -> Grammar:
	"""
	Parse rules in the compact console notation: ``S -> aSb e``.

	The LHS is a single uppercase letter and alternatives are separated by
	blanks. The start symbol defaults to S when S has rules, otherwise the
	first LHS read.
	"""
	rules: List[Tuple[str, List[List[Symbol]]]] = []
	for raw_line in lines:
		line = (raw_line or "").strip()
		if _is_comment(line):
			continue
		lhs, rhs = _split_rule(line)
		if len(lhs) != 1 or not lhs.isupper():
			raise NotationError("Compact LHS must be one uppercase letter", raw_line)
		alts = [[compact_symbol(ch) for ch in alt] for alt in rhs.split()]
		if not alts:
			raise NotationError("Production has no alternatives", raw_line)
		rules.append((lhs, alts))

	if not rules:
		raise NotationError("Grammar has no productions")

	names = [lhs for lhs, _ in rules]
	if start is None:
		start = "S" if "S" in names else names[0]

	grammar = Grammar(nonterminal(start))
	for lhs, alts in rules:
		grammar.add_production(nonterminal(lhs), alts)
	return grammar


def read_compact_grammar(stream: TextIO) -> Grammar:
	"""A count line followed by that many compact rules."""
	header = stream.readline().strip()
	try:
		n = int(header)
	except ValueError:
		raise NotationError("Expected the number of rules", header) from None
	lines = [stream.readline() for _ in range(n)]
	return parse_compact_rules(lines)


def tokenize_input(grammar: Grammar, text: str, *, compact: bool) -> List[Symbol]:
	"""
	Map an input string to grammar symbols: one per character in compact
	notation, whitespace separated otherwise.
	"""
	pieces = [ch for ch in text.strip() if not ch.isspace()] if compact else text.split()
	out: List[Symbol] = []
	for piece in pieces:
		sym = grammar.symbol(piece)
		out.append(sym if sym is not None else terminal(piece))
	return out

