from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from parselab.grammar import Grammar, Symbol


@dataclass(frozen=True)
class ParseStep:
	stack: List[str]
	remaining_input: List[str]
	action: str


@dataclass(frozen=True)
class ParseResult:
	accepted: bool
	error: Optional[str]
	steps: List[ParseStep]


def undeclared_symbol(grammar: Grammar, tokens: Sequence[Symbol]) -> Optional[Symbol]:
	"""First input symbol that is not a declared terminal (reserved symbols included)."""
	for tok in tokens:
		if not grammar.is_terminal(tok):
			return tok
	return None
