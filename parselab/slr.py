from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence, Tuple

from parselab.grammar import END_MARKER, AugmentedGrammar, Grammar, Production, Symbol
from parselab.lr0 import LR0Automaton, State
from parselab.parsing import ParseResult, ParseStep, undeclared_symbol


class ActionKind(Enum):
	SHIFT = auto()
	REDUCE = auto()
	ACCEPT = auto()


@dataclass(frozen=True)
class Action:
	kind: ActionKind
	state: Optional[int] = None
	production: Optional[Production] = None

	@classmethod
	def shift(cls, state: int) -> "Action":
		return cls(ActionKind.SHIFT, state=state)

	@classmethod
	def reduce(cls, production: Production) -> "Action":
		return cls(ActionKind.REDUCE, production=production)

	@classmethod
	def accept(cls) -> "Action":
		return cls(ActionKind.ACCEPT)

	def __str__(self) -> str:
		if self.kind is ActionKind.SHIFT:
			return f"s{self.state}"
		if self.kind is ActionKind.REDUCE:
			return f"r({self.production})"
		return "acc"


ActionTable = Dict[Tuple[int, Symbol], Action]
GotoTable = Dict[Tuple[int, Symbol], int]


class SLRConflict(Exception):
	"""Two different actions compete for ACTION[state, symbol]."""

	def __init__(self, kind: str, state: int, symbol: Symbol, existing: Action, new: Action) -> None:
		self.kind = kind
		self.state = state
		self.symbol = symbol
		self.existing = existing
		self.new = new
		self.message = f"{kind} conflict in state {state} on '{symbol}': {existing} vs {new}"
		super().__init__(self.message)

	def __str__(self) -> str:
		return self.message


class AutomatonInconsistency(RuntimeError):
	"""The tables contradict themselves; the LR(0) construction itself is broken."""


@dataclass
class SLRTables:
	action: ActionTable
	goto: GotoTable
	states: List[State]
	augmented: AugmentedGrammar


def _conflict_kind(existing: Action, new: Action) -> str:
	kinds = {existing.kind, new.kind}
	if kinds == {ActionKind.SHIFT}:
		return "shift/shift"
	if kinds == {ActionKind.REDUCE}:
		return "reduce/reduce"
	return "shift/reduce"


class _TableBuilder:
	def __init__(self, grammar: Grammar, follow: Mapping[Symbol, AbstractSet[Symbol]], stop_at_first: bool) -> None:
		self.grammar = grammar
		self.follow = follow
		self.stop_at_first = stop_at_first
		self.augmented = AugmentedGrammar(grammar)
		self.automaton = LR0Automaton(self.augmented)
		self.action: ActionTable = {}
		self.goto: GotoTable = {}
		self.conflicts: List[SLRConflict] = []

	def follow_of(self, nt: Symbol) -> AbstractSet[Symbol]:
		if nt == self.augmented.start:
			return {END_MARKER}
		return self.follow.get(nt, frozenset())

	def set_action(self, state: int, symbol: Symbol, new: Action) -> None:
		key = (state, symbol)
		existing = self.action.get(key)
		if existing is None or existing == new:
			self.action[key] = new
			return
		# Accept always keeps the cell
		if existing.kind is ActionKind.ACCEPT and new.kind is ActionKind.REDUCE:
			return
		if new.kind is ActionKind.ACCEPT and existing.kind is ActionKind.REDUCE:
			self.action[key] = new
			return

		conflict = SLRConflict(_conflict_kind(existing, new), state, symbol, existing, new)
		if self.stop_at_first:
			raise conflict
		self.conflicts.append(conflict)

	def set_goto(self, state: int, nt: Symbol, target: int) -> None:
		existing = self.goto.get((state, nt))
		if existing is not None and existing != target:
			raise AutomatonInconsistency(f"GOTO[{state}, {nt}] is both {existing} and {target}")
		self.goto[(state, nt)] = target

	def build(self) -> SLRTables:
		states = self.automaton.build_states()
		start = self.augmented.start

		for s, items in enumerate(states):
			for item in items:
				if item.is_reduce:
					if item.lhs == start:
						self.set_action(s, END_MARKER, Action.accept())
						continue
					reduce = Action.reduce(self._production_of(item.lhs, item.rhs))
					for t in sorted(self.follow_of(item.lhs)):
						self.set_action(s, t, reduce)
					continue

				sym = item.next_symbol
				if sym is not None and not self.augmented.is_nonterminal(sym):
					target = self.automaton.goto_state(s, sym)
					if target is not None:
						self.set_action(s, sym, Action.shift(target))

			for nt in sorted(self.grammar.nonterminals):
				target = self.automaton.goto_state(s, nt)
				if target is not None:
					self.set_goto(s, nt, target)

		return SLRTables(action=self.action, goto=self.goto, states=list(states), augmented=self.augmented)

	def _production_of(self, lhs: Symbol, body: Tuple[Symbol, ...]) -> Production:
		for p in self.grammar.productions_for(lhs):
			if p.body == body:
				return p
		raise AutomatonInconsistency(f"No production {lhs} -> {' '.join(s.name for s in body)}")


def build_slr1_tables(grammar: Grammar, follow: Mapping[Symbol, AbstractSet[Symbol]]) -> SLRTables:
	"""
	ACTION/GOTO tables over the canonical LR(0) collection.

	Raises SLRConflict on the first competing action, i.e. when the grammar
	is not SLR(1). A raised build leaves nothing behind to reuse.
	"""
	return _TableBuilder(grammar, follow, stop_at_first=True).build()


def find_slr1_conflicts(grammar: Grammar, follow: Mapping[Symbol, AbstractSet[Symbol]]) -> List[SLRConflict]:
	"""Every SLR(1) conflict of the grammar; empty means the grammar is SLR(1)."""
	builder = _TableBuilder(grammar, follow, stop_at_first=False)
	builder.build()
	return builder.conflicts


class ShiftReduceParser:
	"""Table-driven SLR(1) engine. Each call owns its own stack and cursor."""

	def __init__(self, grammar: Grammar, tables: SLRTables) -> None:
		self.grammar = grammar
		self.tables = tables

	def parse(self, tokens: Sequence[Symbol]) -> bool:
		return self._run(tokens, trace=False).accepted

	def trace(self, tokens: Sequence[Symbol]) -> ParseResult:
		return self._run(tokens, trace=True)

	def _run(self, tokens: Sequence[Symbol], *, trace: bool) -> ParseResult:
		inp = list(tokens) + [END_MARKER]
		stack: List[int] = [0]
		steps: List[ParseStep] = []
		i = 0

		def snapshot(action: str) -> None:
			if not trace:
				return
			steps.append(
				ParseStep(
					stack=[str(s) for s in stack],
					remaining_input=[s.name for s in inp[i:]],
					action=action,
				)
			)

		def reject(error: str) -> ParseResult:
			snapshot(f"reject: {error}")
			return ParseResult(accepted=False, error=error, steps=steps)

		bad = undeclared_symbol(self.grammar, tokens)
		if bad is not None:
			return reject(f"Undeclared input symbol '{bad}'")

		while True:
			state = stack[-1]
			cur = inp[i]

			act = self.tables.action.get((state, cur))
			if act is None:
				return reject(f"No action for state {state} on '{cur}'")

			if act.kind is ActionKind.SHIFT:
				snapshot(f"shift {act.state}")
				stack.append(act.state)  # type: ignore[arg-type]
				i += 1

			elif act.kind is ActionKind.REDUCE:
				prod = act.production
				if prod is None:
					raise AutomatonInconsistency(f"Reduce action without a production in state {state}")
				n = len(prod.body)
				if n >= len(stack):
					raise RuntimeError(f"Reduce by {prod} would pop the base state")
				snapshot(f"reduce {prod}")
				if n:
					del stack[-n:]
				target = self.tables.goto.get((stack[-1], prod.lhs))
				if target is None:
					return reject(f"No goto for state {stack[-1]} on '{prod.lhs}'")
				stack.append(target)

			else:
				snapshot("accept")
				return ParseResult(accepted=True, error=None, steps=steps)
