from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from parselab.grammar import AugmentedGrammar, Production, Symbol


@dataclass(frozen=True)
class Item:
	lhs: Symbol
	rhs: Tuple[Symbol, ...]
	dot: int = 0

	@classmethod
	def start_of(cls, production: Production) -> "Item":
		# epsilon alternatives become empty bodies, i.e. immediate reduce items
		return cls(production.lhs, production.body, 0)

	@property
	def next_symbol(self) -> Optional[Symbol]:
		"""Symbol after the dot, or None when the item is ready to reduce."""
		if self.dot < len(self.rhs):
			return self.rhs[self.dot]
		return None

	@property
	def is_reduce(self) -> bool:
		return self.dot == len(self.rhs)

	def advance(self) -> "Item":
		if self.is_reduce:
			raise ValueError(f"Cannot advance past the end of {self}")
		return Item(self.lhs, self.rhs, self.dot + 1)

	@property
	def sort_key(self) -> Tuple[Tuple[int, str], Tuple[Tuple[int, str], ...], int]:
		return (self.lhs.sort_key, tuple(s.sort_key for s in self.rhs), self.dot)

	def __str__(self) -> str:
		names = [s.name for s in self.rhs]
		names.insert(self.dot, ".")
		return f"{self.lhs} -> " + " ".join(names)


# A state is its item set in canonical order; the tuple doubles as its key.
State = Tuple[Item, ...]


def canonical_key(items: Iterable[Item]) -> State:
	return tuple(sorted(set(items), key=lambda i: i.sort_key))


def closure(augmented: AugmentedGrammar, items: Iterable[Item]) -> State:
	result = set(items)
	queue: Deque[Item] = deque(result)

	while queue:
		item = queue.popleft()
		sym = item.next_symbol
		if sym is None or not augmented.is_nonterminal(sym):
			continue
		for production in augmented.productions_for(sym):
			new_item = Item.start_of(production)
			if new_item not in result:
				result.add(new_item)
				queue.append(new_item)

	return canonical_key(result)


def goto(augmented: AugmentedGrammar, items: Iterable[Item], symbol: Symbol) -> State:
	moved = [i.advance() for i in items if not i.is_reduce and i.next_symbol == symbol]
	if not moved:
		return ()
	return closure(augmented, moved)


class LR0Automaton:
	"""
	Canonical collection of LR(0) item sets over an augmented grammar.

	States get ids in discovery order and are looked up by canonical key,
	never by scanning the list.
	"""

	def __init__(self, augmented: AugmentedGrammar) -> None:
		self.augmented = augmented
		self.states: List[State] = []
		self.transitions: Dict[Tuple[int, Symbol], int] = {}
		self._index: Dict[State, int] = {}

	def start_item(self) -> Item:
		return Item.start_of(self.augmented.start_production)

	def _register(self, state: State) -> int:
		idx = self._index.get(state)
		if idx is None:
			idx = len(self.states)
			self.states.append(state)
			self._index[state] = idx
		return idx

	def state_of(self, items: Iterable[Item]) -> Optional[int]:
		return self._index.get(canonical_key(items))

	def build_states(self) -> List[State]:
		if self.states:
			return self.states

		self._register(closure(self.augmented, [self.start_item()]))
		symbols = self.augmented.symbols()

		# states only get appended, so walking by index is a breadth-first pass
		n = 0
		while n < len(self.states):
			current = self.states[n]
			for sym in symbols:
				target = goto(self.augmented, current, sym)
				if target:
					self.transitions[(n, sym)] = self._register(target)
			n += 1

		return self.states

	def goto_state(self, state: int, symbol: Symbol) -> Optional[int]:
		"""Index of goto(state, symbol), registering it if it is new; None if empty."""
		key = (state, symbol)
		if key in self.transitions:
			return self.transitions[key]
		target = goto(self.augmented, self.states[state], symbol)
		if not target:
			return None
		idx = self._register(target)
		self.transitions[key] = idx
		return idx

	def __len__(self) -> int:
		return len(self.states)

	def __iter__(self):
		return iter(self.states)

	def __getitem__(self, idx: int) -> State:
		return self.states[idx]
