from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional


class Severity(Enum):
	INFO = auto()
	WARNING = auto()
	ERROR = auto()


@dataclass
class Diagnostic:
	severity: Severity
	message: str
	# Which stage produced it: "grammar", "ll1", "slr1".
	stage: Optional[str] = None
	hint: Optional[str] = None

	def __str__(self) -> str:
		return f"[{self.severity.name}] {self.message}"


class DiagnosticEngine:
	def __init__(self) -> None:
		self._items: List[Diagnostic] = []

	@property
	def items(self) -> List[Diagnostic]:
		return self._items

	def report(self, severity: Severity, message: str, stage: Optional[str] = None, hint: Optional[str] = None) -> None:
		self._items.append(Diagnostic(severity, message, stage, hint))

	def info(self, message: str, stage: Optional[str] = None) -> None:
		self.report(Severity.INFO, message, stage)

	def error(self, message: str, stage: Optional[str] = None, hint: Optional[str] = None) -> None:
		self.report(Severity.ERROR, message, stage, hint)

	def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
		self._items.extend(diagnostics)

	def has_errors(self) -> bool:
		return any(d.severity is Severity.ERROR for d in self._items)

	def clear(self) -> None:
		self._items.clear()
