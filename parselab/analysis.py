from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional, Union

from parselab.diagnostics import Diagnostic, DiagnosticEngine
from parselab.first_follow import FirstFollow, compute_first_follow
from parselab.grammar import Grammar, GrammarIllFormed
from parselab.ll1 import LL1Conflict, LL1Table, PredictiveParser, build_ll1_table, find_ll1_conflicts
from parselab.slr import SLRConflict, SLRTables, ShiftReduceParser, build_slr1_tables, find_slr1_conflicts


@dataclass
class AnalysisArtifacts:
	grammar: Grammar
	first_follow: Optional[FirstFollow]
	ll1_table: Optional[LL1Table]
	slr_tables: Optional[SLRTables]
	diagnostics: List[Diagnostic]
	duration_ms: float
	ll1_conflicts: List[LL1Conflict] = field(default_factory=list)
	slr_conflicts: List[SLRConflict] = field(default_factory=list)

	@property
	def is_ll1(self) -> bool:
		return self.ll1_table is not None

	@property
	def is_slr1(self) -> bool:
		return self.slr_tables is not None

	@property
	def classification(self) -> str:
		if self.is_ll1 and self.is_slr1:
			return "LL(1) and SLR(1)"
		if self.is_ll1:
			return "LL(1)"
		if self.is_slr1:
			return "SLR(1)"
		return "neither"

	def parser(self, engine: str) -> Union[PredictiveParser, ShiftReduceParser]:
		if engine == "ll1":
			if self.ll1_table is None:
				raise ValueError("Grammar is not LL(1)")
			return PredictiveParser(self.grammar, self.ll1_table)
		if engine == "slr1":
			if self.slr_tables is None:
				raise ValueError("Grammar is not SLR(1)")
			return ShiftReduceParser(self.grammar, self.slr_tables)
		raise ValueError(f"Unknown engine: {engine}")


class GrammarAnalyzer:
	"""
	Validates a grammar and tries both table builds; a build that stops on a
	conflict is dropped and its classification reported as a diagnostic.

	Results are cached until the grammar's revision changes.
	"""

	def __init__(self, grammar: Grammar, *, all_conflicts: bool = False) -> None:
		self.grammar = grammar
		self.all_conflicts = all_conflicts
		self._artifacts: Optional[AnalysisArtifacts] = None
		self._revision = -1

	def analyze(self) -> AnalysisArtifacts:
		if self._artifacts is not None and self._revision == self.grammar.revision:
			return self._artifacts
		self._artifacts = self._run()
		self._revision = self.grammar.revision
		return self._artifacts

	def _run(self) -> AnalysisArtifacts:
		diagnostics = DiagnosticEngine()
		start = time.perf_counter()
		grammar = self.grammar

		try:
			grammar.validate()
		except GrammarIllFormed as exc:
			diagnostics.error(str(exc), "grammar", hint="Add productions for every referenced nonterminal.")
			return AnalysisArtifacts(
				grammar=grammar,
				first_follow=None,
				ll1_table=None,
				slr_tables=None,
				diagnostics=diagnostics.items,
				duration_ms=(time.perf_counter() - start) * 1000,
			)

		ff = compute_first_follow(grammar)

		ll1_table: Optional[LL1Table] = None
		ll1_conflicts: List[LL1Conflict] = []
		try:
			ll1_table = build_ll1_table(grammar, ff.first, ff.follow)
		except LL1Conflict as exc:
			ll1_conflicts = find_ll1_conflicts(grammar, ff.first, ff.follow) if self.all_conflicts else [exc]
			for c in ll1_conflicts:
				diagnostics.error(str(c), "ll1")
			diagnostics.info("Grammar is not LL(1).", "ll1")
		else:
			diagnostics.info("Grammar is LL(1).", "ll1")

		slr_tables: Optional[SLRTables] = None
		slr_conflicts: List[SLRConflict] = []
		try:
			slr_tables = build_slr1_tables(grammar, ff.follow)
		except SLRConflict as exc:
			slr_conflicts = find_slr1_conflicts(grammar, ff.follow) if self.all_conflicts else [exc]
			for c in slr_conflicts:
				diagnostics.error(str(c), "slr1")
			diagnostics.info("Grammar is not SLR(1).", "slr1")
		else:
			diagnostics.info(f"Grammar is SLR(1) ({len(slr_tables.states)} LR(0) states).", "slr1")

		return AnalysisArtifacts(
			grammar=grammar,
			first_follow=ff,
			ll1_table=ll1_table,
			slr_tables=slr_tables,
			diagnostics=diagnostics.items,
			duration_ms=(time.perf_counter() - start) * 1000,
			ll1_conflicts=ll1_conflicts,
			slr_conflicts=slr_conflicts,
		)


def analyze_grammar(grammar: Grammar, *, all_conflicts: bool = False) -> AnalysisArtifacts:
	return GrammarAnalyzer(grammar, all_conflicts=all_conflicts).analyze()
