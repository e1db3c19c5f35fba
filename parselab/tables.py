from __future__ import annotations

from typing import AbstractSet, List, Mapping

from parselab.grammar import END_MARKER, EPSILON, Grammar, Symbol
from parselab.ll1 import LL1Table
from parselab.slr import SLRTables

Rows = List[List[str]]


def fmt_sym(s: Symbol) -> str:
	return "eps" if s == EPSILON else s.name


def set_rows(title: str, sets: Mapping[Symbol, AbstractSet[Symbol]]) -> Rows:
	rows: Rows = [[title, "Symbols (sorted)"]]
	for nt in sorted(sets):
		rows.append([nt.name, " ".join(fmt_sym(s) for s in sorted(sets[nt]))])
	return rows


def ll1_rows(grammar: Grammar, table: LL1Table) -> Rows:
	terms = sorted(grammar.terminals) + [END_MARKER]
	rows: Rows = [["NonTerminal"] + [t.name for t in terms]]
	for nt in sorted(grammar.nonterminals):
		row = [nt.name]
		for t in terms:
			p = table.get(nt, {}).get(t)
			row.append(str(p).replace(EPSILON.name, "eps") if p is not None else "")
		rows.append(row)
	return rows


def action_rows(grammar: Grammar, tables: SLRTables) -> Rows:
	terms = sorted(grammar.terminals) + [END_MARKER]
	rows: Rows = [["State"] + [t.name for t in terms]]
	for s in range(len(tables.states)):
		row = [str(s)]
		for t in terms:
			act = tables.action.get((s, t))
			row.append(str(act).replace(EPSILON.name, "eps") if act is not None else "")
		rows.append(row)
	return rows


def goto_rows(grammar: Grammar, tables: SLRTables) -> Rows:
	nts = sorted(grammar.nonterminals)
	rows: Rows = [["State"] + [n.name for n in nts]]
	for s in range(len(tables.states)):
		row = [str(s)]
		for n in nts:
			target = tables.goto.get((s, n))
			row.append(str(target) if target is not None else "")
		rows.append(row)
	return rows


def state_rows(tables: SLRTables) -> Rows:
	rows: Rows = [["State", "Items"]]
	for s, items in enumerate(tables.states):
		rows.append([str(s), "; ".join(str(i) for i in items)])
	return rows


def render(rows: Rows) -> str:
	"""Plain fixed-width rendering for terminals."""
	if not rows:
		return ""
	widths = [max(len(r[c]) if c < len(r) else 0 for r in rows) for c in range(len(rows[0]))]
	lines = []
	for r in rows:
		lines.append("  ".join(cell.ljust(widths[c]) for c, cell in enumerate(r)).rstrip())
	return "\n".join(lines)
