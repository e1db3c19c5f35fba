from __future__ import annotations

"""
Export grammar analysis artifacts (FIRST, FOLLOW, LL(1) table, ACTION/GOTO)
into Excel-friendly files.

Outputs (always, tables only when the grammar is in that class):
  - FIRST.csv, FOLLOW.csv
  - LL1_ParseTable.csv
  - SLR1_Action.csv, SLR1_Goto.csv, SLR1_States.csv

Optional (only if openpyxl is installed):
  - Parse_Tables.xlsx  (multiple sheets)

Run:
  python -X utf8 export_tables.py [compact-grammar-file] [out-dir]
"""

import csv
import sys
from pathlib import Path
from typing import Dict, List

from parselab.analysis import AnalysisArtifacts, analyze_grammar
from parselab.notation import parse_compact_rules, read_compact_grammar
from parselab.tables import Rows, action_rows, goto_rows, ll1_rows, set_rows, state_rows


ROOT = Path(__file__).resolve().parent

# E -> E + T | T ; T -> T * F | F ; F -> ( E ) | i
DEMO_RULES = ["E -> E+T T", "T -> T*F F", "F -> (E) i"]


def sheets_for(art: AnalysisArtifacts) -> Dict[str, Rows]:
	sheets: Dict[str, Rows] = {}
	ff = art.first_follow
	if ff is None:
		return sheets
	sheets["FIRST"] = set_rows("FIRST", ff.first)
	sheets["FOLLOW"] = set_rows("FOLLOW", ff.follow)
	if art.ll1_table is not None:
		sheets["LL1_ParseTable"] = ll1_rows(art.grammar, art.ll1_table)
	if art.slr_tables is not None:
		sheets["SLR1_Action"] = action_rows(art.grammar, art.slr_tables)
		sheets["SLR1_Goto"] = goto_rows(art.grammar, art.slr_tables)
		sheets["SLR1_States"] = state_rows(art.slr_tables)
	return sheets


def export_csv(sheets: Dict[str, Rows], out_dir: Path) -> List[Path]:
	written: List[Path] = []
	for name, rows in sheets.items():
		out_path = out_dir / f"{name}.csv"
		with out_path.open("w", newline="", encoding="utf-8") as f:
			w = csv.writer(f)
			w.writerows(rows)
		written.append(out_path)
	return written


def try_export_xlsx(sheets: Dict[str, Rows], out_dir: Path) -> bool:
	try:
		import openpyxl  # type: ignore
		from openpyxl.utils import get_column_letter  # type: ignore
	except ImportError:
		return False

	wb = openpyxl.Workbook()
	wb.remove(wb.active)

	for name, rows in sheets.items():
		ws = wb.create_sheet(name[:31])
		for row in rows:
			ws.append(row)

	# Basic column sizing
	for sheet in wb.worksheets:
		for col in range(1, sheet.max_column + 1):
			letter = get_column_letter(col)
			sheet.column_dimensions[letter].width = 22 if col == 1 else 18

	wb.save(out_dir / "Parse_Tables.xlsx")
	return True


def main(argv: List[str]) -> None:
	if argv:
		with open(argv[0], encoding="utf-8") as f:
			grammar = read_compact_grammar(f)
	else:
		grammar = parse_compact_rules(DEMO_RULES, start="E")
	out_dir = Path(argv[1]) if len(argv) > 1 else ROOT
	out_dir.mkdir(parents=True, exist_ok=True)

	art = analyze_grammar(grammar, all_conflicts=True)
	sheets = sheets_for(art)

	written = export_csv(sheets, out_dir)
	xlsx_ok = try_export_xlsx(sheets, out_dir)

	print("Classification:", art.classification)
	for d in art.diagnostics:
		print(d)
	print("Wrote:", ", ".join(p.name for p in written))
	print("Wrote Parse_Tables.xlsx:", xlsx_ok)


if __name__ == "__main__":
	main(sys.argv[1:])
