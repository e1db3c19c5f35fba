"""
Console front end: read a grammar, say which classes it belongs to, then
answer yes/no for each input string.

Usage:
  python -m parselab.cli [--spaced START] [--all-conflicts] [--dump] [grammar-file]

Without a file the grammar is read from stdin: a count line followed by that
many compact rules (``S -> aSb e``). With ``--spaced START`` the whole file
is read as spaced rules instead (``E' -> + T E' | ε``).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, TextIO

from parselab.analysis import AnalysisArtifacts, GrammarAnalyzer
from parselab.grammar import Grammar
from parselab.notation import NotationError, parse_grammar_lines, read_compact_grammar, tokenize_input
from parselab.settings import get_settings
from parselab.tables import action_rows, goto_rows, ll1_rows, render, set_rows


def _answer_lines(art: AnalysisArtifacts, engine: str, stdin: TextIO, out: TextIO, compact: bool) -> None:
	parser = art.parser(engine)
	while True:
		line = stdin.readline()
		if not line or not line.strip():
			break
		tokens = tokenize_input(art.grammar, line, compact=compact)
		print("yes" if parser.parse(tokens) else "no", file=out)


def dump(art: AnalysisArtifacts, out: TextIO) -> None:
	ff = art.first_follow
	if ff is None:
		return
	print(render(set_rows("FIRST", ff.first)), file=out)
	print(file=out)
	print(render(set_rows("FOLLOW", ff.follow)), file=out)
	if art.ll1_table is not None:
		print("\nLL(1) table", file=out)
		print(render(ll1_rows(art.grammar, art.ll1_table)), file=out)
	if art.slr_tables is not None:
		print("\nACTION", file=out)
		print(render(action_rows(art.grammar, art.slr_tables)), file=out)
		print("\nGOTO", file=out)
		print(render(goto_rows(art.grammar, art.slr_tables)), file=out)


def interact(art: AnalysisArtifacts, stdin: TextIO, out: TextIO, compact: bool = True) -> None:
	if art.is_ll1 and art.is_slr1:
		print("Select a parser(T: for LL(1), B: for SLR(1), Q: quit):", file=out)
		while True:
			choice = stdin.readline()
			if not choice or choice.strip() == "Q":
				return
			choice = choice.strip()
			if choice in ("T", "B"):
				_answer_lines(art, "ll1" if choice == "T" else "slr1", stdin, out, compact)
	elif art.is_ll1:
		print("Grammar is LL(1).", file=out)
		_answer_lines(art, "ll1", stdin, out, compact)
	elif art.is_slr1:
		print("Grammar is SLR(1).", file=out)
		_answer_lines(art, "slr1", stdin, out, compact)
	else:
		print("Grammar is neither LL(1) nor SLR(1).", file=out)


def main(argv: Optional[List[str]] = None, stdin: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
	args = list(sys.argv[1:] if argv is None else argv)
	settings = get_settings()

	spaced_start: Optional[str] = None
	if "--spaced" in args:
		i = args.index("--spaced")
		if i + 1 >= len(args):
			print("Usage: python -m parselab.cli [--spaced START] [--all-conflicts] [--dump] [grammar-file]", file=out)
			return 2
		spaced_start = args[i + 1]
		del args[i : i + 2]
	all_conflicts = settings.all_conflicts
	if "--all-conflicts" in args:
		args.remove("--all-conflicts")
		all_conflicts = True
	want_dump = "--dump" in args
	if want_dump:
		args.remove("--dump")

	source: TextIO = stdin
	if args:
		try:
			source = Path(args[0]).open(encoding="utf-8")
		except OSError as exc:
			print(f"[ERROR] Cannot read grammar file: {exc}", file=out)
			return 1

	try:
		grammar: Grammar
		if spaced_start is not None:
			grammar = parse_grammar_lines(start=spaced_start, lines=source.read().splitlines())
		else:
			grammar = read_compact_grammar(source)
	except NotationError as exc:
		print(f"[ERROR] {exc}", file=out)
		return 1
	finally:
		if source is not stdin:
			source.close()

	art = GrammarAnalyzer(grammar, all_conflicts=all_conflicts).analyze()
	if want_dump or art.first_follow is None:
		for d in art.diagnostics:
			print(d, file=out)
	if art.first_follow is None:
		return 1
	if want_dump:
		dump(art, out)

	interact(art, stdin, out, compact=spaced_start is None)
	return 0


if __name__ == "__main__":
	sys.exit(main())
