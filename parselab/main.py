from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from parselab.analysis import AnalysisArtifacts, GrammarAnalyzer
from parselab.first_follow import compute_first_sets_with_trace, compute_follow_sets_with_trace
from parselab.grammar import Grammar
from parselab.notation import NotationError, parse_compact_rules, parse_grammar_lines, tokenize_input
from parselab.parsing import ParseResult
from parselab.settings import Notation, get_settings
from parselab.tables import action_rows, goto_rows, ll1_rows, state_rows

settings = get_settings()

app = FastAPI(title="LL(1) / SLR(1) Grammar Lab", version="1.0.0")

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


class GrammarRequest(BaseModel):
	# Example (compact): ["S -> aSb e"]; (spaced): ["E -> T E'", "E' -> + T E' | ε"]
	grammar_lines: List[str]
	grammar_start: Optional[str] = None
	notation: Optional[Notation] = None
	all_conflicts: Optional[bool] = None


class AnalyzeRequest(GrammarRequest):
	# FIRST/FOLLOW iteration logs ("show working")
	include_working: bool = False
	include_states: bool = False


class ParseRequest(GrammarRequest):
	input: str
	engine: str = Field(default="both", pattern="^(ll1|slr1|both)$")
	trace: bool = True


def _grammar_from(req: GrammarRequest) -> Grammar:
	notation = req.notation or settings.notation
	try:
		if notation == "compact":
			return parse_compact_rules(req.grammar_lines, start=req.grammar_start)
		if not req.grammar_start:
			raise NotationError("Spaced notation needs grammar_start")
		return parse_grammar_lines(start=req.grammar_start, lines=req.grammar_lines)
	except NotationError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc


def _analyze(req: GrammarRequest) -> AnalysisArtifacts:
	grammar = _grammar_from(req)
	all_conflicts = settings.all_conflicts if req.all_conflicts is None else req.all_conflicts
	return GrammarAnalyzer(grammar, all_conflicts=all_conflicts).analyze()


def _working(passes: List[Dict[Any, List[Any]]]) -> List[Dict[str, List[str]]]:
	return [{nt.name: [s.name for s in added] for nt, added in p.items()} for p in passes]


def _result_json(result: ParseResult) -> Dict[str, Any]:
	return {
		"accepted": result.accepted,
		"error": result.error,
		"steps": [
			{
				"stack": step.stack,
				"remaining_input": step.remaining_input,
				"action": step.action,
			}
			for step in result.steps
		],
	}


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
	return HTMLResponse(
		"<h2>LL(1) / SLR(1) Grammar Lab API</h2>"
		"<p>POST <code>/api/analyze</code> with JSON: <code>{\"grammar_lines\": [\"S -> aSb e\"]}</code></p>"
		"<p>POST <code>/api/parse</code> with an extra <code>input</code> field.</p>"
	)


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


@app.post("/api/analyze")
def analyze(req: AnalyzeRequest) -> Dict[str, Any]:
	art = _analyze(req)
	grammar = art.grammar
	ff = art.first_follow

	working = None
	if req.include_working and ff is not None:
		first, first_passes = compute_first_sets_with_trace(grammar)
		_, follow_passes = compute_follow_sets_with_trace(grammar, first)
		working = {"first_passes": _working(first_passes), "follow_passes": _working(follow_passes)}

	out: Dict[str, Any] = {
		"grammar": {
			"start": grammar.start.name,
			"nonterminals": [s.name for s in sorted(grammar.nonterminals)],
			"terminals": [s.name for s in sorted(grammar.terminals)],
			"productions": [str(p) for p in grammar.productions],
		},
		"classification": art.classification,
		"is_ll1": art.is_ll1,
		"is_slr1": art.is_slr1,
		"first": {k.name: [s.name for s in sorted(v)] for k, v in ff.first.items()} if ff else None,
		"follow": {k.name: [s.name for s in sorted(v)] for k, v in ff.follow.items()} if ff else None,
		"working": working,
		"ll1_table": ll1_rows(grammar, art.ll1_table) if art.ll1_table is not None else None,
		"action": action_rows(grammar, art.slr_tables) if art.slr_tables is not None else None,
		"goto": goto_rows(grammar, art.slr_tables) if art.slr_tables is not None else None,
		"conflicts": {
			"ll1": [str(c) for c in art.ll1_conflicts],
			"slr1": [str(c) for c in art.slr_conflicts],
		},
		"diagnostics": [
			{"severity": d.severity.name, "stage": d.stage, "message": d.message, "hint": d.hint}
			for d in art.diagnostics
		],
		"duration_ms": art.duration_ms,
	}
	if req.include_states and art.slr_tables is not None:
		out["states"] = state_rows(art.slr_tables)
	return out


@app.post("/api/parse")
def parse(req: ParseRequest) -> Dict[str, Any]:
	art = _analyze(req)
	if art.first_follow is None:
		detail = "; ".join(d.message for d in art.diagnostics)
		raise HTTPException(status_code=400, detail=detail or "Grammar is ill-formed")

	notation = req.notation or settings.notation
	tokens = tokenize_input(art.grammar, req.input, compact=(notation == "compact"))
	if len(tokens) > settings.max_tokens:
		raise HTTPException(status_code=413, detail=f"Input longer than {settings.max_tokens} symbols")

	engines = ["ll1", "slr1"] if req.engine == "both" else [req.engine]
	results: Dict[str, Any] = {}
	for engine in engines:
		try:
			parser = art.parser(engine)
		except ValueError as exc:
			results[engine] = {"available": False, "error": str(exc)}
			continue
		result = parser.trace(tokens)
		data = _result_json(result)
		if not req.trace:
			data["steps"] = []
		results[engine] = {"available": True, **data}

	return {
		"classification": art.classification,
		"input": [t.name for t in tokens],
		"results": results,
	}
