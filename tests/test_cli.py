import io
import tempfile
import unittest
from pathlib import Path

from parselab.cli import main


def run(stdin_text, argv=None):
	out = io.StringIO()
	code = main(argv or [], stdin=io.StringIO(stdin_text), out=out)
	return code, out.getvalue().splitlines()


class CliTest(unittest.TestCase):

	def test_both_classes_prompt_for_engine(self):
		code, lines = run("1\nS -> aSb e\nT\nab\naab\n\nB\naabb\n\nQ\n")
		self.assertEqual(code, 0)
		self.assertEqual(
			lines,
			["Select a parser(T: for LL(1), B: for SLR(1), Q: quit):", "yes", "no", "yes"],
		)

	def test_slr_only(self):
		code, lines = run("3\nE -> E+T T\nT -> T*F F\nF -> (E) i\ni+i*i\n(i+i\n")
		self.assertEqual(code, 0)
		self.assertEqual(lines, ["Grammar is SLR(1).", "yes", "no"])

	def test_neither(self):
		code, lines = run("3\nS -> Aa Ba\nA -> c\nB -> c\n")
		self.assertEqual(lines, ["Grammar is neither LL(1) nor SLR(1)."])

	def test_ill_formed(self):
		code, lines = run("1\nS -> aA\n")
		self.assertEqual(code, 1)
		self.assertTrue(lines[0].startswith("[ERROR]"))

	def test_missing_grammar_file(self):
		with tempfile.TemporaryDirectory() as tmp:
			code, lines = run("", [str(Path(tmp) / "absent.txt")])
		self.assertEqual(code, 1)
		self.assertTrue(lines[0].startswith("[ERROR] Cannot read grammar file"))

	def test_spaced_grammar_file_with_dump(self):
		with tempfile.TemporaryDirectory() as tmp:
			path = Path(tmp) / "expr.txt"
			path.write_text("E -> T E'\nE' -> + T E' | ε\nT -> id\n", encoding="utf-8")
			code, lines = run("T\nid + id\nid +\n\nQ\n", ["--spaced", "E", "--dump", str(path)])
		self.assertEqual(code, 0)
		self.assertIn("ACTION", lines)
		self.assertIn("LL(1) table", lines)
		self.assertEqual(lines[-2:], ["yes", "no"])


if __name__ == '__main__':
	unittest.main()
