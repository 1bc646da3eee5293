import unittest

from chi.grammar.concrete import parse
from chi.pure.substitute import substitute


class SubstituteTestCase(unittest.TestCase):

    def test_substitute(self):
        cases = [
            ("x", "x", "λy.y", "λy.y"),
            ("x y", "y", "C()", "x C()"),
            ("λx.y", "y", "Z()", "λx.Z()"),
            ("λx.x", "x", "y", "λx.x"),
            ("rec x = x y", "x", "z", "rec x = x y"),
            ("rec x = x y", "y", "z", "rec x = x z"),
            ("case x of { C(x) → x; D() → x }", "x", "E()", "case E() of { C(x) → x; D() → E() }"),
            ("C(x, D(x))", "x", "Zero()", "C(Zero(), D(Zero()))"),
            ("λy.x", "x", "y", "λy.y"),  # no alpha-conversion: y is captured
        ]
        for term, variable, replacement, expected in cases:
            self.assertEqual(parse(expected), substitute(parse(term), variable, parse(replacement)), term)

    def test_identity_when_absent(self):
        should_pass = ["x", "λq.q", "rec q = q", "case x of { C(q) → q }", "C(x, λy.y)", "f (g x)"]
        for case in should_pass:
            term = parse(case)
            self.assertIs(term, substitute(term, "q", parse("λz.z")), case)

    def test_branch_shadowing(self):
        cases = {
            "case q of { C(q) → q }": "case λz.z of { C(q) → q }",
            "case q of { C(a, q) → q; D(a) → q }": "case λz.z of { C(a, q) → q; D(a) → λz.z }",
        }
        for case, expected in cases.items():
            self.assertEqual(parse(expected), substitute(parse(case), "q", parse("λz.z")), case)

    def test_shadowing(self):
        bodies = ["x", "x y", "λy.x", "case x of { C(y) → x }", "C(x)"]
        for case in bodies:
            term = parse(f"λx.{case}")
            self.assertEqual(term, substitute(term, "x", parse("D()")), case)

    def test_shared_subterms(self):
        term = parse("C(x, λy.y)")
        result = substitute(term, "x", parse("Zero()"))
        self.assertIs(term.args[1], result.args[1])


if __name__ == '__main__':
    unittest.main()
