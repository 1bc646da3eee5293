import unittest

from chi.grammar import abstract, concrete
from chi.lang.error import ChiSyntaxError
from chi.pure.term import Apply, Branch, Case, Const, Lambda, Rec, Var


class AbstractParseTestCase(unittest.TestCase):

    def test_parse(self):
        should_raise = ["", "var", "var X", "lambda (var x)", "apply (var f)", "const c nil", "var x var y",
                        "case (var x) (cons (var y) nil)", "var x)", "$", "lambda var var x", "const C (cons)"]
        for case in should_raise:
            self.assertRaises(ChiSyntaxError, abstract.parse, case)

        cases = {
            "var x": Var("x"),
            "(var x)": Var("x"),
            "lambda x var x": Lambda("x", Var("x")),
            "lambda x (var x)": Lambda("x", Var("x")),
            "apply (var f) (var x)": Apply(Var("f"), Var("x")),
            "rec f (var f)": Rec("f", Var("f")),
            "const C nil": Const("C"),
            "const C (cons (var x) (cons (const D nil) nil))": Const("C", [Var("x"), Const("D")]),
            "const C (cons var x cons var y nil)": Const("C", [Var("x"), Var("y")]),
            "case (var x) (cons (branch C (cons y nil) (var y)) nil)": Case(Var("x"),
                                                                            [Branch("C", ["y"], Var("y"))]),
            "case (var x) nil": Case(Var("x"), []),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, abstract.parse(case), case)

    def test_tokens(self):
        tokens = abstract.Parser(" lambda x (var Y)").tokens
        self.assertEqual([("lambda", "lambda", 1, 7), ("name", "x", 8, 9), ("(", "(", 10, 11), ("var", "var", 11, 14),
                          ("con", "Y", 15, 16), (")", ")", 16, 17)], tokens)


class AbstractFormatTestCase(unittest.TestCase):

    def test_format(self):
        cases = {
            "λx.Suc(x)": "lambda x (const Suc (cons (var x) nil))",
            "f x": "apply (var f) (var x)",
            "C()": "const C (nil)",
            "rec y = case x of { C() → x; D(x) → x }":
                "rec y (case (var x) (\n  cons (branch C nil (var x)) (\n  cons (branch D (cons x nil) (var x)) \n  nil)))",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, abstract.format(concrete.parse(case)), case)

    def test_long_operands(self):
        term = concrete.parse("(λfunction.function argument) (λargument.argument argument)")
        formatted = abstract.format(term)

        self.assertTrue(formatted.startswith("apply \n("), formatted)
        self.assertEqual(term, abstract.parse(formatted))

    def test_reparse(self):
        should_pass = [
            "λx.λy.x y",
            "f (λx.x) (rec g = g) y",
            "case f x of { C(a, b) → λc.a b c; D() → case a of {} }",
            "Cons(f y, map f ys, Nil())",
            "case long_scrutinee_name another_long_argument of { C(x, y, z) → C(x, y, z) }",
        ]
        for case in should_pass:
            term = concrete.parse(case)
            self.assertEqual(term, abstract.parse(abstract.format(term)), case)


if __name__ == '__main__':
    unittest.main()
