import multiprocessing
import sys
import unittest

from chi.grammar.concrete import parse
from chi.lang.error import DispatchArityError
from chi.lang.numerical import number_to_term
from chi.pure.reduction import Evaluator, evaluate
from chi.pure.term import Apply

ADD = "rec add = λm.λn. case n of { Zero() → m; Suc(n) → Suc(add m n) }"

SUB = """(rec foo = 𝜆 m. 𝜆 n. case n of {
Zero() → m;
Suc(n) → case m of {
Zero() → Zero();
Suc(m) → foo m n}})
Suc(Suc(Zero())) Suc(Zero())"""

CASES = {
    "((λx.x)(λx.x))(λx.x)": "λx.x",
    "case C(D(),E()) of { C(x, x) → x }": "E()",
    "case C(λx.x, Zero()) of { C(f, x) → f x }": "Zero()",
    "case (λx.x) C() of { C() → C() }": "C()",
    "C((λx.x) D(), E())": "C(D(), E())",
    "case C(C()) of { C() → C(); C(x) → x }": "C()",
    SUB: "Suc(Zero())",
    # normal forms
    "x": "x",
    "λx.(λy.y) x": "λx.(λy.y) x",
    # stuck terms are returned unevaluated
    "x ((λz.z) C())": "x ((λz.z) C())",
    "case (λx.x) D() of { C() → C() }": "case (λx.x) D() of { C() → C() }",
    "case λx.x of { C() → C() }": "case λx.x of { C() → C() }",
    "case C(D()) of { C() → C() }": "case C(D()) of { C() → C() }",
    "C() D()": "C() D()",
}


def evaluate_forever():
    evaluate(parse("rec x = x"))


class EvaluateTestCase(unittest.TestCase):

    def test_evaluate(self):
        for case, expected in CASES.items():
            self.assertEqual(parse(expected), evaluate(parse(case)), case)

    def test_add(self):
        cases = [(2, 1, 3), (0, 0, 0), (0, 4, 4), (5, 0, 5)]
        for m, n, expected in cases:
            term = Apply(Apply(parse(ADD), number_to_term(m)), number_to_term(n))
            self.assertEqual(number_to_term(expected), evaluate(term), (m, n))

    def test_idempotence(self):
        for case in CASES:
            result = evaluate(parse(case))
            self.assertEqual(result, evaluate(result), case)

    def test_non_termination(self):
        process = multiprocessing.Process(target=evaluate_forever, daemon=True)
        process.start()
        try:
            process.join(timeout=2)
            self.assertTrue(process.is_alive())
        finally:
            process.terminate()
            process.join()


class StrictArityTestCase(unittest.TestCase):

    def test_strict_arity(self):
        evaluator = Evaluator(strict_arity=True)

        with self.assertRaises(DispatchArityError) as raised:
            evaluator.evaluate(parse("case C(C()) of { C() → C(); C(x) → x }"))
        self.assertEqual(("C", 0, 1), (raised.exception.constructor, raised.exception.expected,
                                       raised.exception.got))

        cases = {
            "case C(D()) of { D() → D(); C(x) → x }": "D()",
            "case E() of { C(x) → x }": "case E() of { C(x) → x }",
        }
        for case, expected in cases.items():
            self.assertEqual(parse(expected), evaluator.evaluate(parse(case)), case)

    def test_recursion_limit(self):
        evaluate(parse("x"))
        self.assertGreaterEqual(sys.getrecursionlimit(), Evaluator.RECURSION_LIMIT)

        previous = sys.getrecursionlimit()
        sys.setrecursionlimit(Evaluator.RECURSION_LIMIT + 1000)
        try:
            evaluate(parse("x"))
            self.assertEqual(Evaluator.RECURSION_LIMIT + 1000, sys.getrecursionlimit())
        finally:
            sys.setrecursionlimit(previous)


if __name__ == '__main__':
    unittest.main()
