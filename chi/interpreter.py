"""χ interpreter.

χ is an untyped, strict functional language: the λ-calculus extended with constructor applications, case expressions
and explicit recursion. It is small enough to express its own substitution and evaluation functions, which is what the
bootstrapping layer demonstrates. Program flow:
    1. Parser: concrete (chi/grammar/concrete.py) or abstract (chi/grammar/abstract.py) syntax to a term
    2. Evaluation: call-by-value reduction to normal form (chi/pure/reduction.py), with capture-unsafe substitution
       (chi/pure/substitute.py); terms that get stuck are returned as they are
    3. Bootstrapping: terms are encoded as χ data through an encoding context (chi/bootstrap/decompile.py) and handed
       to χ programs that substitute into or evaluate them (chi/bootstrap/reflection.py)

This module collects the operations a host program needs.
"""

from chi.bootstrap.context import Context, IdTable
from chi.bootstrap.decompile import decompile, recompile
from chi.bootstrap.reflection import self_interpret, self_substitute
from chi.grammar import abstract, concrete
from chi.lang.error import ChiSyntaxError, ChiValueError, DecodeError, DispatchArityError, GenericException
from chi.lang.numerical import number_to_term, term_to_number
from chi.pure.reduction import Evaluator, evaluate
from chi.pure.substitute import free_variables, substitute
from chi.pure.term import Apply, Branch, Case, Const, Lambda, Rec, Term, Var

parse = concrete.parse
format_term = concrete.format

__all__ = [
    "Apply", "Branch", "Case", "Const", "Lambda", "Rec", "Term", "Var",
    "Evaluator", "evaluate", "free_variables", "substitute",
    "Context", "IdTable", "decompile", "recompile", "self_interpret", "self_substitute",
    "abstract", "concrete", "parse", "format_term", "number_to_term", "term_to_number",
    "ChiSyntaxError", "ChiValueError", "DecodeError", "DispatchArityError", "GenericException",
]
