"""Call-by-value reduction of χ terms to normal form.

The evaluator is a plain function of its input: there is no environment or heap, values are substituted straight
into the term. Rules:
    - Var, Lambda: already normal (free variables are stuck, bodies are not reduced under the binder)
    - Apply(f, a): evaluate f; if it is Lambda(x, b), evaluate a and continue with b[x := a]. Otherwise the
      application is stuck and the original, unevaluated Apply(f, a) is returned
    - Const(c, args): evaluate every argument
    - Case(e, branches): evaluate e; if it is Const(c, args) and a branch matches, bind the branch parameters to args
      and continue with its expression. Otherwise the original, unevaluated Case is returned
    - Rec(x, b): continue with b[x := Rec(x, b)]; nothing stops an unproductive rec from unfolding forever

Tail positions (the body after a β-step, a selected branch, an unfolded rec) are reduced in a loop, so Python
recursion depth follows the nesting of the term rather than the length of the computation.

Nested terms still recurse, so the first call to evaluate raises the recursion limit of the whole process to
Evaluator.RECURSION_LIMIT if it is lower. The limit is never lowered.
"""

import logging
import sys

from chi.lang.error import DispatchArityError
from chi.pure.substitute import substitute
from chi.pure.term import Apply, Case, Const, Lambda, Rec, Var

logger = logging.getLogger(__name__)


def bind(branch, const):
    """Substitutes const's arguments for branch's parameters in branch.expression. Parameters are bound from last to
    first, so when a name is repeated the rightmost binding wins.
    """
    result = branch.expression
    for parameter, argument in reversed(list(zip(branch.parameters, const.args))):
        result = substitute(result, parameter, argument)
    return result


class Evaluator:
    """Reduces terms to normal form. With strict_arity, case dispatch commits to the first branch whose constructor
    matches and raises DispatchArityError if its arity doesn't; otherwise branches of the wrong arity are skipped.
    """
    RECURSION_LIMIT = 20000

    def __init__(self, strict_arity=False):
        self.strict_arity = strict_arity

    def select_branch(self, const, branches):
        """Returns the branch selected by const, or None if the case is stuck."""
        for branch in branches:
            if branch.matches(const):
                return branch
            elif self.strict_arity and branch.constructor == const.constructor:
                raise DispatchArityError(const.constructor, len(branch.parameters), len(const.args))
        return None

    def evaluate(self, term):
        """Returns the normal form of term. Diverges if term has none.

        Raises sys.getrecursionlimit() to RECURSION_LIMIT for the whole process if it is lower.
        """
        if sys.getrecursionlimit() < Evaluator.RECURSION_LIMIT:
            sys.setrecursionlimit(Evaluator.RECURSION_LIMIT)
        return self._evaluate(term)

    def _evaluate(self, term):
        while True:
            if isinstance(term, (Var, Lambda)):
                return term

            elif isinstance(term, Apply):
                function = self._evaluate(term.function)
                if not isinstance(function, Lambda):
                    return term
                argument = self._evaluate(term.argument)

                logger.debug("β: substituting for %s", function.variable)
                term = substitute(function.body, function.variable, argument)

            elif isinstance(term, Case):
                scrutinee = self._evaluate(term.scrutinee)
                branch = self.select_branch(scrutinee, term.branches) if isinstance(scrutinee, Const) else None
                if branch is None:
                    return term

                logger.debug("case: selected %s(%s)", branch.constructor, ", ".join(branch.parameters))
                term = bind(branch, scrutinee)

            elif isinstance(term, Rec):
                logger.debug("rec: unfolding %s", term.variable)
                term = substitute(term.body, term.variable, term)

            elif isinstance(term, Const):
                return Const(term.constructor, [self._evaluate(arg) for arg in term.args])

            else:
                raise TypeError(f"expected a χ term, got {type(term).__name__}")


def evaluate(term, strict_arity=False):
    """Returns the normal form of term, see Evaluator."""
    return Evaluator(strict_arity).evaluate(term)
