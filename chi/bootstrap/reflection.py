"""χ running χ: substitution and evaluation carried out by χ programs on encoded terms.

Both operations encode their inputs through the caller's context and evaluate a fixed χ program on them with the
ordinary evaluator. The result is an encoded term, which can be compared against decompile(...) through the same
context or turned back into a term with recompile.
"""

from functools import lru_cache
import logging

from chi.bootstrap.decompile import decompile, decompile_variable
from chi.bootstrap.programs import INTERPRET_PROGRAM, SUBSTITUTE_PROGRAM
from chi.grammar import concrete
from chi.pure.reduction import Evaluator
from chi.pure.term import Apply

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def substitution_program():
    """The parsed self-substitution program. Takes a variable id, an encoded replacement and an encoded term."""
    return concrete.parse(SUBSTITUTE_PROGRAM)


@lru_cache(maxsize=None)
def interpreter_program():
    """The parsed self-interpreter. Takes an encoded term."""
    return concrete.parse(INTERPRET_PROGRAM)


def self_substitute(variable, replacement, term, context, evaluator=None):
    """Returns the encoding of term[variable := replacement], as computed by the χ substitution program."""
    evaluator = evaluator or Evaluator()

    encoded_term = decompile(term, context)
    encoded_variable = decompile_variable(variable, context)
    encoded_replacement = decompile(replacement, context)

    logger.debug("self-substituting for %s", variable)
    program = Apply(Apply(Apply(substitution_program(), encoded_variable), encoded_replacement), encoded_term)
    return evaluator.evaluate(program)


def self_interpret(term, context, evaluator=None):
    """Returns the encoding of term's normal form, as computed by the χ self-interpreter. Diverges if term does."""
    evaluator = evaluator or Evaluator()

    logger.debug("self-interpreting %s", term)
    return evaluator.evaluate(Apply(interpreter_program(), decompile(term, context)))
