"""Natural numbers encoded as Peano numerals: Zero() for 0 and Suc(n) for n + 1. The bootstrapping layer uses them to
represent variable and constructor ids inside χ terms.

Source: https://en.wikipedia.org/wiki/Peano_axioms
"""

from chi.lang.error import ChiValueError
from chi.pure.term import Const

ZERO = "Zero"
SUC = "Suc"


def number_to_term(num):
    """Returns the Peano numeral for natural number num."""
    if isinstance(num, bool) or not isinstance(num, int) or num < 0:
        raise ChiValueError("expected natural number, got '{}'", repr(num))

    result = Const(ZERO)
    for __ in range(num):
        result = Const(SUC, [result])
    return result


def term_to_number(term):
    """Returns the int encoded by Peano numeral term. If term isn't a numeral, returns None."""
    num = 0
    while isinstance(term, Const) and term.constructor == SUC and len(term.args) == 1:
        term, = term.args
        num += 1

    if isinstance(term, Const) and term.constructor == ZERO and not term.args:
        return num
    return None
