"""Canonical encoding ("decompilation") of χ terms as χ data, and its inverse.

Every term is rewritten into a closed vocabulary of constructors, with every identifier replaced by the Peano numeral
of its id in an encoding context:

```
x                   ↦ Var(⌜x⌝)
f a                 ↦ Apply(⌜f a⌝, ⌜a⌝)
λx.e                ↦ Lambda(⌜x⌝, ⌜e⌝)
rec x = e           ↦ Rec(⌜x⌝, ⌜e⌝)
C(e₁, ..., eₙ)      ↦ Const(⌜C⌝, ⌜[e₁, ..., eₙ]⌝)
case e of { bs }    ↦ Case(⌜e⌝, ⌜bs⌝)
C(x₁, ..., xₙ) → e  ↦ Branch(⌜C⌝, ⌜[x₁, ..., xₙ]⌝, ⌜e⌝)       ; parameters are bare numerals, not Var(...)
[a, b, ...]         ↦ Cons(⌜a⌝, Cons(⌜b⌝, ... Nil()))
```

Ids are allocated in the order identifiers are met (left to right, binders before bodies), so re-encoding a term
through the same context always gives the same result.
"""

from chi.lang.error import DecodeError
from chi.lang.numerical import number_to_term, term_to_number
from chi.pure.term import Apply, Branch, Case, Const, Lambda, Rec, Var

VAR = "Var"
CONST = "Const"
APPLY = "Apply"
LAMBDA = "Lambda"
REC = "Rec"
CASE = "Case"
BRANCH = "Branch"
NIL = "Nil"
CONS = "Cons"


def decompile_list(items, decompile_item, context):
    """Encodes items as a Cons/Nil chain. Items are encoded first to last, so ids are allocated left to right."""
    encoded = [decompile_item(item, context) for item in items]

    result = Const(NIL)
    for item in reversed(encoded):
        result = Const(CONS, [item, result])
    return result


def decompile_variable(variable, context):
    """Returns the bare numeral id of variable."""
    return number_to_term(context.allocate_variable_id(variable))


def decompile_branch(branch, context):
    constructor = number_to_term(context.allocate_constructor_id(branch.constructor))
    parameters = decompile_list(branch.parameters, decompile_variable, context)
    return Const(BRANCH, [constructor, parameters, decompile(branch.expression, context)])


def decompile(term, context):
    """Returns the canonical encoding of term, allocating ids in context for identifiers it hasn't seen yet."""
    if isinstance(term, Var):
        return Const(VAR, [decompile_variable(term.name, context)])

    elif isinstance(term, Const):
        constructor = number_to_term(context.allocate_constructor_id(term.constructor))
        return Const(CONST, [constructor, decompile_list(term.args, decompile, context)])

    elif isinstance(term, Apply):
        function = decompile(term.function, context)
        return Const(APPLY, [function, decompile(term.argument, context)])

    elif isinstance(term, (Lambda, Rec)):
        variable = decompile_variable(term.variable, context)
        return Const(LAMBDA if isinstance(term, Lambda) else REC, [variable, decompile(term.body, context)])

    elif isinstance(term, Case):
        scrutinee = decompile(term.scrutinee, context)
        return Const(CASE, [scrutinee, decompile_list(term.branches, decompile_branch, context)])

    raise TypeError(f"expected a χ term, got {type(term).__name__}")


def _fields(encoded, tag, arity):
    """Returns the arguments of encoded, checking that it is tag applied to arity arguments."""
    if not isinstance(encoded, Const) or encoded.constructor != tag or len(encoded.args) != arity:
        raise DecodeError(f"expected an encoded {tag} with {arity} argument(s), got " + "'{}'", encoded)
    return encoded.args


def recompile_list(encoded, recompile_item, context):
    items = []
    while not (isinstance(encoded, Const) and encoded.constructor == NIL and not encoded.args):
        item, encoded = _fields(encoded, CONS, 2)
        items.append(recompile_item(item, context))
    return items


def _name(encoded, lookup, kind):
    num = term_to_number(encoded)
    if num is None:
        raise DecodeError("expected a numeral, got '{}'", encoded)

    name = lookup(num)
    if name is None:
        raise DecodeError(f"{kind} id {num} is not assigned in this context")
    return name


def recompile_variable(encoded, context):
    return _name(encoded, context.lookup_variable, "variable")


def recompile_branch(encoded, context):
    constructor, parameters, expression = _fields(encoded, BRANCH, 3)
    return Branch(_name(constructor, context.lookup_constructor, "constructor"),
                  recompile_list(parameters, recompile_variable, context),
                  recompile(expression, context))


def recompile(encoded, context):
    """Inverse of decompile: maps an encoded term back to the term it encodes, looking ids up in context. Raises
    DecodeError if encoded is not a canonical encoding or uses ids context doesn't know.
    """
    tag = encoded.constructor if isinstance(encoded, Const) else None

    if tag == VAR:
        variable, = _fields(encoded, VAR, 1)
        return Var(recompile_variable(variable, context))

    elif tag == CONST:
        constructor, args = _fields(encoded, CONST, 2)
        return Const(_name(constructor, context.lookup_constructor, "constructor"),
                     recompile_list(args, recompile, context))

    elif tag == APPLY:
        function, argument = _fields(encoded, APPLY, 2)
        return Apply(recompile(function, context), recompile(argument, context))

    elif tag in (LAMBDA, REC):
        variable, body = _fields(encoded, tag, 2)
        return (Lambda if tag == LAMBDA else Rec)(recompile_variable(variable, context), recompile(body, context))

    elif tag == CASE:
        scrutinee, branches = _fields(encoded, CASE, 2)
        return Case(recompile(scrutinee, context), recompile_list(branches, recompile_branch, context))

    raise DecodeError("'{}' is not an encoded χ term", encoded)
