"""Name-based substitution of a term for the free occurrences of a variable.

Substitution respects shadowing (it never descends under a binder of the same name) but performs no
alpha-conversion: a free variable of the replacement can be captured by a binder it is substituted under. Closed
replacements, which are all the evaluator ever substitutes when reducing a closed term, are always safe.
"""

from chi.pure.term import Apply, Branch, Case, Const, Lambda, Rec, Var


def free_variables(term):
    """Returns the set of variable names that occur free in term."""
    return set(term.free_variables)


def substitute_branch(branch, variable, replacement):
    """Substitutes replacement for variable in branch.expression, unless one of the parameters shadows variable."""
    if variable in branch.parameters or variable not in branch.free_variables:
        return branch
    return Branch(branch.constructor, branch.parameters, substitute(branch.expression, variable, replacement))


def substitute(term, variable, replacement):
    """Returns term with every free occurrence of variable replaced by replacement. Subterms that do not mention
    variable are shared with term.
    """
    if variable not in term.free_variables:
        return term

    if isinstance(term, Var):
        return replacement

    elif isinstance(term, Apply):
        return Apply(substitute(term.function, variable, replacement),
                     substitute(term.argument, variable, replacement))

    elif isinstance(term, (Lambda, Rec)):
        # variable is free in term, so the binder cannot be shadowing it
        return type(term)(term.variable, substitute(term.body, variable, replacement))

    elif isinstance(term, Case):
        return Case(substitute(term.scrutinee, variable, replacement),
                    [substitute_branch(branch, variable, replacement) for branch in term.branches])

    elif isinstance(term, Const):
        return Const(term.constructor, [substitute(arg, variable, replacement) for arg in term.args])

    raise TypeError(f"expected a χ term, got {type(term).__name__}")
