"""χ term model: the abstract syntax tree shared by the parsers, the evaluator and the bootstrapping layer.

Formally, χ terms can be defined as

```
<term>   ::= <var>                                  ; "Var"
           | <term> <term>                          ; "Apply", associating by left
           | "λ" <var> "." <term>                   ; "Lambda"
           | "rec" <var> "=" <term>                 ; "Rec": <var> denotes the whole rec term in its body
           | "case" <term> "of" "{" <branch>* "}"   ; "Case"
           | <con> "(" <term>* ")"                  ; "Const"
<branch> ::= <con> "(" <var>* ")" "→" <term>        ; all <var>s are bound in <term>
```

Terms are immutable: substitution, evaluation and encoding always build new terms, and only structural equality
matters. Children that did not change are shared between the old and the new term.
"""

from dataclasses import dataclass
from functools import cached_property


class Term:
    """Superclass of all χ terms. Subclasses are frozen dataclasses, so == is structural equality."""

    def __str__(self):
        from chi.grammar import concrete  # grammar depends on this module
        return concrete.format(self)


@dataclass(frozen=True)
class Var(Term):
    """Free or bound occurrence of a variable."""
    name: str

    @cached_property
    def free_variables(self):
        return frozenset((self.name,))


@dataclass(frozen=True)
class Apply(Term):
    """Application of function to argument."""
    function: Term
    argument: Term

    @cached_property
    def free_variables(self):
        return self.function.free_variables | self.argument.free_variables


@dataclass(frozen=True)
class Lambda(Term):
    """Single-argument abstraction binding variable in body."""
    variable: str
    body: Term

    @cached_property
    def free_variables(self):
        return self.body.free_variables - {self.variable}


@dataclass(frozen=True)
class Rec(Term):
    """Self-referential binding: inside body, variable stands for this whole Rec term."""
    variable: str
    body: Term

    @cached_property
    def free_variables(self):
        return self.body.free_variables - {self.variable}


@dataclass(frozen=True)
class Branch:
    """One alternative of a Case. Matches a Const with the same constructor and as many arguments as parameters."""
    constructor: str
    parameters: tuple
    expression: Term

    def __post_init__(self):
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @cached_property
    def free_variables(self):
        return self.expression.free_variables - set(self.parameters)

    def matches(self, const):
        """Whether or not const selects this branch (constructor name and arity both agree)."""
        return self.constructor == const.constructor and len(self.parameters) == len(const.args)


@dataclass(frozen=True)
class Case(Term):
    """Dispatch on the head constructor of scrutinee."""
    scrutinee: Term
    branches: tuple

    def __post_init__(self):
        object.__setattr__(self, "branches", tuple(self.branches))

    @cached_property
    def free_variables(self):
        result = set(self.scrutinee.free_variables)
        for branch in self.branches:
            result |= branch.free_variables
        return frozenset(result)


@dataclass(frozen=True)
class Const(Term):
    """Constructor applied to a (possibly empty) sequence of arguments."""
    constructor: str
    args: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    @cached_property
    def free_variables(self):
        return frozenset().union(*(arg.free_variables for arg in self.args))
