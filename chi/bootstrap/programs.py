"""χ source of the programs the reflection layer runs on encoded terms (see decompile.py for the encoding).

χ has no let, so helpers are bound by wrapping the main program in β-redexes, outermost first: a helper may use any
helper defined before it. Every program is closed, which keeps the host's capture-unsafe substitution sound while
they run.
"""

# equal m n: whether numerals m and n are equal
EQUAL = """
rec equal = λm.λn. case m of {
  Zero() → case n of { Zero() → True(); Suc(n1) → False() };
  Suc(m1) → case n of { Zero() → False(); Suc(n1) → equal m1 n1 }
}
"""

# member x xs: whether numeral x is in list xs
MEMBER = """
rec member = λx.λxs. case xs of {
  Nil() → False();
  Cons(y, ys) → case equal x y of { True() → True(); False() → member x ys }
}
"""

MAP = """
rec map = λf.λxs. case xs of {
  Nil() → Nil();
  Cons(y, ys) → Cons(f y, map f ys)
}
"""

# subst x e t: t with e substituted for the free occurrences of variable id x
SUBST = """
rec subst = λx.λe.λt. case t of {
  Apply(t1, t2) → Apply(subst x e t1, subst x e t2);
  Lambda(y, t1) → case equal x y of {
    True() → Lambda(y, t1);
    False() → Lambda(y, subst x e t1)
  };
  Case(t1, bs) → Case(subst x e t1, map (λb. case b of {
    Branch(c, ys, u) → case member x ys of {
      True() → Branch(c, ys, u);
      False() → Branch(c, ys, subst x e u)
    }
  }) bs);
  Rec(y, t1) → case equal x y of {
    True() → Rec(y, t1);
    False() → Rec(y, subst x e t1)
  };
  Var(y) → case equal x y of {
    True() → e;
    False() → Var(y)
  };
  Const(c, ts) → Const(c, map (subst x e) ts)
}
"""

SAME_LENGTH = """
rec same_length = λxs.λys. case xs of {
  Nil() → case ys of { Nil() → True(); Cons(z, zs) → False() };
  Cons(z, zs) → case ys of { Nil() → False(); Cons(w, ws) → same_length zs ws }
}
"""

# substs ys vs u: binds the parameters ys to the values vs in u, the last parameter first
SUBSTS = """
rec substs = λys.λvs.λu. case ys of {
  Nil() → u;
  Cons(y, ys1) → case vs of {
    Nil() → u;
    Cons(v, vs1) → subst y v (substs ys1 vs1 u)
  }
}
"""

# lookup c vs bs: Found(parameters, body) of the first branch in bs for constructor id c with as many parameters as
# there are values vs, otherwise NotFound()
LOOKUP = """
rec lookup = λc.λvs.λbs. case bs of {
  Nil() → NotFound();
  Cons(b, rest) → case b of {
    Branch(d, ys, u) → case equal c d of {
      True() → case same_length vs ys of {
        True() → Found(ys, u);
        False() → lookup c vs rest
      };
      False() → lookup c vs rest
    }
  }
}
"""

# eval t: the normal form of t, following the same rules as chi.pure.reduction
EVAL = """
rec eval = λt. case t of {
  Apply(t1, t2) → case eval t1 of {
    Lambda(y, b) → eval (subst y (eval t2) b);
    Apply(u1, u2) → Apply(t1, t2);
    Case(u1, u2) → Apply(t1, t2);
    Rec(u1, u2) → Apply(t1, t2);
    Var(u1) → Apply(t1, t2);
    Const(u1, u2) → Apply(t1, t2)
  };
  Lambda(y, b) → Lambda(y, b);
  Case(t1, bs) → case eval t1 of {
    Const(c, vs) → case lookup c vs bs of {
      Found(ys, u) → eval (substs ys vs u);
      NotFound() → Case(t1, bs)
    };
    Apply(u1, u2) → Case(t1, bs);
    Lambda(u1, u2) → Case(t1, bs);
    Case(u1, u2) → Case(t1, bs);
    Rec(u1, u2) → Case(t1, bs);
    Var(u1) → Case(t1, bs)
  };
  Rec(y, b) → eval (subst y Rec(y, b) b);
  Var(y) → Var(y);
  Const(c, ts) → Const(c, map eval ts)
}
"""


def with_helpers(helpers, program):
    """Returns program with each (name, source) helper bound around it, the first helper outermost."""
    for name, source in reversed(helpers):
        program = f"(λ{name}. {program.strip()})\n({source.strip()})"
    return program


# self-substitution: applied to a variable id, an encoded term and an encoded term
SUBSTITUTE_PROGRAM = with_helpers(
    [("equal", EQUAL), ("member", MEMBER), ("map", MAP)],
    SUBST
)

# self-interpreter: applied to an encoded term
INTERPRET_PROGRAM = with_helpers(
    [("equal", EQUAL), ("member", MEMBER), ("map", MAP), ("subst", SUBST), ("same_length", SAME_LENGTH),
     ("substs", SUBSTS), ("lookup", LOOKUP)],
    EVAL
)
