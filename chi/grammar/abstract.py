"""Abstract syntax of χ: the prefix notation in which χ terms are written as trees of named nodes.

```
<term>   ::= "var" <var>
           | "lambda" <var> <term>
           | "apply" <term> <term>
           | "rec" <var> <term>
           | "const" <con> <list(term)>
           | "case" <term> <list(branch)>
<branch> ::= "branch" <con> <list(var)> <term>
<list(x)> ::= "nil" | "cons" <x> <list(x)>
```

Any operand may be wrapped in parentheses. Keywords cannot be used as variable names.
"""

import re

from chi.lang.error import ChiSyntaxError
from chi.pure.term import Apply, Branch, Case, Const, Lambda, Rec, Var

KEYWORDS = ("var", "lambda", "apply", "rec", "const", "case", "branch", "cons", "nil")
LINE_WIDTH = 30  # operands longer than this are moved onto their own line

TOKEN_REGEX = re.compile(r"\s*(?:(?P<name>[a-z_][A-Za-z0-9_'-]*)|(?P<con>[A-Z][A-Za-z0-9_'-]*)|(?P<punct>[()]))")


class Parser:
    """Recursive-descent parser for χ abstract syntax."""

    def __init__(self, code):
        self.code = code
        self.tokens = []

        idx = 0
        while code[idx:].strip():
            match = TOKEN_REGEX.match(code, idx)
            if match is None:
                start = len(code) - len(code[idx:].lstrip())
                raise ChiSyntaxError("'{}' contains illegal character '{}'", (code, code[start]), start=start)
            kind = match.lastgroup
            text = match.group(kind)
            start, end = match.start(kind), match.end(kind)
            if kind == "name" and text in KEYWORDS or kind == "punct":
                kind = text
            self.tokens.append((kind, text, start, end))
            idx = match.end()

        self.pos = 0

    def peek(self):
        return self.tokens[self.pos][0] if self.pos < len(self.tokens) else None

    def expect(self, kind, expected=None):
        if self.peek() != kind:
            expected = expected or f"'{kind}'"
            if self.pos < len(self.tokens):
                __, text, start, end = self.tokens[self.pos]
                raise ChiSyntaxError("'{}' expected " + expected + ", found '{}'", (self.code, text), start, end)
            end = len(self.code.rstrip())
            raise ChiSyntaxError("'{}' ended early, expected " + expected, self.code, max(end - 1, 0), end)

        token = self.tokens[self.pos]
        self.pos += 1
        return token[1]

    def parse(self):
        if not self.tokens:
            raise ChiSyntaxError("χ term cannot be empty", self.code)

        term = self.term()
        if self.peek() is not None:
            self.expect(None, "end of term")
        return term

    def operand(self, item):
        """Parses item, optionally wrapped in parentheses."""
        if self.peek() == "(":
            self.expect("(")
            result = item()
            self.expect(")")
            return result
        return item()

    def parse_list(self, item):
        items = []
        while self.peek() != "nil":
            self.expect("cons", "'cons' or 'nil'")
            items.append(self.operand(item))
            if self.peek() == "(":  # parenthesized tail
                items.extend(self.operand(lambda: self.parse_list(item)))
                return items
        self.expect("nil")
        return items

    def variable(self):
        return self.expect("name", "a variable")

    def term(self):
        kind = self.peek()
        if kind == "var":
            self.expect("var")
            return Var(self.variable())

        elif kind == "lambda":
            self.expect("lambda")
            return Lambda(self.variable(), self.operand(self.term))

        elif kind == "apply":
            self.expect("apply")
            return Apply(self.operand(self.term), self.operand(self.term))

        elif kind == "rec":
            self.expect("rec")
            return Rec(self.variable(), self.operand(self.term))

        elif kind == "const":
            self.expect("const")
            constructor = self.expect("con", "a constructor")
            return Const(constructor, self.operand(lambda: self.parse_list(self.term)))

        elif kind == "case":
            self.expect("case")
            return Case(self.operand(self.term), self.operand(lambda: self.parse_list(self.branch)))

        elif kind == "(":
            return self.operand(self.term)

        self.expect("var", "'var', 'lambda', 'apply', 'rec', 'const' or 'case'")

    def branch(self):
        self.expect("branch")
        constructor = self.expect("con", "a constructor")
        parameters = self.operand(lambda: self.parse_list(self.variable))
        return Branch(constructor, parameters, self.operand(self.term))


def parse(code):
    """Parses χ abstract syntax code into a term. Raises ChiSyntaxError if code is not a single valid term."""
    return Parser(code).parse()


def format_name_list(names):
    if not names:
        return "nil"
    elif len(names) == 1:
        return f"cons {names[0]} nil"
    return f"cons {names[0]} ({format_name_list(names[1:])})"


def format_term_list(terms, nest_level):
    if not terms:
        return "nil"

    first = format_term(terms[0], nest_level)
    rest = format_term_list(terms[1:], nest_level)
    if len(terms) == 1:
        return f"cons ({first}) {rest}"
    return f"cons ({first}) ({rest})"


def format_branch(branch, nest_level):
    expression = format_term(branch.expression, nest_level)
    if not branch.parameters:
        return f"branch {branch.constructor} nil ({expression})"
    return f"branch {branch.constructor} ({format_name_list(branch.parameters)}) ({expression})"


def format_branch_list(branches, nest_level):
    if not branches:
        return "nil"

    indent = "  " * nest_level
    first = format_branch(branches[0], nest_level)
    rest = format_branch_list(branches[1:], nest_level)
    if len(branches) == 1:
        return f"cons ({first}) \n{indent}{rest}"
    return f"cons ({first}) (\n{indent}{rest})"


def format_operand(term, formatted, nest_level, new_line):
    """Parenthesizes the already formatted term, on a line of its own if new_line."""
    if new_line:
        return "\n{}({})".format("  " * nest_level, format_term(term, nest_level + 1))
    return f"({formatted})"


def format_term(term, nest_level=0):
    """Formats term in abstract syntax. Long operands of apply and case go on their own, deeper indented line."""
    if isinstance(term, Var):
        return f"var {term.name}"

    elif isinstance(term, Lambda):
        return f"lambda {term.variable} ({format_term(term.body, nest_level)})"

    elif isinstance(term, Rec):
        return f"rec {term.variable} ({format_term(term.body, nest_level)})"

    elif isinstance(term, Const):
        return f"const {term.constructor} ({format_term_list(term.args, nest_level)})"

    elif isinstance(term, Apply):
        function = format_term(term.function, nest_level)
        argument = format_term(term.argument, nest_level)
        function_new_line = len(function) > LINE_WIDTH
        argument_new_line = function_new_line or len(argument) > LINE_WIDTH

        return "apply {} {}".format(format_operand(term.function, function, nest_level, function_new_line),
                                    format_operand(term.argument, argument, nest_level, argument_new_line))

    elif isinstance(term, Case):
        scrutinee = format_term(term.scrutinee, nest_level)
        scrutinee = format_operand(term.scrutinee, scrutinee, nest_level, len(scrutinee) > LINE_WIDTH)
        branches = format_branch_list(term.branches, nest_level + 1)
        return "case {} (\n{}{})".format(scrutinee, "  " * (nest_level + 1), branches)

    raise TypeError(f"expected a χ term, got {type(term).__name__}")


def format(term):
    """Formats term in χ abstract syntax. parse(format(term)) == term."""
    return format_term(term)
