"""Concrete syntax of χ: tokenizer, recursive-descent parser and pretty-printer.

```
<term>        ::= "λ" <var> "." <term>                 ; also "𝜆" or "\"; the body is greedy
                | "rec" <var> "=" <term>               ; the body is greedy
                | <atom>+ [ "λ" ... | "rec" ... ]      ; application, associating by left
<atom>        ::= <var>
                | <con> "(" [ <term> ("," <term>)* ] ")"
                | "case" <term> "of" "{" [ <branch> (";" <branch>)* [";"] ] "}"
                | "(" <term> ")"
<branch>      ::= <con> "(" [ <var> ("," <var>)* ] ")" ("→" | "->") <term>

<var>         ::= [a-z_] [A-Za-z0-9_'-]*               ; except the keywords case, of, rec
<con>         ::= [A-Z] [A-Za-z0-9_'-]*
```

A "-" directly followed by ">" ends an identifier, so "C(x)->x" is read as an arrow. "--" starts a comment running
to the end of the line, and "{-" ... "-}" encloses a block comment.
"""

from collections import namedtuple
import re

from chi.lang.error import ChiSyntaxError
from chi.pure.term import Apply, Branch, Case, Const, Lambda, Rec, Var

KEYWORDS = ("case", "of", "rec")

Token = namedtuple("Token", ["kind", "text", "start", "end"])

TOKEN_PATTERNS = [
    ("space", r"\s+"),
    ("lambda", r"λ|𝜆|\\"),
    ("arrow", r"→|->"),
    ("var", r"[a-z_](?:[A-Za-z0-9_']|-(?!>))*"),
    ("con", r"[A-Z](?:[A-Za-z0-9_']|-(?!>))*"),
    ("punct", r"[.=(){},;]"),
]
TOKEN_REGEX = re.compile("|".join(f"(?P<{kind}>{pattern})" for kind, pattern in TOKEN_PATTERNS))


def remove_comments(code):
    """Blanks out comments in code. Newlines and the columns of everything else are preserved, so that error
    positions still point into the original code.
    """
    result = []
    in_block = False
    idx = 0

    while idx < len(code):
        pair = code[idx:idx + 2]
        if in_block:
            if pair == "-}":
                in_block = False
                result.append("  ")
                idx += 2
                continue
            result.append("\n" if code[idx] == "\n" else " ")
        elif pair == "{-":
            in_block = True
            result.append("  ")
            idx += 2
            continue
        elif pair == "--":
            end = code.find("\n", idx)
            end = len(code) if end == -1 else end
            result.append(" " * (end - idx))
            idx = end
            continue
        else:
            result.append(code[idx])
        idx += 1

    if in_block:
        raise ChiSyntaxError("'{}' has an unterminated block comment", code, start=code.rfind("{-"), end=len(code))
    return "".join(result)


def tokenize(code):
    """Returns the list of Tokens in code (comments must already be removed)."""
    tokens = []
    idx = 0
    while idx < len(code):
        match = TOKEN_REGEX.match(code, idx)
        if match is None:
            raise ChiSyntaxError("'{}' contains illegal character '{}'", (code, code[idx]), start=idx)

        kind = match.lastgroup
        text = match.group()
        if kind == "var" and text in KEYWORDS:
            kind = text
        elif kind == "punct":
            kind = text

        if kind != "space":
            tokens.append(Token(kind, text, match.start(), match.end()))
        idx = match.end()

    return tokens


class Parser:
    """Recursive-descent parser over the tokens of a single χ term."""
    ATOM_STARTS = ("var", "con", "(", "case")

    def __init__(self, code):
        self.code = code
        self.tokens = tokenize(code)
        self.pos = 0

    def peek(self):
        """Returns the current token's kind, or None at the end of input."""
        return self.tokens[self.pos].kind if self.pos < len(self.tokens) else None

    def advance(self):
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def error(self, expected):
        """Returns a ChiSyntaxError pointing at the current token."""
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            msg = "'{}' expected " + expected + ", found '{}'"
            return ChiSyntaxError(msg, (self.code, token.text), start=token.start, end=token.end)

        end = len(self.code.rstrip())
        return ChiSyntaxError("'{}' ended early, expected " + expected, self.code, start=max(end - 1, 0), end=end)

    def expect(self, kind, expected=None):
        if self.peek() != kind:
            raise self.error(expected or f"'{kind}'")
        return self.advance()

    def parse(self):
        if not self.tokens:
            raise ChiSyntaxError("χ term cannot be empty", self.code)

        term = self.term()
        if self.peek() is not None:
            raise self.error("end of term")
        return term

    def term(self):
        if self.peek() == "lambda":
            return self.abstraction()
        elif self.peek() == "rec":
            return self.rec()
        return self.application()

    def abstraction(self):
        self.expect("lambda")
        variable = self.expect("var", "a variable").text
        self.expect(".")
        return Lambda(variable, self.term())

    def rec(self):
        self.expect("rec")
        variable = self.expect("var", "a variable").text
        self.expect("=")
        return Rec(variable, self.term())

    def application(self):
        term = self.atom()
        while self.peek() in Parser.ATOM_STARTS:
            term = Apply(term, self.atom())

        if self.peek() in ("lambda", "rec"):  # greedy, so it has to be the last operand
            term = Apply(term, self.term())
        return term

    def atom(self):
        kind = self.peek()
        if kind == "var":
            return Var(self.advance().text)
        elif kind == "con":
            return self.const()
        elif kind == "case":
            return self.case()
        elif kind == "(":
            self.advance()
            term = self.term()
            self.expect(")")
            return term
        raise self.error("a χ term")

    def sequence(self, item):
        """Parses "(" [item ("," item)*] ")" and returns the list of items."""
        self.expect("(")
        items = []
        if self.peek() != ")":
            items.append(item())
            while self.peek() == ",":
                self.advance()
                items.append(item())
        self.expect(")", "',' or ')'")
        return items

    def const(self):
        constructor = self.expect("con", "a constructor").text
        return Const(constructor, self.sequence(self.term))

    def case(self):
        self.expect("case")
        scrutinee = self.term()
        self.expect("of", "'of'")
        self.expect("{")

        branches = []
        if self.peek() != "}":
            branches.append(self.branch())
            while self.peek() == ";":
                self.advance()
                if self.peek() == "}":  # trailing ";"
                    break
                branches.append(self.branch())
        self.expect("}", "';' or '}'")

        return Case(scrutinee, branches)

    def branch(self):
        constructor = self.expect("con", "a constructor").text
        parameters = self.sequence(lambda: self.expect("var", "a variable").text)
        self.expect("arrow", "'→'")
        return Branch(constructor, parameters, self.term())


def parse(code):
    """Parses χ concrete syntax code into a term. Raises ChiSyntaxError if code is not a single valid term."""
    return Parser(remove_comments(code)).parse()


def format_branch(branch, nest_level):
    return "{}{}({}) -> {}".format(
        "  " * nest_level, branch.constructor, ", ".join(branch.parameters), format_term(branch.expression, nest_level)
    )


def format_term(term, nest_level=0):
    """Pretty-prints term. Cases are laid out over several lines, indented by two spaces per nest_level."""
    if isinstance(term, Var):
        return term.name

    elif isinstance(term, Const):
        return "{}({})".format(term.constructor, ", ".join(format_term(arg, nest_level) for arg in term.args))

    elif isinstance(term, Apply):
        function = format_term(term.function, nest_level)
        if isinstance(term.function, (Lambda, Rec)):
            function = f"({function})"

        argument = format_term(term.argument, nest_level)
        if isinstance(term.argument, (Apply, Lambda, Rec)):
            argument = f"({argument})"

        return f"{function} {argument}"

    elif isinstance(term, Lambda):
        body = format_term(term.body, nest_level)
        if isinstance(term.body, Apply):
            body = f"({body})"
        return f"λ{term.variable}.{body}"

    elif isinstance(term, Rec):
        return f"rec {term.variable} = {format_term(term.body, nest_level)}"

    elif isinstance(term, Case):
        branches = ";\n".join(format_branch(branch, nest_level + 1) for branch in term.branches)
        return "case {} of {{\n{}\n{}}}".format(format_term(term.scrutinee, nest_level), branches, "  " * nest_level)

    raise TypeError(f"expected a χ term, got {type(term).__name__}")


def format(term):
    """Pretty-prints term in concrete syntax. parse(format(term)) == term."""
    return format_term(term)
