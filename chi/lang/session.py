"""Session control for χ. Splits .chi files (or command-line input) into statements, parses them and runs them in one
of three modes:
    - eval: reduce to normal form
    - decompile: print the canonical encoding, allocating ids in the session's context
    - interpret: reduce with the χ self-interpreter and decode the result through the session's context

Every statement is a single term in concrete syntax. A statement continues on the following lines for as long as its
parentheses or braces are unbalanced.
"""

from chi.bootstrap.context import Context
from chi.bootstrap.decompile import decompile, recompile
from chi.bootstrap.reflection import self_interpret
from chi.grammar import abstract, concrete
from chi.lang.error import ChiSyntaxError, GenericException
from chi.pure.reduction import Evaluator


class Session:
    """Governs a χ session: its statements, their results and the encoding context they share."""
    SH_FILE = "<in>"  # command-line interpreter filename
    MODES = ("eval", "decompile", "interpret")
    SYNTAXES = ("concrete", "abstract")

    def __init__(self, error_handler, path, cmd_line=False, mode="eval", syntax="concrete", context=None,
                 strict_arity=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.mode = mode
        self.syntax = syntax
        self.context = context if context is not None else Context()
        self.evaluator = Evaluator(strict_arity)

        self.to_run = []   # list of (line num, term) to run
        self.results = []  # formatted results, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            statements = []
            add_to_prev = False

            try:
                with open(path, "r", encoding="utf-8") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, statements)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for statement in statements:
                self.add(*statement)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def is_complete(statement):
        """Whether statement has no open parenthesis, brace or block comment."""
        try:
            code = concrete.remove_comments(statement)
        except ChiSyntaxError:
            return False  # block comment still open

        return code.count("(") <= code.count(")") and code.count("{") <= code.count("}")

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, statements=None):
        """Preprocesses a line from a file or command-line. statements, if given, is the list of (statement,
        line num) read so far: line is appended to it, or to its last statement if add_to_prev. Returns line (joined
        with the previous statement when continuing it) and whether the next line continues the statement.
        """
        if statements is not None:
            if add_to_prev:
                prev, line_num = statements.pop()
                line = prev + line
            if line.strip():
                statements.append((line, line_num))

        return line, not Session.is_complete(line)

    def add(self, statement, line_num):
        """Parses statement and queues it. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, statement.strip(), line_num)  # in case error is raised

        if concrete.remove_comments(statement).strip():
            self.to_run.append((line_num, concrete.parse(statement)))

        self.error_handler.remove_line(self.path)  # error was not raised

    def execute(self, term):
        """Runs term in this session's mode and returns the resulting term."""
        if self.mode == "eval":
            return self.evaluator.evaluate(term)
        elif self.mode == "decompile":
            return decompile(term, self.context)
        elif self.mode == "interpret":
            return recompile(self_interpret(term, self.context, self.evaluator), self.context)
        raise GenericException("unknown mode '{}'", self.mode, diagnosis=False)

    def format(self, term):
        return abstract.format(term) if self.syntax == "abstract" else concrete.format(term)

    def run(self):
        """Runs this session's queued statements, collecting their formatted results. Will raise any errors that are
        encountered.
        """
        while self.to_run:
            line_num, term = self.to_run.pop(0)
            self.error_handler.register_line(self.path, concrete.format(term), line_num)

            self.results.append(self.format(self.execute(term)))

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
