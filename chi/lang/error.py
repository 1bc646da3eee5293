"""Error handling for the χ interpreter. Only GenericExceptions should be encountered during running: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Stuck terms are not errors (they are returned as normal forms), so the evaluator itself only ever raises
DispatchArityError, and only in strict-arity mode.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Base of every χ error/warning. msg is a format string whose "{}" fields are filled with the bolded exprs;
    exprs[0], start and end locate the offending source for the diagnosis.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if not isinstance(exprs, (list, tuple)):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ChiSyntaxError(GenericException):
    """Raised by the concrete and abstract parsers. exprs[0] is the source, start/end delimit its offending part."""

    def __init__(self, msg, exprs, start=0, end=-1):
        super().__init__(msg, exprs, start=start, end=end if end != -1 else start + 1)


class DispatchArityError(GenericException):
    """Raised by a strict-arity evaluator when the branch it committed to binds the wrong number of parameters."""

    def __init__(self, constructor, expected, got):
        msg = "branch for '{}' binds " + f"{expected} parameter(s), but the scrutinee has {got} argument(s)"
        super().__init__(msg, constructor, diagnosis=False)
        self.constructor = constructor
        self.expected = expected
        self.got = got


class DecodeError(GenericException):
    """Raised when an encoded term cannot be mapped back through an encoding context."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class ChiValueError(GenericException):
    """Raised on values that can never be represented, like negative numerals."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False, internal=True)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom χ errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        # multi-line sources are diagnosed on the line holding error.start
        line_start = error.expr.rfind("\n", 0, error.start) + 1
        line_end = error.expr.find("\n", error.start)
        if line_end == -1:
            line_end = len(error.expr)
        line = error.expr[line_start:line_end]
        start = error.start - line_start
        end = max(min(error.end, line_end) - line_start, start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis
    def traceback_msg(self):
        """Returns the 'File ..., line ...' part of a message, one entry per registered file with a live line."""
        entries = [(file, line, line_num) for file, (line, line_num) in self.traceback.items() if line]

        msg = "".join(f"  File '{file}', line {line_num}:\n    {line}\n" for file, line, line_num in entries)
        return "Traceback:\n" + msg if len(entries) > 1 else msg

    def report(self, error, warning=False):
        """Prints error (a GenericException) as an error or warning, diagnosed under its source if it has one."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        msg = "" if warning else self.traceback_msg()
        if error.internal:
            msg += colored("[internal] ", color, attrs=["bold"])
        msg += colored("warning: " if warning else "error: ", color, attrs=["bold"]) + error.msg
        print(msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning))

    def warn(self, *args, **kwargs):
        """Prints a warning built from args (see GenericException). Never exits."""
        self.report(GenericException(*args, **kwargs), warning=True)

    def throw(self, error):
        """Prints error, then exits if fatal. Otherwise the traceback is cleared so the session can go on."""
        self.report(error)

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False

        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is RecursionError:
            self.throw(GenericException("normal form might exist, but maximum recursion depth exceeded"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            return False  # internal errors propagate

        return True
