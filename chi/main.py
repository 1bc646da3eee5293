"""Runs .chi files or the command-line shell, inside the error handling context manager. Installed as the chi
executable.
"""

import argparse
import logging
import os

from chi.bootstrap.context import Context
from chi.lang.error import ErrorHandler, GenericException
from chi.lang.session import Session
from chi.lang.shell import Shell


def load_context(path):
    """Returns the context stored at path, or a fresh one if path is None or doesn't exist yet."""
    if path is None or not os.path.exists(path):
        return Context()

    try:
        return Context.load(path)
    except OSError:
        raise GenericException("'{}' could not be opened", path, diagnosis=False)
    except (ValueError, KeyError, TypeError):
        raise GenericException("'{}' is not a valid context file", path, diagnosis=False)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="chi", description="χ interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--mode", choices=Session.MODES, default="eval",
                        help="evaluate terms, print their canonical encoding, or run them on the self-interpreter")
    parser.add_argument("--syntax", choices=Session.SYNTAXES, default="concrete", help="syntax to print results in")
    parser.add_argument("--context", metavar="PATH",
                        help="encoding context to load ids from (if it exists) and save them back to")
    parser.add_argument("--strict-arity", action="store_true",
                        help="fail instead of getting stuck when a matching branch binds the wrong number of parameters")
    parser.add_argument("--verbose", action="store_true", help="log reduction steps to stderr")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs the χ interpreter. Called from the chi executable."""
    with ErrorHandler() as error_handler:
        args = parse_args(argv)

        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

        context = load_context(args.context)
        options = dict(mode=args.mode, syntax=args.syntax, context=context, strict_arity=args.strict_arity)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, **options)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **options)).cmdloop()

        if args.context is not None:
            context.dump(args.context)


if __name__ == "__main__":
    main()
