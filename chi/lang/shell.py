"""Handles interactive/command-line mode for the χ interpreter. Uses cmd as backend."""

import cmd

from chi.lang.session import Session


class Shell(cmd.Cmd):
    """χ interpreter shell."""
    intro = "χ interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Runs a χ term in the session's current mode."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = Session.preprocess_line(self._tmp_line + line + "\n", self.line_num, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self.line_num)
                self.sess.run()

                if self.sess.results:
                    print(self.sess.pop())

    def do_mode(self, arg):
        """mode [eval|decompile|interpret]: shows or switches what is done with each term."""
        self._switch("mode", Session.MODES, arg)

    def do_syntax(self, arg):
        """syntax [concrete|abstract]: shows or switches the syntax results are printed in."""
        self._switch("syntax", Session.SYNTAXES, arg)

    def _switch(self, setting, choices, arg):
        arg = arg.strip()
        if not arg:
            print(getattr(self.sess, setting))
        elif arg in choices:
            setattr(self.sess, setting, arg)
        else:
            self.sess.error_handler.warn(f"unknown {setting} " + "'{}', expected one of " + ", ".join(choices), arg,
                                         diagnosis=False)

    def do_context(self, arg):
        """Lists the ids assigned to variables and constructors so far."""
        for kind, assignments in (("variables", self.sess.context.variable_assignments()),
                                  ("constructors", self.sess.context.constructor_assignments())):
            print(f"{kind}: " + ", ".join(f"{name} = {id}" for name, id in assignments))

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return super().do_help(arg)

        print("Welcome to the χ interpreter!\n\n"
              "χ is an untyped, strict functional language with constructors and case \n"
              "expressions, small enough to interpret itself. Try typing \n"
              "'case C(λx.x, Zero()) of { C(f, x) → f x }', which evaluates to 'Zero()'.\n\n"
              "Commands: 'mode decompile' prints canonical encodings instead, 'mode interpret'\n"
              "evaluates with the χ self-interpreter, 'syntax abstract' switches the output \n"
              "syntax and 'context' lists the ids assigned so far.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
