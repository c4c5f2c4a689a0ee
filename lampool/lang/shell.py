"""Handles interactive/command-line mode for lampool. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lambda calculus front-end shell. Every line is handed to the session as is: cmd's own command syntax would
    take a term like `help x` for a command, and its 'EOF' marker would shadow a variable named EOF.
    """
    intro = "lampool :: lambda calculus front-end\nType ':help' for more information."

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self.prompt = sess.prompt

    def readline(self):
        """Returns the next input line without its line ending, or None at the end of input."""
        if self.cmdqueue:
            return self.cmdqueue.pop(0)

        if self.use_rawinput:
            try:
                return input(self.prompt)
            except EOFError:
                return None

        self.stdout.write(self.prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def cmdloop(self, intro=None):
        """Runs lines until the session is over or the input ends."""
        self.preloop()
        if intro is None:
            intro = self.intro
        if intro:
            self.stdout.write(f"{intro}\n")

        stop = False
        while not stop:
            line = self.readline()
            if line is None:
                self.stdout.write("\n")
                break
            line = self.precmd(line)
            stop = self.onecmd(line)
            stop = self.postcmd(stop, line)
        self.postloop()

    def precmd(self, line):
        """Forgets the diagnostics of the previous line."""
        self.sess.error_handler.reset()
        return line

    def onecmd(self, line):
        return self.sess.run(line)

    def postcmd(self, stop, line):
        """Refreshes the prompt, which depends on settings and the diagnostics of the line just run."""
        self.prompt = self.sess.prompt
        return stop
