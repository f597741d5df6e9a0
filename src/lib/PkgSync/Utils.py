""" Running external commands, and other small helpers. """

import logging
import subprocess
import threading


class ClassName(object):
    """ A descriptor that returns the name of the class it is set on,
    so that each provider's ``name`` follows its class name. """

    def __get__(self, inst, owner):
        return owner.__name__


class ExecutorResult(object):
    """ The result of :func:`PkgSync.Utils.Executor.run`.  Used as a
    boolean, it is :attr:`PkgSync.Utils.ExecutorResult.success`. """

    def __init__(self, stdout, stderr, retval):
        #: The output of the command
        self.stdout = stdout

        #: The error output of the command
        self.stderr = stderr

        #: The exit status of the command
        self.retval = retval

        #: Whether the command exited 0
        self.success = retval == 0

        #: A message describing the failure, from stderr if the
        #: command wrote any and stdout otherwise; None on success
        self.error = None
        if not self.success:
            output = (stderr or stdout).strip()
            if output:
                self.error = "%s (rv: %s)" % (output, retval)
            else:
                self.error = "No output or error; return value %s" % retval

    def __repr__(self):
        if self.error:
            return "Errored command result: %s" % self.error
        return "Successful command result: %s" % (self.stdout or
                                                  "No output")

    def __bool__(self):
        return self.success


class Executor(object):
    """ Runs external commands with :class:`subprocess.Popen`, and
    kills them if they run too long """

    def __init__(self, timeout=None):
        """
        :param timeout: The default timeout for commands run by this
                        Executor, in seconds
        :type timeout: float
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.timeout = timeout

    def _timeout(self, proc):
        """ Kill the process if it is still running.  Called from a
        :class:`threading.Timer`. """
        if proc.poll() is None:
            try:
                proc.kill()
                self.logger.warning("Process exceeded timeout, killing")
            except OSError as err:
                self.logger.debug("Could not kill process %s: %s" %
                                  (proc.pid, err))

    def run(self, command, timeout=None):
        """ Run a command and wait for it to finish.  Its output is
        logged at debug level and its error output at info level.

        :param command: The command to run
        :type command: list of strings
        :param timeout: Kill the command if it runs longer than this
                        many seconds.  0 or less overrides the default
                        timeout of this Executor.
        :type timeout: float
        :returns: :class:`PkgSync.Utils.ExecutorResult`
        """
        self.logger.debug("Running: %s" % " ".join(command))
        proc = subprocess.Popen(command, stdin=subprocess.PIPE,
                                stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE, close_fds=True,
                                universal_newlines=True)
        if timeout is None:
            timeout = self.timeout
        timer = None
        if timeout is not None and timeout > 0:
            timer = threading.Timer(float(timeout), self._timeout, [proc])
            timer.start()
        try:
            (stdout, stderr) = proc.communicate()
        finally:
            if timer is not None:
                timer.cancel()
        for line in stdout.splitlines():
            self.logger.debug('< %s' % line)
        for line in stderr.splitlines():
            self.logger.info(line)
        return ExecutorResult(stdout, stderr, proc.wait())
