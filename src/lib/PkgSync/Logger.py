"""PkgSync logging support"""

import fcntl
import logging
import logging.handlers
import math
import socket
import struct
import sys
import termios
import PkgSync.Options

logging.raiseExceptions = 0


def terminal_width():
    """ Get the width of the terminal on stdout, or a very large width
    if stdout is not a terminal """
    if not sys.stdout.isatty():
        return 32768
    try:
        width = struct.unpack('hhhh', fcntl.ioctl(0, termios.TIOCGWINSZ,
                                                  b"\000" * 8))[1]
    except (OSError, struct.error):
        width = 0
    return width or 80


class TermiosFormatter(logging.Formatter):
    """ Fits log messages to the terminal.  Long lines are wrapped,
    and a list (such as a list of packages) is laid out in columns.
    """

    def __init__(self, fmt=None, datefmt=None):
        logging.Formatter.__init__(self, fmt, datefmt)
        self.width = terminal_width()

    def columns(self, items):
        """ Lay out items in columns, top to bottom and then left to
        right """
        items = sorted(str(i) for i in items)
        col_width = max(len(i) for i in items)
        ncols = max(self.width // (col_width + 2), 1)
        nrows = int(math.ceil(float(len(items)) / ncols))
        return ["".join(" %-*s " % (col_width, item)
                        for item in items[row::nrows])
                for row in range(nrows)]

    def wrap(self, msg):
        """ Break each line of a message at the terminal width """
        lines = []
        for line in msg.split('\n'):
            chunks = [line[i:i + self.width]
                      for i in range(0, len(line), self.width)]
            lines.extend(chunks or [''])
        return lines

    def format(self, record):
        if isinstance(record.msg, list):
            if not record.msg:
                return ''
            lines = self.columns(record.msg)
        else:
            lines = self.wrap(record.getMessage())
        if record.exc_info:
            lines.append(self.formatException(record.exc_info))
        return '\n'.join(lines)


def _add_handler(handler, name, level, formatter):
    """ Name a handler, set its level and format, and add it to the
    root logger """
    handler.set_name(name)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logging.root.addHandler(handler)


def add_console_handler(level=logging.DEBUG):
    """ Log to stderr """
    _add_handler(logging.StreamHandler(sys.stderr), "console", level,
                 TermiosFormatter())


def add_syslog_handler(procname=None, syslog_facility='daemon',
                       level=logging.DEBUG):
    """ Log to syslog as ``procname``, through ``/dev/log`` if it
    exists and UDP to localhost otherwise """
    if procname is None:
        procname = PkgSync.Options.get_parser().prog
    try:
        try:
            handler = logging.handlers.SysLogHandler('/dev/log',
                                                     syslog_facility)
        except socket.error:
            handler = logging.handlers.SysLogHandler(('localhost', 514),
                                                     syslog_facility)
    except socket.error:
        logging.root.error("Failed to activate syslogging")
        return
    _add_handler(handler, "syslog", level,
                 logging.Formatter(procname + '[%(process)d]: %(message)s'))


def add_file_handler(level=logging.DEBUG):
    """ Log to the file given with ``--logfile`` """
    _add_handler(logging.FileHandler(PkgSync.Options.setup.logfile), "file",
                 level, logging.Formatter(
                     '%(asctime)s %(name)s[%(process)d]: %(message)s'))


def default_log_level():
    """ Get the console log level from ``--debug`` and ``--verbose`` """
    if PkgSync.Options.setup.debug:
        return logging.DEBUG
    elif PkgSync.Options.setup.verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging():
    """ Set up logging from the options.  Only the first call does
    anything. """
    if getattr(logging, 'already_setup', False):
        return

    setup = PkgSync.Options.setup
    level = default_log_level()
    params = ["%s to console" % logging.getLevelName(level)]
    add_console_handler(level=level)

    if getattr(setup, "syslog", False):
        slvl = min(level, logging.INFO)
        params.append("%s to syslog" % logging.getLevelName(slvl))
        add_syslog_handler(level=slvl)

    if setup.logfile:
        params.append("%s to %s" % (logging.getLevelName(level),
                                    setup.logfile))
        add_file_handler(level=level)

    logging.root.setLevel(logging.DEBUG)
    logging.root.debug("Configured logging: %s" % "; ".join(params))
    logging.already_setup = True


class _OptionContainer(object):
    """ The ``[logging]`` options; logging is set up as soon as they
    have been parsed """
    options = [
        PkgSync.Options.BooleanOption(
            '-d', '--debug', help='Enable debugging output',
            cf=('logging', 'debug')),
        PkgSync.Options.BooleanOption(
            '-v', '--verbose', help='Enable verbose output',
            cf=('logging', 'verbose')),
        PkgSync.Options.BooleanOption(
            '--syslog', help="Log to syslog", cf=('logging', 'syslog')),
        PkgSync.Options.PathOption(
            '-o', '--logfile', help='Set path of file log',
            cf=('logging', 'path'))]

    @staticmethod
    def options_parsed_hook():
        """ Set up logging once the options are known """
        setup_logging()


PkgSync.Options.get_parser().add_component(_OptionContainer)
