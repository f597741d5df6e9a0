""" Commands made of subcommands, such as ``pkgsync list``. """

import io
import logging
import re

from PkgSync.Options.Options import PositionalArgument, Subparser, _debug
from PkgSync.Options.Parser import Parser, setup as master_setup

__all__ = ["Subcommand", "CommandRegistry"]

_WS_RE = re.compile(r'\s+')


class Subcommand(object):
    """ Base class for subcommands.  Subclasses override
    :func:`PkgSync.Options.Subcommand.run`, and take no constructor
    arguments.  The lowercased class name is the command name, and
    the docstring is its short help. """

    #: Options this command takes
    options = []

    #: Other names the command can be run as
    aliases = []

    def __init__(self):
        #: The name of the command
        self.name = self.__class__.__name__.lower()

        #: A :class:`PkgSync.Options.Parser` used only to print help
        #: for this command
        self.parser = Parser(prog=self.name,
                             description=self.__class__.__doc__,
                             components=[self], add_base_options=False)

        self.logger = logging.getLogger(self.name)

    def usage(self):
        """ Get a one-line usage message, followed by the short help
        if there is any. """
        sio = io.StringIO()
        self.parser.print_usage(file=sio)
        usage = _WS_RE.sub(' ', sio.getvalue()).strip()
        if usage.startswith("usage: "):
            usage = usage[len("usage: "):]
        doc = _WS_RE.sub(' ', self.__class__.__doc__ or '').strip()
        if doc:
            return "%s - %s" % (usage, doc)
        return usage

    def run(self, setup):
        """ Run the command.

        :param setup: A namespace giving the options for this command.
        :type setup: argparse.Namespace
        :returns: int - the exit status of the command, or None for
                  success
        """
        raise NotImplementedError  # pragma: nocover


class Help(Subcommand):
    """List subcommands and usage, or get help on a specific subcommand."""
    options = [PositionalArgument("command", nargs='?')]

    def __init__(self, registry):
        Subcommand.__init__(self)
        self.registry = registry

    def run(self, setup):
        commands = self.registry.commands
        if setup.command is None:
            for cmd in sorted(set(commands.values()), key=lambda c: c.name):
                print(cmd.usage())
            return 0
        if setup.command not in commands:
            print("No such command: %s" % setup.command)
            return 1
        commands[setup.command].parser.print_help()
        return 0


class CommandRegistry(object):
    """ Registers subcommands, and runs the one given on the command
    line. """

    def __init__(self):
        #: Command name (or alias) -> command object
        self.commands = dict()

        #: One :class:`PkgSync.Options.Subparser` for each name a
        #: command can be run as; add these to the option parser
        self.subcommand_options = []

        self.help = self.register_command(Help(self))

    def register_command(self, cls_or_obj):
        """ Register a single command.

        :param cls_or_obj: The command class or object to register
        :type cls_or_obj: type or Subcommand
        :returns: The command object
        """
        if isinstance(cls_or_obj, type):
            cmd = cls_or_obj()
        else:
            cmd = cls_or_obj
        for name in [cmd.name] + list(cmd.aliases):
            self.commands[name] = cmd
            self.subcommand_options.append(
                Subparser(*cmd.options, name=name,
                          help=cmd.__class__.__doc__))
        return cmd

    def register_commands(self, candidates, parent=Subcommand):
        """ Register every class in ``candidates`` that subclasses
        ``parent``, other than ``parent`` itself and classes whose
        names start with an underscore. """
        for attr in candidates:
            if (isinstance(attr, type) and
                    issubclass(attr, parent) and
                    attr is not parent and
                    not attr.__name__.startswith("_")):
                self.register_command(attr)

    def runcommand(self):
        """ Run the command named in ``PkgSync.Options.setup.subcommand``
        and return its exit status. """
        _debug("Running subcommand %s" % master_setup.subcommand)
        return self.commands[master_setup.subcommand].run(master_setup)
