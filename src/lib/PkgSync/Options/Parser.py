"""The option parser."""

import argparse
import configparser
import sys

from PkgSync.version import __version__
from PkgSync.Options import Types
from PkgSync.Options.Options import Option, PathOption, _debug

__all__ = ["setup", "OptionParserException", "Parser", "get_parser",
           "new_parser"]


#: The namespace that all PkgSync configuration is parsed into
setup = argparse.Namespace(version=__version__,  # pylint: disable=C0103
                           name="PkgSync")


class OptionParserException(Exception):
    """ Raised when an option cannot be added to a parser """


class Parser(argparse.ArgumentParser):
    """ The PkgSync option parser.  Most code should use the shared
    parser from :func:`PkgSync.Options.get_parser`.

    Parsing is done in two passes.  The first finds the config file
    (``-C``, ``$PKGSYNC_CONFIG_FILE`` or the default location) and
    reads it.  The second loads the default of every option from the
    environment or the config file, and then parses the command line.
    """

    #: The path to the config file
    configfile = PathOption('-C', '--config', env="PKGSYNC_CONFIG_FILE",
                            help="Path to configuration file",
                            default="/usr/local/etc/pkgsync.conf")

    #: Options every PkgSync command takes
    options = [configfile,
               Option('--version', action="version",
                      version="%(prog)s " + __version__,
                      help="Print the version and exit")]

    #: Set by unit tests to skip reading config files
    unit_test = False

    def __init__(self, **kwargs):
        """ All keyword arguments of :class:`argparse.ArgumentParser`
        are accepted, and also:

        :param components: Objects whose ``options`` are added to the
                           parser
        :type components: list
        :param namespace: The namespace to parse into.  Default is
                          :attr:`PkgSync.Options.setup`.
        :type namespace: argparse.Namespace
        :param add_base_options: Whether to add
                                 :attr:`PkgSync.Options.Parser.options`.
                                 Subparsers do not.
        :type add_base_options: bool
        """
        components = kwargs.pop('components', None) or []
        namespace = kwargs.pop('namespace', None)
        add_base_options = kwargs.pop('add_base_options', True)
        kwargs.setdefault('add_help', add_base_options)
        argparse.ArgumentParser.__init__(self, **kwargs)

        #: The namespace options are parsed into
        self.namespace = setup if namespace is None else namespace

        #: The config file that was read
        self.cfp = configparser.ConfigParser()

        #: Objects whose options have been added
        self.components = []

        #: All options that have been added, flattened
        self.option_list = []

        self._commands = None
        if add_base_options:
            self.add_component(self)
        for component in components:
            self.add_component(component)

    def _check_duplicate(self, option):
        """ Refuse options that would read the same environment
        variable or config file option as an option already added """
        for other in self.option_list:
            if option.env and option.env == other.env:
                raise OptionParserException(
                    "Duplicate environment variable option: %s" % option.env)
            if option.cf and option.cf == other.cf:
                raise OptionParserException(
                    "Duplicate config file option: %s" % (option.cf,))

    def add_options(self, options):
        """ Add a list of options and option groups """
        for option in options:
            if option in self.option_list:
                continue
            new = [o for o in option.list_options()
                   if o not in self.option_list]
            for opt in new:
                self._check_duplicate(opt)
            option.add_to_parser(self)
            self.option_list.extend(new)

    def add_component(self, component):
        """ Add the ``options`` of an object (a class, a module, a
        subcommand...) to the parser """
        if component in self.components:
            return
        _debug("Adding component %s" % component)
        self.components.append(component)
        self.add_options(getattr(component, "options", []))

    def subcommand_parsers(self):
        """ Get the argparse subparsers action that
        :class:`PkgSync.Options.Subparser` groups add their
        subcommands to """
        if self._commands is None:
            self._commands = self.add_subparsers(dest='subcommand',
                                                 metavar='<command>')
            self._commands.required = True
        return self._commands

    def read_config(self, argv):
        """ Find the config file and read it into :attr:`cfp`.  A
        config file that is missing is an error only if it is not the
        default one. """
        self.configfile.load_default(self.cfp)
        bootstrap = argparse.ArgumentParser(add_help=False)
        bootstrap.add_argument(*self.configfile.args, dest='config',
                               type=self.configfile.type,
                               default=self.configfile.default)
        filename = bootstrap.parse_known_args(argv)[0].config
        self.cfp = configparser.ConfigParser()
        if self.unit_test:
            return
        _debug("Reading config file %s" % filename)
        try:
            found = self.cfp.read([filename])
        except configparser.Error as err:
            self.error("Could not parse %s: %s" % (filename, err))
        if not found and filename != Types.path(self.configfile.initial):
            self.error("Could not read %s" % filename)

    def parse(self, argv=None):
        """ Parse options into :attr:`namespace`.  Values left over
        from an earlier parse are discarded.  Components with an
        ``options_parsed_hook`` have it called afterwards.

        :param argv: The argument list to parse.  By default,
                     ``sys.argv[1:]`` is used.
        :type argv: list
        :returns: argparse.Namespace
        """
        if argv is None:
            argv = sys.argv[1:]  # pragma: nocover
        self.read_config(argv)
        for attr in list(vars(self.namespace)):
            if attr not in ['version', 'name']:
                delattr(self.namespace, attr)
        for opt in self.option_list:
            try:
                opt.load_default(self.cfp)
            except ValueError:
                self.error("Bad value for %s: %s" % (opt, sys.exc_info()[1]))
        self.parse_args(argv, namespace=self.namespace)
        for component in self.components:
            if hasattr(component, "options_parsed_hook"):
                _debug("Calling post-parsing hook on %s" % component)
                component.options_parsed_hook()
        return self.namespace


#: The parser shared by all of PkgSync
_parser = Parser()  # pylint: disable=C0103


def new_parser():
    """ Replace the shared parser with a new one.  This is useful for
    unit testing. """
    global _parser  # pylint: disable=global-statement
    _parser = Parser()


def get_parser(description=None, components=None, namespace=None):
    """ Get the shared :class:`PkgSync.Options.Parser`, after setting
    its description, adding the given components, and pointing it at
    the given namespace.  Under unit tests a new parser is returned
    every time.

    :returns: PkgSync.Options.Parser
    """
    if Parser.unit_test:
        return Parser(description=description, components=components,
                      namespace=namespace)
    if description:
        _parser.description = description
    if namespace is not None:
        _parser.namespace = namespace
    for component in components or []:
        _parser.add_component(component)
    return _parser
