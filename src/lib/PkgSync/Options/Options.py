"""Option objects that know every place their value can come from.

An :class:`Option` is not tied to one :mod:`argparse` parser.  It can
be given on the command line, in the environment or in the config
file, and it remembers the argparse actions it was added as, so that
its default can be changed after the fact from the environment or the
config file.
"""

import os
import sys
from itertools import chain

from PkgSync.Options import Types

__all__ = ["Option", "BooleanOption", "PathOption", "PositionalArgument",
           "OptionGroup", "Subparser", "_debug"]

unit_test = False  # pylint: disable=C0103

_TRUE = ["true", "yes", "on", "1"]
_FALSE = ["false", "no", "off", "0"]


def _debug(msg):
    """ Options are parsed before logging is configured, so debugging
    output about option parsing goes to stdout under unit tests, or to
    stderr if ``PKGSYNC_OPTIONS_DEBUG`` is set. """
    if unit_test:
        print("DEBUG: %s" % msg)
    elif os.environ.get('PKGSYNC_OPTIONS_DEBUG', '0').lower() in _TRUE:
        sys.stderr.write("%s\n" % msg)


def to_bool(value):
    """ Convert a yes/no string from the environment or the config
    file into a bool.

    :raises: ValueError
    """
    if value.lower() in _TRUE:
        return True
    elif value.lower() in _FALSE:
        return False
    raise ValueError("Invalid boolean value %s" % value)


class Option(object):
    """ An option that can be given on the command line, in the
    environment, or in the config file.  The command line beats the
    environment, which beats the config file, which beats the default
    given in the code. """

    def __init__(self, *args, **kwargs):
        """ All arguments and keyword arguments of
        :meth:`argparse.ArgumentParser.add_argument` are accepted, and
        also:

        :param cf: The ``(<section>, <option>)`` this option is read
                   from in the config file
        :type cf: tuple
        :param env: The environment variable this option is read from
        :type env: string
        """
        #: The option strings, or the name of a positional argument
        self.args = args

        #: The ``(<section>, <option>)`` tuple for the config file
        self.cf = kwargs.pop('cf', None)  # pylint: disable=C0103

        #: The environment variable
        self.env = kwargs.pop('env', None)

        #: The default given in the code
        self.initial = kwargs.pop('default', None)

        #: The argparse actions this option was added to parsers as
        self.actions = []

        self.type = kwargs.get('type')
        self._kwargs = kwargs
        self._default = self.initial

    def __repr__(self):
        sources = list(self.args)
        if self.cf:
            sources.append("%s.%s" % self.cf)
        if self.env:
            sources.append("$" + self.env)
        return "%s(%s: default=%s)" % (self.__class__.__name__,
                                       ", ".join(sources), self.default)

    def _get_default(self):
        """ Getter for the ``default`` property """
        return self._default

    def _set_default(self, value):
        """ Setter for the ``default`` property; updates every parser
        this option has been added to """
        self._default = value
        for action in self.actions:
            action.default = value

    #: The current default: from the environment, the config file,
    #: or the code
    default = property(_get_default, _set_default)

    def list_options(self):
        """ Get this option as a list, like an option group would """
        return [self]

    def convert(self, value):
        """ Convert a string from the environment or the config file
        to the type of this option. """
        if self.type is None:
            return value
        return self.type(value)

    def load_default(self, cfp):
        """ Set the default of this option from the environment or
        from the config file, falling back on the default given in the
        code.

        :param cfp: The config file
        :type cfp: configparser.ConfigParser
        :raises: ValueError if the value cannot be converted
        """
        if not self.env and not self.cf:
            return
        if self.env and self.env in os.environ:
            source = "$%s" % self.env
            self.default = self.convert(os.environ[self.env])
        elif self.cf and cfp.has_option(*self.cf):
            source = "config"
            self.default = self.convert(cfp.get(*self.cf))
        else:
            source = "code"
            self.default = self.initial
        _debug("Default of %s from %s" % (self, source))

    def add_to_parser(self, parser):
        """ Add this option to a parser or an argument group.

        :returns: argparse.Action
        """
        _debug("Adding %s" % self)
        kwargs = dict(self._kwargs)
        if self._default is not None:
            kwargs['default'] = self._default
        action = parser.add_argument(*self.args, **kwargs)
        self.actions.append(action)
        return action


class PathOption(Option):
    """ An option that takes a path, which is expanded with
    :func:`PkgSync.Options.Types.path`. """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('type', Types.path)
        kwargs.setdefault('metavar', '<path>')
        Option.__init__(self, *args, **kwargs)


class BooleanOption(Option):
    """ An on/off switch.  Giving the switch on the command line flips
    the default given in the code, which is False unless given:

    .. code-block:: python

        options = [
            PkgSync.Options.BooleanOption(
                "--force", default=True, help="Reinstall packages")]

    The environment and the config file accept yes/no, on/off,
    true/false and 1/0.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('default', False)
        kwargs.setdefault('action',
                          'store_false' if kwargs['default'] else 'store_true')
        Option.__init__(self, *args, **kwargs)

    def convert(self, value):
        return to_bool(value)


class PositionalArgument(Option):
    """ A positional argument """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('metavar', '<%s>' % args[0])
        Option.__init__(self, *args, **kwargs)


class _OptionContainer(list):
    """ A list of options that is added to a parser as a unit """

    def list_options(self):
        """ Get all options in this container, flattening any
        containers within it """
        return list(chain(*[o.list_options() for o in self]))

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, list.__repr__(self))


class OptionGroup(_OptionContainer):
    """ A titled group of options, shown together in ``--help`` """

    def __init__(self, *items, **kwargs):
        _OptionContainer.__init__(self, items)
        self.title = kwargs.pop('title')
        self.description = kwargs.pop('description', None)

    def add_to_parser(self, parser):
        """ Add the group to the given parser """
        group = parser.add_argument_group(self.title, self.description)
        for opt in self:
            opt.add_to_parser(group)


class Subparser(_OptionContainer):
    """ The options of a single subcommand.  The name of the
    subcommand given on the command line is stored as ``subcommand``.
    """

    def __init__(self, *items, **kwargs):
        _OptionContainer.__init__(self, items)
        self.name = kwargs.pop('name')
        self.help = kwargs.pop('help', None)

    def __repr__(self):
        return "%s %s(%s)" % (self.__class__.__name__, self.name,
                              list.__repr__(self))

    def add_to_parser(self, parser):
        """ Add a subparser for this subcommand to the given
        :class:`PkgSync.Options.Parser` """
        subparser = parser.subcommand_parsers().add_parser(
            self.name, help=self.help, add_base_options=False, add_help=True)
        for opt in self:
            opt.add_to_parser(subparser)
