""" Options shared by the pkgsync commands. """

from PkgSync.Options import Types
from PkgSync.Options.Options import Option, BooleanOption

__all__ = ["Common"]


class Common(object):
    """ Options shared by the pkgsync commands. """

    #: The package provider class, looked up by name in
    #: :func:`PkgSync.Providers.get_available`
    provider = Option(
        '-P', '--provider', cf=('pkgsync', 'provider'),
        type=Types.provider, default='default', metavar='<provider>',
        help='Package provider')

    #: Command timeout
    command_timeout = Option(
        "-t", "--command-timeout", cf=('pkgsync', 'command_timeout'),
        type=Types.timeout, dest="command_timeout",
        help="Kill external commands that run longer than this many "
        "seconds")

    #: Do not change anything
    dryrun = BooleanOption(
        '-n', '--dry-run', cf=('pkgsync', 'dryrun'), dest="dryrun",
        help="Show what would be done without changing anything")
