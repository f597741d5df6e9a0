""" Subcommands and command-line interface for ``pkgsync`` """

import sys
import PkgSync.Logger  # pylint: disable=W0611
import PkgSync.Options
import PkgSync.XML
from PkgSync.Frame import Frame
from PkgSync.Providers import ProviderError, get_available


def print_table(rows, justify='left', hdr=True, vdelim=" ", padding=1):
    """Pretty print a table

    rows - list of rows ([[row 1], [row 2], ..., [row n]])
    hdr - if True the first row is treated as a table header
    vdelim - vertical delimiter between columns
    padding - # of spaces around the longest element in the column
    justify - may be left,center,right

    """
    hdelim = "="
    justify = {'left': str.ljust,
               'center': str.center,
               'right': str.rjust}[justify.lower()]

    cols = list(zip(*rows))
    col_widths = [max([len(str(item)) + 2 * padding
                       for item in col]) for col in cols]
    borderline = vdelim.join([w * hdelim for w in col_widths])

    print(borderline)
    for row in rows:
        print(vdelim.join([justify(str(item), width)
                           for (item, width) in zip(row, col_widths)]))
        if hdr:
            print(borderline)
            hdr = False


class PkgSyncCmd(PkgSync.Options.Subcommand):  # pylint: disable=W0223
    """ Base class for all pkgsync subcommands """

    def __init__(self):
        PkgSync.Options.Subcommand.__init__(self)
        self.provider = None

    def get_provider(self, setup):
        """ Instantiate the provider selected with ``--provider`` """
        if self.provider is None:
            self.provider = setup.provider(setup)
        return self.provider

    def errExit(self, emsg):
        """ exit with an error """
        print(emsg)
        raise SystemExit(1)

    def run(self, setup):
        try:
            return self.execute(self.get_provider(setup), setup)
        except ProviderError as err:
            self.logger.error(str(err))
            return 1

    def execute(self, provider, setup):
        """ Run the command with the given provider.

        :param provider: The package provider
        :type provider: PkgSync.Providers.Provider
        :param setup: A namespace giving the options for this command.
        :type setup: argparse.Namespace
        :returns: int - the exit status of the command, or None for
                  success
        """
        raise NotImplementedError


class List(PkgSyncCmd):
    """ List installed packages and their latest versions """

    def execute(self, provider, setup):
        inventory = provider.inventory()
        rows = [('Origin', 'Name', 'Version', 'Latest')]
        for record in sorted(inventory, key=lambda r: r.origin):
            rows.append((record.origin, record.name, record.version,
                         record.latest or '-'))
        print_table(rows)
        if inventory.skipped:
            print("Skipped %d unparseable line(s) of pkg output" %
                  len(inventory.skipped))


class Query(PkgSyncCmd):
    """ Show an installed package """
    options = [PkgSync.Options.PositionalArgument("package")]

    def execute(self, provider, setup):
        record = provider.query(setup.package)
        if record is None:
            print("%s is not installed" % setup.package)
            return 1
        print("%s %s %s" % (record.origin, record.name, record.version))


class Latest(PkgSyncCmd):
    """ Show the version an installed package would be upgraded to """
    options = [PkgSync.Options.PositionalArgument("origin")]

    def execute(self, provider, setup):
        version = provider.get_latest_version(setup.origin)
        if version is not None:
            print(version)


class Install(PkgSyncCmd):
    """ Install a package """
    options = [
        PkgSync.Options.Option(
            "--version", dest="pkg_version", metavar="<version>",
            help="Install this exact version"),
        PkgSync.Options.Option(
            "--source", dest="pkg_source", metavar="<source>",
            help="urn:freebsd:repo:<name>, or a package file path or URL"),
        PkgSync.Options.PositionalArgument("package")]

    def execute(self, provider, setup):
        entry = PkgSync.XML.package(setup.package,
                                    version=setup.pkg_version,
                                    source=setup.pkg_source)
        if setup.dryrun:
            print("Would install %s" % provider.primarykey(entry))
            return
        provider.install(entry)


class Update(PkgSyncCmd):
    """ Upgrade a package if a newer version is available """
    options = [PkgSync.Options.PositionalArgument("origin")]

    def execute(self, provider, setup):
        if setup.dryrun:
            version = provider.get_latest_version(setup.origin)
            if version is not None:
                print("Would upgrade %s to %s" % (setup.origin, version))
            return
        if not provider.update(setup.origin):
            print("%s is up to date" % setup.origin)


class Remove(PkgSyncCmd):
    """ Remove a package """
    options = [PkgSync.Options.PositionalArgument("package")]
    aliases = ['delete']

    def execute(self, provider, setup):
        if setup.dryrun:
            print("Would remove %s" % setup.package)
            return
        provider.uninstall(setup.package)


class Apply(PkgSyncCmd):
    """ Bring all packages in a configuration file into their desired
    state """
    options = Frame.options + [
        PkgSync.Options.PositionalArgument("file")]

    def execute(self, provider, setup):
        try:
            config = PkgSync.XML.load_config(setup.file)
        except (IOError, PkgSync.XML.ParseError):
            self.errExit("Could not load configuration %s: %s" %
                         (setup.file, sys.exc_info()[1]))
        if Frame(setup, config, provider=provider).run():
            return 0
        return 1


class CLI(PkgSync.Options.CommandRegistry):
    """ CLI class for pkgsync """

    options = [
        PkgSync.Options.Common.provider,
        PkgSync.Options.Common.command_timeout,
        PkgSync.Options.Common.dryrun]

    def __init__(self, argv=None):
        PkgSync.Options.CommandRegistry.__init__(self)
        self.register_commands(globals().values(), parent=PkgSyncCmd)
        providers = sorted(set(get_available().values()),
                           key=lambda cls: cls.name)
        parser = PkgSync.Options.get_parser(
            description="Manage FreeBSD packages with pkg",
            components=[self] + providers)
        parser.add_options(self.subcommand_options)
        parser.parse(argv)

    def run(self):
        """ Run pkgsync """
        return self.runcommand()
