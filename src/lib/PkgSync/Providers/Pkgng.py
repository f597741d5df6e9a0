"""This is the PkgSync support for pkgng, the FreeBSD package tool."""

import re
import PkgSync.Options
from PkgSync.Inventory import Inventory, QUERY_FORMAT, parse_query_line
from PkgSync.Providers import Provider, PackageCommandError, \
    PackageSpecError

_REPO_URN_RE = re.compile(r'^urn:freebsd:repo:(?P<repo>.+)$')


def repo_tag_from_urn(urn):
    """ Extract the repository name from a URN of the form
    ``urn:freebsd:repo:<name>``.

    :param urn: The URN
    :type urn: string
    :returns: string
    :raises: :exc:`PkgSync.Providers.PackageSpecError`
    """
    match = _REPO_URN_RE.match(urn)
    if not match:
        raise PackageSpecError("Invalid repository URN %r: expected "
                               "urn:freebsd:repo:<name>" % urn)
    return match.group('repo')


class Pkgng(Provider):
    """Support for pkgng packages on FreeBSD."""

    options = [
        PkgSync.Options.OptionGroup(
            PkgSync.Options.PathOption(
                '--pkg', cf=('pkgng', 'path'), env='PKGSYNC_PKG',
                default='/usr/sbin/pkg', dest='pkg_path',
                help='Pkgng tool path'),
            PkgSync.Options.Option(
                '-r', '--repository', cf=('pkgng', 'repository'),
                dest='pkg_repository', metavar='<name>',
                help='Install packages from this repository unless the '
                'entry gives a source'),
            title='Pkgng options')]

    __execs__ = []
    __handles__ = [('Package', 'pkgng'), ('Package', None)]
    __req__ = {'Package': ['name']}

    def __init__(self, setup, logger=None):
        #: The path to the pkg binary
        self.pkg_path = getattr(setup, 'pkg_path', None) or '/usr/sbin/pkg'
        self.__execs__ = [self.pkg_path]
        Provider.__init__(self, setup, logger=logger)

    def pkg(self, args):
        """ Run pkg with the given arguments.

        :param args: The arguments to pass to pkg
        :type args: list of strings
        :returns: string - the output of the command
        :raises: :exc:`PkgSync.Providers.PackageCommandError`
        """
        command = [self.pkg_path] + list(args)
        result = self.cmd.run(command)
        if not result:
            raise PackageCommandError(command, result)
        return result.stdout

    def get_query(self):
        """ Get the name, version and origin of every installed
        package """
        return self.pkg(['query', '-a', QUERY_FORMAT])

    def get_version_list(self):
        """ Compare every installed package to the remote
        repositories """
        return self.pkg(['version', '-vRo'])

    def get_resource_info(self, name):
        """ Get the name, version and origin of a single installed
        package.

        :param name: The package name or origin
        :type name: string
        :returns: string, or None if pkg does not know the package
        """
        result = self.cmd.run([self.pkg_path, 'query', QUERY_FORMAT, name])
        if not result:
            self.logger.debug("Pkgng: No installed package matches %s: %s" %
                              (name, result.error))
            return None
        return result.stdout

    def inventory(self):
        """ Take a fresh inventory of all installed packages.

        :returns: :class:`PkgSync.Inventory.Inventory`
        """
        inventory = Inventory(self.get_query(), self.get_version_list())
        if inventory.skipped:
            self.logger.debug("Pkgng: Skipped %d unparseable line(s) of "
                              "pkg output" % len(inventory.skipped))
        return inventory

    def instances(self):
        return self.inventory().records
    instances.__doc__ = Provider.instances.__doc__

    def query(self, entry):
        output = self.get_resource_info(self.identifier(entry))
        if not output:
            return None
        for line in output.splitlines():
            record = parse_query_line(line)
            if record is not None:
                return record
        return None
    query.__doc__ = Provider.query.__doc__

    def get_latest_version(self, origin):
        return Inventory(
            version_output=self.get_version_list()).latest_version(origin)
    get_latest_version.__doc__ = Provider.get_latest_version.__doc__

    def latest(self, entry):
        record = self.inventory().find(self.identifier(entry))
        if record is None:
            return None
        self.logger.debug("Pkgng: Latest version of %s is %s" %
                          (record.origin, record.latest))
        return record.latest
    latest.__doc__ = Provider.latest.__doc__

    def _install_name(self, entry):
        """ Get the name to pass to ``pkg install`` for the entry.
        pkg cannot pin a version with the origin syntax (``curl-1.2``
        is valid, ``ftp/curl-1.2`` is not), so versioned installs use
        the short name. """
        version = self.desired_version(entry)
        if version is None:
            return self.identifier(entry)
        name = entry.get('name')
        if '/' in name:
            name = name.split('/', 1)[1]
        return "%s-%s" % (name, version)

    def install(self, entry):
        source = entry.get('source')
        repo = None
        if not source:
            repo = getattr(self.setup, 'pkg_repository', None)
            args = ['install', '-qy']
        elif source.startswith('urn:'):
            repo = repo_tag_from_urn(source)
            args = ['install', '-qy']
        else:
            # add a package file from a path or URL
            args = ['add', '-q']
        if args[0] == 'add':
            args.append(source)
        else:
            if repo:
                args.extend(['-r', repo])
            args.append(self._install_name(entry))

        if self.query(entry) is not None:
            # reinstall, e.g. to move to a pinned version
            args.insert(1, '-f')

        self.logger.info("Pkgng: Installing %s" % args[-1])
        self.pkg(args)
        return True
    install.__doc__ = Provider.install.__doc__

    def update(self, entry, latest=None):
        origin = self.identifier(entry)
        if '/' not in origin:
            record = self.query(origin)
            if record is not None:
                origin = record.origin
        if latest is None:
            latest = self.get_latest_version(origin)
        if latest is None:
            self.logger.debug("Pkgng: No upgrade available for %s" % origin)
            return False
        self.logger.info("Pkgng: Upgrading %s to %s" % (origin, latest))
        self.pkg(['upgrade', '-qy', origin])
        return True
    update.__doc__ = Provider.update.__doc__

    def uninstall(self, entry):
        name = self.identifier(entry)
        self.logger.info("Pkgng: Removing %s" % name)
        self.pkg(['delete', '-qy', name])
        return True
    uninstall.__doc__ = Provider.uninstall.__doc__
