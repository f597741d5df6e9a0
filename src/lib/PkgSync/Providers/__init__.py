"""This contains all PkgSync package providers"""

import os
import stat
import logging
from PkgSync.Utils import Executor, ClassName


class ProviderError(Exception):
    """ Base class for all errors raised by package providers """


class ProviderInstantiationError(ProviderError):
    """ This error is raised if a provider cannot be instantiated,
    e.g. because the package tool it drives is missing. """


class PackageSpecError(ProviderError):
    """ This error is raised if a Package entry cannot be turned into
    a package tool invocation. """


class PackageCommandError(ProviderError):
    """ This error is raised if the package tool fails. """

    def __init__(self, command, result):
        ProviderError.__init__(self, command, result)
        #: The command that failed, as a list
        self.command = command
        #: The :class:`PkgSync.Utils.ExecutorResult` of the command
        self.result = result

    def __str__(self):
        return "Command '%s' failed: %s" % (" ".join(self.command),
                                            self.result.error)


#: ``ensure`` values that do not name a version
ENSURE_PRESENT = 'present'
ENSURE_LATEST = 'latest'
ENSURE_ABSENT = 'absent'
_ENSURE_ALIASES = {'installed': ENSURE_PRESENT,
                   'purged': ENSURE_ABSENT}

#: Actions returned by :func:`PkgSync.Providers.Provider.get_action`
INSTALL = 'install'
UPDATE = 'update'
UNINSTALL = 'uninstall'


class Provider(object):
    """ The base provider class.  All providers subclass this.

    A provider implements the operations a reconciliation engine needs
    from a package system: :func:`instances`, :func:`query`,
    :func:`install`, :func:`update`, :func:`uninstall`, :func:`latest`
    and :func:`get_latest_version`.  Entries are ``Package`` elements
    (see :mod:`PkgSync.XML`) with these attributes:

    * ``name``: the package name or origin (required)
    * ``origin``: the package origin, which is preferred over ``name``
    * ``version``: an exact version to install
    * ``ensure``: ``present`` (the default), ``latest``, ``absent`` or
      a version
    * ``source``: the repository or file to install from
    """

    #: The name of the provider.  By default this uses
    #: :class:`PkgSync.Utils.ClassName` to ensure that it is the
    #: same as the name of the class.
    name = ClassName()

    #: Options this provider takes
    options = []

    #: Full paths to all executables the provider uses.  When the
    #: provider is instantiated it will check to ensure that all of
    #: these files exist and are executable.
    __execs__ = []

    #: A list of 2-tuples of entries handled by this provider.  Each
    #: 2-tuple should contain ``(<tag>, <type>)``, where ``<type>`` is
    #: the ``type`` attribute of the entry.  If this provider handles
    #: entries with no ``type`` attribute, specify None.
    __handles__ = []

    #: A dict that describes the required attributes for entries
    #: handled by this provider.  The keys are the names of tags and
    #: the values are lists of attribute names.
    __req__ = {}

    def __init__(self, setup, logger=None):
        """
        :param setup: The option set PkgSync was invoked with
        :type setup: argparse.Namespace
        :param logger: Logger that will be used for logging by this
                       provider
        :type logger: logging.Logger
        :raises: :exc:`PkgSync.Providers.ProviderInstantiationError`
        """
        #: The option set PkgSync was invoked with
        self.setup = setup

        #: A :class:`logging.Logger` object that will be used by this
        #: provider for logging
        if logger is None:
            logger = logging.getLogger(self.__class__.__module__)
        self.logger = logger

        #: An :class:`PkgSync.Utils.Executor` object for
        #: running external commands.
        self.cmd = Executor(timeout=getattr(setup, 'command_timeout', None))

        self._check_execs()

    def _check_execs(self):
        """ Check all executables used by this provider to ensure that
        they exist and are executable """
        for filename in self.__execs__:
            try:
                mode = stat.S_IMODE(os.stat(filename)[stat.ST_MODE])
            except OSError as err:
                raise ProviderInstantiationError("%s: Failed to stat %s: %s"
                                                 % (self.name, filename, err))
            if not mode & stat.S_IEXEC:
                raise ProviderInstantiationError("%s: %s not executable" %
                                                 (self.name, filename))

    def handlesEntry(self, entry):
        """ Return True if the entry is handled by this provider.

        :param entry: Determine if this entry is handled.
        :type entry: lxml.etree._Element
        :returns: bool
        """
        return (entry.tag, entry.get('type')) in self.__handles__

    def missing_attrs(self, entry):
        """ Return a list of attributes that were expected on an entry
        (from :attr:`PkgSync.Providers.Provider.__req__`), but not found.

        :param entry: The entry to find missing attributes on
        :type entry: lxml.etree._Element
        :returns: list of strings """
        return [attr for attr in self.__req__.get(entry.tag, [])
                if not entry.get(attr)]

    def primarykey(self, entry):
        """ Return a string that describes the entry uniquely amongst
        all entries in the configuration.

        :param entry: The entry to describe
        :type entry: lxml.etree._Element
        :returns: string """
        return "%s:%s" % (entry.tag, entry.get("name"))

    def canInstall(self, entry):
        """ Test if the entry can be installed: it must be handled by
        this provider and must not be missing any attributes.

        :param entry: The entry to evaluate
        :type entry: lxml.etree._Element
        :returns: bool
        """
        if not self.handlesEntry(entry):
            return False
        missing = self.missing_attrs(entry)
        if missing:
            self.logger.error("%s: Cannot install %s due to missing "
                              "required attribute(s): %s" %
                              (self.name, self.primarykey(entry),
                               ", ".join(missing)))
            return False
        return True

    @staticmethod
    def identifier(entry):
        """ Get the name that identifies the package given by the entry
        to the package tool: the origin if one is given, the name
        otherwise.  ``entry`` may also be a plain string.

        :param entry: The Package entry or package name
        :type entry: lxml.etree._Element or string
        :returns: string """
        if isinstance(entry, str):
            return entry
        return entry.get('origin') or entry.get('name')

    @staticmethod
    def get_ensure(entry):
        """ Get the desired state of the package: one of
        ``present``, ``latest``, ``absent`` or a version string.  A
        ``version`` attribute implies ``ensure`` of that version.

        :param entry: The Package entry
        :type entry: lxml.etree._Element
        :returns: string """
        ensure = entry.get('ensure')
        if not ensure:
            return entry.get('version') or ENSURE_PRESENT
        return _ENSURE_ALIASES.get(ensure, ensure)

    @classmethod
    def desired_version(cls, entry):
        """ Get the exact version requested by the entry, if any.

        :param entry: The Package entry
        :type entry: lxml.etree._Element
        :returns: string or None """
        if entry.get('version'):
            return entry.get('version')
        ensure = cls.get_ensure(entry)
        if ensure in [ENSURE_PRESENT, ENSURE_LATEST, ENSURE_ABSENT]:
            return None
        return ensure

    def get_action(self, entry):
        """ Determine what must be done to bring the package described
        by the entry into its desired state.

        :param entry: The Package entry
        :type entry: lxml.etree._Element
        :returns: tuple of ``(<action>, <current record>)``, where
                  ``<action>`` is one of
                  :attr:`PkgSync.Providers.INSTALL`,
                  :attr:`PkgSync.Providers.UPDATE`,
                  :attr:`PkgSync.Providers.UNINSTALL` or None if
                  nothing needs to be done.  For
                  :attr:`PkgSync.Providers.UPDATE`, ``latest`` of the
                  current record is the upgrade target.
        """
        ensure = self.get_ensure(entry)
        current = self.query(entry)
        if ensure == ENSURE_ABSENT:
            if current is None:
                return (None, current)
            return (UNINSTALL, current)
        if current is None:
            return (INSTALL, current)
        if ensure == ENSURE_LATEST:
            latest = self.get_latest_version(current.origin)
            if latest is None:
                return (None, current)
            current.latest = latest
            return (UPDATE, current)
        if ensure == ENSURE_PRESENT or ensure == current.version:
            return (None, current)
        self.logger.info("%s: %s is at version %s, not %s" %
                         (self.name, self.primarykey(entry),
                          current.version, ensure))
        return (INSTALL, current)

    def sync(self, entry):
        """ Bring the package described by the entry into its desired
        state.

        :param entry: The Package entry
        :type entry: lxml.etree._Element
        :returns: bool - True if the package was changed
        :raises: :exc:`PkgSync.Providers.ProviderError`
        """
        action, current = self.get_action(entry)
        if action is None:
            self.logger.debug("%s: %s is in sync" %
                              (self.name, self.primarykey(entry)))
            return False
        if action == UPDATE:
            return self.update(current.origin, latest=current.latest)
        elif action == UNINSTALL:
            self.uninstall(entry)
        else:
            self.install(entry)
        return True

    def instances(self):
        """ Get all installed packages.

        :returns: list of :class:`PkgSync.Inventory.PackageRecord` """
        raise NotImplementedError

    def query(self, entry):
        """ Get the installed package described by the entry.

        :param entry: The Package entry or package name
        :type entry: lxml.etree._Element or string
        :returns: :class:`PkgSync.Inventory.PackageRecord`, or None if
                  the package is not installed """
        raise NotImplementedError

    def install(self, entry):
        """ Install the package described by the entry.

        :param entry: The Package entry
        :type entry: lxml.etree._Element
        :returns: bool - True if the package was installed
        :raises: :exc:`PkgSync.Providers.ProviderError` """
        raise NotImplementedError

    def update(self, entry, latest=None):
        """ Upgrade the package described by the entry to the latest
        version, if a newer version is available.

        :param entry: The Package entry or origin
        :type entry: lxml.etree._Element or string
        :param latest: The upgrade target, if already known
        :type latest: string
        :returns: bool - True if the package was upgraded
        :raises: :exc:`PkgSync.Providers.ProviderError` """
        raise NotImplementedError

    def uninstall(self, entry):
        """ Remove the package described by the entry.

        :param entry: The Package entry or package name
        :type entry: lxml.etree._Element or string
        :returns: bool - True if the package was removed
        :raises: :exc:`PkgSync.Providers.ProviderError` """
        raise NotImplementedError

    def latest(self, entry):
        """ Get the latest version of the installed package described
        by the entry.

        :param entry: The Package entry or package name
        :type entry: lxml.etree._Element or string
        :returns: string or None """
        raise NotImplementedError

    def get_latest_version(self, origin):
        """ Get the version the package with the given origin would be
        upgraded to.

        :param origin: The exact package origin
        :type origin: string
        :returns: string, or None if no upgrade is available """
        raise NotImplementedError


_AVAILABLE = dict()


def get_available():
    """Get a mapping of available provider classes.  Keys are the
    names that are used in the configuration to select a provider;
    values are the provider classes.  ``default`` is always present."""
    if not _AVAILABLE:
        from PkgSync.Providers.Pkgng import Pkgng
        _AVAILABLE['pkgng'] = Pkgng
        _AVAILABLE['default'] = Pkgng
    return _AVAILABLE
