""" Parse the output of ``pkg query`` and ``pkg version`` into
:class:`PkgSync.Inventory.PackageRecord` objects.

Two queries feed an inventory:

* ``pkg query -a '%n %v %o'`` lists every installed package, one per
  line, as ``<name> <version> <origin>``::

      curl 7.33.0 ftp/curl

* ``pkg version -vRo`` compares every installed package against the
  remote repositories, one per line, as ``<origin> <flag> <comment>``::

      ftp/curl                           <   needs updating (remote has 7.33.0_2)
      security/nmap                      =   up-to-date with remote

The flag is ``<`` (an upgrade is available), ``=`` (up to date) or
``>`` (the installed package is newer than the remote one).  ``?``
(not found in any repository) and ``!`` (the comparison failed) carry
no version data, so such packages have no latest version.  Lines that
do not match are skipped, never fatal; each skipped line is recorded
in :attr:`PkgSync.Inventory.Inventory.skipped`.
"""

import logging
import re

LOGGER = logging.getLogger(__name__)

#: ``pkg query`` format string that produces lines parsed by
#: :func:`parse_query_line`
QUERY_FORMAT = '%n %v %o'

_QUERY_RE = re.compile(r'^(?P<name>\S+)\s+(?P<version>\S+)\s+'
                       r'(?P<origin>[^\s/]+/\S+)\s*$')
_VERSION_RE = re.compile(r'^(?P<origin>[^\s/]+/\S+)\s+(?P<flag>[<=>?!])'
                         r'(?:\s+(?P<comment>.*?))?\s*$')
_REMOTE_RE = re.compile(r'\(remote has (?P<version>[^)\s]+)\)')

#: Version flags reported by ``pkg version``
OLDER = '<'
CURRENT = '='
NEWER = '>'
#: Flags that carry no version data: the origin is unknown to the
#: repositories, or the comparison failed
ORPHANED = '?'
FAILED = '!'
NO_DATA = [ORPHANED, FAILED]


class PackageRecord(object):
    """ A single installed package. """

    __slots__ = ['name', 'origin', 'version', 'latest']

    def __init__(self, name, origin, version, latest=None):
        #: The short name of the package, e.g. ``curl``
        self.name = name

        #: The category/name origin of the package, e.g. ``ftp/curl``
        self.origin = origin

        #: The installed version
        self.version = version

        #: The newest version offered by the repositories; the
        #: installed version if no upgrade is offered, or None if
        #: nothing is known about the package
        self.latest = latest

    @property
    def upgradable(self):
        """ True if the repositories offer a different version than
        the installed one """
        return self.latest is not None and self.latest != self.version

    def __eq__(self, other):
        if not isinstance(other, PackageRecord):
            return NotImplemented
        return all(getattr(self, attr) == getattr(other, attr)
                   for attr in self.__slots__)

    def __ne__(self, other):
        rv = self.__eq__(other)
        if rv is NotImplemented:
            return rv
        return not rv

    def __hash__(self):
        return hash((self.name, self.origin, self.version, self.latest))

    def __repr__(self):
        return "%s(name=%r, origin=%r, version=%r, latest=%r)" % (
            self.__class__.__name__, self.name, self.origin, self.version,
            self.latest)


class VersionStatus(object):
    """ One line of ``pkg version`` output. """

    __slots__ = ['origin', 'flag', 'remote']

    def __init__(self, origin, flag, remote=None):
        self.origin = origin
        self.flag = flag
        #: The version the repositories offer, if pkg reported one
        self.remote = remote

    def __repr__(self):
        return "%s(origin=%r, flag=%r, remote=%r)" % (
            self.__class__.__name__, self.origin, self.flag, self.remote)


def parse_query_line(line):
    """ Parse a single line of ``pkg query '%n %v %o'`` output.

    :param line: The line to parse
    :type line: string
    :returns: :class:`PackageRecord` with no ``latest`` version, or
              None if the line does not match
    """
    match = _QUERY_RE.match(line.strip())
    if not match:
        return None
    return PackageRecord(match.group('name'), match.group('origin'),
                         match.group('version'))


def parse_version_line(line):
    """ Parse a single line of ``pkg version -vRo`` output.

    :param line: The line to parse
    :type line: string
    :returns: :class:`VersionStatus`, or None if the line does not
              match.  A ``<`` line without a ``(remote has ...)``
              version does not match.
    """
    match = _VERSION_RE.match(line.strip())
    if not match:
        return None
    remote = None
    comment = match.group('comment') or ''
    rmatch = _REMOTE_RE.search(comment)
    if rmatch:
        remote = rmatch.group('version')
    if match.group('flag') == OLDER and remote is None:
        return None
    return VersionStatus(match.group('origin'), match.group('flag'), remote)


class Inventory(object):
    """ An inventory snapshot: every installed package, joined with
    the version comparison data for it.  Records are keyed by origin,
    and lookups are exact. """

    def __init__(self, query_output='', version_output=''):
        """
        :param query_output: Output of ``pkg query -a '%n %v %o'``
        :type query_output: string
        :param version_output: Output of ``pkg version -vRo``
        :type version_output: string
        """
        #: A list of ``(source, lineno, line)`` tuples describing
        #: lines that could not be parsed.  ``source`` is either
        #: ``query`` or ``version``.
        self.skipped = []

        #: A dict of origin -> :class:`VersionStatus`
        self.versions = dict()
        for lineno, line in self._lines(version_output):
            status = parse_version_line(line)
            if status is None:
                self._skip('version', lineno, line)
            else:
                self.versions[status.origin] = status

        #: A dict of origin -> :class:`PackageRecord`
        self.packages = dict()
        for lineno, line in self._lines(query_output):
            record = parse_query_line(line)
            if record is None:
                self._skip('query', lineno, line)
                continue
            if record.origin in self.packages:
                LOGGER.warning("Duplicate origin %s in package list, "
                               "keeping %s" %
                               (record.origin,
                                self.packages[record.origin].name))
                continue
            record.latest = self._latest(record)
            self.packages[record.origin] = record

    @staticmethod
    def _lines(output):
        """ Iterate over the non-blank lines of the output, with line
        numbers """
        for lineno, line in enumerate((output or '').splitlines(), 1):
            if line.strip():
                yield lineno, line

    def _skip(self, source, lineno, line):
        """ Record an unparseable line """
        LOGGER.debug("Skipping unparseable pkg %s output on line %d: %s" %
                     (source, lineno, line))
        self.skipped.append((source, lineno, line))

    def _latest(self, record):
        """ Determine the latest version of the given record """
        status = self.versions.get(record.origin)
        if status is None or status.flag in NO_DATA:
            return None
        if status.flag == OLDER:
            return status.remote
        return record.version

    @property
    def records(self):
        """ A list of all :class:`PackageRecord` objects, in the order
        pkg listed them """
        return list(self.packages.values())

    def get(self, origin):
        """ Get the record for the given origin.

        :param origin: The exact origin, e.g. ``shells/bash``
        :type origin: string
        :returns: :class:`PackageRecord` or None
        """
        return self.packages.get(origin)

    def find(self, name):
        """ Find a record by origin or, failing that, by short name.

        :param name: An origin or short package name
        :type name: string
        :returns: :class:`PackageRecord` or None
        """
        if '/' in name:
            return self.get(name)
        for record in self.packages.values():
            if record.name == name:
                return record
        return None

    def latest_version(self, origin):
        """ Get the version that ``origin`` would be upgraded to.

        :param origin: The exact origin, e.g. ``shells/bash``
        :type origin: string
        :returns: string, or None if no upgrade is available or
                  nothing is known about the origin
        """
        status = self.versions.get(origin)
        if status is not None and status.flag == OLDER:
            return status.remote
        return None

    def __len__(self):
        return len(self.packages)

    def __iter__(self):
        return iter(self.records)

    def __contains__(self, origin):
        return origin in self.packages
