""" :mod:`PkgSync.Options` provides a number of useful types for use
with the :class:`PkgSync.Options.Option` constructor. """

import os


def path(value):
    """ A generic path.  ``~`` will be expanded with
    :func:`os.path.expanduser` and the absolute resulting path will be
    used.  This does *not* ensure that the path exists. """
    return os.path.abspath(os.path.expanduser(value))


def colon_list(value):
    """ Split a colon-delimited list.  Whitespace is not allowed
    around the colons. """
    if value == '':
        return []
    return value.split(':')


def timeout(value):
    """ Convert the value into a float or None. """
    if value is None:
        return value
    rv = float(value)  # pass ValueError up the stack
    if rv <= 0:
        return None
    return rv


def provider(value):
    """ Look up a package provider class by name in
    :func:`PkgSync.Providers.get_available`. """
    from PkgSync.Providers import get_available
    available = get_available()
    if value not in available:
        raise ValueError("Unknown provider %s; available: %s" %
                         (value, ", ".join(sorted(available))))
    return available[value]
