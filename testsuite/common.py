""" In order to make testing easier and more consistent, we provide a
number of convenience functions, variables, and classes.  To import
this module, first add the parent testsuite directories to
``sys.path`` and then simply do:

.. code-block:: python

    from common import *
"""

import os
import sys
import lxml.etree
import PkgSync.Options
import PkgSync.Utils
from mock import patch, MagicMock, Mock, call
from unittest import TestCase

#: The directory holding captured pkg output used by the tests
fixtures = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                        "fixtures")


def fixture(name):
    """ Get the contents of a fixture file.

    :param name: The name of the file in :attr:`fixtures`
    :type name: str
    :returns: str """
    with open(os.path.join(fixtures, name)) as fixture_file:
        return fixture_file.read()


#: A function to set a default config option if it's not already set
def set_setup_default(option, value=None):
    if not hasattr(PkgSync.Options.setup, option):
        setattr(PkgSync.Options.setup, option, value)

# these two variables do slightly different things for unit tests; the
# former skips config file reading, while the latter sends option
# debug logging to stdout so it can be captured. These are separate
# because we want to enable config file reading in order to test
# option parsing.
PkgSync.Options.Parser.unit_test = True
PkgSync.Options.Options.unit_test = True

set_setup_default("command_timeout")
set_setup_default("dryrun", False)


class MockExecutor(object):
    """mock object for :class:`PkgSync.Utils.Executor` objects.

    Results can be given per command: ``results`` maps a tuple of
    leading arguments (after the executable) to a ``(stdout, stderr,
    retval)`` tuple.  The longest matching prefix wins; commands that
    match nothing get :attr:`stdout`, :attr:`stderr` and
    :attr:`retval`."""
    def __init__(self, timeout=None):
        self.timeout = timeout

        # variables that can be set to control the result returned
        self.stdout = ''
        self.stderr = ''
        self.retval = 0
        self.results = dict()

        # variables that record how run() was called
        self.calls = []

    @property
    def commands(self):
        """ The commands that were run, as lists """
        return [c['command'] for c in self.calls]

    def run(self, command, timeout=None):
        self.calls.append({"command": command,
                           "timeout": timeout or self.timeout})

        args = tuple(command[1:])
        for length in range(len(args), 0, -1):
            if args[:length] in self.results:
                return PkgSync.Utils.ExecutorResult(
                    *self.results[args[:length]])
        return PkgSync.Utils.ExecutorResult(self.stdout, self.stderr,
                                            self.retval)


class PkgSyncTestCase(TestCase):
    """ Base TestCase class that inherits from
    :class:`unittest.TestCase`.  This class adds
    :func:`assertXMLEqual`, a useful assertion method given all the
    XML used by PkgSync.
    """
    capture_stderr = True

    @classmethod
    def setUpClass(cls):
        cls._stderr = sys.stderr
        if cls.capture_stderr:
            sys.stderr = sys.stdout

    @classmethod
    def tearDownClass(cls):
        if cls.capture_stderr:
            sys.stderr = cls._stderr

    def assertXMLEqual(self, el1, el2, msg=None):
        """ Test that the two XML trees given are equal. """
        if msg is None:
            msg = "XML trees are not equal: %s"
        else:
            msg += ": %s"
        msg += "\n%s"
        fullmsg = "First:  %s" % lxml.etree.tostring(el1) + \
            "\nSecond: %s" % lxml.etree.tostring(el2)

        self.assertEqual(el1.tag, el2.tag, msg=msg % ("Tags differ", fullmsg))
        if el1.text is not None and el2.text is not None:
            self.assertEqual(el1.text.strip(), el2.text.strip(),
                             msg=msg % ("Text content differs", fullmsg))
        else:
            self.assertEqual(el1.text, el2.text,
                             msg=msg % ("Text content differs", fullmsg))
        self.assertCountEqual(el1.attrib.items(), el2.attrib.items(),
                              msg=msg % ("Attributes differ", fullmsg))
        self.assertEqual(len(el1), len(el2),
                         msg=msg % ("Different numbers of children", fullmsg))
        for child1, child2 in zip(el1, el2):
            self.assertXMLEqual(child1, child2)
