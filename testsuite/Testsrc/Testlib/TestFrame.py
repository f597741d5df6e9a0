import os
import sys
import argparse
import lxml.etree
from PkgSync.Frame import *
from PkgSync.Providers import Provider, PackageCommandError, \
    PackageSpecError, INSTALL, UPDATE, UNINSTALL
from PkgSync.XML import XML

# add all parent testsuite directories to sys.path to allow (most)
# relative imports
path = os.path.dirname(__file__)
while path != "/":
    if os.path.basename(path).lower().startswith("test"):
        sys.path.append(path)
    if os.path.basename(path) == "testsuite":
        break
    path = os.path.dirname(path)
from common import *

CONFIG = """
<Configuration>
  <Bundle name="shells">
    <Package name="shells/zsh" ensure="latest"/>
    <Package name="shells/bash"/>
    <Path name="/etc/shells"/>
  </Bundle>
  <Bundle name="net">
    <Package name="ftp/curl" version="7.33.1"
             source="urn:freebsd:repo:FreeBSD"/>
    <Package name="security/nmap" ensure="absent"/>
  </Bundle>
</Configuration>
"""


class TestFrame(PkgSyncTestCase):
    target_class = Frame

    def get_obj(self, setup=None, config=None, provider=None):
        if setup is None:
            setup = argparse.Namespace(dryrun=False, only_bundles=[])
        if config is None:
            config = XML(CONFIG)
        if provider is None:
            provider = Mock()
            provider.canInstall.side_effect = \
                lambda e: e.tag == "Package"
            provider.primarykey.side_effect = \
                lambda e: "%s:%s" % (e.tag, e.get("name"))
            provider.sync.return_value = False
        return self.target_class(setup, config, provider=provider)

    def test__init(self):
        provider = Mock()
        setup = argparse.Namespace(dryrun=False, provider=Mock())
        setup.provider.return_value = provider
        frame = self.target_class(setup, XML(CONFIG))
        setup.provider.assert_called_with(setup)
        self.assertIs(frame.provider, provider)
        self.assertEqual(frame.states, dict())
        self.assertEqual(frame.modified, [])

    def test_entries(self):
        frame = self.get_obj()
        self.assertEqual([e.get("name") for e in frame.entries()],
                         ["shells/zsh", "shells/bash", "ftp/curl",
                          "security/nmap"])

    def test_entries_only_bundles(self):
        frame = self.get_obj(setup=argparse.Namespace(dryrun=False,
                                                      only_bundles=["net"]))
        self.assertEqual([e.get("name") for e in frame.entries()],
                         ["ftp/curl", "security/nmap"])

    def test_run(self):
        frame = self.get_obj()
        frame.provider.sync.side_effect = \
            lambda e: e.get("name") == "shells/bash"
        self.assertTrue(frame.run())
        self.assertEqual(frame.provider.sync.call_count, 4)
        self.assertEqual([e.get("name") for e in frame.modified],
                         ["shells/bash"])
        self.assertEqual(len(frame.states), 4)
        self.assertTrue(all(frame.states.values()))
        self.assertFalse(frame.provider.get_action.called)

    def test_run_failure(self):
        frame = self.get_obj()

        def sync(entry):
            if entry.get("name") == "ftp/curl":
                raise PackageCommandError(
                    ["/usr/sbin/pkg", "install", "-qy", "-r", "FreeBSD",
                     "curl-7.33.1"],
                    PkgSync.Utils.ExecutorResult("", "pkg: failed", 1))
            elif entry.get("name") == "shells/bash":
                raise PackageSpecError("bad entry")
            return True

        frame.provider.sync.side_effect = sync
        self.assertFalse(frame.run())
        # other entries continue after a failure
        self.assertEqual(frame.provider.sync.call_count, 4)
        states = dict((e.get("name"), s) for e, s in frame.states.items())
        self.assertEqual(states, {"shells/zsh": True,
                                  "shells/bash": False,
                                  "ftp/curl": False,
                                  "security/nmap": True})
        self.assertEqual([e.get("name") for e in frame.modified],
                         ["shells/zsh", "security/nmap"])

    def test_run_dryrun(self):
        frame = self.get_obj(setup=argparse.Namespace(dryrun=True,
                                                      only_bundles=None))
        actions = {"shells/zsh": UPDATE,
                   "shells/bash": INSTALL,
                   "ftp/curl": None,
                   "security/nmap": UNINSTALL}
        frame.provider.get_action.side_effect = \
            lambda e: (actions[e.get("name")], None)
        self.assertFalse(frame.run())
        self.assertFalse(frame.provider.sync.called)
        self.assertEqual(frame.modified, [])
        states = dict((e.get("name"), s) for e, s in frame.states.items())
        self.assertEqual(states, {"shells/zsh": False,
                                  "shells/bash": False,
                                  "ftp/curl": True,
                                  "security/nmap": False})

    def test_run_empty(self):
        frame = self.get_obj(config=XML("<Configuration/>"))
        self.assertTrue(frame.run())
        self.assertEqual(frame.states, dict())

    def test_run_with_provider(self):
        """ apply a configuration with a real provider """
        provider = Provider(argparse.Namespace(command_timeout=None))
        provider.__handles__ = [('Package', None)]
        provider.get_action = Mock(return_value=(None, None))
        frame = self.get_obj(provider=provider)
        self.assertTrue(frame.run())
        self.assertEqual(len(frame.states), 4)
        self.assertEqual(frame.modified, [])
