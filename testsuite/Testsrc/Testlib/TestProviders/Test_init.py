import os
import sys
import argparse
import lxml.etree
from PkgSync.Inventory import PackageRecord
from PkgSync.Providers import *
import PkgSync.Providers

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


class DummyProvider(Provider):
    __handles__ = [('Package', 'dummy'), ('Package', None)]
    __req__ = {'Package': ['name']}


class TestProvider(PkgSyncTestCase):
    target_class = DummyProvider

    def get_obj(self, setup=None):
        if setup is None:
            setup = argparse.Namespace(command_timeout=None)
        execs = self.target_class.__execs__
        self.target_class.__execs__ = []
        rv = self.target_class(setup)
        self.target_class.__execs__ = execs
        return rv

    def test__init(self):
        setup = argparse.Namespace(command_timeout=15)

        @patch.object(self.target_class, "_check_execs")
        def inner(mock_check_execs):
            p = self.get_obj(setup=setup)
            mock_check_execs.assert_called_with()
            self.assertIs(p.setup, setup)
            self.assertEqual(p.cmd.timeout, 15)

        inner()

    def test_name(self):
        self.assertEqual(self.get_obj().name, self.target_class.__name__)

    def test__check_execs(self):
        p = self.get_obj()
        p.__execs__ = ["/usr/sbin/pkg"]

        @patch("os.stat")
        def inner(mock_stat):
            mock_stat.return_value = (33261, 2245040, 64770, 1, 0, 0,
                                      25552, 1360831382, 1352194410,
                                      1354626626)
            p._check_execs()
            mock_stat.assert_called_with("/usr/sbin/pkg")

            # not executable
            mock_stat.reset_mock()
            mock_stat.return_value = (33188, 2245040, 64770, 1, 0, 0,
                                      25552, 1360831382, 1352194410,
                                      1354626626)
            self.assertRaises(ProviderInstantiationError, p._check_execs)

            # non-existent
            mock_stat.reset_mock()
            mock_stat.side_effect = OSError
            self.assertRaises(ProviderInstantiationError, p._check_execs)

        inner()

    def test_handlesEntry(self):
        p = self.get_obj()
        self.assertTrue(p.handlesEntry(lxml.etree.Element("Package",
                                                          name="zsh")))
        self.assertTrue(p.handlesEntry(lxml.etree.Element("Package",
                                                          name="zsh",
                                                          type="dummy")))
        self.assertFalse(p.handlesEntry(lxml.etree.Element("Package",
                                                           name="zsh",
                                                           type="yum")))
        self.assertFalse(p.handlesEntry(lxml.etree.Element("Service",
                                                           name="sshd")))

    def test_canInstall(self):
        p = self.get_obj()
        self.assertTrue(p.canInstall(lxml.etree.Element("Package",
                                                        name="zsh")))
        self.assertFalse(p.canInstall(lxml.etree.Element("Package")))
        self.assertEqual(p.missing_attrs(lxml.etree.Element("Package")),
                         ["name"])
        self.assertFalse(p.canInstall(lxml.etree.Element("Path",
                                                         name="/etc")))

    def test_primarykey(self):
        p = self.get_obj()
        self.assertEqual(
            p.primarykey(lxml.etree.Element("Package", name="ftp/curl")),
            "Package:ftp/curl")

    def test_identifier(self):
        self.assertEqual(Provider.identifier("zsh"), "zsh")
        self.assertEqual(
            Provider.identifier(lxml.etree.Element("Package", name="zsh")),
            "zsh")
        self.assertEqual(
            Provider.identifier(lxml.etree.Element("Package", name="zsh",
                                                   origin="shells/zsh")),
            "shells/zsh")

    def test_get_ensure(self):
        def ensure(**attrs):
            return Provider.get_ensure(lxml.etree.Element("Package",
                                                          name="zsh",
                                                          **attrs))

        self.assertEqual(ensure(), ENSURE_PRESENT)
        self.assertEqual(ensure(ensure="installed"), ENSURE_PRESENT)
        self.assertEqual(ensure(ensure="latest"), ENSURE_LATEST)
        self.assertEqual(ensure(ensure="absent"), ENSURE_ABSENT)
        self.assertEqual(ensure(ensure="purged"), ENSURE_ABSENT)
        self.assertEqual(ensure(ensure="5.0.2_1"), "5.0.2_1")
        self.assertEqual(ensure(version="5.0.2_1"), "5.0.2_1")

    def test_desired_version(self):
        def version(**attrs):
            return Provider.desired_version(
                lxml.etree.Element("Package", name="zsh", **attrs))

        self.assertIsNone(version())
        self.assertIsNone(version(ensure="latest"))
        self.assertIsNone(version(ensure="absent"))
        self.assertEqual(version(ensure="5.0.2_1"), "5.0.2_1")
        self.assertEqual(version(version="5.0.2_1", ensure="present"),
                         "5.0.2_1")

    def test_get_action(self):
        p = self.get_obj()
        p.query = Mock()
        p.get_latest_version = Mock()
        zsh = PackageRecord("zsh", "shells/zsh", "5.0.2_1")

        def action(**attrs):
            return p.get_action(lxml.etree.Element("Package", name="zsh",
                                                   **attrs))

        # not installed
        p.query.return_value = None
        self.assertEqual(action(), (INSTALL, None))
        self.assertEqual(action(ensure="latest"), (INSTALL, None))
        self.assertEqual(action(ensure="5.0.2_1"), (INSTALL, None))
        self.assertEqual(action(ensure="absent"), (None, None))
        self.assertFalse(p.get_latest_version.called)

        # installed
        p.query.return_value = zsh
        self.assertEqual(action(), (None, zsh))
        self.assertEqual(action(ensure="5.0.2_1"), (None, zsh))
        self.assertEqual(action(ensure="5.0.3"), (INSTALL, zsh))
        self.assertEqual(action(ensure="absent"), (UNINSTALL, zsh))
        self.assertFalse(p.get_latest_version.called)

        p.get_latest_version.return_value = None
        self.assertEqual(action(ensure="latest"), (None, zsh))
        p.get_latest_version.assert_called_with("shells/zsh")

        p.get_latest_version.return_value = "5.0.3"
        self.assertEqual(action(ensure="latest"), (UPDATE, zsh))
        self.assertEqual(zsh.latest, "5.0.3")

    def test_sync(self):
        p = self.get_obj()
        p.get_action = Mock()
        p.install = Mock()
        p.update = Mock()
        p.uninstall = Mock()
        entry = lxml.etree.Element("Package", name="ftp/curl",
                                   ensure="latest")
        curl = PackageRecord("curl", "ftp/curl", "7.33.0", "7.33.0_2")

        def reset():
            p.install.reset_mock()
            p.update.reset_mock()
            p.uninstall.reset_mock()

        p.get_action.return_value = (None, curl)
        self.assertFalse(p.sync(entry))
        self.assertFalse(p.install.called)
        self.assertFalse(p.update.called)
        self.assertFalse(p.uninstall.called)

        reset()
        p.get_action.return_value = (UPDATE, curl)
        p.update.return_value = True
        self.assertTrue(p.sync(entry))
        p.update.assert_called_with("ftp/curl", latest="7.33.0_2")
        self.assertFalse(p.install.called)

        reset()
        p.get_action.return_value = (INSTALL, None)
        self.assertTrue(p.sync(entry))
        p.install.assert_called_with(entry)
        self.assertFalse(p.update.called)

        reset()
        p.get_action.return_value = (UNINSTALL, curl)
        self.assertTrue(p.sync(entry))
        p.uninstall.assert_called_with(entry)

    def test_sync_error(self):
        p = self.get_obj()
        p.get_action = Mock(return_value=(INSTALL, None))
        p.install = Mock(side_effect=PackageSpecError("bad source"))
        self.assertRaises(ProviderError, p.sync,
                          lxml.etree.Element("Package", name="zsh"))

    def test_abstract(self):
        p = Provider(argparse.Namespace(command_timeout=None))
        entry = lxml.etree.Element("Package", name="zsh")
        self.assertRaises(NotImplementedError, p.instances)
        self.assertRaises(NotImplementedError, p.query, entry)
        self.assertRaises(NotImplementedError, p.install, entry)
        self.assertRaises(NotImplementedError, p.update, entry)
        self.assertRaises(NotImplementedError, p.uninstall, entry)
        self.assertRaises(NotImplementedError, p.latest, entry)
        self.assertRaises(NotImplementedError, p.get_latest_version,
                          "shells/zsh")


class TestPackageCommandError(PkgSyncTestCase):
    def test_str(self):
        result = PkgSync.Utils.ExecutorResult("", "pkg: No packages "
                                              "available to install", 70)
        err = PackageCommandError(["/usr/sbin/pkg", "install", "-qy",
                                   "bash"], result)
        self.assertIsInstance(err, ProviderError)
        self.assertIs(err.result, result)
        self.assertEqual(str(err),
                         "Command '/usr/sbin/pkg install -qy bash' failed: "
                         "pkg: No packages available to install (rv: 70)")


class TestGetAvailable(PkgSyncTestCase):
    def test_get_available(self):
        from PkgSync.Providers.Pkgng import Pkgng
        available = PkgSync.Providers.get_available()
        self.assertIs(available['pkgng'], Pkgng)
        self.assertIs(available['default'], Pkgng)
