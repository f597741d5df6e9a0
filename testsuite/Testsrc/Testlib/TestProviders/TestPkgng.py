import os
import sys
import argparse
import lxml.etree
from PkgSync.Inventory import PackageRecord
from PkgSync.Providers import ProviderError, PackageCommandError, \
    PackageSpecError, ProviderInstantiationError, UPDATE
from PkgSync.Providers.Pkgng import *
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
from Test_init import TestProvider

PKG = "/usr/local/sbin/pkg"


class TestRepoTagFromUrn(PkgSyncTestCase):
    def test_repo_tag_from_urn(self):
        self.assertEqual(repo_tag_from_urn("urn:freebsd:repo:FreeBSD"),
                         "FreeBSD")
        self.assertEqual(repo_tag_from_urn("urn:freebsd:repo:my-repo"),
                         "my-repo")
        self.assertRaises(PackageSpecError, repo_tag_from_urn,
                          "urn:freebsd:repo:")
        self.assertRaises(PackageSpecError, repo_tag_from_urn,
                          "urn:openbsd:repo:OpenBSD")


class TestPkgng(TestProvider):
    target_class = Pkgng

    def get_obj(self, setup=None):
        if setup is None:
            setup = argparse.Namespace(command_timeout=None, pkg_path=PKG,
                                       pkg_repository=None)

        @patch.object(self.target_class, "_check_execs")
        def inner(mock_check_execs):
            return TestProvider.get_obj(self, setup=setup)

        rv = inner()
        rv.cmd = MockExecutor()
        rv.cmd.results = {
            ('query', '-a', '%n %v %o'): (fixture("pkg.info"), '', 0),
            ('version', '-vRo'): (fixture("pkg.version"), '', 0),
            ('query', '%n %v %o', 'bash'): (fixture("pkg.query_absent"),
                                            '', 1),
            ('query', '%n %v %o', 'zsh'): (fixture("pkg.query"), '', 0),
            ('query', '%n %v %o', 'shells/zsh'): (fixture("pkg.query"),
                                                  '', 0),
            ('query', '%n %v %o', 'curl'): ("curl 7.33.0 ftp/curl\n",
                                            '', 0),
            ('query', '%n %v %o', 'ftp/curl'): ("curl 7.33.0 ftp/curl\n",
                                                '', 0)}
        return rv

    def test__init(self):
        setup = argparse.Namespace(command_timeout=15, pkg_path=PKG)

        @patch.object(self.target_class, "_check_execs")
        def inner(mock_check_execs):
            p = TestProvider.get_obj(self, setup=setup)
            mock_check_execs.assert_called_with()
            self.assertEqual(p.pkg_path, PKG)
            self.assertEqual(p.__execs__, [PKG])
            self.assertEqual(p.cmd.timeout, 15)

        inner()

    @patch.object(Pkgng, "_check_execs")
    def test__init_default_path(self, mock_check_execs):
        p = Pkgng(argparse.Namespace(command_timeout=None))
        self.assertEqual(p.pkg_path, "/usr/sbin/pkg")
        self.assertEqual(p.name, "Pkgng")

    def test__init_missing_pkg(self):
        setup = argparse.Namespace(command_timeout=None,
                                   pkg_path="/nonexistent/sbin/pkg")
        self.assertRaises(ProviderInstantiationError, Pkgng, setup)

    def test_abstract(self):
        for meth in ["instances", "query", "install", "update",
                     "uninstall", "latest", "get_latest_version"]:
            self.assertIsNot(getattr(Pkgng, meth),
                             getattr(PkgSync.Providers.Provider, meth),
                             meth)

    def test_handlesEntry(self):
        p = self.get_obj()
        for attrs in [dict(), dict(type="pkgng")]:
            self.assertTrue(p.handlesEntry(
                lxml.etree.Element("Package", name="zsh", **attrs)))
        self.assertFalse(p.handlesEntry(
            lxml.etree.Element("Package", name="zsh", type="yum")))
        self.assertFalse(p.handlesEntry(
            lxml.etree.Element("Service", name="sshd")))

    def test_pkg(self):
        p = self.get_obj()
        p.cmd.stdout = "output"
        self.assertEqual(p.pkg(["info"]), "output")
        self.assertEqual(p.cmd.commands, [[PKG, "info"]])

        p.cmd.retval = 1
        p.cmd.stderr = "pkg: error"
        self.assertRaises(PackageCommandError, p.pkg, ["info"])

    def test_instances_empty(self):
        p = self.get_obj()
        p.cmd.results = dict()
        self.assertEqual(p.instances(), [])

    def test_instances(self):
        p = self.get_obj()
        instances = p.instances()
        self.assertCountEqual([i.name for i in instances],
                              ["ca_root_nss", "curl", "nmap", "pkg",
                               "gnupg", "mcollective", "zsh", "tac_plus"])
        self.assertIn([PKG, "query", "-a", "%n %v %o"], p.cmd.commands)
        self.assertIn([PKG, "version", "-vRo"], p.cmd.commands)

    def test_instances_latest(self):
        instances = dict((i.origin, i) for i in self.get_obj().instances())
        nmap = instances['security/nmap']
        self.assertEqual(nmap.version, nmap.latest)
        self.assertEqual(instances['shells/zsh'].version, "5.0.2_1")
        self.assertEqual(instances['ftp/curl'].latest, "7.33.0_2")

    def test_instances_failure(self):
        p = self.get_obj()
        p.cmd.results[('version', '-vRo')] = ('', 'pkg: repository '
                                              'unavailable', 3)
        self.assertRaises(PackageCommandError, p.instances)

    def test_inventory_skipped(self):
        p = self.get_obj()
        inventory = p.inventory()
        self.assertEqual(len(inventory), 8)
        # the orphaned package has no version data, but is not garbage
        self.assertEqual(inventory.skipped, [])

        p.cmd.results[('version', '-vRo')] = (
            fixture("pkg.version") + "garbage\n", '', 0)
        inventory = p.inventory()
        self.assertEqual(inventory.skipped, [("version", 10, "garbage")])

    def test_query(self):
        p = self.get_obj()
        self.assertEqual(p.query(lxml.etree.Element("Package", name="zsh")),
                         PackageRecord("zsh", "shells/zsh", "5.0.2_1"))
        self.assertEqual(p.query("curl").origin, "ftp/curl")
        self.assertIn([PKG, "query", "%n %v %o", "curl"], p.cmd.commands)

        # origin is preferred over name
        p.cmd.calls = []
        p.query(lxml.etree.Element("Package", name="zsh",
                                   origin="shells/zsh"))
        self.assertEqual(p.cmd.commands,
                         [[PKG, "query", "%n %v %o", "shells/zsh"]])

    def test_query_absent(self):
        p = self.get_obj()
        self.assertIsNone(p.query(lxml.etree.Element("Package",
                                                     name="bash")))

        # unparseable output is treated as absent, too
        p.cmd.results[('query', '%n %v %o', 'bash')] = \
            (fixture("pkg.query_absent"), '', 0)
        self.assertIsNone(p.query("bash"))

    def test_latest(self):
        p = self.get_obj()
        self.assertIsNone(p.latest(lxml.etree.Element("Package",
                                                      name="bash")))
        self.assertEqual(
            p.latest(lxml.etree.Element("Package", name="ftp/curl")),
            "7.33.0_2")
        self.assertEqual(p.latest("curl"), "7.33.0_2")
        self.assertEqual(p.latest("security/nmap"), "6.40")

    def test_get_latest_version(self):
        p = self.get_obj()
        self.assertIsNone(p.get_latest_version("security/nmap"))
        self.assertEqual(p.get_latest_version("shells/bash-completion"),
                         "2.1_3")
        self.assertIsNone(p.get_latest_version("shells/bash"))
        self.assertEqual(p.cmd.commands[-1], [PKG, "version", "-vRo"])

    def _install(self, p, **attrs):
        """ Install a Package entry, and return the arguments of the
        last pkg command """
        p.install(lxml.etree.Element("Package", **attrs))
        return p.cmd.commands[-1][1:]

    def test_install(self):
        p = self.get_obj()
        self.assertEqual(self._install(p, name="shells/bash"),
                         ["install", "-qy", "shells/bash"])
        self.assertEqual(self._install(p, name="bash", origin="shells/bash"),
                         ["install", "-qy", "shells/bash"])

    def test_install_version(self):
        p = self.get_obj()
        p.cmd.results[('query', '%n %v %o', 'curl')] = ('', '', 1)
        p.cmd.results[('query', '%n %v %o', 'ftp/curl')] = ('', '', 1)
        args = self._install(p, name="ftp/curl", ensure="7.33.1")
        self.assertIn("curl-7.33.1", args)
        args = self._install(p, name="curl", ensure="7.33.1")
        self.assertIn("curl-7.33.1", args)
        args = self._install(p, name="curl", version="7.33.1")
        self.assertEqual(args, ["install", "-qy", "curl-7.33.1"])

    def test_install_repo(self):
        p = self.get_obj()
        args = self._install(p, name="shells/bash",
                             source="urn:freebsd:repo:FreeBSD")
        self.assertIn("FreeBSD", args)
        self.assertEqual(args,
                         ["install", "-qy", "-r", "FreeBSD", "shells/bash"])

    def test_install_default_repo(self):
        p = self.get_obj()
        p.setup.pkg_repository = "local"
        self.assertEqual(self._install(p, name="shells/bash"),
                         ["install", "-qy", "-r", "local", "shells/bash"])

        # an explicit source wins
        self.assertEqual(
            self._install(p, name="shells/bash",
                          source="urn:freebsd:repo:FreeBSD"),
            ["install", "-qy", "-r", "FreeBSD", "shells/bash"])

    def test_install_bad_urn(self):
        p = self.get_obj()
        self.assertRaises(PackageSpecError, p.install,
                          lxml.etree.Element("Package", name="bash",
                                             source="urn:freebsd:FreeBSD"))
        self.assertEqual(p.cmd.calls, [])

    def test_install_file(self):
        p = self.get_obj()
        self.assertEqual(
            self._install(p, name="bash",
                          source="/var/cache/pkg/bash-4.2.45.txz"),
            ["add", "-q", "/var/cache/pkg/bash-4.2.45.txz"])
        self.assertEqual(
            self._install(p, name="bash",
                          source="http://pkg.example.com/bash-4.2.45.txz"),
            ["add", "-q", "http://pkg.example.com/bash-4.2.45.txz"])

    def test_install_reinstall(self):
        p = self.get_obj()
        self.assertEqual(self._install(p, name="zsh", ensure="5.0.3"),
                         ["install", "-f", "-qy", "zsh-5.0.3"])

    def test_install_failure(self):
        p = self.get_obj()
        p.cmd.results[('install',)] = ('', 'pkg: No packages available to '
                                       'install matching bash', 70)
        self.assertRaises(PackageCommandError, p.install,
                          lxml.etree.Element("Package", name="bash"))

    def test_update(self):
        p = self.get_obj()
        self.assertTrue(p.update("ftp/curl"))
        self.assertEqual(p.cmd.commands[-1],
                         [PKG, "upgrade", "-qy", "ftp/curl"])

        # short names are resolved to origins
        p.cmd.calls = []
        self.assertTrue(p.update(lxml.etree.Element("Package", name="curl")))
        self.assertEqual(p.cmd.commands[-1],
                         [PKG, "upgrade", "-qy", "ftp/curl"])

    def test_update_current(self):
        p = self.get_obj()
        self.assertFalse(p.update("security/nmap"))
        self.assertNotIn("upgrade", [c[1] for c in p.cmd.commands])

        self.assertFalse(p.update("shells/bash"))
        self.assertNotIn("upgrade", [c[1] for c in p.cmd.commands])

    def test_update_failure(self):
        p = self.get_obj()
        p.cmd.results[('upgrade',)] = ('', 'pkg: cannot upgrade', 1)
        self.assertRaises(ProviderError, p.update, "ftp/curl")

    def test_ensure_latest_calls_update(self):
        p = self.get_obj()
        p.update = Mock()
        p.update.return_value = True
        entry = lxml.etree.Element("Package", name="ftp/curl",
                                   ensure="latest")
        self.assertEqual(p.get_action(entry)[0], UPDATE)
        self.assertTrue(p.sync(entry))
        p.update.assert_called_with("ftp/curl", latest="7.33.0_2")

    def test_ensure_latest_single_version_query(self):
        p = self.get_obj()
        self.assertTrue(p.sync(lxml.etree.Element("Package", name="ftp/curl",
                                                  ensure="latest")))
        self.assertEqual(p.cmd.commands.count([PKG, "version", "-vRo"]), 1)
        self.assertEqual(p.cmd.commands[-1],
                         [PKG, "upgrade", "-qy", "ftp/curl"])

    def test_update_known_target(self):
        p = self.get_obj()
        self.assertTrue(p.update("ftp/curl", latest="7.33.0_2"))
        self.assertEqual(p.cmd.commands,
                         [[PKG, "upgrade", "-qy", "ftp/curl"]])

    def test_ensure_latest_up_to_date(self):
        p = self.get_obj()
        p.cmd.results[('query', '%n %v %o', 'zsh')] = \
            (fixture("pkg.query"), '', 0)
        p.update = Mock()
        p.install = Mock()
        self.assertFalse(p.sync(lxml.etree.Element("Package", name="zsh",
                                                   ensure="latest")))
        self.assertFalse(p.update.called)
        self.assertFalse(p.install.called)

    def test_uninstall(self):
        p = self.get_obj()
        self.assertTrue(p.uninstall(lxml.etree.Element("Package",
                                                       name="zsh")))
        self.assertEqual(p.cmd.commands[-1], [PKG, "delete", "-qy", "zsh"])

        p.cmd.results[('delete',)] = ('', 'pkg: zsh is locked', 1)
        self.assertRaises(PackageCommandError, p.uninstall, "zsh")
