import io
import os
import sys
import argparse
import tempfile
import PkgSync.Options
from PkgSync.CLI import *
from PkgSync.Providers.Pkgng import Pkgng

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

PKG = "/usr/local/sbin/pkg"


class TestPrintTable(PkgSyncTestCase):
    def test_print_table(self):
        old_stdout = sys.stdout
        sys.stdout = io.StringIO()
        try:
            print_table([("Origin", "Version"), ("ftp/curl", "7.33.0")])
            output = sys.stdout.getvalue().splitlines()
        finally:
            sys.stdout = old_stdout
        self.assertEqual(output, ["========== =========",
                                  "Origin     Version  ",
                                  "========== =========",
                                  "ftp/curl   7.33.0   "])


class TestCLI(PkgSyncTestCase):
    def get_provider(self):
        @patch.object(Pkgng, "_check_execs")
        def inner(mock_check_execs):
            return Pkgng(argparse.Namespace(command_timeout=None,
                                            pkg_path=PKG,
                                            pkg_repository=None))

        provider = inner()
        provider.cmd = MockExecutor()
        provider.cmd.results = {
            ('query', '-a', '%n %v %o'): (fixture("pkg.info"), '', 0),
            ('version', '-vRo'): (fixture("pkg.version"), '', 0),
            ('query', '%n %v %o', 'bash'): (fixture("pkg.query_absent"),
                                            '', 1),
            ('query', '%n %v %o', 'shells/bash'): ('', '', 1),
            ('query', '%n %v %o', 'curl'): ('', '', 1),
            ('query', '%n %v %o', 'zsh'): (fixture("pkg.query"), '', 0),
            ('query', '%n %v %o', 'shells/zsh'): (fixture("pkg.query"),
                                                  '', 0),
            ('query', '%n %v %o', 'ftp/curl'): ("curl 7.33.0 ftp/curl\n",
                                                '', 0)}
        return provider

    def run_cli(self, argv, provider=None):
        """ Run pkgsync with the given arguments.  Returns a tuple of
        (<return value>, <output lines>, <pkg commands>) """
        if provider is None:
            provider = self.get_provider()
        cli = CLI(argv)
        PkgSync.Options.setup.provider = Mock(return_value=provider)
        old_stdout = sys.stdout
        sys.stdout = io.StringIO()
        try:
            rv = cli.run()
            output = [l for l in sys.stdout.getvalue().splitlines()
                      if not l.startswith("DEBUG: ")]
        finally:
            sys.stdout = old_stdout
        return (rv, output, [c[1:] for c in provider.cmd.commands])

    def test_list(self):
        rv, output, commands = self.run_cli(["list"])
        self.assertIn(rv, [0, None])
        self.assertEqual(output[1].split(),
                         ["Origin", "Name", "Version", "Latest"])
        rows = dict((l.split()[0], l.split()) for l in output[3:])
        self.assertEqual(rows["ftp/curl"],
                         ["ftp/curl", "curl", "7.33.0", "7.33.0_2"])
        self.assertEqual(rows["security/nmap"],
                         ["security/nmap", "nmap", "6.40", "6.40"])
        self.assertEqual(rows["sysutils/mcollective"],
                         ["sysutils/mcollective", "mcollective", "2.2.3",
                          "-"])
        self.assertEqual(len(rows), 8)

    def test_list_skipped(self):
        provider = self.get_provider()
        provider.cmd.results[('version', '-vRo')] = (
            fixture("pkg.version") + "garbage\n", '', 0)
        rv, output, commands = self.run_cli(["list"], provider=provider)
        self.assertEqual(output[-1],
                         "Skipped 1 unparseable line(s) of pkg output")

    def test_query(self):
        rv, output, commands = self.run_cli(["query", "zsh"])
        self.assertIn(rv, [0, None])
        self.assertEqual(output, ["shells/zsh zsh 5.0.2_1"])
        self.assertEqual(commands, [["query", "%n %v %o", "zsh"]])

    def test_query_absent(self):
        rv, output, commands = self.run_cli(["query", "bash"])
        self.assertEqual(rv, 1)
        self.assertEqual(output, ["bash is not installed"])

    def test_latest(self):
        rv, output, commands = self.run_cli(["latest",
                                             "shells/bash-completion"])
        self.assertIn(rv, [0, None])
        self.assertEqual(output, ["2.1_3"])

        rv, output, commands = self.run_cli(["latest", "security/nmap"])
        self.assertIn(rv, [0, None])
        self.assertEqual(output, [])

    def test_install(self):
        rv, output, commands = self.run_cli(
            ["install", "curl", "--version", "7.33.1",
             "--source", "urn:freebsd:repo:FreeBSD"])
        self.assertIn(rv, [0, None])
        self.assertEqual(commands[-1],
                         ["install", "-qy", "-r", "FreeBSD", "curl-7.33.1"])

    def test_install_dryrun(self):
        rv, output, commands = self.run_cli(["-n", "install", "shells/bash"])
        self.assertIn(rv, [0, None])
        self.assertEqual(output, ["Would install Package:shells/bash"])
        self.assertEqual(commands, [])

    def test_install_failure(self):
        provider = self.get_provider()
        provider.cmd.results[('install',)] = \
            ('', 'pkg: No packages available to install matching bash', 70)
        rv, output, commands = self.run_cli(["install", "shells/bash"],
                                            provider=provider)
        self.assertEqual(rv, 1)

    def test_install_bad_source(self):
        rv, output, commands = self.run_cli(
            ["install", "shells/bash", "--source", "urn:freebsd:FreeBSD"])
        self.assertEqual(rv, 1)
        self.assertEqual(commands, [])

    def test_update(self):
        rv, output, commands = self.run_cli(["update", "ftp/curl"])
        self.assertIn(rv, [0, None])
        self.assertEqual(commands[-1], ["upgrade", "-qy", "ftp/curl"])

        rv, output, commands = self.run_cli(["update", "security/nmap"])
        self.assertIn(rv, [0, None])
        self.assertEqual(output, ["security/nmap is up to date"])
        self.assertNotIn("upgrade", [c[0] for c in commands])

    def test_update_dryrun(self):
        rv, output, commands = self.run_cli(["--dry-run", "update",
                                             "ftp/curl"])
        self.assertEqual(output, ["Would upgrade ftp/curl to 7.33.0_2"])
        self.assertNotIn("upgrade", [c[0] for c in commands])

    def test_remove(self):
        rv, output, commands = self.run_cli(["remove", "zsh"])
        self.assertIn(rv, [0, None])
        self.assertEqual(commands, [["delete", "-qy", "zsh"]])

        rv, output, commands = self.run_cli(["delete", "zsh"])
        self.assertEqual(commands, [["delete", "-qy", "zsh"]])

    def _write_config(self, data):
        fd, name = tempfile.mkstemp(suffix=".xml")
        config = os.fdopen(fd, 'w')
        config.write(data)
        config.close()
        return name

    def test_apply(self):
        name = self._write_config(
            "<Configuration><Bundle name='shells'>"
            "<Package name='shells/zsh' ensure='latest'/>"
            "<Package name='ftp/curl' ensure='latest'/>"
            "<Package name='shells/bash'/>"
            "</Bundle></Configuration>")
        try:
            rv, output, commands = self.run_cli(["apply", name])
        finally:
            os.unlink(name)
        self.assertEqual(rv, 0)
        self.assertIn(["upgrade", "-qy", "ftp/curl"], commands)
        self.assertIn(["install", "-qy", "shells/bash"], commands)
        self.assertNotIn(["upgrade", "-qy", "shells/zsh"], commands)

    def test_apply_failure(self):
        provider = self.get_provider()
        provider.cmd.results[('install',)] = ('', 'pkg: failed', 1)
        name = self._write_config(
            "<Configuration><Bundle name='shells'>"
            "<Package name='shells/bash'/>"
            "<Package name='ftp/curl' ensure='latest'/>"
            "</Bundle></Configuration>")
        try:
            rv, output, commands = self.run_cli(["apply", name],
                                                provider=provider)
        finally:
            os.unlink(name)
        self.assertEqual(rv, 1)
        self.assertIn(["upgrade", "-qy", "ftp/curl"], commands)

    def test_apply_missing_file(self):
        self.assertRaises(SystemExit, self.run_cli,
                          ["apply", "/nonexistent/pkgsync.xml"])
