"""test builtin option types."""

import argparse
import os

from PkgSync.Options import Option, Types, Parser
from TestOptions import PkgSyncTestCase


class TestOptionTypes(PkgSyncTestCase):
    """test builtin option types."""
    def setUp(self):
        self.options = None

    def _test_options(self, options):
        """helper to test option types.

        this expects that self.options is set to a single option named
        test. The value of that option is returned.
        """
        result = argparse.Namespace()
        parser = Parser(components=[self], namespace=result)
        parser.parse(options)
        return result.test

    def test_colon_list(self):
        """parse colon-list values."""
        self.options = [Option("--test", type=Types.colon_list)]
        self.assertCountEqual(self._test_options(["--test", "one:two three"]),
                              ["one", "two three"])
        self.assertEqual(Types.colon_list(""), [])

    def test_path(self):
        """parse path values."""
        self.options = [Option("--test", type=Types.path)]
        self.assertEqual(self._test_options(["--test", "~/pkg"]),
                         os.path.expanduser("~/pkg"))
        self.assertEqual(self._test_options(["--test", "sbin/pkg"]),
                         os.path.abspath("sbin/pkg"))

    def test_timeout(self):
        """parse timeout values."""
        self.options = [Option("--test", type=Types.timeout)]
        self.assertEqual(self._test_options(["--test", "1.0"]), 1.0)
        self.assertEqual(self._test_options(["--test", "300"]), 300.0)
        self.assertIsNone(self._test_options(["--test", "0"]))
        self.assertIsNone(self._test_options(["--test", "-2"]))
        self.assertIsNone(Types.timeout(None))
        self.assertRaises(ValueError, Types.timeout, "forever")

    def test_provider(self):
        """look up package providers by name."""
        from PkgSync.Providers.Pkgng import Pkgng
        self.options = [Option("--test", type=Types.provider)]
        self.assertIs(self._test_options(["--test", "pkgng"]), Pkgng)
        self.assertIs(Types.provider("default"), Pkgng)
        self.assertRaises(ValueError, Types.provider, "yum")
        self.assertRaises(SystemExit, self._test_options, ["--test", "yum"])
