"""test selecting the package provider and its options."""

import argparse
import os

from PkgSync.Options import get_parser, new_parser, Common
from PkgSync.Providers.Pkgng import Pkgng

from TestOptions import make_config, OptionTestCase


class TestProviderOption(OptionTestCase):
    """tests for the --provider option."""

    def setUp(self):
        OptionTestCase.setUp(self)
        self.options = [Common.provider]
        self.result = argparse.Namespace()
        new_parser()
        self.parser = get_parser(components=[self, Pkgng],
                                 namespace=self.result,
                                 description="provider testing parser")
        self._env = os.environ.pop("PKGSYNC_PKG", None)

    def tearDown(self):
        if self._env is not None:
            os.environ["PKGSYNC_PKG"] = self._env
        elif "PKGSYNC_PKG" in os.environ:
            del os.environ["PKGSYNC_PKG"]

    @make_config()
    def test_default_provider(self, config_file):
        """load the default provider."""
        self.parser.parse(["-C", config_file])
        self.assertIs(self.result.provider, Pkgng)
        self.assertEqual(self.result.pkg_path, "/usr/sbin/pkg")
        self.assertIsNone(self.result.pkg_repository)

    @make_config()
    def test_select_provider(self, config_file):
        """select a provider on the command line."""
        self.parser.parse(["-C", config_file, "--provider", "pkgng"])
        self.assertIs(self.result.provider, Pkgng)

    @make_config()
    def test_unknown_provider(self, config_file):
        """fail to select an unknown provider."""
        self.assertRaises(SystemExit, self.parser.parse,
                          ["-C", config_file, "--provider", "yum"])

    @make_config({"pkgsync": {"provider": "pkgng"}})
    def test_provider_in_config(self, config_file):
        """select a provider in the config file."""
        self.parser.parse(["-C", config_file])
        self.assertIs(self.result.provider, Pkgng)

    @make_config({"pkgsync": {"provider": "yum"}})
    def test_unknown_provider_in_config(self, config_file):
        """fail on an unknown provider in the config file."""
        self.assertRaises(SystemExit, self.parser.parse,
                          ["-C", config_file])

    @make_config({"pkgng": {"path": "/usr/local/sbin/pkg",
                            "repository": "local"}})
    def test_provider_config(self, config_file):
        """set provider options in the config file."""
        self.parser.parse(["-C", config_file])
        self.assertEqual(self.result.pkg_path, "/usr/local/sbin/pkg")
        self.assertEqual(self.result.pkg_repository, "local")

    @make_config({"pkgng": {"path": "/usr/local/sbin/pkg"}})
    def test_provider_cli(self, config_file):
        """provider options on the command line beat the config
        file."""
        self.parser.parse(["-C", config_file, "--pkg", "/opt/sbin/pkg",
                           "-r", "FreeBSD"])
        self.assertEqual(self.result.pkg_path, "/opt/sbin/pkg")
        self.assertEqual(self.result.pkg_repository, "FreeBSD")

    @make_config()
    def test_provider_env(self, config_file):
        """set the pkg path in the environment."""
        os.environ["PKGSYNC_PKG"] = "/usr/local/sbin/pkg"
        self.parser.parse(["-C", config_file])
        self.assertEqual(self.result.pkg_path, "/usr/local/sbin/pkg")


class TestCommonOptions(OptionTestCase):
    """tests for the other common options."""

    def setUp(self):
        OptionTestCase.setUp(self)
        self.options = [Common.command_timeout, Common.dryrun]
        self.result = argparse.Namespace()
        new_parser()
        self.parser = get_parser(components=[self], namespace=self.result)

    @make_config({"pkgsync": {"command_timeout": "60"}})
    def test_config(self, config_file):
        """set common options in the config file."""
        self.parser.parse(["-C", config_file])
        self.assertEqual(self.result.command_timeout, 60.0)
        self.assertFalse(self.result.dryrun)

    @make_config()
    def test_cli(self, config_file):
        """set common options on the command line."""
        self.parser.parse(["-C", config_file, "-t", "5", "-n"])
        self.assertEqual(self.result.command_timeout, 5.0)
        self.assertTrue(self.result.dryrun)
