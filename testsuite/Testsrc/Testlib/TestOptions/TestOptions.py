"""basic option parsing tests."""

import argparse
import os
import tempfile

from PkgSync.Options import Option, PathOption, BooleanOption, Parser, \
    PositionalArgument, OptionParserException, OptionGroup
from TestOptions import OptionTestCase, make_config, clean_environment
from common import patch


class TestBasicOptions(OptionTestCase):
    """test basic option parsing."""
    def setUp(self):
        # parsing options can modify the Option objects themselves,
        # so the options are created anew for each test.
        OptionTestCase.setUp(self)
        self.options = [
            BooleanOption("--test-true-boolean", env="TEST_TRUE_BOOLEAN",
                          cf=("test", "true_boolean"), default=True),
            BooleanOption("--test-false-boolean", env="TEST_FALSE_BOOLEAN",
                          cf=("test", "false_boolean"), default=False),
            Option("--test-option", env="TEST_OPTION", cf=("test", "option"),
                   default="foo"),
            PathOption("--test-path-option", env="TEST_PATH_OPTION",
                       cf=("test", "path"), default="/test")]

    @clean_environment
    def _test_options(self, options=None, env=None, config=None):
        """helper to test a set of options.

        returns the namespace from parsing the given CLI options with
        the given config and environment.
        """
        if config is not None:
            config = {"test": config}
        if options is None:
            options = []

        @make_config(config)
        def inner(config_file):
            """do the actual tests."""
            result = argparse.Namespace()
            parser = Parser(components=[self], namespace=result)
            parser.parse(argv=["-C", config_file] + options)
            return result

        if env is not None:
            for name, value in env.items():
                os.environ[name] = value

        return inner()

    def test_expand_path(self):
        """expand ~ in path option."""
        options = self._test_options(options=["--test-path-option",
                                              "~/test"])
        self.assertEqual(options.test_path_option,
                         os.path.expanduser("~/test"))

    def test_canonicalize_path(self):
        """get absolute path from path option."""
        options = self._test_options(options=["--test-path-option",
                                              "./test"])
        self.assertEqual(options.test_path_option,
                         os.path.abspath("./test"))

    def test_default_bool(self):
        """use the default value of boolean options."""
        options = self._test_options()
        self.assertTrue(options.test_true_boolean)
        self.assertFalse(options.test_false_boolean)

    def test_default(self):
        """use the default value of an option."""
        options = self._test_options()
        self.assertEqual(options.test_option, "foo")

    def test_default_path(self):
        """use the default value of a path option."""
        options = self._test_options()
        self.assertEqual(options.test_path_option, "/test")

    def test_invalid_boolean(self):
        """set boolean to invalid values."""
        self.assertRaises(SystemExit,
                          self._test_options,
                          config={"true_boolean": "you betcha"})
        self.assertRaises(SystemExit,
                          self._test_options,
                          env={"TEST_TRUE_BOOLEAN": "hell no"})

    def test_set_boolean_in_config(self):
        """set boolean options in config files."""
        set_to_other = {"true_boolean": "off",
                        "false_boolean": "yes"}
        options = self._test_options(config=set_to_other)
        self.assertFalse(options.test_true_boolean)
        self.assertTrue(options.test_false_boolean)

    def test_set_boolean_in_env(self):
        """set boolean options in environment."""
        options = self._test_options(env={"TEST_TRUE_BOOLEAN": "off",
                                          "TEST_FALSE_BOOLEAN": "yes"})
        self.assertFalse(options.test_true_boolean)
        self.assertTrue(options.test_false_boolean)

    def test_set_boolean_in_cli(self):
        """set boolean options on the command line."""
        options = self._test_options(options=["--test-true-boolean",
                                              "--test-false-boolean"])
        self.assertFalse(options.test_true_boolean)
        self.assertTrue(options.test_false_boolean)

    def test_set_in_config(self):
        """set options in config files."""
        options = self._test_options(config={"option": "foo2",
                                             "path": "/etc/pkgsync"})
        self.assertEqual(options.test_option, "foo2")
        self.assertEqual(options.test_path_option, "/etc/pkgsync")

    def test_set_in_env(self):
        """set options in environment."""
        options = self._test_options(env={"TEST_OPTION": "foo3",
                                          "TEST_PATH_OPTION": "/usr/local"})
        self.assertEqual(options.test_option, "foo3")
        self.assertEqual(options.test_path_option, "/usr/local")

    def test_set_in_cli(self):
        """set options on the command line."""
        options = self._test_options(options=["--test-option", "foo4"])
        self.assertEqual(options.test_option, "foo4")

    def test_precedence(self):
        """cli beats environment beats config file."""
        config = {"option": "config"}
        env = {"TEST_OPTION": "env"}
        options = self._test_options(config=config)
        self.assertEqual(options.test_option, "config")
        options = self._test_options(config=config, env=env)
        self.assertEqual(options.test_option, "env")
        options = self._test_options(config=config, env=env,
                                     options=["--test-option", "cli"])
        self.assertEqual(options.test_option, "cli")

    def test_default_restored(self):
        """the default in code comes back when the config no longer
        sets an option."""
        options = self._test_options(config={"option": "config"})
        self.assertEqual(options.test_option, "config")
        options = self._test_options()
        self.assertEqual(options.test_option, "foo")

    @make_config()
    def test_reparse(self, config_file):
        """values from an earlier parse are discarded."""
        result = argparse.Namespace()
        parser = Parser(components=[self], namespace=result)
        parser.parse(["-C", config_file, "--test-option", "cli"])
        self.assertEqual(result.test_option, "cli")
        parser.parse(["-C", config_file])
        self.assertEqual(result.test_option, "foo")

    @make_config()
    def test_positional(self, config_file):
        """get a positional argument."""
        result = argparse.Namespace()
        parser = Parser(namespace=result)
        parser.add_options([PositionalArgument("package")])
        parser.parse(["-C", config_file, "shells/zsh"])
        self.assertEqual(result.package, "shells/zsh")

    @make_config()
    def test_option_group(self, config_file):
        """add options in a group."""
        result = argparse.Namespace()
        parser = Parser(namespace=result)
        parser.add_options([OptionGroup(Option("--test-group-option"),
                                        title="Test options")])
        parser.parse(["-C", config_file, "--test-group-option", "bar"])
        self.assertEqual(result.test_group_option, "bar")

    @make_config()
    def test_unknown_option(self, config_file):
        """fail on unknown options."""
        parser = Parser(namespace=argparse.Namespace())
        self.assertRaises(SystemExit, parser.parse,
                          ["-C", config_file, "--not-an-option"])

    def test_duplicate_cf(self):
        """fail to add options with the same config file option."""
        parser = Parser(namespace=argparse.Namespace())
        parser.add_options([Option("--foo", cf=("test", "foo"))])
        self.assertRaises(OptionParserException, parser.add_options,
                          [Option("--bar", cf=("test", "foo"))])

    def test_duplicate_env(self):
        """fail to add options with the same environment variable."""
        parser = Parser(namespace=argparse.Namespace())
        parser.add_options([Option("--foo", env="TEST_FOO")])
        self.assertRaises(OptionParserException, parser.add_options,
                          [Option("--bar", env="TEST_FOO")])


class TestConfigFile(OptionTestCase):
    """test locating the config file."""

    def setUp(self):
        OptionTestCase.setUp(self)
        self.options = [Option("--foo", cf=("test", "foo"), default="default")]

    def test_missing_config_file(self):
        """fail on a missing config file that was asked for."""
        parser = Parser(components=[self], namespace=argparse.Namespace())
        self.assertRaises(SystemExit, parser.parse,
                          ["-C", "/nonexistent/pkgsync.conf"])

    def test_missing_default_config_file(self):
        """a missing config file in the default location is not an
        error."""
        result = argparse.Namespace()
        parser = Parser(components=[self], namespace=result)
        default = Parser.configfile.default
        env = os.environ.pop("PKGSYNC_CONFIG_FILE", None)
        try:
            with patch.object(Parser.configfile, "initial",
                              "/nonexistent/pkgsync.conf"):
                parser.parse([])
        finally:
            Parser.configfile.default = default
            if env is not None:
                os.environ["PKGSYNC_CONFIG_FILE"] = env
        self.assertEqual(result.foo, "default")

    def test_unparseable_config_file(self):
        """fail on a config file that is not in ini format."""
        fd, name = tempfile.mkstemp()
        os.write(fd, b"not a config file\n")
        os.close(fd)
        parser = Parser(components=[self], namespace=argparse.Namespace())
        try:
            self.assertRaises(SystemExit, parser.parse, ["-C", name])
        finally:
            os.unlink(name)

    @make_config({"test": {"foo": "from config"}})
    def test_config_file_env(self, config_file):
        """find the config file through the environment."""
        result = argparse.Namespace()
        parser = Parser(components=[self], namespace=result)
        default = Parser.configfile.default
        env = os.environ.get("PKGSYNC_CONFIG_FILE")
        os.environ["PKGSYNC_CONFIG_FILE"] = config_file
        try:
            parser.parse([])
        finally:
            Parser.configfile.default = default
            if env is None:
                del os.environ["PKGSYNC_CONFIG_FILE"]
            else:
                os.environ["PKGSYNC_CONFIG_FILE"] = env
        self.assertEqual(result.foo, "from config")
