import os
import sys
import logging
import argparse
import PkgSync.Options
import PkgSync.Logger
from PkgSync.Logger import *

# add all parent testsuite directories to sys.path to allow (most)
# relative imports
path = os.path.dirname(__file__)
while path != '/':
    if os.path.basename(path).lower().startswith("test"):
        sys.path.append(path)
    if os.path.basename(path) == "testsuite":
        break
    path = os.path.dirname(path)
from common import *


class TestTermiosFormatter(PkgSyncTestCase):
    def get_obj(self, width=80):
        fmt = TermiosFormatter()
        fmt.width = width
        return fmt

    def record(self, msg):
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg,
                                 None, None)

    def test_format(self):
        fmt = self.get_obj()
        self.assertEqual(fmt.format(self.record("Installing curl")),
                         "Installing curl")

    def test_format_wrap(self):
        fmt = self.get_obj(width=10)
        self.assertEqual(fmt.format(self.record("a" * 25)).split("\n"),
                         ["a" * 10, "a" * 10, "a" * 5])

    def test_format_list(self):
        fmt = self.get_obj(width=40)
        output = fmt.format(self.record(["Package:shells/zsh",
                                         "Package:ftp/curl"]))
        self.assertIn("Package:ftp/curl", output)
        self.assertIn("Package:shells/zsh", output)
        self.assertEqual(fmt.format(self.record([])), "")

    def test_format_columns(self):
        fmt = self.get_obj(width=12)
        output = fmt.format(self.record(["e", "b", "d", "a", "c"]))
        # sorted, then laid out top to bottom
        self.assertEqual(output.split("\n"),
                         [" a  c  e ", " b  d "])

    @patch("sys.stdout")
    def test_terminal_width_pipe(self, mock_stdout):
        mock_stdout.isatty.return_value = False
        self.assertEqual(terminal_width(), 32768)


class TestHandlers(PkgSyncTestCase):
    @patch("logging.root")
    def test_add_console_handler(self, mock_root):
        add_console_handler(level=logging.INFO)
        handler = mock_root.addHandler.call_args[0][0]
        self.assertEqual(handler.get_name(), "console")
        self.assertEqual(handler.level, logging.INFO)
        self.assertIsInstance(handler.formatter, TermiosFormatter)

    @patch("logging.root")
    @patch("logging.FileHandler")
    def test_add_file_handler(self, mock_FileHandler, mock_root):
        setup = argparse.Namespace(logfile="/var/log/pkgsync.log")
        with patch("PkgSync.Options.setup", setup):
            add_file_handler(level=logging.DEBUG)
        mock_FileHandler.assert_called_with("/var/log/pkgsync.log")
        handler = mock_FileHandler.return_value
        handler.set_name.assert_called_with("file")
        handler.setLevel.assert_called_with(logging.DEBUG)
        mock_root.addHandler.assert_called_with(handler)


class TestSetupLogging(PkgSyncTestCase):
    def setUp(self):
        self.setup = argparse.Namespace(debug=False, verbose=False,
                                        syslog=False, logfile=None)

    def test_default_log_level(self):
        @patch("PkgSync.Options.setup", self.setup)
        def inner():
            self.assertEqual(default_log_level(), logging.WARNING)
            self.setup.verbose = True
            self.assertEqual(default_log_level(), logging.INFO)
            self.setup.debug = True
            self.assertEqual(default_log_level(), logging.DEBUG)

        inner()

    @patch("PkgSync.Logger.add_file_handler")
    @patch("PkgSync.Logger.add_syslog_handler")
    @patch("PkgSync.Logger.add_console_handler")
    def test_setup_logging(self, mock_add_console_handler,
                           mock_add_syslog_handler, mock_add_file_handler):
        self.setup.verbose = True
        self.setup.syslog = True
        self.setup.logfile = "/var/log/pkgsync.log"

        @patch("PkgSync.Options.setup", self.setup)
        def inner():
            already_setup = getattr(logging, "already_setup", None)
            if already_setup is not None:
                del logging.already_setup
            try:
                setup_logging()
                mock_add_console_handler.assert_called_with(
                    level=logging.INFO)
                mock_add_syslog_handler.assert_called_with(
                    level=logging.INFO)
                mock_add_file_handler.assert_called_with(level=logging.INFO)
                self.assertTrue(logging.already_setup)

                # logging is only set up once
                mock_add_console_handler.reset_mock()
                setup_logging()
                self.assertFalse(mock_add_console_handler.called)
            finally:
                if already_setup is None:
                    del logging.already_setup
                else:
                    logging.already_setup = already_setup

        inner()


class TestLoggingOptions(PkgSyncTestCase):
    def test_options(self):
        result = argparse.Namespace()
        parser = PkgSync.Options.Parser(
            namespace=result, components=[PkgSync.Logger._OptionContainer])
        with patch("PkgSync.Logger.setup_logging") as mock_setup_logging:
            parser.parse(["-v", "--syslog", "-o", "/var/log/pkgsync.log"])
            mock_setup_logging.assert_called_with()
        self.assertTrue(result.verbose)
        self.assertFalse(result.debug)
        self.assertTrue(result.syslog)
        self.assertEqual(result.logfile, "/var/log/pkgsync.log")
