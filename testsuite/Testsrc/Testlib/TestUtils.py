import os
import sys
import subprocess
from PkgSync.Utils import *

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


class TestClassName(PkgSyncTestCase):
    def test_name(self):
        class Foo(object):
            name = ClassName()

        class Bar(Foo):
            pass

        self.assertEqual(Foo.name, "Foo")
        self.assertEqual(Foo().name, "Foo")
        self.assertEqual(Bar().name, "Bar")


class TestExecutorResult(PkgSyncTestCase):
    def test_success(self):
        result = ExecutorResult("out\n", "", 0)
        self.assertTrue(result)
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(result.stdout, "out\n")

    def test_error_from_stderr(self):
        result = ExecutorResult("out", "pkg: failed\n", 70)
        self.assertFalse(result)
        self.assertEqual(result.retval, 70)
        self.assertEqual(result.error, "pkg: failed (rv: 70)")

    def test_error_from_stdout(self):
        result = ExecutorResult("No packages matching\n", "", 1)
        self.assertEqual(result.error, "No packages matching (rv: 1)")

    def test_error_no_output(self):
        result = ExecutorResult("", "", 1)
        self.assertEqual(result.error, "No output or error; return value 1")

    def test_repr(self):
        self.assertEqual(repr(ExecutorResult("", "", 0)),
                         "Successful command result: No output")
        self.assertEqual(repr(ExecutorResult("", "pkg: failed", 3)),
                         "Errored command result: pkg: failed (rv: 3)")


class TestExecutor(PkgSyncTestCase):
    target_class = Executor

    def get_obj(self, timeout=None):
        return self.target_class(timeout=timeout)

    @patch("subprocess.Popen")
    def test_run(self, mock_Popen):
        exc = self.get_obj()
        proc = Mock()
        proc.communicate.return_value = ("curl 7.33.0 ftp/curl\n", "")
        proc.wait.return_value = 0
        mock_Popen.return_value = proc

        result = exc.run(["/usr/sbin/pkg", "query", "%n %v %o", "curl"])
        self.assertTrue(result)
        self.assertEqual(result.stdout, "curl 7.33.0 ftp/curl\n")
        args, kwargs = mock_Popen.call_args
        self.assertEqual(args[0],
                         ["/usr/sbin/pkg", "query", "%n %v %o", "curl"])
        self.assertTrue(kwargs["universal_newlines"])
        self.assertEqual(kwargs['stdout'], subprocess.PIPE)
        proc.communicate.assert_called_with()

    @patch("subprocess.Popen")
    def test_run_failure(self, mock_Popen):
        exc = self.get_obj()
        proc = Mock()
        proc.communicate.return_value = ("", "pkg: No packages matching\n")
        proc.wait.return_value = 70
        mock_Popen.return_value = proc

        result = exc.run(["/usr/sbin/pkg", "install", "-qy", "bash"])
        self.assertFalse(result)
        self.assertEqual(result.retval, 70)
        self.assertEqual(result.error, "pkg: No packages matching (rv: 70)")

    @patch("threading.Timer")
    @patch("subprocess.Popen")
    def test_run_timeout(self, mock_Popen, mock_Timer):
        exc = self.get_obj(timeout=30)
        proc = Mock()
        proc.communicate.return_value = ("", "")
        proc.wait.return_value = 0
        mock_Popen.return_value = proc

        exc.run(["/usr/sbin/pkg", "upgrade", "-qy", "ftp/curl"])
        mock_Timer.assert_called_with(30.0, exc._timeout, [proc])
        mock_Timer.return_value.start.assert_called_with()
        mock_Timer.return_value.cancel.assert_called_with()

        # an explicit timeout of 0 overrides the default
        mock_Timer.reset_mock()
        exc.run(["/usr/sbin/pkg", "upgrade", "-qy", "ftp/curl"], timeout=0)
        self.assertFalse(mock_Timer.called)

    def test__timeout(self):
        exc = self.get_obj()
        proc = Mock()
        proc.poll.return_value = None
        exc._timeout(proc)
        proc.kill.assert_called_with()

        proc.reset_mock()
        proc.poll.return_value = 0
        exc._timeout(proc)
        self.assertFalse(proc.kill.called)

        # the process exited between poll() and kill()
        proc.reset_mock()
        proc.poll.return_value = None
        proc.kill.side_effect = OSError
        exc._timeout(proc)
        proc.kill.assert_called_with()
