import os
import sys
from PkgSync.Inventory import *

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


class TestParseQueryLine(PkgSyncTestCase):
    def test_parse(self):
        record = parse_query_line("zsh 5.0.2_1 shells/zsh")
        self.assertEqual(record, PackageRecord("zsh", "shells/zsh",
                                               "5.0.2_1"))
        self.assertIsNone(record.latest)

    def test_whitespace(self):
        record = parse_query_line("  curl   7.33.0\tftp/curl  \n")
        self.assertEqual(record.name, "curl")
        self.assertEqual(record.version, "7.33.0")
        self.assertEqual(record.origin, "ftp/curl")

    def test_no_match(self):
        for line in ["", "pkg: No package(s) matching bash",
                     "zsh 5.0.2_1", "zsh 5.0.2_1 zsh",
                     "zsh 5.0.2_1 shells/zsh extra"]:
            self.assertIsNone(parse_query_line(line))


class TestParseVersionLine(PkgSyncTestCase):
    def test_older(self):
        status = parse_version_line(
            "ftp/curl                           <   needs updating "
            "(remote has 7.33.0_2)")
        self.assertEqual(status.origin, "ftp/curl")
        self.assertEqual(status.flag, OLDER)
        self.assertEqual(status.remote, "7.33.0_2")

    def test_current(self):
        status = parse_version_line(
            "security/nmap                      =   up-to-date with remote")
        self.assertEqual(status.origin, "security/nmap")
        self.assertEqual(status.flag, CURRENT)
        self.assertIsNone(status.remote)

    def test_newer(self):
        status = parse_version_line(
            "shells/zsh  >   succeeds remote (remote has 5.0.2)")
        self.assertEqual(status.flag, NEWER)
        self.assertEqual(status.remote, "5.0.2")

    def test_no_data_flags(self):
        status = parse_version_line(
            "sysutils/mcollective  ?   orphaned: sysutils/mcollective")
        self.assertEqual(status.origin, "sysutils/mcollective")
        self.assertEqual(status.flag, ORPHANED)
        self.assertIsNone(status.remote)

        status = parse_version_line(
            "sysutils/mcollective  !   Comparison failed")
        self.assertEqual(status.flag, FAILED)

    def test_bare_flag(self):
        status = parse_version_line("shells/zsh =")
        self.assertEqual(status.flag, CURRENT)

    def test_no_match(self):
        for line in ["",
                     "sysutils/mcollective  *   unknown flag",
                     "ftp/curl <",
                     "ftp/curl <   needs updating",
                     "curl-7.33.0 < needs updating (remote has 7.33.0_2)"]:
            self.assertIsNone(parse_version_line(line), line)


class TestPackageRecord(PkgSyncTestCase):
    def test_upgradable(self):
        self.assertTrue(PackageRecord("curl", "ftp/curl", "7.33.0",
                                      "7.33.0_2").upgradable)
        self.assertFalse(PackageRecord("nmap", "security/nmap", "6.40",
                                       "6.40").upgradable)
        self.assertFalse(PackageRecord("nmap", "security/nmap",
                                       "6.40").upgradable)

    def test_equality(self):
        rec1 = PackageRecord("curl", "ftp/curl", "7.33.0")
        rec2 = PackageRecord("curl", "ftp/curl", "7.33.0")
        rec3 = PackageRecord("curl", "ftp/curl", "7.33.0", "7.33.0_2")
        self.assertEqual(rec1, rec2)
        self.assertNotEqual(rec1, rec3)
        self.assertEqual(len(set([rec1, rec2, rec3])), 2)
        self.assertNotEqual(rec1, "ftp/curl")


class TestInventory(PkgSyncTestCase):
    def get_obj(self, query_output=None, version_output=None):
        if query_output is None:
            query_output = fixture("pkg.info")
        if version_output is None:
            version_output = fixture("pkg.version")
        return Inventory(query_output, version_output)

    def test_empty(self):
        inv = Inventory('', '')
        self.assertEqual(len(inv), 0)
        self.assertEqual(inv.records, [])
        self.assertEqual(inv.skipped, [])

        inv = Inventory(None, None)
        self.assertEqual(len(inv), 0)

    def test_records(self):
        inv = self.get_obj()
        self.assertCountEqual([r.name for r in inv],
                              ["ca_root_nss", "curl", "nmap", "pkg",
                               "gnupg", "mcollective", "zsh", "tac_plus"])
        self.assertEqual(len(inv), 8)
        self.assertIn("shells/zsh", inv)
        self.assertNotIn("shells/bash", inv)

        # order is the order pkg listed them
        self.assertEqual(inv.records[0].origin, "security/ca_root_nss")
        self.assertEqual(inv.records[-1].origin, "shells/zsh")

    def test_version(self):
        inv = self.get_obj()
        self.assertEqual(inv.get("shells/zsh").version, "5.0.2_1")

    def test_latest(self):
        inv = self.get_obj()
        # upgrade available
        curl = inv.get("ftp/curl")
        self.assertEqual(curl.latest, "7.33.0_2")
        self.assertTrue(curl.upgradable)

        # up to date
        nmap = inv.get("security/nmap")
        self.assertEqual(nmap.latest, nmap.version)
        self.assertFalse(nmap.upgradable)

        # orphaned
        self.assertIsNone(inv.get("sysutils/mcollective").latest)

    def test_latest_no_version_data(self):
        inv = self.get_obj(version_output='')
        self.assertTrue(all(r.latest is None for r in inv))

    def test_latest_version(self):
        inv = self.get_obj()
        self.assertIsNone(inv.latest_version("security/nmap"))
        self.assertEqual(inv.latest_version("shells/bash-completion"),
                         "2.1_3")
        # origins are matched exactly
        self.assertIsNone(inv.latest_version("shells/bash"))
        self.assertIsNone(inv.latest_version("bash-completion"))

    def test_find(self):
        inv = self.get_obj()
        self.assertEqual(inv.find("ftp/curl").name, "curl")
        self.assertEqual(inv.find("curl").origin, "ftp/curl")
        self.assertIsNone(inv.find("bash"))
        self.assertIsNone(inv.find("shells/bash"))
        self.assertIsNone(inv.find("net/curl"))

    def test_no_data_not_skipped(self):
        inv = self.get_obj()
        self.assertEqual(inv.skipped, [])
        self.assertIsNone(inv.get("sysutils/mcollective").latest)

        inv = Inventory("mcollective 2.2.3 sysutils/mcollective\n",
                        "sysutils/mcollective  !   Comparison failed\n")
        self.assertEqual(inv.skipped, [])
        self.assertIsNone(inv.get("sysutils/mcollective").latest)
        self.assertIsNone(inv.latest_version("sysutils/mcollective"))

    def test_garbled(self):
        query = "\n".join(["curl 7.33.0 ftp/curl",
                           "",
                           "garbage",
                           "zsh 5.0.2_1 shells/zsh"])
        version = "\n".join(["ftp/curl < needs updating (remote has 7.34.0)",
                             "ftp/curl <",
                             "more garbage"])
        inv = Inventory(query, version)
        self.assertEqual(len(inv), 2)
        self.assertEqual(inv.get("ftp/curl").latest, "7.34.0")
        self.assertIsNone(inv.get("shells/zsh").latest)
        self.assertCountEqual(inv.skipped,
                              [("query", 3, "garbage"),
                               ("version", 2, "ftp/curl <"),
                               ("version", 3, "more garbage")])

    def test_duplicate_origin(self):
        inv = Inventory("curl 7.33.0 ftp/curl\ncurl-lite 7.0 ftp/curl\n")
        self.assertEqual(len(inv), 1)
        self.assertEqual(inv.get("ftp/curl").name, "curl")

    def test_newer_than_remote(self):
        inv = Inventory("zsh 5.0.3 shells/zsh",
                        "shells/zsh > succeeds remote (remote has 5.0.2)")
        self.assertEqual(inv.get("shells/zsh").latest, "5.0.3")
        self.assertIsNone(inv.latest_version("shells/zsh"))
