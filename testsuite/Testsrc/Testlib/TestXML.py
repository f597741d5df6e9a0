import os
import sys
import tempfile
import lxml.etree
from PkgSync.XML import *

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


class TestXML(PkgSyncTestCase):
    def test_XML(self):
        el = XML("<Configuration><!-- comment --><Bundle name='a'/>"
                 "</Configuration>")
        self.assertEqual(el.tag, "Configuration")
        # comments are dropped
        self.assertEqual(len(el), 1)

    def test_XML_encoding(self):
        el = XML(u"<?xml version='1.0' encoding='UTF-8'?>"
                 u"<Configuration/>")
        self.assertEqual(el.tag, "Configuration")

    def test_XML_invalid(self):
        self.assertRaises(ParseError, XML, "<Configuration>")

    def test_load_config(self):
        fd, name = tempfile.mkstemp()
        try:
            config = os.fdopen(fd, 'w')
            config.write("<Configuration><Bundle name='shells'>"
                         "<Package name='shells/zsh' ensure='latest'/>"
                         "</Bundle></Configuration>")
            config.close()
            root = load_config(name)
        finally:
            os.unlink(name)
        self.assertXMLEqual(
            root,
            XML("<Configuration><Bundle name='shells'>"
                "<Package name='shells/zsh' ensure='latest'/>"
                "</Bundle></Configuration>"))

    def test_package(self):
        self.assertXMLEqual(package("curl", version="7.33.1", source=None),
                            lxml.etree.Element("Package", name="curl",
                                               version="7.33.1"))
        self.assertXMLEqual(package("shells/zsh"),
                            lxml.etree.Element("Package", name="shells/zsh"))
