'''XML handling for PkgSync configurations and Package entries'''

# pylint: disable=E0611,W0611,C0103

from functools import wraps

from lxml.etree import Element, SubElement, tostring, XMLParser
from lxml.etree import XMLSyntaxError as ParseError
from lxml.etree import XML as _XML
from lxml.etree import parse as _parse

# libxml2 2.9.0+ doesn't parse 10M+ documents by default
_parser = XMLParser(huge_tree=True, remove_comments=True)


@wraps(_XML)
def XML(val, **kwargs):
    """ unicode strings w/encoding declaration are not supported in
    recent lxml.etree, so we try to read XML, and if it fails we try
    encoding the string. """
    kwargs.setdefault('parser', _parser)
    try:
        return _XML(val, **kwargs)
    except ValueError:
        return _XML(val.encode(), **kwargs)


def load_config(filename):
    """ Load a configuration document from a file.  The document root
    holds ``Bundle`` elements, each of which holds entries such as
    ``Package``:

    .. code-block:: xml

        <Configuration>
          <Bundle name="shells">
            <Package name="shells/zsh" ensure="latest"/>
            <Package name="curl" version="7.33.1"
                     source="urn:freebsd:repo:FreeBSD"/>
          </Bundle>
        </Configuration>

    :param filename: The path to the configuration file
    :type filename: string
    :returns: lxml.etree._Element - the document root
    :raises: :exc:`PkgSync.XML.ParseError`
    """
    return _parse(filename, parser=_parser).getroot()


def package(name, **attrs):
    """ Build a ``Package`` entry.  Attributes whose value is None
    are left out.

    :param name: The package name or origin
    :type name: string
    :returns: lxml.etree._Element """
    return Element('Package', name=name,
                   **dict((k, v) for k, v in attrs.items() if v is not None))
