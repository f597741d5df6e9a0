""" PkgSync options parsing. """

# pylint: disable=W0611,W0401
from PkgSync.Options import Types
from PkgSync.Options.Options import *
from PkgSync.Options.Parser import *
from PkgSync.Options.Subcommands import *
from PkgSync.Options.Common import *
