""" pkgsync version declaration """

__version__ = "0.4.0"
