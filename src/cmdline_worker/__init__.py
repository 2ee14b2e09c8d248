"""Templated command-line job worker."""

__version__ = "0.4.1"
