"""modlists - generate module-list source files from the package names a web page mentions."""

__version__ = "0.3.0"
