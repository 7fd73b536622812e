"""configdiff: changelog of configuration-property metadata between releases."""

__version__ = "0.1.0"
