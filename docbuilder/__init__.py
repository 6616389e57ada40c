"""docbuilder - clones registered packages and builds their documentation."""

__version__ = "0.1.0"
