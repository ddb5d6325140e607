"""svnscope: interpret Subversion output and aggregate working-copy status."""

__version__ = "0.1.0"
