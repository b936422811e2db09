"""wpt - release WordPress plugins and themes to the wp.org SVN repository."""

__version__ = "0.4.0"
