"""mudmatch - name matching for objects in a MUSH-style containment graph."""

__version__ = "0.1.0"
