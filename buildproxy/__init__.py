"""
Build proxy: forwards document build requests to the upstream processing API
and validates the converted PDF before returning it.
"""

__version__ = "1.0.0"
