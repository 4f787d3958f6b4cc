"""
Format-specific validators.
"""

from . import instructions, pdf

__all__ = ['instructions', 'pdf']
