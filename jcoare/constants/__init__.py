"""
Physical constants for the COARE bulk flux algorithm

This module exposes the constants shared by the thermodynamic helpers and
the bulk parameterizations.
"""

from jcoare.constants.physical_constants import *

__all__ = [
    'physical_constants',
]
