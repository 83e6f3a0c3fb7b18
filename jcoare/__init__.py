"""
COARE 3.6 Air-Sea Bulk Transfer Coefficients in JAX

This package computes the drag, sensible heat and evaporation transfer
coefficients of the COARE 3.6 bulk algorithm (Fairall et al. 2003, Edson
et al. 2013), optionally with the cool-skin and warm-layer corrections of
the sea surface temperature (Fairall et al. 1996). All routines are pure
JAX functions over arrays with one element per location.

Modules:
- constants: Physical constants
- thermodynamics: Moist air and sea water helpers
- similarity: Stability correction functions psi_m and psi_h
- coare3p6: The iterative algorithm and its building blocks
- cool_skin, warm_layer: Skin temperature corrections
- bulk_formula: Fluxes from transfer coefficients
- config, output: Run configuration and xarray output
"""

from jcoare.constants import physical_constants
from jcoare.bulk_types import (
    CoareParameters, CoolSkinState, WarmLayerState, SurfaceRadiation,
    SolarClock, NeutralDiagnostics, BulkCoefficients, BulkFluxes
)
from jcoare.coare3p6 import compute_fluxes, initialize_skin_states
from jcoare.bulk_formula import compute_bulk_fluxes

__all__ = [
    'physical_constants',
    'CoareParameters',
    'CoolSkinState',
    'WarmLayerState',
    'SurfaceRadiation',
    'SolarClock',
    'NeutralDiagnostics',
    'BulkCoefficients',
    'BulkFluxes',
    'compute_fluxes',
    'initialize_skin_states',
    'compute_bulk_fluxes',
]
