"""
Conversion of COARE results to xarray datasets for analysis and plotting.
"""

from typing import Sequence

import jax
import numpy as np
import xarray as xr

from jcoare.bulk_types import BulkCoefficients

# name: (units, description)
VARIABLE_ATTRS = {
    "Cd": ("1", "Drag coefficient at zu"),
    "Ch": ("1", "Sensible heat transfer coefficient at zu"),
    "Ce": ("1", "Evaporation transfer coefficient at zu"),
    "t_zu": ("K", "Potential air temperature at zu"),
    "q_zu": ("kg/kg", "Specific humidity at zu"),
    "U_blk": ("m/s", "Bulk wind speed at zu including gustiness"),
    "T_s": ("K", "Surface temperature used in the bulk formulae"),
    "q_s": ("kg/kg", "Saturation specific humidity at the surface"),
    "CdN": ("1", "Neutral drag coefficient"),
    "ChN": ("1", "Neutral sensible heat transfer coefficient"),
    "CeN": ("1", "Neutral evaporation transfer coefficient"),
    "z0": ("m", "Aerodynamic roughness length"),
    "z0t": ("m", "Scalar roughness length"),
    "u_star": ("m/s", "Friction velocity"),
    "L": ("m", "Obukhov length"),
    "UN10": ("m/s", "Neutral wind speed at 10 m"),
    "dT_cs": ("K", "Cool-skin temperature increment"),
    "tau_ac": ("N s/m2", "Momentum accumulated in the warm layer since reset"),
    "qnt_ac": ("J/m2", "Heat accumulated in the warm layer since reset"),
    "dT_wl": ("K", "Warm-layer temperature increment"),
    "hz_wl": ("m", "Warm-layer thickness"),
}


def coefficients_to_xarray(result: BulkCoefficients, dims: Sequence[str] = ()) -> xr.Dataset:
    """Converts a COARE result to an xarray.Dataset.

    Neutral diagnostics and skin states are included when present in the
    result. Every variable carries ``units`` and ``description`` attributes.

    Args:
        result:
            Output of ``compute_fluxes``.
        dims:
            Names of the array dimensions, one per axis of the inputs.

    Returns:
        An `xarray.Dataset` with one variable per field.
    """
    fields = {k: v for k, v in result._asdict().items()
              if k not in ("neutral", "cool_skin", "warm_layer")}
    for sub in (result.neutral, result.cool_skin, result.warm_layer):
        if sub is not None:
            fields.update(sub._asdict())

    dims = tuple(dims)
    data_vars = {}
    for name, value in fields.items():
        value = np.asarray(jax.device_get(value))
        if value.ndim != len(dims):
            raise ValueError(
                f"Field '{name}' has {value.ndim} dimensions but {len(dims)} names were given"
            )
        units, description = VARIABLE_ATTRS[name]
        data_vars[name] = xr.DataArray(
            value, dims=dims, attrs={"units": units, "description": description}
        )

    return xr.Dataset(data_vars)
