"""Physical constants and defaults for the peak coordinate model.

This module holds the numeric constants shared by the coordinate, peak,
interval and search modules. Values that callers may want to tune (range
parsing delimiters, default search tolerance) live here as well so they can
be read in one place.

Sources
-------
- Charge carrier mass: proton mass rounded to 6 decimals, as used by most
  deconvolution tools when converting between neutral mass and m/z
"""

import math

# =============================================================================
# Fundamental Physical Constants
# =============================================================================

# Mass of one elementary charge carrier (a proton)
# m/z = (M + z * CHARGE_CARRIER_MASS) / z
CHARGE_CARRIER_MASS = 1.007276  # Da

# =============================================================================
# Coordinate Range Defaults
# =============================================================================

# Value an absent start bound takes for containment and overlap tests
DEFAULT_RANGE_START = 0.0

# Value an absent end bound takes for containment and overlap tests
DEFAULT_RANGE_END = math.inf

# Delimiters tried when parsing "<start><delim><end>", highest priority first
RANGE_DELIMITERS = (' ', ':', '-')

# =============================================================================
# Search Defaults
# =============================================================================

# Default matching tolerance for nearest-peak search
DEFAULT_TOLERANCE_PPM = 10.0
