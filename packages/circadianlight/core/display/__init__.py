"""Display gamma appliers."""

from circadianlight.core.display.protocols import GammaApplier
from circadianlight.core.display.xrandr import (
    XrandrGammaApplier,
    format_gamma,
    parse_connected_outputs,
)

__all__ = [
    "GammaApplier",
    "XrandrGammaApplier",
    "format_gamma",
    "parse_connected_outputs",
]
