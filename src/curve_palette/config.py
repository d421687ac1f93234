"""
Defaults shared by the curve engine, the chart and the palette service.

Every value here is a plain module constant; callers pass overrides as
keyword arguments rather than mutating these.
"""

# Sampling
CURVE_RESOLUTION: int = 128  # polyline segments for drawing / hit-testing
CLAMP_RESOLUTION: int = 128  # samples used to locate clamp bounds
CLAMP_REFINE_STEPS: int = 32  # bisection steps per clamp boundary

# Interaction
HIT_TOLERANCE_PX: float = 5.0

# Chart
WHEEL_WEDGES: int = 256
CHART_PADDING: float = 0.07
HIGHLIGHT_COLOR: str = "hsl(0, 0%, 25%)"
START_POINT_COLOR: str = "lightgreen"
END_POINT_COLOR: str = "palevioletred"

# Palette
EXPORT_PRECISION: int = 3
PALETTE_STOPS: int = 12
GRADIENT_RESOLUTION: int = 32
MAX_SAMPLES: int = 512
