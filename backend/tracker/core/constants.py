"""Shared application constants.

Keeps the view-layer defaults in one place so they can be documented and
adjusted together.
"""

# Suggested chart y-axis padding around the plotted data
Y_AXIS_MIN_FACTOR = 0.9
Y_AXIS_MAX_FACTOR = 1.1

# Status colors used by the overview tiles
STATUS_COLORS = {
    "Good": "#386743",
    "Bad": "#cf0000",
    "No Data": "gray",
}
