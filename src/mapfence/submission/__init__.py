"""Submission-time location and floor picking."""

from mapfence.submission.picker import (
    MSG_FLOOR_REQUIRED,
    MSG_LOCATION_REQUIRED,
    MSG_MAP_LOAD_FAILED,
    LocationPicker,
    floor_label,
)

__all__ = [
    "MSG_FLOOR_REQUIRED",
    "MSG_LOCATION_REQUIRED",
    "MSG_MAP_LOAD_FAILED",
    "LocationPicker",
    "floor_label",
]
