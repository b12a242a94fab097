"""Closed-form room acoustics estimates."""

from .model import (
    AcousticModel,
    clarity_index,
    cube_equivalent_area,
    reverberation_time,
    room_modes,
    speech_transmission_index,
)

__all__ = [
    "AcousticModel",
    "reverberation_time",
    "room_modes",
    "clarity_index",
    "speech_transmission_index",
    "cube_equivalent_area",
]
