"""Catalogue of common interior finishes with typical acoustic coefficients.

Absorption values are broadband averages over the 250 Hz – 4 kHz octaves.
Reflection is estimated as the complement of absorption and density is a
relative figure (1.0 = gypsum board), matching what the sensing pipeline
reports for classified materials.
"""

from __future__ import annotations

from .room import Material

_CATALOGUE: dict[str, tuple[str, float, float]] = {
    # key: (display name, absorption, relative density)
    "drywall": ("Drywall", 0.10, 1.0),
    "concrete": ("Concrete", 0.02, 3.0),
    "brick": ("Brick", 0.03, 2.4),
    "glass": ("Glass", 0.04, 3.2),
    "hardwood": ("Hardwood Floor", 0.10, 0.9),
    "carpet": ("Carpet", 0.30, 0.4),
    "carpet_padded": ("Carpet with Underlay", 0.60, 0.5),
    "curtain_heavy": ("Heavy Curtain", 0.55, 0.3),
    "upholstery": ("Upholstered Furniture", 0.45, 0.6),
    "wood_panel": ("Wood Paneling", 0.15, 0.8),
    "acoustic_panel": ("Acoustic Panel", 0.80, 0.2),
    "acoustic_tile": ("Acoustic Ceiling Tile", 0.65, 0.3),
}

DEFAULT_MATERIAL_KEY = "drywall"


def available_materials() -> list[str]:
    """Return the catalogue keys in alphabetical order."""

    return sorted(_CATALOGUE)


def material_by_name(name: str) -> Material:
    """Look up a catalogue material by key or display name (case-insensitive)."""

    key = name.strip().lower().replace(" ", "_")
    entry = _CATALOGUE.get(key)
    if entry is None:
        for display, absorption, density in _CATALOGUE.values():
            if display.lower() == name.strip().lower():
                entry = (display, absorption, density)
                break
    if entry is None:
        raise ValueError(f"Unknown material: {name!r}")
    display, absorption, density = entry
    return Material(
        name=display,
        absorption_coefficient=absorption,
        reflection_coefficient=round(1.0 - absorption, 4),
        density=density,
    )


DEFAULT_MATERIAL = material_by_name(DEFAULT_MATERIAL_KEY)


__all__ = ["available_materials", "material_by_name", "DEFAULT_MATERIAL", "DEFAULT_MATERIAL_KEY"]
