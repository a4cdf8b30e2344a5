"""Localization target: a real-world point of interest used for visual positioning."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LatLng:
    """Geographic point in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocalizationTarget:
    """Immutable record of a localization target.

    Attributes:
        identifier: unique identifier of the target
        center: geolocation of the target
        name: display name
        image_url: url where the hint image is stored
        default_anchor: default anchor payload
    """

    identifier: str
    center: LatLng
    name: str
    image_url: str
    default_anchor: str
