# app/domain/address.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .neighborhoods import MANHATTAN_NEIGHBORHOODS, NeighborhoodClassifier

_STREET_RE = re.compile(r"\b(w|e|west|east)\.?\s+(\d{1,3})(?:st|nd|rd|th)\b", re.IGNORECASE)
_AVENUE_RE = re.compile(r"\b(\d{1,5})\s+(\d{1,2})(?:st|nd|rd|th)?\s+ave", re.IGNORECASE)


@dataclass(frozen=True)
class AddressHeuristic:
    """
    Fixed constants for turning a Manhattan street address into a rough position.

    Cross streets climb about 0.00063 deg of latitude per block along an avenue;
    14th St sits near 40.7359. Avenue building numbers advance ~20 per block
    starting from 14th St. West/East addresses get a single representative
    longitude on each side of Fifth Ave.
    """

    anchor_street: int = 14
    anchor_lat: float = 40.7359
    degrees_per_block: float = 0.00063
    west_lng: float = -73.98
    east_lng: float = -73.95
    avenue_numbers_per_block: int = 20
    avenue_origin_street: int = 14
    avenue_lng: float = -73.98
    keywords: tuple[tuple[str, str], ...] = (
        ("harlem", "Harlem"),
        ("upper east", "Upper East Side"),
        ("upper west", "Upper West Side"),
        ("midtown", "Midtown"),
        ("chelsea", "Chelsea"),
        ("village", "Greenwich Village"),
        ("soho", "SoHo"),
        ("tribeca", "Tribeca"),
        ("financial", "Financial District"),
    )
    default_label: str = "Midtown"

    def street_to_lat(self, street: int) -> float:
        return self.anchor_lat + (street - self.anchor_street) * self.degrees_per_block


MANHATTAN_ADDRESS_HEURISTIC = AddressHeuristic()


def estimate_neighborhood_from_address(
    address: Any,
    *,
    classifier: NeighborhoodClassifier = MANHATTAN_NEIGHBORHOODS,
    heuristic: AddressHeuristic = MANHATTAN_ADDRESS_HEURISTIC,
) -> str:
    """
    Best-effort locality guess for listings that arrived without coordinates.

    Order of attempts:
      1) "<W|E|West|East> <n>th" cross street -> latitude ladder
      2) "<building> <n>th Ave" avenue address -> estimated cross street
      3) explicit neighborhood keywords in the text
      4) heuristic.default_label

    This is not a geocoder. It never raises, whatever `address` is.
    """
    if not isinstance(address, str) or not address.strip():
        return heuristic.default_label

    text = address.lower()

    m = _STREET_RE.search(text)
    if m:
        street = int(m.group(2))
        lng = heuristic.west_lng if m.group(1).startswith("w") else heuristic.east_lng
        return classifier.classify(lat=heuristic.street_to_lat(street), lng=lng)

    m = _AVENUE_RE.search(text)
    if m:
        building = int(m.group(1))
        street = building // heuristic.avenue_numbers_per_block + heuristic.avenue_origin_street
        return classifier.classify(lat=heuristic.street_to_lat(street), lng=heuristic.avenue_lng)

    for needle, label in heuristic.keywords:
        if needle in text:
            return label

    return heuristic.default_label
