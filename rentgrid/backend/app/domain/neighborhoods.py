# app/domain/neighborhoods.py
from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class NeighborhoodBand:
    upper_lat: float
    label: str
    # optional east/west split inside the band: lng < split_lng -> label, else east_label
    east_label: str | None = None
    split_lng: float | None = None

    def resolve(self, lng: float) -> str:
        if self.split_lng is None or self.east_label is None:
            return self.label
        return self.label if lng < self.split_lng else self.east_label


@dataclass(frozen=True)
class NeighborhoodClassifier:
    """
    Latitude ladder, south to north. Pure and total: any (lat, lng) maps to a label.
    """

    bands: tuple[NeighborhoodBand, ...]
    northern_label: str

    def __post_init__(self) -> None:
        if not self.bands:
            raise ConfigurationError("Neighborhood ladder needs at least one band")
        uppers = [b.upper_lat for b in self.bands]
        if any(a >= b for a, b in zip(uppers, uppers[1:])):
            raise ConfigurationError(f"Neighborhood bands must be strictly ascending: {uppers}")
        for b in self.bands:
            if (b.split_lng is None) != (b.east_label is None):
                raise ConfigurationError(f"Band {b.label!r} needs both split_lng and east_label")

    def classify(self, lat: float, lng: float) -> str:
        for band in self.bands:
            if lat < band.upper_lat:
                return band.resolve(lng)
        return self.northern_label

    def labels(self) -> tuple[str, ...]:
        out: list[str] = []
        for b in self.bands:
            for lbl in (b.label, b.east_label):
                if lbl and lbl not in out:
                    out.append(lbl)
        if self.northern_label not in out:
            out.append(self.northern_label)
        return tuple(out)


MANHATTAN_NEIGHBORHOODS = NeighborhoodClassifier(
    bands=(
        NeighborhoodBand(40.715, "Financial District"),
        NeighborhoodBand(40.725, "Tribeca"),
        NeighborhoodBand(40.735, "SoHo"),
        NeighborhoodBand(40.745, "Greenwich Village"),
        NeighborhoodBand(40.755, "Chelsea"),
        NeighborhoodBand(40.765, "Midtown"),
        NeighborhoodBand(40.775, "Midtown East"),
        NeighborhoodBand(40.800, "Upper West Side", east_label="Upper East Side", split_lng=-73.96),
    ),
    northern_label="Harlem",
)
