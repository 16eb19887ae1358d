from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Regime = Literal["discrete", "continuous"]


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]  # [lng, lat]


class PolygonGeometry(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[tuple[float, float]]]  # rings of [lng, lat]


Geometry = Annotated[Union[PointGeometry, PolygonGeometry], Field(discriminator="type")]


class TileProperties(BaseModel):
    price: int = Field(..., gt=0)
    count: int = Field(..., ge=1)
    neighborhood: str
    price_display: str
    color: str
    beds: int | None = None
    cluster_type: Literal["grid"] = "grid"
    row: int
    col: int
    center_lat: float
    center_lng: float


class TileFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: TileProperties
    geometry: Geometry


class LegendItem(BaseModel):
    color: str
    label: str
    tier: str
    range: tuple[float, float]


class TileMeta(BaseModel):
    total_listings: int = Field(..., ge=0)
    assigned: int = Field(..., ge=0)
    dropped: int = Field(..., ge=0)
    drop_reasons: dict[str, int]
    cluster_count: int = Field(..., ge=0)
    cluster_type: Literal["grid"] = "grid"
    zoom: int = 11
    source: str
    bedrooms: int | None = None
    regime: Regime = "discrete"
    domain: tuple[float, float] | None = None


class TileCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[TileFeature]
    meta: TileMeta
    legend: list[LegendItem] = Field(default_factory=list)


class PriceStats(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    avg: float = Field(..., ge=0)
    count: int = Field(..., ge=0)


class RefreshResult(BaseModel):
    refreshed: list[str]
    cells: dict[str, int]
    sources: dict[str, str]
