"""
Geodesic helpers on a spherical Earth model.

Bearings are in degrees, 0 = North, increasing clockwise. Local planar
coordinates are (x, y) metres with x pointing East and y pointing North.
Survey polygons are sequences of (lon, lat) vertices or a shapely Polygon
in lon/lat.
"""
import math
from typing import List, Optional, Sequence, Tuple, Union

from shapely.geometry import Polygon

from ..data.models import Coordinate

# Mean Earth radius (m)
EARTH_RADIUS = 6371000.0

PolygonLike = Union[Polygon, Sequence[Tuple[float, float]]]


def normalize_angle(angle: float) -> float:
    """Wraps an angle into [0, 360)."""
    angle = math.fmod(angle, 360.0)
    if angle < 0.0:
        angle += 360.0
    # fmod of a tiny negative value can round up to exactly 360
    return 0.0 if angle >= 360.0 else angle


def turn_angle(bearing1: float, bearing2: float) -> float:
    """Smallest angle between two bearings, in [0, 180]."""
    diff = abs(bearing2 - bearing1) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance in metres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (math.sin(d_lat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS * c


def bearing(a: Coordinate, b: Coordinate) -> float:
    """Initial great-circle bearing from a to b. Identical points give 0."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    y = math.sin(d_lon) * math.cos(lat2)
    x = (math.cos(lat1) * math.sin(lat2) -
         math.sin(lat1) * math.cos(lat2) * math.cos(d_lon))
    if x == 0.0 and y == 0.0:
        return 0.0
    return normalize_angle(math.degrees(math.atan2(y, x)))


def destination(origin: Coordinate, distance_m: float, bearing_deg: float) -> Coordinate:
    """Point reached travelling distance_m along bearing_deg. Keeps the origin altitude."""
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)
    brng = math.radians(bearing_deg)
    d = distance_m / EARTH_RADIUS

    lat2 = math.asin(math.sin(lat1) * math.cos(d) +
                     math.cos(lat1) * math.sin(d) * math.cos(brng))
    lon2 = lon1 + math.atan2(math.sin(brng) * math.sin(d) * math.cos(lat1),
                             math.cos(d) - math.sin(lat1) * math.sin(lat2))

    lon_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return Coordinate(math.degrees(lat2), lon_deg, origin.altitude)


def to_local_xy(coord: Coordinate, origin: Coordinate) -> Tuple[float, float]:
    """Projects coord onto the tangent plane at origin (polar form)."""
    d = distance(origin, coord)
    b = math.radians(bearing(origin, coord))
    return d * math.sin(b), d * math.cos(b)


def from_local_xy(point: Tuple[float, float], origin: Coordinate,
                  altitude: Optional[float] = None) -> Coordinate:
    """Inverse of to_local_xy."""
    x, y = point[0], point[1]
    d = math.hypot(x, y)
    coord = destination(origin, d, normalize_angle(math.degrees(math.atan2(x, y))))
    if altitude is not None:
        return coord.with_altitude(altitude)
    return coord


def polygon_vertices(polygon: PolygonLike) -> List[Tuple[float, float]]:
    """Normalises a survey polygon to an open list of (lon, lat) vertices."""
    if isinstance(polygon, Polygon):
        if polygon.is_empty:
            return []
        coords = [(float(p[0]), float(p[1])) for p in polygon.exterior.coords]
        return coords[:-1]

    vertices = [(float(p[0]), float(p[1])) for p in polygon]
    # Explicitly closed rings repeat the first vertex
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    return vertices


def polygon_centroid(polygon: PolygonLike) -> Coordinate:
    """
    Mean of the vertices. Only meant as a local projection origin, not a true
    spherical centroid. Fewer than 3 vertices yields the first vertex.
    """
    vertices = polygon_vertices(polygon)
    if not vertices:
        return Coordinate(0.0, 0.0)
    if len(vertices) < 3:
        lon, lat = vertices[0]
        return Coordinate(lat, lon)

    sum_lon = sum(v[0] for v in vertices)
    sum_lat = sum(v[1] for v in vertices)
    n = len(vertices)
    return Coordinate(sum_lat / n, sum_lon / n)


def project_polygon(polygon: PolygonLike, origin: Optional[Coordinate] = None) -> List[Tuple[float, float]]:
    """Local (x, y) metres of every vertex relative to origin (centroid by default)."""
    vertices = polygon_vertices(polygon)
    if origin is None:
        origin = polygon_centroid(vertices)
    return [to_local_xy(Coordinate(lat, lon), origin) for lon, lat in vertices]


def polygon_area(polygon: PolygonLike) -> float:
    """
    Planar (shoelace) area in square metres, computed on the local tangent
    plane around the vertex centroid. Degrades near the poles and for very
    large areas.
    """
    vertices = polygon_vertices(polygon)
    if len(vertices) < 3:
        return 0.0
    return Polygon(project_polygon(vertices)).area
