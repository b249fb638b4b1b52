import logging
from dataclasses import replace
from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon, LineString
from shapely import affinity

from ..data.models import (
    Coordinate, Waypoint, HeadingMode, WaypointAction, MissionParameters, PatternType,
)
from ..utils import geo_utils
from ..utils.geo_utils import PolygonLike

logger = logging.getLogger(__name__)


class CoveragePatternGenerator:
    """
    Boustrophedon ("lawnmower") coverage over a survey polygon.

    The polygon is projected onto the tangent plane at its vertex centroid,
    rotated so the flight lines become horizontal, cut with horizontal scan
    lines and rotated back. The direction is the rotation applied to the
    scan lines in the local plane: 0 gives East-West lines, 90 North-South.
    """

    DEFAULT_SPEED = 8.0
    CIRCULAR_SPEED = 5.0
    CIRCULAR_POINTS = 24

    def __init__(self):
        self.last_error = ""

    def generate(self, polygon: PolygonLike, params: MissionParameters) -> List[Waypoint]:
        """Builds the pattern requested by the mission parameters."""
        self.last_error = ""
        if params.use_camera_spacing:
            spacing = self.calculate_optimal_spacing(
                params.altitude, params.side_overlap,
                params.camera.sensor_width_mm, params.camera.focal_length_mm)
        else:
            spacing = params.spacing

        if params.pattern == PatternType.GRID:
            return self.generate_grid(polygon, params.altitude, spacing, speed=params.speed)
        if params.pattern == PatternType.CIRCULAR:
            vertices = geo_utils.polygon_vertices(polygon)
            if len(vertices) < 3:
                self.last_error = "Invalid polygon (less than 3 points)"
                logger.warning(self.last_error)
                return []
            center = geo_utils.polygon_centroid(vertices)
            radius = max(geo_utils.distance(center, Coordinate(lat, lon)) for lon, lat in vertices)
            return self.generate_circular(center, radius, params.altitude, self.CIRCULAR_POINTS)
        return self.generate_parallel_lines(
            polygon, params.altitude, params.direction, spacing, speed=params.speed)

    def generate_parallel_lines(self, polygon: PolygonLike, altitude: float, direction: float,
                                spacing: float, speed: float = DEFAULT_SPEED) -> List[Waypoint]:
        """
        Parallel flight lines covering the polygon.

        :param polygon: Survey area as (lon, lat) vertices or a shapely Polygon.
        :param altitude: Flight altitude in metres.
        :param direction: Line direction in degrees.
        :param spacing: Distance between flight lines in metres.
        :return: Waypoints with a TAKE_PHOTO action, numbered from 0.
        """
        self.last_error = ""
        vertices = geo_utils.polygon_vertices(polygon)
        if len(vertices) < 3:
            self.last_error = "Invalid polygon (less than 3 points)"
            logger.warning(self.last_error)
            return []
        if spacing <= 0:
            self.last_error = f"Invalid line spacing: {spacing}"
            logger.warning(self.last_error)
            return []

        # 1. Local projection around the vertex centroid
        origin = geo_utils.polygon_centroid(vertices)
        local = geo_utils.project_polygon(vertices, origin)

        # 2. Scan-line points in the local plane
        points = self.generate_parallel_line_points(local, direction, spacing)

        # 3. Back to geographic coordinates
        waypoints = []
        for i, point in enumerate(points):
            coord = geo_utils.from_local_xy(point, origin, altitude)
            waypoints.append(Waypoint(
                coordinate=coord,
                index=i,
                speed=speed,
                actions=(WaypointAction.TAKE_PHOTO,),
            ))

        logger.info("Parallel pattern: %d waypoints (direction %.1f deg, spacing %.1f m)",
                    len(waypoints), direction, spacing)
        return waypoints

    def generate_parallel_line_points(self, local_polygon: Sequence[Tuple[float, float]],
                                      direction: float, spacing: float) -> List[Tuple[float, float]]:
        """
        Scan-line intersection on a polygon already in local metres.
        Returns the boustrophedon-ordered (x, y) points, rotated back to the
        original frame.
        """
        if len(local_polygon) < 3 or spacing <= 0:
            return []

        # Rotate so flight lines are horizontal (constant y)
        rotated_poly = affinity.rotate(Polygon(local_polygon), -direction, origin=(0.0, 0.0))
        min_x, min_y, max_x, max_y = rotated_poly.bounds

        ring = np.asarray(rotated_poly.exterior.coords)
        p1 = ring[:-1]
        p2 = ring[1:]

        points = []
        going_right = True
        odd_lines = 0
        i = 0
        y = min_y + spacing / 2.0

        while y <= max_y:
            # Half-open straddle test so a vertex on the line is counted once
            straddle = (((p1[:, 1] <= y) & (p2[:, 1] > y)) |
                        ((p2[:, 1] <= y) & (p1[:, 1] > y)))

            if np.count_nonzero(straddle) >= 2:
                a = p1[straddle]
                b = p2[straddle]
                xs = np.sort(a[:, 0] + (y - a[:, 1]) * (b[:, 0] - a[:, 0]) / (b[:, 1] - a[:, 1]))

                if len(xs) % 2:
                    # Degenerate / self-intersecting ring: drop the unpaired exit
                    odd_lines += 1
                    xs = xs[:-1]

                pairs = xs.reshape(-1, 2)
                if not going_right:
                    pairs = pairs[::-1, ::-1]
                points.extend((float(x), y) for x in pairs.ravel())
                going_right = not going_right

            i += 1
            y = min_y + spacing / 2.0 + i * spacing

        if odd_lines:
            logger.warning("%d scan line(s) had an odd number of intersections; "
                           "unpaired crossings were dropped", odd_lines)
        logger.debug("Scan lines: %d, points: %d", i, len(points))

        if not points:
            return []
        if len(points) == 1:
            return points

        restored = affinity.rotate(LineString(points), direction, origin=(0.0, 0.0))
        return [(float(x), float(y)) for x, y in restored.coords]

    def generate_grid(self, polygon: PolygonLike, altitude: float, spacing: float,
                      speed: float = DEFAULT_SPEED) -> List[Waypoint]:
        """Two perpendicular parallel-line passes (0 and 90 degrees), renumbered."""
        lines1 = self.generate_parallel_lines(polygon, altitude, 0.0, spacing, speed=speed)
        error = self.last_error
        lines2 = self.generate_parallel_lines(polygon, altitude, 90.0, spacing, speed=speed)
        self.last_error = self.last_error or error

        return [replace(wp, index=i) for i, wp in enumerate(lines1 + lines2)]

    def generate_circular(self, center: Coordinate, radius: float, altitude: float,
                          points: int) -> List[Waypoint]:
        """Orbit around a point of interest, camera facing the centre."""
        if points <= 0:
            return []

        waypoints = []
        for i in range(points):
            angle = (360.0 / points) * i
            coord = geo_utils.destination(center, radius, angle).with_altitude(altitude)
            waypoints.append(Waypoint(
                coordinate=coord,
                index=i,
                speed=self.CIRCULAR_SPEED,
                heading_mode=HeadingMode.POINT_OF_INTEREST,
                heading=geo_utils.normalize_angle(angle + 180.0),
                actions=(WaypointAction.TAKE_PHOTO,),
            ))
        return waypoints

    @staticmethod
    def calculate_optimal_spacing(altitude: float, side_overlap: float,
                                  sensor_width: float, focal_length: float) -> float:
        """
        Line spacing from the pinhole camera footprint.

        :param altitude: Flight altitude in metres.
        :param side_overlap: Desired overlap percentage (0-100).
        :param sensor_width: Sensor width in mm.
        :param focal_length: Focal length in mm.
        """
        footprint_width = (sensor_width * altitude) / focal_length
        return footprint_width * (1.0 - side_overlap / 100.0)
