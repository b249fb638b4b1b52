from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# ----------------------------
# STRUCTURE DEFINITIONS
# ----------------------------

@dataclass(frozen=True)
class Coordinate:
    """Geographic position. Altitude reference (AGL/MSL) is up to the caller."""
    latitude: float
    longitude: float
    altitude: float = 0.0

    def with_altitude(self, altitude: float) -> "Coordinate":
        return Coordinate(self.latitude, self.longitude, altitude)


class HeadingMode(Enum):
    AUTO = "auto"                            # Follow flight path
    FIXED = "fixed"                          # Maintain specific heading
    POINT_OF_INTEREST = "point_of_interest"  # Face POI
    MANUAL = "manual"                        # Custom heading per waypoint


class WaypointAction(Enum):
    NONE = "none"
    TAKE_PHOTO = "take_photo"
    START_VIDEO = "start_video"
    STOP_VIDEO = "stop_video"
    HOVER = "hover"
    ROTATE_AIRCRAFT = "rotate_aircraft"


@dataclass(frozen=True)
class Waypoint:
    coordinate: Coordinate
    index: int = 0
    speed: float = 8.0          # m/s
    heading_mode: HeadingMode = HeadingMode.AUTO
    heading: float = 0.0        # degrees
    actions: Tuple[WaypointAction, ...] = ()
    hover_time: int = 0         # seconds

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude

    @property
    def altitude(self) -> float:
        return self.coordinate.altitude


class PatternType(Enum):
    PARALLEL = "parallel"
    GRID = "grid"
    CIRCULAR = "circular"


@dataclass
class CameraSpec:
    """Pinhole camera geometry. Sensor sizes and focal length in mm."""
    sensor_width_mm: float = 6.3
    sensor_height_mm: float = 4.7
    focal_length_mm: float = 6.72
    image_width_px: int = 4000


@dataclass
class MissionParameters:
    altitude: float = 75.0          # m
    speed: float = 8.0              # m/s
    spacing: float = 50.0           # m between flight lines (used when side overlap is not applied)
    direction: float = 0.0          # degrees
    front_overlap: float = 75.0     # %
    side_overlap: float = 65.0      # %
    pattern: PatternType = PatternType.PARALLEL
    camera: CameraSpec = field(default_factory=CameraSpec)
    use_camera_spacing: bool = True

    def ground_sample_distance(self) -> float:
        """GSD in cm/pixel."""
        c = self.camera
        return (c.sensor_width_mm * self.altitude * 100.0) / (c.focal_length_mm * c.image_width_px)

    def image_footprint_width(self) -> float:
        return (self.camera.sensor_width_mm * self.altitude) / self.camera.focal_length_mm

    def image_footprint_height(self) -> float:
        return (self.camera.sensor_height_mm * self.altitude) / self.camera.focal_length_mm

    def photo_interval_distance(self) -> float:
        """Along-track distance between photos for the requested front overlap."""
        return self.image_footprint_height() * (1.0 - self.front_overlap / 100.0)
