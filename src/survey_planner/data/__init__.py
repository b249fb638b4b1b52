from .models import (
    Coordinate, Waypoint, HeadingMode, WaypointAction,
    PatternType, CameraSpec, MissionParameters,
)
from .drone_db import DroneDB, DroneSpec, BatteryProfile, SpecValue
# Populates DroneDB.DRONES
from . import drone_data
