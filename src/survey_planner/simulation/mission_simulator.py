import logging
from typing import List

from ..data.models import Coordinate, Waypoint
from ..data.drone_db import BatteryProfile
from ..utils import geo_utils

logger = logging.getLogger(__name__)

TAKEOFF_TIME_MIN = 0.5
LANDING_TIME_MIN = 0.5
PHOTO_OVERHEAD = 1.15   # capture stops along the lines
TURN_OVERHEAD = 1.10    # deceleration at direction changes
MAX_SPEED_MS = 15.0
DEFAULT_SPEED = 10.0


class MissionSimulator:
    """
    Battery and energy estimates for a planned route.
    """

    def __init__(self, profile: BatteryProfile):
        self.profile = profile

    @staticmethod
    def _speed(speed: float) -> float:
        if speed <= 0.0:
            logger.warning("Non-positive speed %.2f; using %.1f m/s", speed, DEFAULT_SPEED)
            return DEFAULT_SPEED
        return speed

    def estimate_flight_time(self, waypoints: List[Waypoint], speed: float) -> float:
        """
        Total mission time in minutes: legs plus takeoff and landing, then the
        photo-capture and turn overheads.
        """
        if not waypoints:
            return 0.0

        speed = self._speed(speed)
        total = 0.0
        for a, b in zip(waypoints, waypoints[1:]):
            total += geo_utils.distance(a.coordinate, b.coordinate) / speed / 60.0

        total += TAKEOFF_TIME_MIN + LANDING_TIME_MIN
        total *= PHOTO_OVERHEAD
        total *= TURN_OVERHEAD
        return total

    def battery_usage(self, waypoints: List[Waypoint], speed: float) -> float:
        """Estimated percentage of one battery's usable time (can exceed 100)."""
        usable = self.profile.usable_flight_time
        if usable <= 0.0:
            return 100.0
        return self.estimate_flight_time(waypoints, speed) / usable * 100.0

    def energy_consumption(self, distance: float, altitude: float, speed: float) -> float:
        """
        Energy in Wh for a straight segment. Hover power scaled up with speed
        (+30% at 15 m/s) and altitude (+10% at 120 m).
        """
        speed = self._speed(speed)
        time_hours = (distance / speed) / 3600.0

        base_power = self.profile.hover_current_draw * self.profile.nominal_voltage
        speed_factor = 1.0 + (speed / MAX_SPEED_MS) * 0.3
        altitude_factor = 1.0 + (altitude / 120.0) * 0.1

        return base_power * speed_factor * altitude_factor * time_hours

    def estimate_current_draw(self, speed: float, altitude: float, wind_speed: float) -> float:
        """Current draw in amperes for the given flight conditions."""
        current = self.profile.hover_current_draw

        speed_ratio = speed / MAX_SPEED_MS
        current += (self.profile.cruise_current_draw - self.profile.hover_current_draw) * speed_ratio

        # 20% more at 10 m/s wind
        current *= 1.0 + (wind_speed / 10.0) * 0.2

        # Thinner air above 100 m
        if altitude > 100.0:
            current *= 1.0 + ((altitude - 100.0) / 200.0) * 0.15

        return current

    def find_optimal_return_point(self, waypoints: List[Waypoint], home: Coordinate,
                                  elapsed_time: float = 0.0, speed: float = DEFAULT_SPEED) -> int:
        """
        Index of the last waypoint from which the aircraft can still get home
        with a one minute reserve, given elapsed_time minutes already flown.
        """
        if not waypoints:
            return -1

        speed = self._speed(speed)
        remaining = self.profile.usable_flight_time - elapsed_time

        for i, wp in enumerate(waypoints):
            rth = (geo_utils.distance(wp.coordinate, home) / speed + 30.0) / 60.0
            if rth + 1.0 > remaining:
                return max(0, i - 1)

        return len(waypoints) - 1
