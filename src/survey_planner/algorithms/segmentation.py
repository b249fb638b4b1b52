import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional

from ..data.models import Coordinate, Waypoint
from ..data.drone_db import BatteryProfile
from ..utils import geo_utils

logger = logging.getLogger(__name__)

RTH_BUFFER_MIN = 2.5         # handling/repositioning overhead for every battery after the first
SAFETY_BUFFER_MIN = 1.0      # reserve kept on every acceptance check
LANDING_ALLOWANCE_S = 30.0
DEFAULT_CRUISE_SPEED = 10.0  # m/s


class PartitionOutcome(Enum):
    FEASIBLE = "feasible"
    # A waypoint whose return-to-home alone exceeds the available time; it
    # gets its own sub-mission so planning always terminates.
    INFEASIBLE_LEG_ISOLATED = "infeasible_leg_isolated"


@dataclass
class SubMission:
    battery_number: int                  # 1-based
    waypoints: List[Waypoint]
    waypoint_start: int                  # index into the original route
    waypoint_end: int                    # inclusive
    estimated_flight_time: float         # min, legs + return to home
    estimated_distance: float            # m, legs between assigned waypoints
    launch_point: Coordinate
    landing_point: Coordinate
    segment_time: float = 0.0            # min
    rth_time: float = 0.0                # min, from the last waypoint incl. landing
    outcome: PartitionOutcome = PartitionOutcome.FEASIBLE
    notes: str = ""

    @property
    def is_feasible(self) -> bool:
        return self.outcome == PartitionOutcome.FEASIBLE

    def summary(self) -> str:
        return (f"Battery {self.battery_number}: {len(self.waypoints)} waypoints, "
                f"{self.estimated_flight_time:.1f} min flight, {self.estimated_distance:.0f} m distance")


@dataclass
class BatteryPlan:
    """Ordered sub-missions; iterates and indexes like a list."""
    sub_missions: List[SubMission] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __len__(self):
        return len(self.sub_missions)

    def __iter__(self):
        return iter(self.sub_missions)

    def __getitem__(self, item):
        return self.sub_missions[item]

    @property
    def has_infeasible_legs(self) -> bool:
        return any(not m.is_feasible for m in self.sub_missions)

    @property
    def total_flight_time(self) -> float:
        return sum(m.estimated_flight_time for m in self.sub_missions)

    @property
    def total_distance(self) -> float:
        return sum(m.estimated_distance for m in self.sub_missions)

    def waypoints(self) -> List[Waypoint]:
        return [wp for m in self.sub_missions for wp in m.waypoints]

    def summary(self) -> str:
        if not self.sub_missions:
            return "No mission data available."
        lines = [m.summary() for m in self.sub_missions]
        if self.has_infeasible_legs:
            lines.append(f"WARNING: {len(self.warnings)} waypoint(s) cannot be reached within the safety margin")
        return "\n".join(lines)


class _BatteryRange(NamedTuple):
    start: int
    end: int
    segment_time: float
    distance: float
    rth_time: float
    outcome: PartitionOutcome


class BatteryPartitioner:
    """
    Splits an ordered route into battery-feasible sub-missions. Each battery
    keeps enough time to fly back to the launch point and land.
    """

    def __init__(self, profile: BatteryProfile, home_point: Optional[Coordinate] = None,
                 speed: Optional[float] = None):
        """
        :param profile: Battery profile; usable time is read on every run.
        :param home_point: Launch/landing location. Defaults to the first waypoint.
        :param speed: Cruise speed (m/s). Defaults to each waypoint's own speed.
        """
        self.profile = profile
        self.home_point = home_point
        self.speed = speed

    def partition(self, waypoints: List[Waypoint]) -> BatteryPlan:
        plan = BatteryPlan()
        if not waypoints:
            return plan

        home = self._home(waypoints)
        for battery_number, r in enumerate(self._battery_ranges(waypoints, home), start=1):
            mission = SubMission(
                battery_number=battery_number,
                waypoints=list(waypoints[r.start:r.end + 1]),
                waypoint_start=r.start,
                waypoint_end=r.end,
                estimated_flight_time=r.segment_time + r.rth_time,
                estimated_distance=r.distance,
                # Later batteries take off at home and resume at their first waypoint
                launch_point=home if battery_number == 1 else waypoints[r.start].coordinate,
                landing_point=home,
                segment_time=r.segment_time,
                rth_time=r.rth_time,
                outcome=r.outcome,
            )
            if r.outcome == PartitionOutcome.INFEASIBLE_LEG_ISOLATED:
                message = (f"Battery {battery_number}: waypoint {r.start} needs {r.rth_time:.1f} min "
                           f"to return home, more than the available battery time")
                mission.notes = "Isolated: return-to-home exceeds the safety margin"
                plan.warnings.append(message)
                logger.warning(message)
            plan.sub_missions.append(mission)

        for mission in plan.sub_missions[:-1]:
            mission.notes = mission.notes or (f"Land at home, swap battery {mission.battery_number} "
                                              f"→ {mission.battery_number + 1}, resume")
        last = plan.sub_missions[-1]
        last.notes = last.notes or "Final battery - mission complete"

        logger.info("Route of %d waypoints split over %d battery(ies)", len(waypoints), len(plan))
        return plan

    def calculate_required_batteries(self, waypoints: List[Waypoint]) -> int:
        if not waypoints:
            return 0
        home = self._home(waypoints)
        return sum(1 for _ in self._battery_ranges(waypoints, home))

    def _home(self, waypoints: List[Waypoint]) -> Coordinate:
        return self.home_point if self.home_point is not None else waypoints[0].coordinate

    def _battery_ranges(self, waypoints: List[Waypoint], home: Coordinate) -> Iterator[_BatteryRange]:
        """
        Accumulating -> commit loop shared by partition() and
        calculate_required_batteries(), so both always agree.
        """
        n = len(waypoints)
        usable = self.profile.usable_flight_time
        current = 0
        battery = 1

        while current < n:
            available = usable if battery == 1 else usable - RTH_BUFFER_MIN
            start = current
            rth = self._return_time(waypoints[start], home)

            if rth + SAFETY_BUFFER_MIN > available:
                yield _BatteryRange(start, start, 0.0, 0.0, rth, PartitionOutcome.INFEASIBLE_LEG_ISOLATED)
                current = start + 1
                battery += 1
                continue

            segment_time = 0.0
            distance = 0.0
            end = start
            while end + 1 < n:
                leg_distance = geo_utils.distance(waypoints[end].coordinate, waypoints[end + 1].coordinate)
                leg_time = self._leg_time(leg_distance, waypoints[end + 1])
                next_rth = self._return_time(waypoints[end + 1], home)

                if segment_time + leg_time + next_rth + SAFETY_BUFFER_MIN > available:
                    break

                segment_time += leg_time
                distance += leg_distance
                rth = next_rth
                end += 1

            yield _BatteryRange(start, end, segment_time, distance, rth, PartitionOutcome.FEASIBLE)
            current = end + 1
            battery += 1

    def _speed_for(self, waypoint: Waypoint) -> float:
        speed = self.speed if self.speed is not None else waypoint.speed
        if speed <= 0.0:
            logger.warning("Non-positive speed %.2f; using %.1f m/s", speed, DEFAULT_CRUISE_SPEED)
            return DEFAULT_CRUISE_SPEED
        return speed

    def _leg_time(self, distance_m: float, target: Waypoint) -> float:
        """Leg travel time in minutes."""
        return distance_m / self._speed_for(target) / 60.0

    def _return_time(self, waypoint: Waypoint, home: Coordinate) -> float:
        """Return-to-home time in minutes including the landing allowance."""
        seconds = geo_utils.distance(waypoint.coordinate, home) / self._speed_for(waypoint)
        return (seconds + LANDING_ALLOWANCE_S) / 60.0


def partition(waypoints: List[Waypoint], profile: BatteryProfile,
              home_point: Optional[Coordinate] = None, speed: Optional[float] = None) -> BatteryPlan:
    return BatteryPartitioner(profile, home_point, speed).partition(waypoints)


def calculate_required_batteries(waypoints: List[Waypoint], profile: BatteryProfile,
                                 home_point: Optional[Coordinate] = None, speed: Optional[float] = None) -> int:
    return BatteryPartitioner(profile, home_point, speed).calculate_required_batteries(waypoints)
