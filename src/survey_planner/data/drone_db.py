from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .models import CameraSpec

# ----------------------------
# STRUCTURE DEFINITIONS
# ----------------------------

@dataclass
class SpecValue:
    """Value container with traceability."""
    value: Any
    units: str
    conditions: str = ""
    source: str = ""


@dataclass
class BatteryProfile:
    drone_name: str = "Generic Drone"
    capacity_mah: float = 3000.0
    nominal_voltage: float = 11.1       # V
    max_flight_time: float = 25.0       # rated, minutes
    safety_margin: float = 0.20         # 0.0-1.0
    cruise_current_draw: float = 4.0    # A
    hover_current_draw: float = 3.2     # A

    # Derived values are recomputed on every access so edits to the rated
    # time or the margin are always reflected.
    @property
    def usable_flight_time(self) -> float:
        return self.max_flight_time * (1.0 - self.safety_margin)

    @property
    def usable_capacity(self) -> float:
        return self.capacity_mah * (1.0 - self.safety_margin)


@dataclass
class DroneSpec:
    name: str
    battery: BatteryProfile
    camera: CameraSpec = field(default_factory=CameraSpec)
    cruise_speed_ms: Optional[SpecValue] = None
    max_wind_mps: Optional[SpecValue] = None

# ----------------------------
# DATABASE LOGIC
# ----------------------------

class DroneDB:
    DRONES: Dict[str, DroneSpec] = {}
    DEFAULT_DRONE = "Generic Drone"

    @staticmethod
    def get_drone_names() -> List[str]:
        return list(DroneDB.DRONES.keys())

    @staticmethod
    def get_specs(drone_name: str) -> Optional[DroneSpec]:
        return DroneDB.DRONES.get(drone_name)

    @staticmethod
    def get_battery_profile(drone_name: str) -> BatteryProfile:
        """
        Battery profile for a catalogued drone. Unknown names fall back to the
        conservative generic profile.
        """
        spec = DroneDB.DRONES.get(drone_name) or DroneDB.DRONES.get(DroneDB.DEFAULT_DRONE)
        if spec is None:
            return BatteryProfile()
        b = spec.battery
        return BatteryProfile(
            drone_name=b.drone_name,
            capacity_mah=b.capacity_mah,
            nominal_voltage=b.nominal_voltage,
            max_flight_time=b.max_flight_time,
            safety_margin=b.safety_margin,
            cruise_current_draw=b.cruise_current_draw,
            hover_current_draw=b.hover_current_draw,
        )

    @staticmethod
    def exceeds_wind_limit(drone: DroneSpec, wind_speed: float) -> bool:
        """True when wind_speed (m/s) is above the rated wind resistance. Unrated drones never exceed."""
        limit = drone.max_wind_mps
        if limit is None: return False
        return wind_speed > float(limit.value)

    @staticmethod
    def theoretical_range_km(drone: DroneSpec, usable: bool = True) -> Optional[float]:
        speed_sv = drone.cruise_speed_ms
        if speed_sv is None: return None

        minutes = drone.battery.usable_flight_time if usable else drone.battery.max_flight_time
        try:
            return float(speed_sv.value) * minutes * 60.0 / 1000.0
        except (TypeError, ValueError):
            return None
