from .drone_db import DroneDB, DroneSpec, BatteryProfile, SpecValue
from .models import CameraSpec


DroneDB.DRONES = {
    # --- DJI MINI SERIES ---
    "DJI Mini 3": DroneSpec(
        name="DJI Mini 3",
        battery=BatteryProfile(
            drone_name="DJI Mini 3",
            capacity_mah=2453,
            nominal_voltage=7.38,
            max_flight_time=38.0,
            cruise_current_draw=3.5,
            hover_current_draw=2.8,
        ),
        camera=CameraSpec(sensor_width_mm=9.7, sensor_height_mm=7.3, focal_length_mm=6.7, image_width_px=4000),
        cruise_speed_ms=SpecValue(10.0, "m/s", "Normal mode cruise", "DJI Specs"),
        max_wind_mps=SpecValue(10.7, "m/s", "Level 5 resistance", "DJI Specs"),
    ),

    "DJI Mini 3 Pro": DroneSpec(
        name="DJI Mini 3 Pro",
        battery=BatteryProfile(
            drone_name="DJI Mini 3 Pro",
            capacity_mah=2453,
            nominal_voltage=7.38,
            max_flight_time=34.0,
            cruise_current_draw=3.8,
            hover_current_draw=3.0,
        ),
        camera=CameraSpec(sensor_width_mm=9.7, sensor_height_mm=7.3, focal_length_mm=6.7, image_width_px=4032),
        cruise_speed_ms=SpecValue(10.0, "m/s", "Normal mode cruise", "DJI Specs"),
        max_wind_mps=SpecValue(10.7, "m/s", "Level 5 resistance", "DJI Specs"),
    ),

    # --- DJI AIR / MAVIC SERIES ---
    "DJI Air 3": DroneSpec(
        name="DJI Air 3",
        battery=BatteryProfile(
            drone_name="DJI Air 3",
            capacity_mah=4241,
            nominal_voltage=11.55,
            max_flight_time=46.0,
            cruise_current_draw=5.2,
            hover_current_draw=4.0,
        ),
        camera=CameraSpec(sensor_width_mm=9.6, sensor_height_mm=7.2, focal_length_mm=6.72, image_width_px=8064),
        cruise_speed_ms=SpecValue(12.0, "m/s", "Normal mode cruise", "DJI Specs"),
        max_wind_mps=SpecValue(12.0, "m/s", "Max wind resistance", "DJI Specs"),
    ),

    "DJI Mavic 3": DroneSpec(
        name="DJI Mavic 3",
        battery=BatteryProfile(
            drone_name="DJI Mavic 3",
            capacity_mah=5000,
            nominal_voltage=15.4,
            max_flight_time=46.0,
            cruise_current_draw=6.0,
            hover_current_draw=4.5,
        ),
        camera=CameraSpec(sensor_width_mm=17.3, sensor_height_mm=13.0, focal_length_mm=12.29, image_width_px=5280),
        cruise_speed_ms=SpecValue(12.0, "m/s", "Normal mode cruise", "DJI Specs"),
        max_wind_mps=SpecValue(12.0, "m/s", "Max wind resistance", "DJI Specs"),
    ),

    # --- FALLBACK ---
    "Generic Drone": DroneSpec(
        name="Generic Drone",
        battery=BatteryProfile(),
        camera=CameraSpec(),
        cruise_speed_ms=SpecValue(8.0, "m/s", "Conservative default"),
        max_wind_mps=SpecValue(8.0, "m/s", "Conservative default"),
    ),
}
