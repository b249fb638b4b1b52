import matplotlib.pyplot as plt

from . import geo_utils

BATTERY_COLORS = ['tab:blue', 'tab:orange', 'tab:green', 'tab:red', 'tab:purple', 'tab:brown']


def plot_mission(waypoints, polygon=None, battery_plan=None, ax=None):
    """
    Preview of a planned mission in lon/lat.

    Draws the survey boundary, the route and, when a battery plan is given,
    one colour per sub-mission. Returns the axes.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    if polygon is not None:
        vertices = geo_utils.polygon_vertices(polygon)
        if vertices:
            xs = [v[0] for v in vertices] + [vertices[0][0]]
            ys = [v[1] for v in vertices] + [vertices[0][1]]
            ax.plot(xs, ys, color='black', linewidth=2, label="Survey area")
            ax.fill(xs, ys, alpha=0.15, color='green')

    if battery_plan is not None and len(battery_plan) > 0:
        for i, mission in enumerate(battery_plan):
            color = BATTERY_COLORS[i % len(BATTERY_COLORS)]
            lons = [wp.longitude for wp in mission.waypoints]
            lats = [wp.latitude for wp in mission.waypoints]
            style = '-' if mission.is_feasible else ':'
            ax.plot(lons, lats, style, marker='.', color=color, label=f"Battery {mission.battery_number}")
        home = battery_plan[0].landing_point
        ax.plot(home.longitude, home.latitude, 'k^', markersize=10, label="Home")
    elif waypoints:
        lons = [wp.longitude for wp in waypoints]
        lats = [wp.latitude for wp in waypoints]
        ax.plot(lons, lats, '-', marker='.', color='tab:blue', label="Route")

    if waypoints:
        ax.plot(waypoints[0].longitude, waypoints[0].latitude, 'go', label="Start")
        ax.plot(waypoints[-1].longitude, waypoints[-1].latitude, 'rs', label="End")

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect('equal', adjustable='datalim')
    ax.grid(True)
    ax.legend()
    return ax
