# gpxstats/visualize/plot.py
"""
Plotting routines for gpxstats
"""

import matplotlib.pyplot as plt

from gpxstats.analyze.track import Track
from gpxstats.geo.position import distance_3d


def _arrival_speeds(track):
    """
    Speed of the segment arriving at each retained position.

    The start has no arriving segment, and a zero-time segment has no defined
    speed; both are coloured as 0 m/s.
    """
    speeds = [0.0]
    for i in range(1, len(track)):
        dt = track.arrived[i] - track.departed[i - 1]
        speeds.append(distance_3d(track[i - 1], track[i]) / dt if dt > 0 else 0.0)
    return speeds


def plot_track(route, show=True):
    """
    Scatter every retained position of a route or track.

    Tracks are coloured by arrival speed, routes by elevation. Returns the
    matplotlib Figure.
    """
    positions = list(route)
    if isinstance(route, Track):
        colours = _arrival_speeds(route)
        label = "Speed (m/s)"
        title = f"{route.name} coloured by speed"
    else:
        colours = [p.elevation for p in positions]
        label = "Elevation (m)"
        title = f"{route.name} coloured by elevation"

    fig = plt.figure(figsize=(8, 6))
    sc = plt.scatter(
        [p.longitude for p in positions],
        [p.latitude for p in positions],
        c=colours, s=5, cmap="viridis",
    )
    plt.colorbar(sc, label=label)
    plt.xlabel("Longitude")
    plt.ylabel("Latitude")
    plt.title(title)
    if show:
        plt.show()
    return fig
