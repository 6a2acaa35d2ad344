# src/pksimviz/ui/view.py
from pksim.types import Metrics, Sample

from .metrics_panel import MetricsPanel
from .plots import PlotWidget


class SimulationView:
    """Renderer for one simulation run: chart plus metric tiles."""

    def __init__(self, plot: PlotWidget, tiles: MetricsPanel):
        self.plot = plot
        self.tiles = tiles

    def render(self, samples: list[Sample], metrics: Metrics,
               dose_times_h: tuple[float, ...] = ()) -> None:
        self.plot.plot_simulation(samples, metrics, dose_times_h=dose_times_h)
        self.tiles.show_metrics(metrics)
