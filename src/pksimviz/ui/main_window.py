# src/pksimviz/ui/main_window.py
import logging

from PySide6.QtWidgets import (QFileDialog, QHBoxLayout, QMainWindow, QStatusBar, QVBoxLayout,
                               QWidget)

from pksim.config import EXPORT_FILENAME, EXPORT_SCALE
from pksim.engine import run_simulation
from pksim.interfaces import ExportError

from .controls import ControlsPanel, SimulateRequest
from .export import WidgetExporter
from .metrics_panel import MetricsPanel
from .plots import PlotWidget
from .view import SimulationView

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, exporter=None):
        super().__init__()
        self.setWindowTitle("PK Simulator")
        self.resize(1200, 760)

        central = QWidget(self); self.setCentralWidget(central)
        root = QHBoxLayout(central)

        self.controls = ControlsPanel()
        root.addWidget(self.controls, 0)

        # Everything inside chart_region ends up in the exported image
        self.chart_region = QWidget()
        right = QVBoxLayout(self.chart_region)
        self.plot = PlotWidget()
        self.tiles = MetricsPanel()
        right.addWidget(self.plot, 1)
        right.addWidget(self.tiles, 0)
        root.addWidget(self.chart_region, 1)

        self.view = SimulationView(self.plot, self.tiles)
        self.exporter = exporter or WidgetExporter()
        self.last_samples = []
        self.last_metrics = None

        self.status = QStatusBar(); self.setStatusBar(self.status)

        # wire events
        self.controls.simulateRequested.connect(self.on_simulate)
        self.controls.exportRequested.connect(self.on_export)

        # first run using current control values
        self.controls._emit_request()

    def on_simulate(self, req: SimulateRequest):
        try:
            samples, metrics = run_simulation(req.params, dt_h=req.dt_h)
            self.view.render(samples, metrics, dose_times_h=req.params.dose_times_h)
            self.last_samples, self.last_metrics = samples, metrics
            msg = f"{len(samples)} samples | AUC {metrics.auc:.1f} mg·h/L | {metrics.percent_in_range:.1f}% in range"
            self.status.showMessage(msg, 5000)
        except Exception as e:
            logger.exception("Simulation failed")
            self.status.showMessage(f"Error: {e}", 8000)

    def on_export(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export chart", EXPORT_FILENAME, "PNG image (*.png)")
        if not path:
            return
        self.export_to(path)

    def export_to(self, path, scale: float = EXPORT_SCALE) -> bool:
        try:
            written = self.exporter.save(self.chart_region, path, scale=scale)
        except ExportError as e:
            logger.error("Export failed: %s", e)
            self.status.showMessage(f"Export failed: {e}", 8000)
            return False
        self.status.showMessage(f"Saved {written}", 5000)
        return True
