# src/pksimviz/ui/plots.py
import math

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from pksim.simulate import samples_to_arrays

BAND_BRUSH = (34, 197, 94, 40)
BAND_COLOR = (22, 163, 74)
DOSE_COLOR = (148, 163, 184)
CURVE_COLOR = (79, 70, 229)
MAX_DOSE_MARKERS = 100


def nearest_index(t: np.ndarray, x: float) -> int:
    """Index of the sample time in sorted t closest to x."""
    idx = int(np.clip(np.searchsorted(t, x), 0, len(t) - 1))
    if idx > 0 and abs(t[idx - 1] - x) <= abs(t[idx] - x):
        return idx - 1
    return idx


class PlotWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Main plot area
        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground("w")
        self.plot_widget.setLabel("left", "Concentration", units="mg/L")
        self.plot_widget.setLabel("bottom", "Time", units="h")
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.addLegend()
        layout.addWidget(self.plot_widget)

        self.readout = QLabel("")
        layout.addWidget(self.readout)

        self.curve = None
        self._t = np.empty(0)
        self._samples = []
        self._proxy = pg.SignalProxy(self.plot_widget.scene().sigMouseMoved,
                                     rateLimit=30, slot=self._on_mouse_moved)

    def plot_simulation(self, samples, metrics, dose_times_h=()):
        """Draw the curve, the therapeutic window and the dose times."""
        self.clear()
        if not samples:
            return
        t, C = samples_to_arrays(samples)
        self._t, self._samples = t, list(samples)

        lo, hi = samples[0].therapeutic_min, samples[0].therapeutic_max
        if math.isfinite(hi):
            band = pg.LinearRegionItem(values=(lo, hi), orientation="horizontal",
                                       brush=BAND_BRUSH, movable=False)
            band.setZValue(-10)
            self.plot_widget.addItem(band)
            self.plot_widget.addItem(pg.InfiniteLine(pos=hi, angle=0, pen=pg.mkPen(BAND_COLOR, style=Qt.PenStyle.DashLine)))
        self.plot_widget.addItem(pg.InfiniteLine(pos=lo, angle=0, pen=pg.mkPen(BAND_COLOR, style=Qt.PenStyle.DashLine)))

        for start_h in dose_times_h[:MAX_DOSE_MARKERS]:
            self.plot_widget.addItem(pg.InfiniteLine(pos=start_h, angle=90, pen=pg.mkPen(DOSE_COLOR, style=Qt.PenStyle.DotLine)))

        self.curve = self.plot_widget.plot(t, C, pen=pg.mkPen(CURVE_COLOR, width=2), name="Concentration")

        if metrics.t_peak_h is not None:
            self.plot_widget.plot([metrics.t_peak_h], [metrics.c_peak], pen=None,
                                  symbol="o", symbolSize=7, symbolBrush=CURVE_COLOR,
                                  name="Single-dose peak")

    def clear(self):
        self.plot_widget.clear()
        self.curve = None
        self._t = np.empty(0)
        self._samples = []
        self.readout.setText("")

    def _on_mouse_moved(self, evt):
        if not self._samples:
            return
        pos = evt[0]
        plot_item = self.plot_widget.getPlotItem()
        if not plot_item.sceneBoundingRect().contains(pos):
            return
        x = plot_item.vb.mapSceneToView(pos).x()
        s = self._samples[nearest_index(self._t, x)]
        self.readout.setText(f"t = {s.time_h:.2f} h | C = {s.concentration:.3f} mg/L | {s.status}")
