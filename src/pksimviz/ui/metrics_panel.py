# src/pksimviz/ui/metrics_panel.py
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QVBoxLayout

from pksim.types import Metrics

# (attribute on Metrics, tile title, unit, format)
TILES = [
    ("half_life_h", "Half-life", "h", "{:.2f}"),
    ("t_peak_h", "Tmax", "h", "{:.2f}"),
    ("c_peak", "Cmax", "mg/L", "{:.3f}"),
    ("auc", "AUC", "mg·h/L", "{:.1f}"),
    ("percent_in_range", "Time in range", "%", "{:.1f}"),
    ("css_avg", "Css avg", "mg/L", "{:.3f}"),
    ("css_min", "Css min", "mg/L", "{:.3f}"),
    ("css_max", "Css max", "mg/L", "{:.3f}"),
]


def format_value(value, fmt: str, unit: str) -> str:
    if value is None:
        return "n/a"
    return f"{fmt.format(value)} {unit}"


class MetricsPanel(QFrame):
    def __init__(self, parent=None, columns: int = 4):
        super().__init__(parent)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        grid = QGridLayout(self)
        self.values: dict[str, QLabel] = {}
        for i, (attr, title, _unit, _fmt) in enumerate(TILES):
            tile = QFrame(); tile.setFrameShape(QFrame.Shape.Box)
            box = QVBoxLayout(tile)
            box.addWidget(QLabel(title))
            value = QLabel("n/a")
            value.setAlignment(Qt.AlignmentFlag.AlignCenter)
            value.setStyleSheet("font-size: 15px; font-weight: bold;")
            box.addWidget(value)
            self.values[attr] = value
            grid.addWidget(tile, i // columns, i % columns)

    def show_metrics(self, metrics: Metrics):
        for attr, _title, unit, fmt in TILES:
            self.values[attr].setText(format_value(getattr(metrics, attr), fmt, unit))
