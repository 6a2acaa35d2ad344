# src/pksimviz/ui/controls.py
import math
from dataclasses import dataclass

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (QCheckBox, QComboBox, QDoubleSpinBox, QFrame, QLabel,
                               QPushButton, QSpinBox, QVBoxLayout)

from pksim.config import DEFAULTS, DT_H
from pksim.params import ke_from_half_life, normalize_parameters
from pksim.types import SimulationParameters


@dataclass
class SimulateRequest:
    params: SimulationParameters
    dt_h: float = DT_H


class ControlsPanel(QFrame):
    simulateRequested = Signal(SimulateRequest)
    exportRequested = Signal()

    def __init__(self):
        super().__init__()
        self.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Controls"))

        # --- Dosing Parameters ---
        layout.addWidget(QLabel("Dosing"))
        self.route = QComboBox()
        self.route.addItem("IV bolus", "iv")
        self.route.addItem("Oral", "oral")
        layout.addWidget(QLabel("Route"))
        layout.addWidget(self.route)

        self.dose = QDoubleSpinBox(); self.dose.setRange(0, 1e6); self.dose.setValue(DEFAULTS["dose_mg"])
        self.dose.setSuffix(" mg")
        layout.addWidget(QLabel("Dose (mg)"))
        layout.addWidget(self.dose)

        self.interval = QDoubleSpinBox(); self.interval.setDecimals(2)
        self.interval.setRange(0.25, 1e4); self.interval.setValue(DEFAULTS["interval_h"])
        self.interval.setSuffix(" h")
        layout.addWidget(QLabel("Dosing interval (h)"))
        layout.addWidget(self.interval)

        self.n_doses = QSpinBox(); self.n_doses.setRange(1, 500); self.n_doses.setValue(DEFAULTS["n_doses"])
        layout.addWidget(QLabel("Number of doses"))
        layout.addWidget(self.n_doses)

        # --- PK Parameters ---
        layout.addWidget(QLabel("PK Parameters"))

        self.V = QDoubleSpinBox(); self.V.setRange(0.01, 1e5); self.V.setValue(DEFAULTS["volume_L"])
        self.V.setSuffix(" L")
        layout.addWidget(QLabel("V (volume, L)"))
        layout.addWidget(self.V)

        # Elimination input mode: rate constant or half-life
        layout.addWidget(QLabel("Elimination input"))
        self.mode = QComboBox(); self.mode.addItems(["ke (rate constant)", "t½ (half-life)"])
        layout.addWidget(self.mode)

        self.ke = QDoubleSpinBox(); self.ke.setDecimals(4); self.ke.setRange(0.0001, 10)
        self.ke.setValue(DEFAULTS["ke_per_h"]); self.ke.setSuffix(" /h")
        self.lbl_ke = QLabel("ke (elimination rate, /h)")
        layout.addWidget(self.lbl_ke)
        layout.addWidget(self.ke)

        self.t_half = QDoubleSpinBox(); self.t_half.setDecimals(2); self.t_half.setRange(0.01, 1e5)
        self.t_half.setValue(math.log(2.0) / DEFAULTS["ke_per_h"]); self.t_half.setSuffix(" h")
        self.lbl_t_half = QLabel("t½ (elimination half-life, h)")
        layout.addWidget(self.lbl_t_half)
        layout.addWidget(self.t_half)

        # Oral-only inputs: ka and F
        self.ka = QDoubleSpinBox(); self.ka.setDecimals(3); self.ka.setRange(0.001, 50)
        self.ka.setValue(DEFAULTS["ka_per_h"]); self.ka.setSuffix(" /h")
        self.lbl_ka = QLabel("ka (absorption rate, /h)")
        layout.addWidget(self.lbl_ka)
        layout.addWidget(self.ka)

        self.F = QDoubleSpinBox(); self.F.setDecimals(2); self.F.setRange(0.0, 1.0)
        self.F.setSingleStep(0.05); self.F.setValue(DEFAULTS["bioavailability"])
        self.lbl_F = QLabel("F (bioavailability)")
        layout.addWidget(self.lbl_F)
        layout.addWidget(self.F)

        # --- Therapeutic window ---
        layout.addWidget(QLabel("Therapeutic window (mg/L)"))
        self.band_min = QDoubleSpinBox(); self.band_min.setDecimals(2); self.band_min.setRange(0, 1e6)
        self.band_min.setValue(DEFAULTS["therapeutic_min"])
        layout.addWidget(QLabel("Minimum"))
        layout.addWidget(self.band_min)

        self.band_max = QDoubleSpinBox(); self.band_max.setDecimals(2); self.band_max.setRange(0, 1e6)
        self.band_max.setValue(DEFAULTS["therapeutic_max"])
        layout.addWidget(QLabel("Maximum"))
        layout.addWidget(self.band_max)

        # Optional fixed horizon
        self.fixed_duration = QCheckBox("Fixed duration")
        self.duration = QDoubleSpinBox(); self.duration.setDecimals(2); self.duration.setRange(1, 1e5)
        self.duration.setValue(48.0); self.duration.setSuffix(" h")
        layout.addWidget(self.fixed_duration)
        layout.addWidget(self.duration)

        go = QPushButton("Simulate"); layout.addWidget(go)
        go.clicked.connect(self._emit_request)
        export = QPushButton("Export chart as PNG"); layout.addWidget(export)
        export.clicked.connect(self.exportRequested.emit)
        layout.addStretch(1)

        self.route.currentIndexChanged.connect(self._update_route_visibility)
        self.mode.currentIndexChanged.connect(self._update_mode_visibility)
        self.fixed_duration.toggled.connect(self.duration.setEnabled)
        self.duration.setEnabled(False)
        self._update_route_visibility()
        self._update_mode_visibility()

        # Recompute on every edit
        for spin in (self.dose, self.interval, self.n_doses, self.V, self.ke, self.t_half,
                     self.ka, self.F, self.band_min, self.band_max, self.duration):
            spin.valueChanged.connect(self._emit_request)
        self.route.currentIndexChanged.connect(self._emit_request)
        self.mode.currentIndexChanged.connect(self._emit_request)
        self.fixed_duration.toggled.connect(self._emit_request)

    def _update_mode_visibility(self):
        half_life_mode = (self.mode.currentIndex() == 1)
        self.lbl_ke.setVisible(not half_life_mode)
        self.ke.setVisible(not half_life_mode)
        self.lbl_t_half.setVisible(half_life_mode)
        self.t_half.setVisible(half_life_mode)

    def _update_route_visibility(self):
        is_oral = (self.route.currentData() == "oral")
        for w in (self.lbl_ka, self.ka, self.lbl_F, self.F):
            w.setVisible(is_oral)

    def current_parameters(self) -> SimulationParameters:
        if self.mode.currentIndex() == 1:
            ke = ke_from_half_life(self.t_half.value())
        else:
            ke = self.ke.value()
        return normalize_parameters(
            route=self.route.currentData(),
            dose_mg=self.dose.value(),
            volume_L=self.V.value(),
            ke_per_h=ke,
            ka_per_h=self.ka.value(),
            bioavailability=self.F.value(),
            interval_h=self.interval.value(),
            n_doses=self.n_doses.value(),
            therapeutic_min=self.band_min.value(),
            therapeutic_max=self.band_max.value(),
            duration_h=self.duration.value() if self.fixed_duration.isChecked() else None,
        )

    def _emit_request(self, *_):
        self.simulateRequested.emit(SimulateRequest(params=self.current_parameters()))
