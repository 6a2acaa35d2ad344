# src/pksimviz/ui/export.py
import logging
from pathlib import Path

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, Qt

from pksim.config import EXPORT_SCALE
from pksim.interfaces import ExportError

logger = logging.getLogger(__name__)


class WidgetExporter:
    """
    Rasterizes an on-screen widget to PNG.

    export_region(widget, scale) grabs the widget, optionally scales the pixmap
    up (smooth transform) and encodes it through an in-memory QBuffer.
    """

    def __init__(self, image_format: str = "PNG"):
        self.image_format = image_format

    def export_region(self, target, scale: float = EXPORT_SCALE) -> bytes:
        if target is None:
            raise ExportError("Nothing to export: chart region is missing.")
        if not (scale > 0):
            raise ExportError(f"Export scale must be > 0 (got {scale}).")

        pixmap = target.grab()
        if pixmap.isNull() or pixmap.width() == 0 or pixmap.height() == 0:
            raise ExportError("Chart region could not be captured.")
        if scale != 1.0:
            pixmap = pixmap.scaled(int(pixmap.width() * scale), int(pixmap.height() * scale),
                                   Qt.AspectRatioMode.KeepAspectRatio,
                                   Qt.TransformationMode.SmoothTransformation)

        data = QByteArray()
        buf = QBuffer(data)
        buf.open(QIODevice.OpenModeFlag.WriteOnly)
        ok = pixmap.save(buf, self.image_format)
        buf.close()
        if not ok or data.isEmpty():
            raise ExportError(f"Encoding the chart as {self.image_format} failed.")
        logger.debug("Captured %dx%d px chart image", pixmap.width(), pixmap.height())
        return bytes(data.data())

    def save(self, target, path, scale: float = EXPORT_SCALE) -> Path:
        """Export target and write it to path; OSErrors are re-raised as ExportError."""
        png = self.export_region(target, scale)
        path = Path(path)
        try:
            path.write_bytes(png)
        except OSError as e:
            raise ExportError(f"Could not write {path}: {e}") from e
        logger.info("Exported chart to %s (%d bytes)", path, len(png))
        return path
