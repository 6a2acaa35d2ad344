import os

# Qt widgets in tests render without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
