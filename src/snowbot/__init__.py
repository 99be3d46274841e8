"""snowbot: turn gridded snow forecasts into chat-sized time windows."""

__version__ = "0.1.0"
