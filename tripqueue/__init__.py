"""tripqueue: asynchronous travel-itinerary generation jobs."""

__version__ = "0.1.0"
