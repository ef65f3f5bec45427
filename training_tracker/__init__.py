"""Training Tracker: training plan experiments and workout log."""

__version__ = "0.1.0"
