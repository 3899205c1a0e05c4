"""Student Interactions Tracker."""

__version__ = "0.1.0"
