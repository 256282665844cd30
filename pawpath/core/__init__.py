"""Core itinerary logic for PawPath."""


class InvalidRecordError(ValueError):
    """Raised when a model record cannot become a stop or leg."""


from .itinerary import ItineraryBuilder, build_day_plan
from .layout import Placement, layout
from .legs import build_leg, find_connecting_leg
from .points import Bounds, PointRegistry, equals, parse_coordinate
from .session import PlannerSession, SessionState, ingest_batch
from .timeline import LegEntry, StopEntry, TimelineEntry, assemble

__all__ = [
    "Bounds",
    "InvalidRecordError",
    "ItineraryBuilder",
    "LegEntry",
    "Placement",
    "PlannerSession",
    "PointRegistry",
    "SessionState",
    "StopEntry",
    "TimelineEntry",
    "assemble",
    "build_day_plan",
    "build_leg",
    "equals",
    "find_connecting_leg",
    "ingest_batch",
    "layout",
    "parse_coordinate",
]
