"""Evacuation planning pipeline: locate safe spots, route to the best one, build a plan."""

from evacuation_planner.assembler import PlanAssembler, build_summary
from evacuation_planner.errors import EvacuationPlannerError, QuotaExceededError, UpstreamUnavailableError
from evacuation_planner.locator import SafeSpotLocator, rank_safe_spots
from evacuation_planner.models import Plan, RawFeature, Route, RouteGeometry, SafeSpot, SafeSpotType
from evacuation_planner.projector import DrawableRoute, SafeSpotMarker, project_route, project_safe_spot_markers
from evacuation_planner.quota import QuotaGuard
from evacuation_planner.route_planner import RoutePlanner

__all__ = [
    "DrawableRoute",
    "EvacuationPlannerError",
    "Plan",
    "PlanAssembler",
    "QuotaExceededError",
    "QuotaGuard",
    "RawFeature",
    "Route",
    "RouteGeometry",
    "RoutePlanner",
    "SafeSpot",
    "SafeSpotLocator",
    "SafeSpotMarker",
    "SafeSpotType",
    "UpstreamUnavailableError",
    "build_summary",
    "project_route",
    "project_safe_spot_markers",
    "rank_safe_spots",
]
