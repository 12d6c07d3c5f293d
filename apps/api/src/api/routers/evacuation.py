from __future__ import annotations

import logging
from time import perf_counter

from fastapi import APIRouter, Depends, Request

from evacuation_planner.assembler import PlanAssembler
from evacuation_planner.errors import QuotaExceededError
from evacuation_planner.models import Plan
from evacuation_planner.projector import project_route, project_safe_spot_markers

from api.dependencies import get_overpass_quota_guard, get_plan_assembler, settings
from api.errors import ApiError
from api.observability import PlanOutcomeMetric
from api.quota import DailyQuotaGuard
from api.response import success_response
from api.schemas.evacuation import EvacuationPlanRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/evacuation", tags=["evacuation"])


def _outcome(plan: Plan) -> str:
    if plan.best_safe_spot is None:
        return "no_candidates"
    if plan.primary_route is None:
        return "no_route"
    return "planned"


def _render_payload(plan: Plan) -> dict:
    markers = project_safe_spot_markers(plan.crisis_id, plan.all_safe_spots)
    routes = []
    if plan.primary_route is not None and plan.best_safe_spot is not None:
        routes.append(project_route(plan.primary_route, plan.crisis_title, plan.best_safe_spot.name))
    return {
        "plan": plan.to_payload(),
        "markers": [marker.model_dump(mode="json", by_alias=True) for marker in markers],
        "routes": [route.model_dump(mode="json", by_alias=True) for route in routes],
    }


@router.post("/plans")
async def create_plan(
    request: Request,
    body: EvacuationPlanRequest,
    assembler: PlanAssembler = Depends(get_plan_assembler),
) -> dict:
    collector = request.app.state.plan_metrics
    started = perf_counter()
    try:
        plan = await assembler.assemble(
            crisis_id=body.crisis_id,
            crisis_title=body.crisis_title,
            lat=body.latitude,
            lng=body.longitude,
            radius_meters=body.search_radius_meters or settings.DEFAULT_SEARCH_RADIUS_METERS,
            sample_interval=body.sample_interval or settings.DEFAULT_SAMPLE_INTERVAL,
        )
    except QuotaExceededError as exc:
        collector.observe(PlanOutcomeMetric("quota_exceeded", (perf_counter() - started) * 1000.0, 0))
        raise ApiError("QUOTA_EXCEEDED", str(exc), 429) from exc
    except ValueError as exc:
        raise ApiError("VALIDATION_ERROR", str(exc), 422) from exc

    outcome = _outcome(plan)
    collector.observe(
        PlanOutcomeMetric(outcome, (perf_counter() - started) * 1000.0, len(plan.all_safe_spots))
    )
    logger.info("evacuation_plan_served", extra={"crisis_id": plan.crisis_id, "outcome": outcome})
    return success_response(_render_payload(plan), meta={"outcome": outcome})


@router.get("/quota")
async def quota_status(guard: DailyQuotaGuard = Depends(get_overpass_quota_guard)) -> dict:
    used = await guard.used_today()
    return success_response(
        {"source": guard.source, "limit": guard.limit, "used": used, "remaining": max(0, guard.limit - used)},
        meta={},
    )
