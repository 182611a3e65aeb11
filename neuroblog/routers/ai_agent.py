from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from neuroblog.database import get_db
from neuroblog.schemas.suggestion import ApproveRequest, RejectRequest, SuggestionOut
from neuroblog.services.authz import Principal, require_admin
from neuroblog.services.container import ServiceContainer, get_container
from neuroblog.services.errors import Forbidden, InvalidTransition, NotFound, PipelineError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai-agent", tags=["ai-agent"])


def _parse_id(suggestion_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(suggestion_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid suggestion id")


def _http_error(e: PipelineError) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, Forbidden):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, InvalidTransition):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def _out(items) -> list[dict]:
    return [SuggestionOut.model_validate(s).model_dump(mode="json") for s in items]


@router.post("/generate-suggestions")
async def generate_suggestions(
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    suggestions = await container.pipeline.generate_batch(db)
    return {
        "message": f"Generated {len(suggestions)} blog suggestions from trending topics",
        "suggestions": _out(suggestions),
    }


@router.get("/suggestions")
def list_suggestions(
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    return _out(container.manager.list_pending(db, limit=10))


@router.post("/suggestions/{suggestion_id}/publish")
def publish_suggestion(
    suggestion_id: str,
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    sid = _parse_id(suggestion_id)
    try:
        s, post = container.manager.publish(db, sid, principal)
    except PipelineError as e:
        raise _http_error(e)
    return {"message": "Suggestion published successfully", "suggestion": _out([s])[0], "post_id": str(post.id)}


@router.post("/suggestions/{suggestion_id}/approve")
def approve_suggestion(
    suggestion_id: str,
    payload: Optional[ApproveRequest] = None,
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    sid = _parse_id(suggestion_id)
    payload = payload or ApproveRequest()
    try:
        s, post = container.manager.approve(
            db,
            sid,
            principal,
            admin_notes=payload.admin_notes,
            should_publish=payload.should_publish,
        )
    except PipelineError as e:
        raise _http_error(e)

    return {
        "message": "Suggestion approved and published" if post else "Suggestion approved",
        "suggestion": _out([s])[0],
        "post_id": str(post.id) if post else None,
    }


@router.post("/suggestions/{suggestion_id}/reject")
def reject_suggestion(
    suggestion_id: str,
    payload: Optional[RejectRequest] = None,
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    sid = _parse_id(suggestion_id)
    payload = payload or RejectRequest()
    try:
        s = container.manager.reject(db, sid, principal, admin_notes=payload.admin_notes)
    except PipelineError as e:
        raise _http_error(e)
    return {"message": "Suggestion rejected", "suggestion": _out([s])[0]}


@router.delete("/suggestions/{suggestion_id}")
def delete_suggestion(
    suggestion_id: str,
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    sid = _parse_id(suggestion_id)
    try:
        container.manager.delete(db, sid, principal)
    except PipelineError as e:
        raise _http_error(e)
    return {"message": "Suggestion deleted successfully"}


@router.post("/auto-generate")
async def auto_generate(
    db: Session = Depends(get_db),
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    pending = container.manager.count_pending(db)
    limit = container.settings.manual_max_pending
    if pending >= limit:
        logger.info("Auto-generate skipped: %d pending suggestions", pending)
        return {"message": f"Skipped: {pending} suggestions already pending review", "generated": 0, "suggestions": []}

    suggestions = await container.pipeline.generate_batch(db)
    return {
        "message": f"Generated {len(suggestions)} blog suggestions",
        "generated": len(suggestions),
        "suggestions": _out(suggestions),
    }


@router.post("/start-auto-generation")
async def start_auto_generation(
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    container.scheduler.start()
    return {"message": "Auto-generation started", "running": container.scheduler.running}


@router.post("/stop-auto-generation")
async def stop_auto_generation(
    container: ServiceContainer = Depends(get_container),
    principal: Principal = Depends(require_admin),
):
    container.scheduler.stop()
    return {"message": "Auto-generation stopped", "running": container.scheduler.running}
