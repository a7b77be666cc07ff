"""Approver routing API routes — admin-managed club/hostel → approver mapping."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stayback.auth import requires_role
from stayback.database import get_db
from stayback.models.approver_route import ApproverRoute, WILDCARD
from stayback.models.approval import ApproverKind
from stayback.models.user import User, UserRole
from stayback.schemas.route import ApproverRouteCreate, ApproverRouteOut
from stayback.services.approver_resolution import approver_exists, normalize_key

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=ApproverRouteOut, status_code=status.HTTP_201_CREATED)
def create_route(
    payload: ApproverRouteCreate,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    """Assign an approver to a club (team lead), hostel (warden) or all requests (staff, key "*")."""
    key = normalize_key(payload.match_key)
    if payload.kind == ApproverKind.staff and key != WILDCARD:
        raise HTTPException(status_code=400, detail='Staff routes use the "*" match key')

    if not approver_exists(db, payload.kind, payload.approver_id):
        raise HTTPException(status_code=404, detail="Approver not found")

    existing = (
        db.query(ApproverRoute)
        .filter(ApproverRoute.kind == payload.kind, ApproverRoute.match_key == key)
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="A route for this key already exists")

    route = ApproverRoute(kind=payload.kind, match_key=key, approver_id=payload.approver_id)
    db.add(route)
    db.commit()
    db.refresh(route)
    logger.info("Route %s: %s '%s' -> %s", route.route_id, payload.kind.value, key, payload.approver_id)
    return route


@router.get("/", response_model=list[ApproverRouteOut])
def list_routes(db: Session = Depends(get_db), _: User = Depends(requires_role(UserRole.admin))):
    return db.query(ApproverRoute).order_by(ApproverRoute.kind, ApproverRoute.match_key).all()


@router.delete("/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_route(
    route_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(requires_role(UserRole.admin)),
):
    route = db.query(ApproverRoute).filter(ApproverRoute.route_id == route_id).first()
    if not route:
        raise HTTPException(status_code=404, detail="Route not found")
    db.delete(route)
    db.commit()
    logger.info("Deleted route %s", route_id)
