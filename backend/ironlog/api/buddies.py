from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ironlog.api.common import current_user, ok
from ironlog.core.constants import BUDDY_ACCEPTED, BUDDY_PENDING, BUDDY_REMOVED
from ironlog.core.errors import NotAllowed, RecordNotFound, ValidationFailed
from ironlog.db import get_db
from ironlog.models.buddy import BuddyConnection, BuddyInteraction, SharedGoal
from ironlog.models.goal import Goal
from ironlog.schemas.buddy import (
    BuddyConnectionRead,
    BuddyRequestCreate,
    BuddyRequestRead,
    EncouragementCreate,
    ShareGoalRequest,
    SharedGoalRead,
)

router = APIRouter(prefix="/buddies", tags=["buddies"])


def _utc(dt: Optional[datetime]) -> Optional[datetime]:
    # sqlite hands back naive datetimes; everything is stored as UTC
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


def connection_strength(
    connected_date: Optional[datetime],
    last_interaction: Optional[datetime],
    shared_goals: int,
    interaction_count: int,
    now: Optional[datetime] = None,
) -> int:
    """0-100 score from connection age, recency of contact and engagement."""
    now = _utc(now) or datetime.now(timezone.utc)
    connected = _utc(connected_date) or now
    last = _utc(last_interaction) or connected

    days_connected = (now - connected).days
    days_quiet = (now - last).days

    score = 50
    if days_connected > 30:
        score += 10
    if days_connected > 90:
        score += 10

    if days_quiet <= 7:
        score += 20
    elif days_quiet <= 14:
        score += 10
    elif days_quiet > 30:
        score -= 20

    score += min(shared_goals * 5, 20)
    score += min(interaction_count * 2, 20)
    return max(0, min(100, score))


def _between(a: str, b: str):
    return or_(
        and_(BuddyConnection.sender_id == a, BuddyConnection.receiver_id == b),
        and_(BuddyConnection.sender_id == b, BuddyConnection.receiver_id == a),
    )


def _accepted_between(db: Session, a: str, b: str) -> Optional[BuddyConnection]:
    return (
        db.query(BuddyConnection)
        .filter(_between(a, b), BuddyConnection.status == BUDDY_ACCEPTED)
        .first()
    )


def _shares_between(db: Session, a: str, b: str):
    return db.query(SharedGoal).filter(
        or_(
            and_(SharedGoal.owner_id == a, SharedGoal.shared_with_id == b),
            and_(SharedGoal.owner_id == b, SharedGoal.shared_with_id == a),
        )
    )


def _get_connection(db: Session, connection_id: int) -> BuddyConnection:
    conn = db.query(BuddyConnection).filter(BuddyConnection.id == connection_id).first()
    if not conn:
        raise RecordNotFound("Buddy connection", connection_id)
    return conn


def list_connections(db: Session, user_id: str) -> list[BuddyConnectionRead]:
    rows = (
        db.query(BuddyConnection)
        .filter(
            or_(BuddyConnection.sender_id == user_id, BuddyConnection.receiver_id == user_id),
            BuddyConnection.status == BUDDY_ACCEPTED,
        )
        .order_by(BuddyConnection.connected_date.desc())
        .all()
    )

    connections = []
    for conn in rows:
        buddy_id = conn.other_party(user_id)
        shared = _shares_between(db, user_id, buddy_id).filter(SharedGoal.is_active.is_(True)).count()
        connections.append(
            BuddyConnectionRead(
                id=conn.id,
                buddy_id=buddy_id,
                connected_date=conn.connected_date,
                connection_strength=connection_strength(
                    conn.connected_date, conn.last_interaction, shared, conn.interaction_count or 0
                ),
                shared_goals=shared,
                interaction_count=conn.interaction_count or 0,
                last_interaction=conn.last_interaction,
            )
        )
    return connections


@router.get("/connections")
def get_connections(
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    connections = list_connections(db, user_id)
    logger.info(f"Retrieved {len(connections)} buddy connections for {user_id}")
    return ok(connections, count=len(connections))


@router.get("/requests")
def get_requests(
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    pending = db.query(BuddyConnection).filter(BuddyConnection.status == BUDDY_PENDING)
    sent = pending.filter(BuddyConnection.sender_id == user_id).order_by(BuddyConnection.request_date.desc()).all()
    received = (
        pending.filter(BuddyConnection.receiver_id == user_id).order_by(BuddyConnection.request_date.desc()).all()
    )
    return ok(
        {
            "sent": [BuddyRequestRead.model_validate(r) for r in sent],
            "received": [BuddyRequestRead.model_validate(r) for r in received],
        }
    )


@router.post("/requests")
def send_request(
    payload: BuddyRequestCreate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    target = payload.target_user_id
    if target == user_id:
        raise ValidationFailed("Cannot send request to yourself")

    existing = (
        db.query(BuddyConnection)
        .filter(_between(user_id, target), BuddyConnection.status.in_([BUDDY_PENDING, BUDDY_ACCEPTED]))
        .first()
    )
    if existing is not None:
        if existing.status == BUDDY_ACCEPTED:
            raise ValidationFailed("Already connected")
        raise ValidationFailed("Request already pending")

    request = BuddyConnection(
        sender_id=user_id,
        receiver_id=target,
        status=BUDDY_PENDING,
        message=payload.message,
        request_date=datetime.now(timezone.utc),
    )
    db.add(request)
    db.commit()
    db.refresh(request)

    logger.info(f"Buddy request {request.id}: {user_id} -> {target}")
    return ok(BuddyRequestRead.model_validate(request), message="Buddy request sent")


def _pending_for_receiver(db: Session, request_id: int, user_id: str) -> BuddyConnection:
    request = _get_connection(db, request_id)
    if request.receiver_id != user_id:
        raise NotAllowed("Only the receiver can respond to a buddy request")
    if request.status != BUDDY_PENDING:
        raise ValidationFailed("Request is not pending")
    return request


@router.post("/requests/{request_id}/accept")
def accept_request(
    request_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    request = _pending_for_receiver(db, request_id, user_id)
    now = datetime.now(timezone.utc)
    request.status = BUDDY_ACCEPTED
    request.connected_date = now
    request.last_interaction = now
    db.commit()
    db.refresh(request)

    logger.info(f"Buddy request {request_id} accepted by {user_id}")
    return ok(BuddyRequestRead.model_validate(request), message="Buddy request accepted")


@router.post("/requests/{request_id}/decline")
def decline_request(
    request_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    request = _pending_for_receiver(db, request_id, user_id)
    db.delete(request)
    db.commit()

    logger.info(f"Buddy request {request_id} declined by {user_id}")
    return ok({"id": request_id}, message="Buddy request declined")


@router.delete("/connections/{connection_id}")
def remove_connection(
    connection_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    conn = _get_connection(db, connection_id)
    if user_id not in (conn.sender_id, conn.receiver_id):
        raise NotAllowed("Not a party to this connection")
    if conn.status != BUDDY_ACCEPTED:
        raise ValidationFailed("Connection is not active")

    conn.status = BUDDY_REMOVED
    conn.removed_date = datetime.now(timezone.utc)
    conn.removed_by = user_id

    buddy_id = conn.other_party(user_id)
    deactivated = 0
    for share in _shares_between(db, user_id, buddy_id).filter(SharedGoal.is_active.is_(True)).all():
        share.is_active = False
        deactivated += 1
    db.commit()

    logger.info(f"Connection {connection_id} removed by {user_id}, {deactivated} shares deactivated")
    return ok({"id": connection_id, "deactivated_shares": deactivated}, message="Buddy connection removed")


@router.post("/shared-goals")
def share_goal(
    payload: ShareGoalRequest,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    if _accepted_between(db, user_id, payload.buddy_id) is None:
        raise ValidationFailed("No connection with this buddy")

    goal = db.query(Goal).filter(Goal.id == payload.goal_id, Goal.user_id == user_id).first()
    if not goal:
        raise RecordNotFound("Goal", payload.goal_id)

    share = (
        db.query(SharedGoal)
        .filter(
            SharedGoal.owner_id == user_id,
            SharedGoal.goal_id == payload.goal_id,
            SharedGoal.shared_with_id == payload.buddy_id,
        )
        .first()
    )
    if share is not None:
        share.share_level = payload.share_level
        share.is_active = True
        message = "Goal sharing updated"
    else:
        share = SharedGoal(
            owner_id=user_id,
            goal_id=payload.goal_id,
            shared_with_id=payload.buddy_id,
            share_level=payload.share_level,
            is_active=True,
        )
        db.add(share)
        message = "Goal shared successfully"
    db.commit()
    db.refresh(share)

    logger.info(f"Goal {payload.goal_id} shared by {user_id} with {payload.buddy_id} ({payload.share_level})")
    return ok(SharedGoalRead.model_validate(share), message=message)


@router.get("/shared-goals")
def get_shared_goals(
    buddy_id: str = Query(...),
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    active = db.query(SharedGoal).filter(SharedGoal.is_active.is_(True))
    received = (
        active.filter(SharedGoal.owner_id == buddy_id, SharedGoal.shared_with_id == user_id)
        .order_by(SharedGoal.shared_date.desc())
        .all()
    )
    shared = (
        active.filter(SharedGoal.owner_id == user_id, SharedGoal.shared_with_id == buddy_id)
        .order_by(SharedGoal.shared_date.desc())
        .all()
    )

    items = [{**SharedGoalRead.model_validate(s).model_dump(), "type": "received"} for s in received]
    items += [{**SharedGoalRead.model_validate(s).model_dump(), "type": "shared"} for s in shared]
    return ok(items, total_shared=len(items))


@router.delete("/shared-goals/{share_id}")
def unshare_goal(
    share_id: int,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    share = db.query(SharedGoal).filter(SharedGoal.id == share_id).first()
    if not share:
        raise RecordNotFound("Shared goal", share_id)
    if share.owner_id != user_id:
        raise NotAllowed("Only the goal owner can stop sharing")

    share.is_active = False
    db.commit()

    logger.info(f"Share {share_id} deactivated by {user_id}")
    return ok({"id": share_id}, message="Goal unshared")


@router.post("/encouragement")
def send_encouragement(
    payload: EncouragementCreate,
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    now = datetime.now(timezone.utc)
    interaction = BuddyInteraction(
        sender_id=user_id,
        receiver_id=payload.receiver_id,
        interaction_type="encouragement",
        subtype=payload.type,
        message=payload.message,
        date=now,
        is_read=False,
    )
    db.add(interaction)

    conn = _accepted_between(db, user_id, payload.receiver_id)
    if conn is not None:
        conn.last_interaction = now
        conn.interaction_count = (conn.interaction_count or 0) + 1
    db.commit()
    db.refresh(interaction)

    logger.info(f"Encouragement {interaction.id}: {user_id} -> {payload.receiver_id}")
    return ok({"interaction_id": interaction.id}, message="Encouragement sent successfully")


@router.get("/leaderboard")
def leaderboard(
    user_id: str = Depends(current_user),
    db: Session = Depends(get_db),
):
    never = datetime.min.replace(tzinfo=timezone.utc)
    ranked = sorted(
        list_connections(db, user_id),
        key=lambda c: (c.connection_strength, _utc(c.last_interaction) or never),
        reverse=True,
    )
    board = [{**c.model_dump(), "rank": idx + 1} for idx, c in enumerate(ranked)]
    return ok(board, top_buddy=board[0] if board else None)
