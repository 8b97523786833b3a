"""Chore routes: list, create, complete, delete and the points leaderboard."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from src.api.dependencies import get_current_user, not_found
from src.api.schemas import ChoreOut, CreateChoreRequest, LeaderboardEntry
from src.data.models import Chore, User

router = APIRouter(prefix="/api/chores", tags=["chores"])

CurrentUser = Annotated[User, Depends(get_current_user)]


@router.get("", response_model=list[ChoreOut])
def list_chores(request: Request, user: CurrentUser) -> list[ChoreOut]:
    chores = request.app.state.chores.list_by_household(user.household_id)
    return [ChoreOut.model_validate(c) for c in chores]


@router.get("/pending", response_model=list[ChoreOut])
def list_pending_chores(request: Request, user: CurrentUser) -> list[ChoreOut]:
    chores = request.app.state.chores.list_by_household(user.household_id, completed=False)
    return [ChoreOut.model_validate(c) for c in chores]


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
def get_leaderboard(request: Request, user: CurrentUser) -> list[LeaderboardEntry]:
    """Household members ranked by points from completed chores."""
    totals = request.app.state.chores.leaderboard(user.household_id)
    members = request.app.state.users.list_by_household(user.household_id)
    entries = [
        LeaderboardEntry(user_id=m.id, name=m.name, points=totals.get(m.id, 0))
        for m in members
    ]
    entries.sort(key=lambda e: e.points, reverse=True)
    return entries


@router.post("", response_model=ChoreOut, status_code=status.HTTP_201_CREATED)
def create_chore(body: CreateChoreRequest, request: Request, user: CurrentUser) -> ChoreOut:
    state = request.app.state
    if body.assigned_to_id is not None:
        assignee = state.users.get_user(body.assigned_to_id)
        if assignee is None or assignee.household_id != user.household_id:
            raise not_found("Assignee")

    chore = state.chores.add_chore(Chore(
        title=body.title,
        description=body.description,
        due_date=body.due_date,
        points=body.points,
        household_id=user.household_id,
        created_by=user.id,
        assigned_to_id=body.assigned_to_id,
        start_time=body.start_time,
    ))
    return ChoreOut.model_validate(chore)


@router.patch("/{chore_id}/complete", response_model=ChoreOut)
def complete_chore(chore_id: int, request: Request, user: CurrentUser) -> ChoreOut:
    try:
        chore = request.app.state.chores.complete_chore(chore_id, user.household_id)
    except ValueError:
        raise not_found("Chore")
    return ChoreOut.model_validate(chore)


@router.delete("/{chore_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chore(chore_id: int, request: Request, user: CurrentUser) -> Response:
    if not request.app.state.chores.delete_chore(chore_id, user.household_id):
        raise not_found("Chore")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
