"""Profile and household membership routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_current_user, not_found
from src.api.schemas import InviteCodeResponse, UpdateProfileRequest, UserOut
from src.data.models import User

router = APIRouter(prefix="/api/users", tags=["users"])

CurrentUser = Annotated[User, Depends(get_current_user)]


@router.get("/me", response_model=UserOut)
def get_me(user: CurrentUser) -> UserOut:
    return UserOut.model_validate(user)


@router.patch("/me", response_model=UserOut)
def update_me(body: UpdateProfileRequest, request: Request, user: CurrentUser) -> UserOut:
    updated = request.app.state.users.update_profile(user.id, name=body.name, avatar=body.avatar)
    return UserOut.model_validate(updated)


@router.get("/household", response_model=list[UserOut])
def list_household_members(request: Request, user: CurrentUser) -> list[UserOut]:
    members = request.app.state.users.list_by_household(user.household_id)
    return [UserOut.model_validate(m) for m in members]


@router.get("/household/invite-code", response_model=InviteCodeResponse)
def get_invite_code(request: Request, user: CurrentUser) -> InviteCodeResponse:
    household = request.app.state.households.get_household(user.household_id)
    if household is None:
        raise not_found("Household")
    return InviteCodeResponse(invite_code=household.invite_code)
