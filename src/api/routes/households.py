"""Household bootstrap and joining by invite code.

These are the only routes that work without an X-User-Id header: they are how
a user comes to exist in the first place.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status

from src.api.schemas import (
    CreateHouseholdRequest,
    HouseholdOut,
    JoinHouseholdRequest,
    MembershipResponse,
    UserOut,
)
from src.data.models import UserRole

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/households", tags=["households"])


def _email_taken(email: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Email {email.strip().lower()} is already registered",
    )


@router.post("", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
def create_household(body: CreateHouseholdRequest, request: Request) -> MembershipResponse:
    """Create a household and its first member, who becomes its guardian."""
    state = request.app.state
    if state.users.find_by_email(body.email) is not None:
        raise _email_taken(body.email)

    household = state.households.create_household(body.household_name)
    try:
        user = state.users.add_user(body.email, body.name, household.id, UserRole.GUARDIAN)
    except ValueError:
        raise _email_taken(body.email)

    return MembershipResponse(
        household=HouseholdOut.model_validate(household),
        user=UserOut.model_validate(user),
    )


@router.post("/join", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
def join_household(body: JoinHouseholdRequest, request: Request) -> MembershipResponse:
    state = request.app.state
    household = state.households.find_by_invite_code(body.invite_code)
    if household is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid invite code")

    try:
        user = state.users.add_user(body.email, body.name, household.id, UserRole.MEMBER)
    except ValueError:
        raise _email_taken(body.email)

    logger.info("User #%d joined household #%d", user.id, household.id)
    return MembershipResponse(
        household=HouseholdOut.model_validate(household),
        user=UserOut.model_validate(user),
    )
