"""Device token registration for push notifications.

Only the registrations are kept here; delivery happens elsewhere.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Request, Response, status

from src.api.dependencies import get_current_user, not_found
from src.api.schemas import DeviceTokenOut, RegisterDeviceRequest, UnregisterDeviceRequest
from src.data.models import User

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

CurrentUser = Annotated[User, Depends(get_current_user)]


@router.post("/register", response_model=DeviceTokenOut, status_code=status.HTTP_201_CREATED)
def register_device(
    body: RegisterDeviceRequest, request: Request, user: CurrentUser,
) -> DeviceTokenOut:
    token = request.app.state.device_tokens.register(user.id, body.token, body.platform)
    return DeviceTokenOut.model_validate(token)


@router.delete("/unregister", status_code=status.HTTP_204_NO_CONTENT)
def unregister_device(
    request: Request,
    user: CurrentUser,
    body: Annotated[UnregisterDeviceRequest, Body()],
) -> Response:
    if not request.app.state.device_tokens.unregister(body.token):
        raise not_found("Device token")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
