"""Shared shopping list routes."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from src.api.dependencies import get_current_user, not_found
from src.api.schemas import CreateGroceryRequest, GroceryOut
from src.data.models import GroceryItem, User

router = APIRouter(prefix="/api/groceries", tags=["groceries"])

CurrentUser = Annotated[User, Depends(get_current_user)]

_DEFAULT_NEEDED_BY = timedelta(days=7)


@router.get("", response_model=list[GroceryOut])
def list_groceries(request: Request, user: CurrentUser) -> list[GroceryOut]:
    items = request.app.state.groceries.list_by_household(user.household_id)
    return [GroceryOut.model_validate(i) for i in items]


@router.get("/pending", response_model=list[GroceryOut])
def list_pending_groceries(request: Request, user: CurrentUser) -> list[GroceryOut]:
    items = request.app.state.groceries.list_by_household(user.household_id, checked=False)
    return [GroceryOut.model_validate(i) for i in items]


@router.post("", response_model=GroceryOut, status_code=status.HTTP_201_CREATED)
def add_grocery(body: CreateGroceryRequest, request: Request, user: CurrentUser) -> GroceryOut:
    item = request.app.state.groceries.add_item(GroceryItem(
        name=body.name,
        category=body.category,
        needed_by=body.needed_by or date.today() + _DEFAULT_NEEDED_BY,
        added_by_id=user.id,
        household_id=user.household_id,
    ))
    return GroceryOut.model_validate(item)


@router.patch("/{item_id}/toggle", response_model=GroceryOut)
def toggle_grocery(item_id: int, request: Request, user: CurrentUser) -> GroceryOut:
    try:
        item = request.app.state.groceries.toggle_item(item_id, user.household_id)
    except ValueError:
        raise not_found("Grocery item")
    return GroceryOut.model_validate(item)


# Declared before /{item_id} so "clear-checked" is not taken for an id.
@router.delete("/clear-checked", status_code=status.HTTP_204_NO_CONTENT)
def clear_checked(request: Request, user: CurrentUser) -> Response:
    request.app.state.groceries.clear_checked(user.household_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_grocery(item_id: int, request: Request, user: CurrentUser) -> Response:
    if not request.app.state.groceries.delete_item(item_id, user.household_id):
        raise not_found("Grocery item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
