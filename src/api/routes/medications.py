"""Medication routes: the household's medicines, dose logging and inventory."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from src.api.dependencies import get_current_user, not_found
from src.api.schemas import (
    CreateMedicationRequest,
    DoseLogOut,
    InventoryUpdateRequest,
    LogDoseRequest,
    MedicationOut,
)
from src.data.models import Medication, MedicationLog, User

router = APIRouter(prefix="/api/medications", tags=["medications"])

CurrentUser = Annotated[User, Depends(get_current_user)]


@router.get("", response_model=list[MedicationOut])
def list_medications(request: Request, user: CurrentUser) -> list[MedicationOut]:
    medications = request.app.state.medications.list_by_household(user.household_id)
    return [MedicationOut.model_validate(m) for m in medications]


@router.post("", response_model=MedicationOut, status_code=status.HTTP_201_CREATED)
def create_medication(
    body: CreateMedicationRequest, request: Request, user: CurrentUser,
) -> MedicationOut:
    medication = request.app.state.medications.add_medication(Medication(
        name=body.name,
        dosage=body.dosage,
        instructions=body.instructions,
        morning=body.morning,
        afternoon=body.afternoon,
        evening=body.evening,
        inventory=body.inventory,
        household_id=user.household_id,
        assigned_to_id=body.assigned_to_id,
    ))
    return MedicationOut.model_validate(medication)


@router.post("/log", response_model=DoseLogOut, status_code=status.HTTP_201_CREATED)
def log_dose(body: LogDoseRequest, request: Request, user: CurrentUser) -> DoseLogOut:
    """Record a dose for the caller. TAKEN uses up one unit of inventory."""
    try:
        log = request.app.state.medications.log_dose(MedicationLog(
            medication_id=body.medication_id,
            user_id=user.id,
            household_id=user.household_id,
            status=body.status,
            scheduled_time=body.scheduled_time,
            taken_time=body.taken_time,
            notes=body.notes,
        ))
    except ValueError:
        raise not_found("Medication")
    return DoseLogOut.model_validate(log)


@router.get("/{medication_id}/logs", response_model=list[DoseLogOut])
def list_dose_logs(medication_id: int, request: Request, user: CurrentUser) -> list[DoseLogOut]:
    medications = request.app.state.medications
    if medications.get_medication(medication_id, user.household_id) is None:
        raise not_found("Medication")
    return [DoseLogOut.model_validate(log) for log in medications.list_logs(medication_id, user.household_id)]


@router.patch("/{medication_id}/inventory", response_model=MedicationOut)
def update_inventory(
    medication_id: int, body: InventoryUpdateRequest, request: Request, user: CurrentUser,
) -> MedicationOut:
    try:
        medication = request.app.state.medications.set_inventory(
            medication_id, user.household_id, body.quantity,
        )
    except ValueError:
        raise not_found("Medication")
    return MedicationOut.model_validate(medication)


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_medication(medication_id: int, request: Request, user: CurrentUser) -> Response:
    if not request.app.state.medications.delete_medication(medication_id, user.household_id):
        raise not_found("Medication")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
