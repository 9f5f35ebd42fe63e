from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_camp_service, get_current_caller
from ..models.camps import CampCreate, CampRecord, CampStatus, CampUpdate
from ..models.common import MessageResponse
from ..services.camp_service import CampService
from ..utils.security import Caller

router = APIRouter(prefix="/api/camps", tags=["Camps"])


@router.get("", response_model=List[CampRecord])
async def list_approved_camps(service: CampService = Depends(get_camp_service)):
    """List approved camps"""
    return service.list_approved()


@router.get("/all", response_model=List[CampRecord])
async def list_all_camps(
    caller: Caller = Depends(get_current_caller),
    service: CampService = Depends(get_camp_service),
):
    """List every camp regardless of status (admin only)"""
    return service.list_all(caller)


@router.get("/{camp_id}", response_model=CampRecord)
async def get_camp(camp_id: str, service: CampService = Depends(get_camp_service)):
    return service.get_camp(camp_id)


@router.post("", response_model=CampRecord, status_code=201)
async def propose_camp(
    proposal: CampCreate,
    caller: Caller = Depends(get_current_caller),
    service: CampService = Depends(get_camp_service),
):
    """Add a new camp proposal"""
    return service.propose(proposal, caller)


@router.put("/{camp_id}", response_model=CampRecord)
async def update_camp(
    camp_id: str,
    changes: CampUpdate,
    caller: Caller = Depends(get_current_caller),
    service: CampService = Depends(get_camp_service),
):
    return service.update(camp_id, changes, caller)


@router.delete("/{camp_id}", response_model=MessageResponse)
async def delete_camp(
    camp_id: str,
    caller: Caller = Depends(get_current_caller),
    service: CampService = Depends(get_camp_service),
):
    return MessageResponse(message=service.delete(camp_id, caller))


@router.put("/{camp_id}/approve", response_model=CampRecord)
async def approve_camp(
    camp_id: str,
    caller: Caller = Depends(get_current_caller),
    service: CampService = Depends(get_camp_service),
):
    return service.set_status(camp_id, CampStatus.approved, caller)


@router.put("/{camp_id}/reject", response_model=CampRecord)
async def reject_camp(
    camp_id: str,
    caller: Caller = Depends(get_current_caller),
    service: CampService = Depends(get_camp_service),
):
    return service.set_status(camp_id, CampStatus.rejected, caller)
