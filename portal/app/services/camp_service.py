from typing import List

from ..models.camps import CampCreate, CampRecord, CampStatus, CampUpdate
from ..utils.errors import ClientInputError
from ..utils.logging import logger
from ..utils.security import Caller
from .collection import CollectionService


class CampService(CollectionService):
    """Camp sites proposed by members and moderated by administrators."""

    record_model = CampRecord
    label = "Camp"

    def list_approved(self) -> List[CampRecord]:
        return self._find_many({"status": CampStatus.approved.value})

    def list_all(self, caller: Caller) -> List[CampRecord]:
        caller.require_admin()
        return self._find_many()

    def get_camp(self, camp_id: str) -> CampRecord:
        return self._find_one(camp_id)

    def propose(self, proposal: CampCreate, caller: Caller) -> CampRecord:
        """Store a new camp; only administrators may choose its status."""
        status = CampStatus.pending
        if caller.is_admin and proposal.status:
            status = CampStatus(proposal.status)

        record = CampRecord(
            **proposal.model_dump(exclude={"status"}),
            status=status,
            added_by=caller.user_id,
        )
        camp = self._insert(record)
        logger.log_step("camp_proposed", {
            "camp_id": camp.id,
            "status": camp.status,
            "caller": caller.user_id,
        })
        return camp

    def update(self, camp_id: str, changes: CampUpdate, caller: Caller) -> CampRecord:
        caller.require_admin()
        data = changes.model_dump(by_alias=True, exclude_none=True)
        if not data:
            raise ClientInputError("No fields to update.")
        camp = self._update(camp_id, data)
        logger.log_step("camp_updated", {"camp_id": camp.id, "fields": sorted(data)})
        return camp

    def set_status(self, camp_id: str, status: CampStatus, caller: Caller) -> CampRecord:
        caller.require_admin()
        camp = self._update(camp_id, {"status": status.value})
        logger.log_step("camp_status_changed", {"camp_id": camp.id, "status": status.value})
        return camp

    def delete(self, camp_id: str, caller: Caller) -> str:
        caller.require_admin()
        self._delete(camp_id)
        logger.log_step("camp_deleted", {"camp_id": camp_id})
        return "Camp deleted successfully."
