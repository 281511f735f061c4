"""
Job status: pending -> in_progress -> completed.

Status is written redundantly onto the HardDisk, Inward and Outward rows
so each collection reads correctly on its own. When they disagree,
`resolve_status` decides which copy wins.
"""
import logging

from recovery_desk.schemas.record import (
    HardDiskRecord,
    InwardRecord,
    OutwardRecord,
    RecordStatus,
)
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.numbering import allocate_record_id
from recovery_desk.utils.dates import today_iso

logger = logging.getLogger(__name__)


def resolve_status(
    hard_disk: HardDiskRecord,
    inward: InwardRecord | None,
    outward: OutwardRecord | None,
) -> RecordStatus:
    if hard_disk.status is not None:
        return hard_disk.status
    if outward is not None and outward.status is not None:
        return outward.status
    if inward is not None and inward.status is not None:
        return inward.status
    if (outward is not None and outward.is_completed) or hard_disk.is_closed:
        return RecordStatus.COMPLETED
    if outward is not None:
        return RecordStatus.IN_PROGRESS
    return RecordStatus.PENDING


def update_record_status(records: RecordCollections, job_id: str, new_status: RecordStatus) -> bool:
    """Write `new_status` to every row of the job. False if no row exists."""
    new_status = RecordStatus(new_status)
    completed = new_status is RecordStatus.COMPLETED
    today = today_iso()

    with records.transaction():
        hard_disks = records.hard_disks()
        inward = records.inward()
        outward = records.outward()
        hd = next((r for r in hard_disks if r.job_id == job_id), None)
        inw = next((r for r in inward if r.job_id == job_id), None)
        out = next((r for r in outward if r.job_id == job_id), None)
        if hd is None and inw is None and out is None:
            return False

        if hd is not None:
            hd.status = new_status
            hd.is_closed = completed
            records.save_hard_disks(hard_disks)

        if inw is not None:
            inw.status = new_status
            inw.is_delivered = completed
            records.save_inward(inward)

        if out is not None:
            out.status = new_status
            out.is_completed = completed
            out.completed_date = (out.completed_date or today) if completed else None
            records.save_outward(outward)
        elif completed and hd is not None:
            outward.append(OutwardRecord(
                id=allocate_record_id(records),
                job_id=job_id,
                date=today,
                delivered_to=hd.customer_name,
                notes="Auto-created when status changed to completed",
                customer_name=hd.customer_name,
                phone_number=hd.phone_number,
                is_completed=True,
                completed_date=today,
                estimated_amount=hd.estimated_amount or (inw.estimated_amount if inw else None),
                status=RecordStatus.COMPLETED,
            ))
            records.save_outward(outward)

    logger.info("Job %s status -> %s", job_id, new_status.value)
    return True
