"""
Keeps the HardDisk, Inward and Outward collections in step for a job.

HardDisk is the intake record and the source of customer/device facts.
Saving it creates the job's Inward and Outward rows on first save and
pushes estimate fields into them on later saves. Every operation here
runs inside one `RecordCollections.transaction()`.
"""
import logging

from recovery_desk.errors import DuplicateJobId, ProtectedJobIdError, ValidationFailed
from recovery_desk.schemas.customer import CustomerUpsert
from recovery_desk.schemas.record import (
    DeliveryDetails,
    DeliveryMode,
    HardDiskRecord,
    InwardRecord,
    OutwardRecord,
    RecordStatus,
)
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.customer_service import add_or_update_master_customer
from recovery_desk.services.numbering import allocate_record_id, commit_job_id, is_auto_generated
from recovery_desk.utils.dates import today_iso

logger = logging.getLogger(__name__)


def _index_by_job(items: list, job_id: str) -> int | None:
    return next((i for i, item in enumerate(items) if item.job_id == job_id), None)


def save_hard_disk_record_with_sync(records: RecordCollections, record: HardDiskRecord) -> bool:
    """Upsert a HardDisk record and propagate it. Returns True if it was new."""
    with records.transaction():
        hard_disks = records.hard_disks()
        index = _index_by_job(hard_disks, record.job_id)
        is_new = index is None
        if is_new:
            hard_disks.append(record)
        else:
            hard_disks[index] = record
        records.save_hard_disks(hard_disks)

        add_or_update_master_customer(
            records,
            CustomerUpsert(
                name=record.customer_name,
                phone_number=record.phone_number,
                address=record.customer_address,
                state=record.customer_state,
                gstin=record.customer_gstin,
            ),
        )

        inward = records.inward()
        inward_index = _index_by_job(inward, record.job_id)
        if inward_index is None:
            if is_new:
                inward.append(InwardRecord(
                    id=allocate_record_id(records),
                    job_id=record.job_id,
                    date=record.received_date or record.created_at[:10],
                    received_from=record.customer_name,
                    notes=f"Auto-created from intake. Complaint: {record.complaint}",
                    customer_name=record.customer_name,
                    phone_number=record.phone_number,
                    estimated_amount=record.estimated_amount,
                    estimated_delivery_date=record.estimated_delivery_date,
                    is_delivered=False,
                    status=record.status or RecordStatus.PENDING,
                ))
                records.save_inward(inward)
        else:
            # Edits only carry estimate fields over; delivery bookkeeping stays.
            existing = inward[inward_index]
            existing.estimated_amount = record.estimated_amount
            existing.estimated_delivery_date = record.estimated_delivery_date
            existing.date = record.received_date or existing.date
            records.save_inward(inward)

        outward = records.outward()
        outward_index = _index_by_job(outward, record.job_id)
        if outward_index is None:
            if is_new:
                outward.append(OutwardRecord(
                    id=allocate_record_id(records),
                    job_id=record.job_id,
                    date=today_iso(),
                    delivered_to=record.customer_name,
                    delivery_mode=DeliveryMode.HAND_DELIVERY,
                    notes="Auto-created from Hard Disk record",
                    customer_name=record.customer_name,
                    phone_number=record.phone_number,
                    estimated_amount=record.estimated_amount,
                    is_completed=False,
                    status=record.status or RecordStatus.IN_PROGRESS,
                ))
                records.save_outward(outward)
        else:
            outward[outward_index].estimated_amount = record.estimated_amount
            records.save_outward(outward)

    return is_new


def create_job(records: RecordCollections, record: HardDiskRecord) -> HardDiskRecord:
    with records.transaction():
        if records.find_hard_disk(record.job_id) is not None:
            raise DuplicateJobId(record.job_id)
        save_hard_disk_record_with_sync(records, record)
        commit_job_id(records, record.job_id)
    logger.info("Job %s received from %s", record.job_id, record.customer_name)
    return record


def edit_job(records: RecordCollections, job_id: str, changes: dict) -> HardDiskRecord | None:
    """Apply field changes to an existing job. None if the job is unknown."""
    if is_auto_generated(job_id):
        raise ProtectedJobIdError(job_id, "edit")
    with records.transaction():
        existing = records.find_hard_disk(job_id)
        if existing is None:
            return None
        updated = existing.model_copy(update=changes)
        save_hard_disk_record_with_sync(records, updated)
    return updated


def update_inward_with_estimate(records: RecordCollections, job_id: str, amount: float) -> bool:
    """Record a saved estimate's subtotal as the job's estimated amount."""
    with records.transaction():
        inward = records.inward()
        index = _index_by_job(inward, job_id)
        if index is None:
            return False
        inward[index].manual_amount = amount
        inward[index].estimated_amount = amount
        records.save_inward(inward)
    return True


def validate_delivery_details(details: DeliveryDetails) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not details.delivery_date:
        errors["deliveryDate"] = "Delivery date is required"
    if not details.recipient_name.strip():
        errors["recipientName"] = "Recipient name is required"
    if details.delivery_mode.requires_tracking:
        if not (details.courier_number or "").strip():
            errors["courierNumber"] = "Tracking number is required for courier/postal delivery"
        if not (details.courier_company or "").strip():
            errors["courierCompany"] = "Courier/postal company is required"
    return errors


def normalize_delivery_details(details: DeliveryDetails) -> DeliveryDetails:
    if details.delivery_mode.requires_tracking:
        return details
    return details.model_copy(update={"courier_number": None, "courier_company": None})


def mark_item_as_delivered_with_details(records: RecordCollections, job_id: str, details: DeliveryDetails) -> bool:
    errors = validate_delivery_details(details)
    if errors:
        raise ValidationFailed(errors)
    details = normalize_delivery_details(details)

    with records.transaction():
        hard_disks = records.hard_disks()
        hd_index = _index_by_job(hard_disks, job_id)
        if hd_index is None:
            return False

        inward = records.inward()
        inward_index = _index_by_job(inward, job_id)
        if inward_index is not None:
            row = inward[inward_index]
            row.is_delivered = True
            row.delivery_date = details.delivery_date
            row.status = RecordStatus.COMPLETED
            records.save_inward(inward)

        outward = records.outward()
        outward_index = _index_by_job(outward, job_id)
        if outward_index is not None:
            row = outward[outward_index]
            row.is_completed = True
            row.completed_date = details.delivery_date
            row.delivery_mode = details.delivery_mode
            row.delivered_to = details.recipient_name
            row.notes = details.notes or row.notes
            row.status = RecordStatus.COMPLETED
            records.save_outward(outward)

        hd = hard_disks[hd_index]
        hd.is_closed = True
        hd.delivery_details = details
        hd.status = RecordStatus.COMPLETED
        records.save_hard_disks(hard_disks)

    logger.info("Job %s delivered via %s to %s", job_id, details.delivery_mode.value, details.recipient_name)
    return True


def mark_item_as_delivered(records: RecordCollections, job_id: str, delivery_date: str) -> bool:
    """Older delivery path: only flags the Inward record."""
    with records.transaction():
        inward = records.inward()
        index = _index_by_job(inward, job_id)
        if index is None:
            return False
        inward[index].is_delivered = True
        inward[index].delivery_date = delivery_date
        records.save_inward(inward)
    return True
