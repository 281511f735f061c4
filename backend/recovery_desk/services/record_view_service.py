"""
Unified per-job view merged from HardDisk, Inward and Outward.

Field priority:
  estimated amount / delivery date  Inward, then HardDisk
  delivery mode                     Outward, then HardDisk delivery details
  status                            see status_service.resolve_status
  delivered                         Inward delivered or Outward completed
"""
import uuid

from recovery_desk.schemas.job import DeliveryReport, MasterRecordData
from recovery_desk.schemas.record import (
    HardDiskRecord,
    InwardRecord,
    OutwardRecord,
    RecordStatus,
)
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.status_service import resolve_status

NOT_YET_DELIVERED = "Not yet delivered"


def _first_by_job(items: list) -> dict:
    by_job: dict = {}
    for item in items:
        by_job.setdefault(item.job_id, item)
    return by_job


def build_master_record(
    hd: HardDiskRecord,
    inward: InwardRecord | None,
    outward: OutwardRecord | None,
) -> MasterRecordData:
    details = hd.delivery_details
    return MasterRecordData(
        job_id=hd.job_id,
        serial_number=hd.serial_number,
        model=hd.model,
        capacity=hd.capacity,
        customer_name=hd.customer_name,
        phone_number=hd.phone_number,
        received_date=hd.received_date,
        complaint=hd.complaint,
        estimated_amount=(inward.estimated_amount if inward else None) or hd.estimated_amount,
        estimated_delivery_date=(inward.estimated_delivery_date if inward else None) or hd.estimated_delivery_date,
        inward_date=inward.date if inward else None,
        inward_notes=inward.notes if inward else None,
        outward_date=outward.date if outward else None,
        delivered_to=outward.delivered_to if outward else None,
        delivery_mode=(outward.delivery_mode if outward else None) or (details.delivery_mode if details else None),
        delivery_details=details,
        status=resolve_status(hd, inward, outward),
        is_closed=hd.is_closed,
        is_delivered=bool((inward and inward.is_delivered) or (outward and outward.is_completed)),
        completed_date=outward.completed_date if outward else None,
    )


def get_master_record_data(records: RecordCollections, job_id: str) -> MasterRecordData | None:
    hd = records.find_hard_disk(job_id)
    if hd is None:
        return None
    return build_master_record(hd, records.find_inward(job_id), records.find_outward(job_id))


def get_all_records_with_status(records: RecordCollections) -> list[MasterRecordData]:
    inward = _first_by_job(records.inward())
    outward = _first_by_job(records.outward())
    return [
        build_master_record(hd, inward.get(hd.job_id), outward.get(hd.job_id))
        for hd in records.hard_disks()
    ]


def get_delivery_reports(records: RecordCollections) -> list[DeliveryReport]:
    # Row ids are display keys only and change on every call.
    return [
        DeliveryReport(
            id=str(uuid.uuid4()),
            job_id=r.job_id,
            date=r.outward_date or r.received_date,
            delivered_to=r.delivered_to or NOT_YET_DELIVERED,
            delivery_mode=r.delivery_mode,
            customer_name=r.customer_name,
            phone_number=r.phone_number,
            is_completed=r.status is RecordStatus.COMPLETED,
            completed_date=r.completed_date,
            inward_date=r.inward_date,
            device_info=f"{r.model} {r.capacity}",
            serial_number=r.serial_number,
            estimated_amount=r.estimated_amount,
            status=r.status,
        )
        for r in get_all_records_with_status(records)
    ]
