from fastapi import APIRouter, Depends, HTTPException

from recovery_desk.dependencies import get_records
from recovery_desk.errors import DuplicateJobId, ProtectedJobIdError, ValidationFailed
from recovery_desk.schemas.job import (
    EstimateAmountUpdate,
    IntakeSession,
    JobCreate,
    JobUpdate,
    MasterRecordData,
    NextJobIdResponse,
    StatusUpdate,
)
from recovery_desk.schemas.record import DeliveryDetails, HardDiskRecord, RecordStatus
from recovery_desk.services.backup_service import delete_job, open_intake
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.numbering import next_available_job_id, peek_available_job_id
from recovery_desk.services.record_view_service import (
    get_all_records_with_status,
    get_master_record_data,
)
from recovery_desk.services.status_service import update_record_status
from recovery_desk.services.sync_service import (
    create_job,
    edit_job,
    mark_item_as_delivered_with_details,
    update_inward_with_estimate,
)
from recovery_desk.utils.dates import now_iso, today_iso

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _get_or_404(records: RecordCollections, job_id: str) -> MasterRecordData:
    record = get_master_record_data(records, job_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return record


@router.get("/next-id", response_model=NextJobIdResponse)
async def next_job_id(records: RecordCollections = Depends(get_records)):
    return NextJobIdResponse(job_id=peek_available_job_id(records))


@router.post("/intake", response_model=IntakeSession)
async def start_intake(records: RecordCollections = Depends(get_records)):
    job_id, result = open_intake(records)
    return IntakeSession(next_job_id=job_id, fresh_start=result)


@router.post("", response_model=MasterRecordData, status_code=201)
async def create(req: JobCreate, records: RecordCollections = Depends(get_records)):
    suggested = next_available_job_id(records)
    data = req.model_dump(exclude={"job_id", "received_date"})
    record = HardDiskRecord(
        **data,
        job_id=req.job_id or suggested,
        received_date=req.received_date or today_iso(),
        created_at=now_iso(),
        is_closed=False,
    )
    try:
        create_job(records, record)
    except DuplicateJobId as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _get_or_404(records, record.job_id)


@router.get("", response_model=list[MasterRecordData])
async def list_jobs(
    status: RecordStatus | None = None,
    q: str | None = None,
    records: RecordCollections = Depends(get_records),
):
    result = get_all_records_with_status(records)
    if status:
        result = [r for r in result if r.status is status]
    if q:
        needle = q.lower()
        result = [
            r for r in result
            if needle in r.job_id.lower()
            or needle in r.customer_name.lower()
            or needle in r.serial_number.lower()
            or needle in r.phone_number
        ]
    return result


@router.get("/{job_id}", response_model=MasterRecordData)
async def get_job(job_id: str, records: RecordCollections = Depends(get_records)):
    return _get_or_404(records, job_id)


@router.put("/{job_id}", response_model=MasterRecordData)
async def update_job(job_id: str, req: JobUpdate, records: RecordCollections = Depends(get_records)):
    try:
        updated = edit_job(records, job_id, req.model_dump(exclude_unset=True))
    except ProtectedJobIdError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    if updated is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _get_or_404(records, job_id)


@router.delete("/{job_id}")
async def delete(job_id: str, records: RecordCollections = Depends(get_records)):
    try:
        deleted = delete_job(records, job_id)
    except ProtectedJobIdError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=404, detail="Job not found")
    return {"message": "Job deleted"}


@router.put("/{job_id}/status", response_model=MasterRecordData)
async def change_status(job_id: str, req: StatusUpdate, records: RecordCollections = Depends(get_records)):
    if not update_record_status(records, job_id, req.status):
        raise HTTPException(status_code=404, detail="Job not found")
    return _get_or_404(records, job_id)


@router.post("/{job_id}/delivery", response_model=MasterRecordData)
async def deliver(job_id: str, req: DeliveryDetails, records: RecordCollections = Depends(get_records)):
    try:
        delivered = mark_item_as_delivered_with_details(records, job_id, req)
    except ValidationFailed as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    if not delivered:
        raise HTTPException(status_code=404, detail="Job not found")
    return _get_or_404(records, job_id)


@router.put("/{job_id}/estimate-amount", response_model=MasterRecordData)
async def record_estimate_amount(
    job_id: str,
    req: EstimateAmountUpdate,
    records: RecordCollections = Depends(get_records),
):
    if not update_inward_with_estimate(records, job_id, req.amount):
        raise HTTPException(status_code=404, detail="Job not found")
    return _get_or_404(records, job_id)
