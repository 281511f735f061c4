from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from recovery_desk.dependencies import get_records
from recovery_desk.schemas.backup import (
    BackupJobDataExport,
    ClearResult,
    CountResult,
    FullExport,
    FullImport,
    OperationResult,
    SelectedIds,
    SelectiveDeleteResult,
)
from recovery_desk.schemas.record import BackupJobData
from recovery_desk.services.backup_service import (
    add_backup_job_data,
    auto_sync_backup_job_data,
    clear_all_data,
    clear_all_records_for_fresh_start,
    clear_backup_job_data,
    clear_monthly_revenue_data,
    delete_job_id_from_all_records,
    delete_selected_backup_job_data,
    export_all_data,
    export_backup_job_data,
    import_backup_job_data,
    import_data,
)
from recovery_desk.services.collections import RecordCollections

router = APIRouter(tags=["backup"])


@router.get("/export/json", response_model=FullExport)
async def json_export(records: RecordCollections = Depends(get_records)):
    return export_all_data(records)


@router.post("/import/json", response_model=OperationResult)
async def json_import(req: FullImport, records: RecordCollections = Depends(get_records)):
    return import_data(records, req)


@router.post("/fresh-start", response_model=ClearResult)
async def fresh_start(records: RecordCollections = Depends(get_records)):
    return clear_all_records_for_fresh_start(records)


@router.post("/clear-all", response_model=OperationResult)
async def clear_everything(records: RecordCollections = Depends(get_records)):
    return clear_all_data(records)


@router.delete("/records/{job_id}", response_model=OperationResult)
async def purge_job(job_id: str, records: RecordCollections = Depends(get_records)):
    # Cascade delete used by the records screens; no Job ID guard here.
    return delete_job_id_from_all_records(records, job_id)


@router.get("/backup-jobs", response_model=list[BackupJobData])
async def list_backup_jobs(records: RecordCollections = Depends(get_records)):
    return records.backup_job_data()


@router.post("/backup-jobs", response_model=BackupJobData, status_code=201)
async def add_backup_job(entry: dict[str, Any] = Body(...), records: RecordCollections = Depends(get_records)):
    if not (entry.get("jobId") or entry.get("job_id")):
        raise HTTPException(status_code=400, detail="jobId is required")
    return add_backup_job_data(records, entry)


@router.get("/backup-jobs/export", response_model=BackupJobDataExport)
async def export_backup_jobs(records: RecordCollections = Depends(get_records)):
    return export_backup_job_data(records)


@router.post("/backup-jobs/import", response_model=CountResult)
async def import_backup_jobs(payload: Any = Body(...), records: RecordCollections = Depends(get_records)):
    return import_backup_job_data(records, payload)


@router.post("/backup-jobs/auto-sync", response_model=CountResult)
async def sync_backup_jobs(records: RecordCollections = Depends(get_records)):
    return auto_sync_backup_job_data(records)


@router.post("/backup-jobs/delete-selected", response_model=SelectiveDeleteResult)
async def delete_backup_jobs(req: SelectedIds, records: RecordCollections = Depends(get_records)):
    return delete_selected_backup_job_data(records, req.ids)


@router.post("/backup-jobs/clear-revenue", response_model=CountResult)
async def clear_revenue(records: RecordCollections = Depends(get_records)):
    return clear_monthly_revenue_data(records)


@router.delete("/backup-jobs")
async def clear_backup_jobs(records: RecordCollections = Depends(get_records)):
    clear_backup_job_data(records)
    return {"message": "Backup job data cleared"}
