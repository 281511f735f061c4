"""
Bulk lifecycle operations: wipes, cascading deletes, backup job data
and full-system export/import.

Everything here returns a result model instead of raising, so callers
can always show a summary.
"""
import logging
import time
from typing import Any

from pydantic import ValidationError

from recovery_desk.config import settings
from recovery_desk.errors import ProtectedJobIdError
from recovery_desk.schemas.backup import (
    BackupJobDataExport,
    ClearResult,
    CountResult,
    FullExport,
    FullImport,
    OperationResult,
    SelectiveDeleteResult,
)
from recovery_desk.schemas.record import BackupJobData, HardDiskRecord, RecordStatus
from recovery_desk.services.collections import RecordCollections, StorageKeys
from recovery_desk.services.numbering import (
    allocate_record_id,
    is_auto_generated,
    next_available_job_id,
    reserve_record_ids,
)
from recovery_desk.utils.dates import now_iso, today_iso

logger = logging.getLogger(__name__)


# ---- wipes ----------------------------------------------------------------

def clear_all_records_for_fresh_start(records: RecordCollections) -> ClearResult:
    """Wipe jobs, documents and counters. Company details and terms stay."""
    try:
        cleared: list[str] = []
        with records.transaction():
            for key, label, count in (
                (StorageKeys.HARD_DISK_RECORDS, "Hard Disk Records", len(records.hard_disks())),
                (StorageKeys.INWARD_RECORDS, "Inward Records", len(records.inward())),
                (StorageKeys.OUTWARD_RECORDS, "Outward Records", len(records.outward())),
                (StorageKeys.BACKUP_JOB_DATA, "Business Analytics Records", len(records.backup_job_data())),
                (StorageKeys.GENERATED_INVOICES, "Generated Invoices", len(records.invoices())),
                (StorageKeys.GENERATED_ESTIMATES, "Generated Estimates", len(records.estimates())),
            ):
                records.remove(key)
                if count:
                    cleared.append(f"{count} {label}")

            records.remove(StorageKeys.JOB_COUNTER)
            cleared.append("Job ID Counter Reset")
            records.remove(StorageKeys.INVOICE_COUNTER)
            cleared.append("Invoice Counter Reset")
    except Exception as exc:
        logger.error("Fresh start failed: %s", exc)
        return ClearResult(success=False, cleared_items=[], error=str(exc))

    logger.info("Fresh start: %s", ", ".join(cleared))
    return ClearResult(success=True, cleared_items=cleared)


def clear_all_data(records: RecordCollections) -> OperationResult:
    """Remove every stored key, company details and terms included."""
    try:
        with records.transaction():
            for key in StorageKeys.ALL:
                records.remove(key)
    except Exception as exc:
        logger.error("Clearing all data failed: %s", exc)
        return OperationResult(success=False, error=str(exc))
    logger.info("All stored data removed")
    return OperationResult(success=True)


def open_intake(records: RecordCollections) -> tuple[str, ClearResult | None]:
    """
    Prepare the intake form: returns the job ID to offer and, when
    `wipe_on_intake_load` is enabled, the result of the fresh-start wipe.
    """
    result = None
    if settings.wipe_on_intake_load:
        result = clear_all_records_for_fresh_start(records)
    return next_available_job_id(records), result


# ---- deletes --------------------------------------------------------------

def _purge_orphans(records: RecordCollections, job_ids: set[str]) -> None:
    records.save_invoices([i for i in records.invoices() if i.job_id not in job_ids])
    records.save_estimates([e for e in records.estimates() if e.job_id not in job_ids])

    remaining = records.hard_disks()
    phones = {hd.phone_number for hd in remaining if hd.phone_number}
    names = {hd.customer_name.lower() for hd in remaining if hd.customer_name}
    records.save_master_customers([
        c for c in records.master_customers()
        if (c.phone_number and c.phone_number in phones) or c.name.lower() in names
    ])


def _remove_jobs(
    records: RecordCollections,
    job_ids: set[str],
    purge_orphans: bool,
    include_backup: bool = True,
) -> None:
    records.save_hard_disks([r for r in records.hard_disks() if r.job_id not in job_ids])
    records.save_inward([r for r in records.inward() if r.job_id not in job_ids])
    records.save_outward([r for r in records.outward() if r.job_id not in job_ids])
    if include_backup:
        records.save_backup_job_data([r for r in records.backup_job_data() if r.job_id not in job_ids])
    if purge_orphans:
        _purge_orphans(records, job_ids)


def delete_job_id_from_all_records(
    records: RecordCollections,
    job_id: str,
    purge_orphans: bool | None = None,
) -> OperationResult:
    if purge_orphans is None:
        purge_orphans = settings.purge_orphans_on_delete
    try:
        with records.transaction():
            _remove_jobs(records, {job_id}, purge_orphans)
    except Exception as exc:
        logger.error("Deleting job %s failed: %s", job_id, exc)
        return OperationResult(success=False, error=str(exc))
    logger.info("Job %s deleted from all collections", job_id)
    return OperationResult(success=True)


def delete_job(records: RecordCollections, job_id: str) -> bool:
    """Delete from the intake list. Auto-generated IDs are refused."""
    if is_auto_generated(job_id):
        raise ProtectedJobIdError(job_id, "delete")
    if records.find_hard_disk(job_id) is None:
        return False
    result = delete_job_id_from_all_records(records, job_id)
    return result.success


def delete_selected_backup_job_data(records: RecordCollections, ids: list[int]) -> SelectiveDeleteResult:
    selected = set(ids)
    try:
        with records.transaction():
            rows = records.backup_job_data()
            to_delete = [r for r in rows if r.id in selected]
            job_ids = [r.job_id for r in to_delete]
            records.save_backup_job_data([r for r in rows if r.id not in selected])
            _remove_jobs(records, set(job_ids), settings.purge_orphans_on_delete, include_backup=False)
    except Exception as exc:
        logger.error("Deleting selected backup rows failed: %s", exc)
        return SelectiveDeleteResult(success=False, count=0, deleted_job_ids=[], error=str(exc))

    logger.info("Deleted %d backup rows and jobs %s", len(to_delete), ", ".join(job_ids))
    return SelectiveDeleteResult(success=True, count=len(to_delete), deleted_job_ids=job_ids)


# ---- backup job data ------------------------------------------------------

def _backup_row_from_hard_disk(records: RecordCollections, hd: HardDiskRecord) -> BackupJobData:
    return BackupJobData(
        id=allocate_record_id(records),
        job_id=hd.job_id,
        customer_name=hd.customer_name,
        phone_number=hd.phone_number,
        device_info=f"{hd.model} {hd.capacity}",
        serial_number=hd.serial_number,
        complaint=hd.complaint,
        received_date=hd.received_date,
        estimated_amount=hd.estimated_amount,
        status=hd.status or RecordStatus.PENDING,
        created_at=hd.created_at,
        notes="Auto-synced from hard disk record",
    )


def auto_sync_backup_job_data(records: RecordCollections) -> CountResult:
    """Add a backup row for every job that has none. Existing rows are left alone."""
    try:
        with records.transaction():
            rows = records.backup_job_data()
            known = {r.job_id for r in rows}
            added = [
                _backup_row_from_hard_disk(records, hd)
                for hd in records.hard_disks()
                if hd.job_id not in known
            ]
            records.save_backup_job_data(rows + added)
    except Exception as exc:
        logger.error("Backup auto-sync failed: %s", exc)
        return CountResult(success=False, count=0, error=str(exc))
    return CountResult(success=True, count=len(added))


def add_backup_job_data(records: RecordCollections, entry: dict[str, Any]) -> BackupJobData:
    with records.transaction():
        data = {k: v for k, v in entry.items() if k != "id"}
        if not _pick(data, "createdAt", "created_at"):
            data["createdAt"] = now_iso()
        row = BackupJobData.model_validate({**data, "id": allocate_record_id(records)})
        records.save_backup_job_data(records.backup_job_data() + [row])
    return row


def _pick(item: dict, camel: str, snake: str) -> Any:
    value = item.get(camel)
    return value if value is not None else item.get(snake)


def _text(value: Any, default: str = "") -> str:
    return str(value) if value not in (None, "") else default


def _imported_row(records: RecordCollections, item: Any, index: int, stamp: int) -> BackupJobData:
    if not isinstance(item, dict):
        raise ValueError(f"Entry {index} is not an object")
    amount = _pick(item, "estimatedAmount", "estimated_amount")
    try:
        amount = float(amount) if amount else None
    except (TypeError, ValueError):
        amount = None
    # Labels such as "In Progress" map onto the enum; unknown values become pending.
    try:
        status = RecordStatus(str(item.get("status") or "").strip().lower().replace(" ", "_"))
    except ValueError:
        status = RecordStatus.PENDING
    return BackupJobData(
        id=allocate_record_id(records),
        job_id=_text(_pick(item, "jobId", "job_id"), f"IMPORTED-{stamp}-{index}"),
        customer_name=_text(_pick(item, "customerName", "customer_name"), "Unknown Customer"),
        phone_number=_text(_pick(item, "phoneNumber", "phone_number")),
        device_info=_text(_pick(item, "deviceInfo", "device_info"), "Unknown Device"),
        serial_number=_text(_pick(item, "serialNumber", "serial_number")),
        complaint=_text(item.get("complaint"), "No complaint specified"),
        received_date=_text(_pick(item, "receivedDate", "received_date"), today_iso()),
        estimated_amount=amount,
        status=status,
        created_at=_text(_pick(item, "createdAt", "created_at"), now_iso()),
        notes=_text(item.get("notes")),
    )


def import_backup_job_data(records: RecordCollections, payload: Any) -> CountResult:
    """Append rows from a loosely-typed list (or an export envelope)."""
    if isinstance(payload, dict):
        payload = payload.get("backupJobData", [])
    if not isinstance(payload, list):
        return CountResult(success=False, count=0, error="Expected a list of backup job records")

    stamp = int(time.time() * 1000)
    try:
        with records.transaction():
            imported = [_imported_row(records, item, i, stamp) for i, item in enumerate(payload)]
            records.save_backup_job_data(records.backup_job_data() + imported)
    except (ValueError, TypeError, ValidationError) as exc:
        logger.error("Backup import rejected: %s", exc)
        return CountResult(success=False, count=0, error=str(exc))

    logger.info("Imported %d backup job rows", len(imported))
    return CountResult(success=True, count=len(imported))


def export_backup_job_data(records: RecordCollections) -> BackupJobDataExport:
    rows = records.backup_job_data()
    return BackupJobDataExport(backup_job_data=rows, export_date=now_iso(), total_records=len(rows))


def clear_backup_job_data(records: RecordCollections) -> None:
    records.remove(StorageKeys.BACKUP_JOB_DATA)


def clear_monthly_revenue_data(records: RecordCollections) -> CountResult:
    """Blank out the amount on every backup row that has one."""
    try:
        with records.transaction():
            rows = records.backup_job_data()
            cleared = 0
            for row in rows:
                if row.estimated_amount and row.estimated_amount > 0:
                    row.estimated_amount = None
                    cleared += 1
            records.save_backup_job_data(rows)
    except Exception as exc:
        logger.error("Clearing revenue data failed: %s", exc)
        return CountResult(success=False, count=0, error=str(exc))
    return CountResult(success=True, count=cleared)


# ---- full-system backup ---------------------------------------------------

def export_all_data(records: RecordCollections) -> FullExport:
    return FullExport(
        hard_disk_records=records.hard_disks(),
        inward_records=records.inward(),
        outward_records=records.outward(),
        invoice_counter=records.invoice_counter(),
        job_counter=records.job_counter(),
        export_date=now_iso(),
    )


def import_data(records: RecordCollections, payload: FullImport) -> OperationResult:
    """Replace each collection present in the payload wholesale."""
    try:
        with records.transaction():
            if payload.hard_disk_records is not None:
                records.remove(StorageKeys.HARD_DISK_RECORDS)
                records.save_hard_disks(payload.hard_disk_records)
            if payload.inward_records is not None:
                records.remove(StorageKeys.INWARD_RECORDS)
                records.save_inward(payload.inward_records)
                reserve_record_ids(records, [r.id for r in payload.inward_records])
            if payload.outward_records is not None:
                records.remove(StorageKeys.OUTWARD_RECORDS)
                records.save_outward(payload.outward_records)
                reserve_record_ids(records, [r.id for r in payload.outward_records])
            if payload.invoice_counter is not None:
                records.save_invoice_counter(payload.invoice_counter)
            if payload.job_counter is not None:
                records.save_job_counter(payload.job_counter)
    except Exception as exc:
        logger.error("Full import failed: %s", exc)
        return OperationResult(success=False, error=str(exc))
    logger.info("Full import applied (exported %s)", payload.export_date or "unknown date")
    return OperationResult(success=True)
