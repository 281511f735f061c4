from typing import Any

from recovery_desk.schemas.base import CamelModel
from recovery_desk.schemas.record import (
    BackupJobData,
    HardDiskRecord,
    InvoiceCounter,
    InwardRecord,
    OutwardRecord,
)


class OperationResult(CamelModel):
    success: bool
    error: str | None = None


class CountResult(OperationResult):
    count: int = 0


class ClearResult(OperationResult):
    cleared_items: list[str] = []


class SelectiveDeleteResult(CountResult):
    deleted_job_ids: list[str] = []


class BackupJobDataExport(CamelModel):
    backup_job_data: list[BackupJobData]
    export_date: str
    total_records: int


class BackupJobDataImport(CamelModel):
    backup_job_data: list[dict[str, Any]] = []


class SelectedIds(CamelModel):
    ids: list[int]


class FullExport(CamelModel):
    hard_disk_records: list[HardDiskRecord]
    inward_records: list[InwardRecord]
    outward_records: list[OutwardRecord]
    invoice_counter: InvoiceCounter
    job_counter: int
    export_date: str


class FullImport(CamelModel):
    hard_disk_records: list[HardDiskRecord] | None = None
    inward_records: list[InwardRecord] | None = None
    outward_records: list[OutwardRecord] | None = None
    invoice_counter: InvoiceCounter | None = None
    job_counter: int | None = None
    export_date: str | None = None
