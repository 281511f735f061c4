import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator, TypeVar

from pydantic import BaseModel, ValidationError

from recovery_desk.schemas.base import CamelModel
from recovery_desk.schemas.document import GeneratedEstimate, GeneratedInvoice
from recovery_desk.schemas.record import (
    BackupJobData,
    HardDiskRecord,
    InvoiceCounter,
    InwardRecord,
    MasterCustomer,
    OutwardRecord,
)
from recovery_desk.services.store import BufferedStore, KeyValueStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class StorageKeys:
    HARD_DISK_RECORDS = "hardDiskRecords"
    INWARD_RECORDS = "inwardRecords"
    OUTWARD_RECORDS = "outwardRecords"
    INVOICE_COUNTER = "invoiceCounter"
    JOB_COUNTER = "jobCounter"
    COMPANY_DETAILS = "companyDetails"
    TERMS_TEMPLATES = "termsTemplates"
    GENERATED_INVOICES = "generatedInvoices"
    GENERATED_ESTIMATES = "generatedEstimates"
    MASTER_CUSTOMERS = "masterCustomers"
    BACKUP_JOB_DATA = "backupJobData"
    RECORD_SEQUENCE = "recordSequence"

    ALL = (
        HARD_DISK_RECORDS,
        INWARD_RECORDS,
        OUTWARD_RECORDS,
        INVOICE_COUNTER,
        JOB_COUNTER,
        COMPANY_DETAILS,
        TERMS_TEMPLATES,
        GENERATED_INVOICES,
        GENERATED_ESTIMATES,
        MASTER_CUSTOMERS,
        BACKUP_JOB_DATA,
        RECORD_SEQUENCE,
    )


class RecordCollections:
    """
    Typed access to every collection kept in a KeyValueStore.

    Each collection is one JSON array under its key. Unreadable data is
    logged and skipped on read; it never raises to the caller. Rows that
    fail validation stay in storage until the collection is wiped.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @contextmanager
    def transaction(self) -> Iterator["RecordCollections"]:
        """Buffer every write made inside the block and flush them together."""
        if isinstance(self._store, BufferedStore):
            # Already inside a transaction: join it.
            yield self
            return
        buffered = BufferedStore(self._store)
        self._store = buffered
        try:
            yield self
            buffered.flush()
        except Exception:
            buffered.discard()
            raise
        finally:
            self._store = buffered.inner

    # ---- raw JSON ---------------------------------------------------------

    def read_json(self, key: str, default: Any) -> Any:
        raw = self._store.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning("Unreadable JSON under %r, using default: %s", key, exc)
            return default

    def write_json(self, key: str, data: Any) -> None:
        self._store.set(key, json.dumps(data).encode("utf-8"))

    def remove(self, key: str) -> None:
        self._store.delete(key)

    def _load_list(self, key: str, model: type[M]) -> list[M]:
        data = self.read_json(key, [])
        if not isinstance(data, list):
            logger.warning("Expected a list under %r, got %s; using empty list", key, type(data).__name__)
            return []
        items: list[M] = []
        for raw in data:
            try:
                items.append(model.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping invalid %s under %r: %s", model.__name__, key, exc)
        return items

    def _unreadable(self, key: str, model: type[M]) -> list[Any]:
        data = self.read_json(key, [])
        if not isinstance(data, list):
            return []
        kept = []
        for raw in data:
            try:
                model.model_validate(raw)
            except ValidationError:
                kept.append(raw)
        return kept

    def _save_list(self, key: str, items: list[CamelModel], model: type[CamelModel]) -> None:
        # Rows that no longer validate are written back as stored.
        self.write_json(key, [item.to_store() for item in items] + self._unreadable(key, model))

    def _load_int(self, key: str) -> int:
        value = self.read_json(key, 0)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid counter under %r: %r; using 0", key, value)
            return 0

    # ---- collections ------------------------------------------------------

    def hard_disks(self) -> list[HardDiskRecord]:
        return self._load_list(StorageKeys.HARD_DISK_RECORDS, HardDiskRecord)

    def save_hard_disks(self, records: list[HardDiskRecord]) -> None:
        self._save_list(StorageKeys.HARD_DISK_RECORDS, records, HardDiskRecord)

    def inward(self) -> list[InwardRecord]:
        return self._load_list(StorageKeys.INWARD_RECORDS, InwardRecord)

    def save_inward(self, records: list[InwardRecord]) -> None:
        self._save_list(StorageKeys.INWARD_RECORDS, records, InwardRecord)

    def outward(self) -> list[OutwardRecord]:
        return self._load_list(StorageKeys.OUTWARD_RECORDS, OutwardRecord)

    def save_outward(self, records: list[OutwardRecord]) -> None:
        self._save_list(StorageKeys.OUTWARD_RECORDS, records, OutwardRecord)

    def master_customers(self) -> list[MasterCustomer]:
        return self._load_list(StorageKeys.MASTER_CUSTOMERS, MasterCustomer)

    def save_master_customers(self, customers: list[MasterCustomer]) -> None:
        self._save_list(StorageKeys.MASTER_CUSTOMERS, customers, MasterCustomer)

    def backup_job_data(self) -> list[BackupJobData]:
        return self._load_list(StorageKeys.BACKUP_JOB_DATA, BackupJobData)

    def save_backup_job_data(self, rows: list[BackupJobData]) -> None:
        self._save_list(StorageKeys.BACKUP_JOB_DATA, rows, BackupJobData)

    def invoices(self) -> list[GeneratedInvoice]:
        return self._load_list(StorageKeys.GENERATED_INVOICES, GeneratedInvoice)

    def save_invoices(self, invoices: list[GeneratedInvoice]) -> None:
        self._save_list(StorageKeys.GENERATED_INVOICES, invoices, GeneratedInvoice)

    def estimates(self) -> list[GeneratedEstimate]:
        return self._load_list(StorageKeys.GENERATED_ESTIMATES, GeneratedEstimate)

    def save_estimates(self, estimates: list[GeneratedEstimate]) -> None:
        self._save_list(StorageKeys.GENERATED_ESTIMATES, estimates, GeneratedEstimate)

    # ---- counters ---------------------------------------------------------

    def job_counter(self) -> int:
        return self._load_int(StorageKeys.JOB_COUNTER)

    def save_job_counter(self, value: int) -> None:
        self.write_json(StorageKeys.JOB_COUNTER, value)

    def invoice_counter(self) -> InvoiceCounter:
        data = self.read_json(StorageKeys.INVOICE_COUNTER, None)
        if data is None:
            return InvoiceCounter()
        try:
            return InvoiceCounter.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid invoice counter, resetting to zero: %s", exc)
            return InvoiceCounter()

    def save_invoice_counter(self, counter: InvoiceCounter) -> None:
        self.write_json(StorageKeys.INVOICE_COUNTER, counter.to_store())

    def record_sequence(self) -> int:
        return self._load_int(StorageKeys.RECORD_SEQUENCE)

    def save_record_sequence(self, value: int) -> None:
        self.write_json(StorageKeys.RECORD_SEQUENCE, value)

    # ---- lookups ----------------------------------------------------------

    def find_hard_disk(self, job_id: str) -> HardDiskRecord | None:
        return next((r for r in self.hard_disks() if r.job_id == job_id), None)

    def find_inward(self, job_id: str) -> InwardRecord | None:
        return next((r for r in self.inward() if r.job_id == job_id), None)

    def find_outward(self, job_id: str) -> OutwardRecord | None:
        return next((r for r in self.outward() if r.job_id == job_id), None)
