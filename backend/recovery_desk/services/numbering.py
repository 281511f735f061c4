"""
Job ID, document number and internal record ID allocation.

Job IDs look like JOB001. IDs that match that exact shape are treated as
auto-generated and are protected from edits and deletes; anything else a
user typed in is free-form.
"""
import re

from recovery_desk.config import settings
from recovery_desk.services.collections import RecordCollections


def _auto_job_id_pattern() -> re.Pattern:
    return re.compile(rf"^{re.escape(settings.job_id_prefix)}\d{{{settings.job_id_width}}}$")


def is_auto_generated(job_id: str) -> bool:
    return bool(_auto_job_id_pattern().match(job_id))


def format_job_id(number: int) -> str:
    return f"{settings.job_id_prefix}{number:0{settings.job_id_width}d}"


def job_number(job_id: str) -> int | None:
    m = re.match(rf"^{re.escape(settings.job_id_prefix)}(\d+)$", job_id)
    return int(m.group(1)) if m else None


def preview_next_job_id(records: RecordCollections) -> str:
    return format_job_id(records.job_counter() + 1)


def generate_next_job_id(records: RecordCollections) -> str:
    counter = records.job_counter() + 1
    records.save_job_counter(counter)
    return format_job_id(counter)


def reset_job_id_counter(records: RecordCollections) -> None:
    records.save_job_counter(0)


def peek_available_job_id(records: RecordCollections) -> str:
    """Next free job ID. Read-only: an empty store always answers JOB001."""
    existing = {r.job_id for r in records.hard_disks()}
    if not existing:
        return format_job_id(1)

    number = records.job_counter() + 1
    while format_job_id(number) in existing:
        number += 1
    return format_job_id(number)


def next_available_job_id(records: RecordCollections) -> str:
    """Like `peek_available_job_id`, but resets the counter when there are no jobs."""
    if not records.hard_disks():
        reset_job_id_counter(records)
    return peek_available_job_id(records)


def commit_job_id(records: RecordCollections, job_id: str) -> bool:
    """Advance the counter if `job_id` is exactly the next one in sequence."""
    number = job_number(job_id)
    if number is None or number != records.job_counter() + 1:
        return False
    generate_next_job_id(records)
    return True


def _format_document_number(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{settings.document_number_width}d}"


def preview_next_invoice_number(records: RecordCollections) -> str:
    return _format_document_number("INV", records.invoice_counter().invoice + 1)


def preview_next_estimate_number(records: RecordCollections) -> str:
    return _format_document_number("EST", records.invoice_counter().estimate + 1)


def generate_next_invoice_number(records: RecordCollections) -> str:
    counter = records.invoice_counter()
    counter.invoice += 1
    records.save_invoice_counter(counter)
    return _format_document_number("INV", counter.invoice)


def generate_next_estimate_number(records: RecordCollections) -> str:
    counter = records.invoice_counter()
    counter.estimate += 1
    records.save_invoice_counter(counter)
    return _format_document_number("EST", counter.estimate)


def allocate_record_id(records: RecordCollections) -> int:
    """Next ID for inward/outward/customer/backup rows."""
    value = records.record_sequence() + 1
    records.save_record_sequence(value)
    return value


def reserve_record_ids(records: RecordCollections, ids: list[int]) -> None:
    """Move the sequence past IDs that arrived from outside (imports)."""
    if ids and max(ids) > records.record_sequence():
        records.save_record_sequence(max(ids))
