from recovery_desk.errors import ValidationFailed
from recovery_desk.schemas.document import GeneratedEstimate, GeneratedInvoice
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.sync_service import update_inward_with_estimate
from recovery_desk.utils.dates import now_iso


def validate_document_data(
    number: str | None,
    customer_name: str | None,
    phone_number: str | None,
    amount: float | None,
    job_id: str | None,
) -> list[str]:
    errors = []
    if not number:
        errors.append("Invoice/Estimate number is required")
    if not customer_name:
        errors.append("Customer name is required")
    if not phone_number:
        errors.append("Phone number is required")
    if not amount or amount <= 0:
        errors.append("Amount must be greater than zero")
    if not job_id:
        errors.append("Job ID is required")
    return errors


def _upsert(items: list, doc) -> list:
    index = next((i for i, item in enumerate(items) if item.id == doc.id), None)
    if index is None:
        items.append(doc)
    else:
        items[index] = doc
    return items


def save_generated_invoice(records: RecordCollections, invoice: GeneratedInvoice) -> GeneratedInvoice:
    errors = validate_document_data(
        invoice.invoice_number, invoice.customer_name, invoice.phone_number,
        invoice.amount, invoice.job_id,
    )
    if errors:
        raise ValidationFailed(errors)

    invoice = invoice.model_copy(update={
        "id": invoice.id or f"{invoice.job_id}-{invoice.invoice_number}",
        "generated_date": invoice.generated_date or now_iso(),
    })
    with records.transaction():
        records.save_invoices(_upsert(records.invoices(), invoice))
    return invoice


def save_generated_estimate(records: RecordCollections, estimate: GeneratedEstimate) -> GeneratedEstimate:
    """Store an estimate and make its subtotal the job's estimated amount."""
    errors = validate_document_data(
        estimate.estimate_number, estimate.customer_name, estimate.phone_number,
        estimate.subtotal, estimate.job_id,
    )
    if errors:
        raise ValidationFailed(errors)

    estimate = estimate.model_copy(update={
        "id": estimate.id or f"{estimate.job_id}-{estimate.estimate_number}",
        "generated_date": estimate.generated_date or now_iso(),
    })
    with records.transaction():
        records.save_estimates(_upsert(records.estimates(), estimate))
        update_inward_with_estimate(records, estimate.job_id, estimate.subtotal)
    return estimate


def get_invoice_by_job_id(records: RecordCollections, job_id: str) -> GeneratedInvoice | None:
    return next((inv for inv in records.invoices() if inv.job_id == job_id), None)


def get_estimate_by_job_id(records: RecordCollections, job_id: str) -> GeneratedEstimate | None:
    return next((est for est in records.estimates() if est.job_id == job_id), None)
