from fastapi import APIRouter, Depends, HTTPException

from recovery_desk.dependencies import get_records
from recovery_desk.errors import ValidationFailed
from recovery_desk.schemas.document import (
    DocumentNumberResponse,
    GeneratedEstimate,
    GeneratedInvoice,
)
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.document_service import (
    get_estimate_by_job_id,
    get_invoice_by_job_id,
    save_generated_estimate,
    save_generated_invoice,
)
from recovery_desk.services.numbering import (
    generate_next_estimate_number,
    generate_next_invoice_number,
    preview_next_estimate_number,
    preview_next_invoice_number,
)

router = APIRouter(tags=["documents"])


@router.get("/invoices/next-number", response_model=DocumentNumberResponse)
async def peek_invoice_number(records: RecordCollections = Depends(get_records)):
    return DocumentNumberResponse(number=preview_next_invoice_number(records))


@router.post("/invoices/next-number", response_model=DocumentNumberResponse)
async def take_invoice_number(records: RecordCollections = Depends(get_records)):
    return DocumentNumberResponse(number=generate_next_invoice_number(records))


@router.get("/invoices", response_model=list[GeneratedInvoice])
async def list_invoices(records: RecordCollections = Depends(get_records)):
    return records.invoices()


@router.post("/invoices", response_model=GeneratedInvoice, status_code=201)
async def save_invoice(req: GeneratedInvoice, records: RecordCollections = Depends(get_records)):
    try:
        return save_generated_invoice(records, req)
    except ValidationFailed as exc:
        raise HTTPException(status_code=422, detail=exc.errors)


@router.get("/jobs/{job_id}/invoice", response_model=GeneratedInvoice)
async def job_invoice(job_id: str, records: RecordCollections = Depends(get_records)):
    invoice = get_invoice_by_job_id(records, job_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.get("/estimates/next-number", response_model=DocumentNumberResponse)
async def peek_estimate_number(records: RecordCollections = Depends(get_records)):
    return DocumentNumberResponse(number=preview_next_estimate_number(records))


@router.post("/estimates/next-number", response_model=DocumentNumberResponse)
async def take_estimate_number(records: RecordCollections = Depends(get_records)):
    return DocumentNumberResponse(number=generate_next_estimate_number(records))


@router.get("/estimates", response_model=list[GeneratedEstimate])
async def list_estimates(records: RecordCollections = Depends(get_records)):
    return records.estimates()


@router.post("/estimates", response_model=GeneratedEstimate, status_code=201)
async def save_estimate(req: GeneratedEstimate, records: RecordCollections = Depends(get_records)):
    try:
        return save_generated_estimate(records, req)
    except ValidationFailed as exc:
        raise HTTPException(status_code=422, detail=exc.errors)


@router.get("/jobs/{job_id}/estimate", response_model=GeneratedEstimate)
async def job_estimate(job_id: str, records: RecordCollections = Depends(get_records)):
    estimate = get_estimate_by_job_id(records, job_id)
    if estimate is None:
        raise HTTPException(status_code=404, detail="Estimate not found")
    return estimate
