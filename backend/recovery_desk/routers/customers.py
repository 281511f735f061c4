from fastapi import APIRouter, Depends, HTTPException

from recovery_desk.dependencies import get_records
from recovery_desk.schemas.customer import CustomerUpsert
from recovery_desk.schemas.record import MasterCustomer
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.customer_service import (
    add_or_update_master_customer,
    get_master_customer_by_name,
    get_master_customer_by_phone,
    list_master_customers,
)

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[MasterCustomer])
async def list_customers(records: RecordCollections = Depends(get_records)):
    return list_master_customers(records)


@router.get("/lookup", response_model=MasterCustomer)
async def lookup_customer(
    phone: str | None = None,
    name: str | None = None,
    records: RecordCollections = Depends(get_records),
):
    if not phone and not name:
        raise HTTPException(status_code=400, detail="Provide phone or name")
    customer = None
    if phone:
        customer = get_master_customer_by_phone(records, phone)
    if customer is None and name:
        customer = get_master_customer_by_name(records, name)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("", response_model=MasterCustomer)
async def upsert_customer(req: CustomerUpsert, records: RecordCollections = Depends(get_records)):
    if not req.name and not req.phone_number:
        raise HTTPException(status_code=400, detail="Customer name or phone number is required")
    with records.transaction():
        customer = add_or_update_master_customer(records, req)
    return customer
