from recovery_desk.schemas.customer import CustomerUpsert
from recovery_desk.schemas.record import MasterCustomer
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.numbering import allocate_record_id
from recovery_desk.utils.dates import now_iso


def _match_index(customers: list[MasterCustomer], phone_number: str | None, name: str | None) -> int | None:
    # Phone number is the key; a case-insensitive name match is the fallback.
    if phone_number:
        for i, c in enumerate(customers):
            if c.phone_number == phone_number:
                return i
    if name:
        for i, c in enumerate(customers):
            if c.name.lower() == name.lower():
                return i
    return None


def add_or_update_master_customer(records: RecordCollections, data: CustomerUpsert) -> MasterCustomer:
    customers = records.master_customers()
    now = now_iso()
    index = _match_index(customers, data.phone_number, data.name)

    if index is not None:
        updates = data.model_dump(exclude_unset=True)
        for key in ("name", "phone_number"):
            if updates.get(key, "") is None:
                del updates[key]
        customer = customers[index].model_copy(update={**updates, "last_updated": now})
        customers[index] = customer
    else:
        customer = MasterCustomer(
            id=allocate_record_id(records),
            name=data.name or "",
            phone_number=data.phone_number or "",
            email=data.email,
            address=data.address,
            state=data.state,
            gstin=data.gstin,
            created_at=now,
            last_updated=now,
        )
        customers.append(customer)

    records.save_master_customers(customers)
    return customer


def get_master_customer_by_phone(records: RecordCollections, phone_number: str) -> MasterCustomer | None:
    return next((c for c in records.master_customers() if c.phone_number == phone_number), None)


def get_master_customer_by_name(records: RecordCollections, name: str) -> MasterCustomer | None:
    return next((c for c in records.master_customers() if c.name.lower() == name.lower()), None)


def list_master_customers(records: RecordCollections) -> list[MasterCustomer]:
    return sorted(records.master_customers(), key=lambda c: c.name.lower())
