from recovery_desk.schemas.base import CamelModel


class CustomerUpsert(CamelModel):
    name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    address: str | None = None
    state: str | None = None
    gstin: str | None = None
