from enum import Enum

from pydantic import Field, field_validator

from recovery_desk.schemas.base import CamelModel


class RecordStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return {
            RecordStatus.PENDING: "Pending",
            RecordStatus.IN_PROGRESS: "In Progress",
            RecordStatus.COMPLETED: "Completed",
        }[self]


class DeliveryMode(str, Enum):
    HAND_DELIVERY = "Hand Delivery"
    COURIER = "Courier"
    POSTAL_SERVICE = "Postal Service"
    PICKUP = "Pickup by Customer"
    OTHER = "Other"

    @property
    def requires_tracking(self) -> bool:
        return self in (DeliveryMode.COURIER, DeliveryMode.POSTAL_SERVICE)


class DeliveryDetails(CamelModel):
    delivery_date: str = ""
    delivery_mode: DeliveryMode = DeliveryMode.HAND_DELIVERY
    recipient_name: str = ""
    courier_number: str | None = None
    courier_company: str | None = None
    notes: str | None = None


class HardDiskRecord(CamelModel):
    job_id: str
    serial_number: str = ""
    model: str = ""
    capacity: str = ""
    year: int | None = None
    complaint: str = ""
    customer_name: str = ""
    phone_number: str = ""
    customer_gstin: str | None = Field(default=None, alias="customerGSTIN")
    customer_address: str | None = None
    customer_state: str | None = None
    estimated_amount: float | None = None
    estimated_delivery_date: str | None = None
    received_date: str = ""
    created_at: str = ""
    is_closed: bool = False
    delivery_details: DeliveryDetails | None = None
    status: RecordStatus | None = None

    @field_validator("year", mode="before")
    @classmethod
    def _blank_year(cls, value):
        return None if value == "" else value


class InwardRecord(CamelModel):
    id: int
    job_id: str
    date: str = ""
    received_from: str = ""
    notes: str = ""
    customer_name: str = ""
    phone_number: str = ""
    manual_amount: float | None = None
    estimated_amount: float | None = None
    estimated_delivery_date: str | None = None
    is_delivered: bool = False
    delivery_date: str | None = None
    status: RecordStatus | None = None


class OutwardRecord(CamelModel):
    id: int
    job_id: str
    date: str = ""
    delivered_to: str = ""
    delivery_mode: DeliveryMode | None = None
    notes: str = ""
    customer_name: str = ""
    phone_number: str = ""
    is_completed: bool = False
    completed_date: str | None = None
    estimated_amount: float | None = None
    status: RecordStatus | None = None


class MasterCustomer(CamelModel):
    id: int
    name: str = ""
    phone_number: str = ""
    email: str | None = None
    address: str | None = None
    state: str | None = None
    gstin: str | None = None
    created_at: str = ""
    last_updated: str = ""


class BackupJobData(CamelModel):
    id: int
    job_id: str
    customer_name: str = ""
    phone_number: str = ""
    device_info: str = ""
    serial_number: str = ""
    complaint: str = ""
    received_date: str = ""
    estimated_amount: float | None = None
    status: RecordStatus = RecordStatus.PENDING
    created_at: str = ""
    notes: str | None = None


class InvoiceCounter(CamelModel):
    invoice: int = 0
    estimate: int = 0
