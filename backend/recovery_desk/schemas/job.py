from pydantic import Field

from recovery_desk.schemas.backup import ClearResult
from recovery_desk.schemas.base import CamelModel
from recovery_desk.schemas.record import DeliveryDetails, DeliveryMode, RecordStatus


class JobCreate(CamelModel):
    job_id: str | None = None
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
    received_date: str | None = None


class JobUpdate(CamelModel):
    serial_number: str | None = None
    model: str | None = None
    capacity: str | None = None
    year: int | None = None
    complaint: str | None = None
    customer_name: str | None = None
    phone_number: str | None = None
    customer_gstin: str | None = Field(default=None, alias="customerGSTIN")
    customer_address: str | None = None
    customer_state: str | None = None
    estimated_amount: float | None = None
    estimated_delivery_date: str | None = None
    received_date: str | None = None


class StatusUpdate(CamelModel):
    status: RecordStatus


class EstimateAmountUpdate(CamelModel):
    amount: float


class NextJobIdResponse(CamelModel):
    job_id: str


class IntakeSession(CamelModel):
    next_job_id: str
    fresh_start: ClearResult | None = None


class MasterRecordData(CamelModel):
    job_id: str
    serial_number: str
    model: str
    capacity: str
    customer_name: str
    phone_number: str
    received_date: str
    complaint: str

    estimated_amount: float | None = None
    estimated_delivery_date: str | None = None
    inward_date: str | None = None
    inward_notes: str | None = None

    outward_date: str | None = None
    delivered_to: str | None = None
    delivery_mode: DeliveryMode | None = None
    delivery_details: DeliveryDetails | None = None

    status: RecordStatus
    is_closed: bool = False
    is_delivered: bool = False
    completed_date: str | None = None


class DeliveryReport(CamelModel):
    id: str
    job_id: str
    date: str
    delivered_to: str
    delivery_mode: DeliveryMode | None = None
    customer_name: str
    phone_number: str
    is_completed: bool
    completed_date: str | None = None
    inward_date: str | None = None
    device_info: str
    serial_number: str
    estimated_amount: float | None = None
    status: RecordStatus
