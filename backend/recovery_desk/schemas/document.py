from recovery_desk.schemas.base import CamelModel


class GeneratedInvoice(CamelModel):
    id: str = ""
    invoice_number: str
    job_id: str
    customer_name: str = ""
    phone_number: str = ""
    amount: float = 0
    subtotal: float = 0
    cgst: float = 0
    sgst: float = 0
    igst: float = 0
    grand_total: float = 0
    is_inter_state: bool = False
    generated_date: str = ""
    custom_terms: str | None = None


class GeneratedEstimate(CamelModel):
    id: str = ""
    estimate_number: str
    job_id: str
    customer_name: str = ""
    phone_number: str = ""
    base_amount: float = 0
    diagnostic_fee: float = 0
    manual_amount: float | None = None
    subtotal: float = 0
    cgst: float = 0
    sgst: float = 0
    igst: float = 0
    grand_total: float = 0
    is_inter_state: bool = False
    validity_days: int = 30
    valid_until_date: str = ""
    generated_date: str = ""
    custom_terms: str | None = None


class DocumentNumberResponse(CamelModel):
    number: str
