from fastapi import APIRouter, Depends

from recovery_desk.dependencies import get_records
from recovery_desk.schemas.job import DeliveryReport
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.record_view_service import get_delivery_reports

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/delivery", response_model=list[DeliveryReport])
async def delivery_reports(records: RecordCollections = Depends(get_records)):
    return get_delivery_reports(records)
