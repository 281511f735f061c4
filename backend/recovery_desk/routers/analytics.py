from fastapi import APIRouter, Depends

from recovery_desk.dependencies import get_records
from recovery_desk.services.analytics_service import get_dashboard_analytics
from recovery_desk.services.collections import RecordCollections

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("")
async def get_analytics(records: RecordCollections = Depends(get_records)):
    return get_dashboard_analytics(records)
