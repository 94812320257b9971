"""
Travel analytics endpoint for Rail Connect
"""
from fastapi import APIRouter, HTTPException, status, Depends
from typing import Dict, Any
import logging

from app.api.deps import get_travel_analytics
from app.core.security import get_current_user
from app.schemas.analytics import AnalyticsResponse
from app.services.analytics import TravelAnalytics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    current_user: Dict[str, Any] = Depends(get_current_user),
    analytics: TravelAnalytics = Depends(get_travel_analytics),
):
    """Current-year totals, top destinations and monthly breakdowns"""
    try:
        return await analytics.for_user(current_user["uid"])
    except Exception as e:
        logger.error(f"Error computing analytics for {current_user['uid']}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load your travel data. Please try again later."
        )
