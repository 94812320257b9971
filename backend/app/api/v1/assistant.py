"""
Assistant endpoints for Rail Connect
Smart train suggestions and the help chatbot, both backed by Gemini
"""
from fastapi import APIRouter, HTTPException, status, Depends
from typing import Dict, Any, Optional
import logging

from app.api.deps import get_assistant
from app.core.errors import BookingError
from app.core.security import get_current_user, get_current_user_optional, validate_ai_input
from app.schemas.assistant import (
    ChatbotInput,
    ChatbotOutput,
    ChatRequest,
    SmartSuggestionsInput,
    SmartSuggestionsOutput,
    SuggestionRequest,
)
from app.services.assistant import POPULAR_ROUTES, AssistantService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/suggestions", response_model=SmartSuggestionsOutput)
async def smart_suggestions(
    body: SuggestionRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant),
):
    """
    Suggest up to three routes for a trip

    Uses the user's recent bookings and a list of popular routes.
    """
    try:
        data = SmartSuggestionsInput(
            user_id=current_user['uid'],
            origin=body.origin,
            destination=body.destination,
            date=body.date.isoformat(),
            past_routes=await assistant.past_routes(current_user['uid']),
            popular_routes=POPULAR_ROUTES,
        )
        return await assistant.suggest(data)
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error getting suggestions for {current_user['uid']}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch smart suggestions. Please try again."
        )


@router.post("/chat", response_model=ChatbotOutput)
async def chat(
    body: ChatRequest,
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user_optional),
    assistant: AssistantService = Depends(get_assistant),
):
    message = validate_ai_input(body.message)
    try:
        return await assistant.chat(
            ChatbotInput(message=message),
            user_id=current_user['uid'] if current_user else None,
            session_id=body.session_id,
        )
    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Chat error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Sorry, I encountered an error. Please try again."
        )
