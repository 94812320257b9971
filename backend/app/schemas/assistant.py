"""
Schemas for the prompt-completion flows (smart suggestions, chatbot)
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class PastRoute(BaseModel):
    origin: str
    destination: str
    date: str


class PopularRoute(BaseModel):
    origin: str
    destination: str


class SmartSuggestionsInput(BaseModel):
    user_id: str
    origin: str
    destination: str
    date: str = Field(..., description="Travel date (YYYY-MM-DD)")
    past_routes: List[PastRoute] = Field(default_factory=list)
    popular_routes: List[PopularRoute] = Field(default_factory=list)


class Suggestion(BaseModel):
    origin: str
    destination: str
    date: str
    reason: Optional[str] = None


class SmartSuggestionsOutput(BaseModel):
    suggestions: List[Suggestion]


class SuggestionRequest(BaseModel):
    origin: str = Field(..., min_length=2)
    destination: str = Field(..., min_length=2)
    date: date


class ChatbotInput(BaseModel):
    message: str


class ChatbotOutput(BaseModel):
    reply: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    session_id: Optional[str] = None
