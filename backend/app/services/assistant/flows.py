"""
Assistant flows: smart train suggestions and the help chatbot
"""
import asyncio
import logging
import uuid
from typing import List, Optional

from app.core.firebase import Collections, utcnow
from app.schemas.assistant import (
    ChatbotInput,
    ChatbotOutput,
    PastRoute,
    PopularRoute,
    SmartSuggestionsInput,
    SmartSuggestionsOutput,
)
from app.services.assistant.prompt_client import PromptClient
from app.services.booking.store import BookingStore

logger = logging.getLogger(__name__)

POPULAR_ROUTES = [
    PopularRoute(origin="New Delhi (NDLS)", destination="Mumbai Central (MMCT)"),
    PopularRoute(origin="Chennai Egmore (MS)", destination="Bengaluru Cantt (BNC)"),
    PopularRoute(origin="Kolkata Howrah Jn (HWH)", destination="Patna Jn (PNBE)"),
]

PAST_ROUTE_LIMIT = 10

SUGGESTIONS_PROMPT = """You are a train travel expert, recommending routes to users based on their history and popular routes.
The user is travelling from {origin} to {destination} on {date}.

Here are the user's past routes:
{past_routes}

Here are some popular routes:
{popular_routes}

Based on this information, suggest the 3 most convenient train routes for the user.
Each suggestion should include a reason, if possible.
The date should be the same as the user's travel date.
Do not suggest any routes that start or end at stations that do not exist.

Respond with JSON of the form:
{{"suggestions": [{{"origin": "...", "destination": "...", "date": "YYYY-MM-DD", "reason": "..."}}]}}"""

CHAT_PROMPT = """You are a friendly and helpful AI assistant for "Rail Connect", a website for searching, viewing and booking train tickets in India.
You can provide general information, answer simple questions about using the website, and guide users.
You cannot search for trains, check PNR status or make bookings through this chat; direct the user to the relevant sections of the website instead.

User's message: "{message}"

Respond politely and concisely, in a few sentences.
Respond with JSON of the form: {{"reply": "..."}}"""


def _format_routes(routes) -> str:
    if not routes:
        return "- None"
    lines = []
    for route in routes:
        line = f"- From {route.origin} to {route.destination}"
        if getattr(route, "date", None):
            line += f" on {route.date}"
        lines.append(line)
    return "\n".join(lines)


def build_suggestions_prompt(data: SmartSuggestionsInput) -> str:
    return SUGGESTIONS_PROMPT.format(
        origin=data.origin,
        destination=data.destination,
        date=data.date,
        past_routes=_format_routes(data.past_routes),
        popular_routes=_format_routes(data.popular_routes),
    )


def build_chat_prompt(data: ChatbotInput) -> str:
    return CHAT_PROMPT.format(message=data.message)


class AssistantService:

    def __init__(self, client: PromptClient, bookings: BookingStore, db) -> None:
        self.client = client
        self.bookings = bookings
        self.db = db

    async def past_routes(self, user_id: str) -> List[PastRoute]:
        """Most recent trips from the user's own bookings"""
        bookings = await self.bookings.list_for_user(user_id, descending=True)
        return [
            PastRoute(origin=b.origin, destination=b.destination, date=b.travel_date.isoformat())
            for b in bookings[:PAST_ROUTE_LIMIT]
        ]

    async def suggest(self, data: SmartSuggestionsInput) -> SmartSuggestionsOutput:
        result = await self.client.generate(build_suggestions_prompt(data), SmartSuggestionsOutput)
        logger.info(f"Suggestions for {data.user_id}: {len(result.suggestions)} routes")
        return result

    async def chat(self, data: ChatbotInput, user_id: Optional[str] = None, session_id: Optional[str] = None) -> ChatbotOutput:
        result = await self.client.generate(build_chat_prompt(data), ChatbotOutput, temperature=0.7)
        await self.store_message(session_id or uuid.uuid4().hex, user_id, data.message, result.reply)
        return result

    async def store_message(self, session_id: str, user_id: Optional[str], user_message: str, bot_reply: str) -> None:
        """Chat history is best effort; a failed write does not fail the reply"""
        def _work():
            message_id = str(uuid.uuid4())
            self.db.collection(Collections.CHAT_MESSAGES).document(message_id).set({
                "session_id": session_id,
                "user_id": user_id,
                "user_message": user_message,
                "bot_reply": bot_reply,
                "timestamp": utcnow(),
            })

        try:
            await asyncio.to_thread(_work)
        except Exception as e:
            logger.error(f"Error storing chat message for session {session_id}: {e}")
