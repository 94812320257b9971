"""
Account, profile and saved passenger endpoints for Rail Connect
"""
from fastapi import APIRouter, HTTPException, status, Depends
from typing import Dict, Any, List
import asyncio
import logging

from app.api.deps import get_firebase, get_saved_passenger_store
from app.core.errors import BookingError
from app.core.firebase import FirebaseClient
from app.core.security import get_current_user, safe_log_error
from app.schemas.passenger import PassengerDetails, SavedPassenger
from app.schemas.profile import ProfileResponse, ProfileUpdate, SignupRequest
from app.services.profile import SavedPassengerStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])


def profile_response(uid: str, data: Dict[str, Any], current_user: Dict[str, Any]) -> ProfileResponse:
    return ProfileResponse(
        uid=uid,
        email=data.get('email') or current_user.get('email'),
        display_name=data.get('display_name') or current_user.get('display_name'),
        email_verified=current_user.get('email_verified', data.get('email_verified', False)),
    )


# ==================== Account ====================

@router.post("/auth/signup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, firebase: FirebaseClient = Depends(get_firebase)):
    """Create a Firebase Auth account and its profile document"""
    try:
        user_data = await asyncio.to_thread(
            firebase.create_user, body.email, body.password, body.display_name
        )
    except ValueError as e:
        safe_log_error(f"Signup failed for {body.email}", e)
        if "already exists" in str(e):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An account with this email already exists"
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not create account"
        )

    return ProfileResponse(
        uid=user_data['uid'],
        email=user_data['email'],
        display_name=user_data.get('display_name'),
        email_verified=user_data.get('email_verified', False),
    )


# ==================== Profile ====================

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: Dict[str, Any] = Depends(get_current_user),
    firebase: FirebaseClient = Depends(get_firebase),
):
    data = await asyncio.to_thread(firebase.get_user, current_user['uid']) or {}
    return profile_response(current_user['uid'], data, current_user)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    firebase: FirebaseClient = Depends(get_firebase),
):
    """Update the display name on the auth account and the profile document"""
    try:
        data = await asyncio.to_thread(
            firebase.update_user, current_user['uid'], {'display_name': body.display_name}
        )
    except Exception as e:
        safe_log_error(f"Error updating profile {current_user['uid']}", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to update profile. Please try again."
        )
    return profile_response(current_user['uid'], data, current_user)


# ==================== Saved Passengers ====================

@router.get("/profile/passengers", response_model=List[SavedPassenger])
async def list_saved_passengers(
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: SavedPassengerStore = Depends(get_saved_passenger_store),
):
    try:
        return await store.list_for_user(current_user['uid'])
    except Exception as e:
        logger.error(f"Error listing saved passengers for {current_user['uid']}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load saved passengers"
        )


@router.post("/profile/passengers", response_model=SavedPassenger, status_code=status.HTTP_201_CREATED)
async def create_saved_passenger(
    body: PassengerDetails,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: SavedPassengerStore = Depends(get_saved_passenger_store),
):
    try:
        return await store.create(current_user['uid'], body)
    except BookingError as e:
        raise e.to_http()


@router.put("/profile/passengers/{passenger_id}", response_model=SavedPassenger)
async def update_saved_passenger(
    passenger_id: str,
    body: PassengerDetails,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: SavedPassengerStore = Depends(get_saved_passenger_store),
):
    try:
        return await store.update(passenger_id, current_user['uid'], body)
    except BookingError as e:
        raise e.to_http()


@router.delete("/profile/passengers/{passenger_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_passenger(
    passenger_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: SavedPassengerStore = Depends(get_saved_passenger_store),
):
    try:
        await store.delete(passenger_id, current_user['uid'])
    except BookingError as e:
        raise e.to_http()
