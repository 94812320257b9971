"""
Security utilities for Rail Connect
Firebase ID token verification, log redaction, assistant input checks
"""
from fastapi import HTTPException, status, Request, Header
from typing import Optional, Dict, Any
import logging
import re

logger = logging.getLogger(__name__)


# ==================== Firebase Auth User Extraction ====================

async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> Dict[str, Any]:
    """
    Extract and verify Firebase Auth user from Authorization header.

    Expects header format: "Bearer <firebase_id_token>"

    Returns:
        Dict with user info: uid, email, email_verified, display_name

    Raises:
        HTTPException 401: If token is missing, invalid, or expired
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Use: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"}
        )

    firebase = request.app.state.firebase

    try:
        decoded_token = firebase.verify_id_token(parts[1])
    except ValueError as e:
        logger.warning(f"Token verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )
    except Exception as e:
        safe_log_error("Auth error", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"}
        )

    uid = decoded_token.get('uid')
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user ID"
        )

    return {
        'uid': uid,
        'email': decoded_token.get('email', ''),
        'email_verified': decoded_token.get('email_verified', False),
        'display_name': decoded_token.get('name', ''),
    }


async def get_current_user_optional(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> Optional[Dict[str, Any]]:
    """
    Optional Firebase Auth user extraction.
    Returns None if no token provided, raises error only if token is invalid.
    """
    if not authorization:
        return None

    return await get_current_user(request, authorization)


# ==================== Log Redaction ====================

def redact_sensitive_data(text: str) -> str:
    """
    Redact sensitive information from logs
    Removes: emails, card numbers, tokens, phone numbers
    """
    if not text:
        return text

    text = re.sub(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b', '[EMAIL_REDACTED]', text)

    # Card numbers (13-19 digits with optional spaces/dashes)
    text = re.sub(r'\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4,7}\b', '[CARD_REDACTED]', text)

    text = re.sub(r'\b(cvv|cvc)[:\s]*\d{3,4}\b', '[CVV_REDACTED]', text, flags=re.IGNORECASE)

    # Google API keys
    text = re.sub(r'\b(AIza[0-9A-Za-z_-]{35})\b', '[API_KEY_REDACTED]', text)

    text = re.sub(r'\b\+?[\d\s()\-]{10,15}\b', '[PHONE_REDACTED]', text)

    return text


def safe_log_error(message: str, error: Exception):
    """Log errors with sensitive data redaction"""
    safe_message = redact_sensitive_data(message)
    safe_error = redact_sensitive_data(str(error))
    logger.error(f"{safe_message}: {safe_error}")


# ==================== Assistant Input Validation ====================

def validate_ai_input(text: str, max_length: int = 2000) -> str:
    """
    Validate and sanitize assistant input.
    Prevents prompt injection and abuse.

    Raises:
        HTTPException 400: If input is empty, too long or looks like an injection
    """
    if not text or not text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Input cannot be empty"
        )

    text = text.strip()

    if len(text) > max_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Input too long. Maximum {max_length} characters allowed"
        )

    # Remove control characters except newlines and tabs
    text = ''.join(char for char in text if char.isprintable() or char in '\n\t')

    injection_patterns = [
        r'ignore\s+(previous|above|all)\s+instructions',
        r'system\s*:',
        r'<\|im_start\|>',
        r'<\|im_end\|>',
        r'###\s*instruction',
        r'forget\s+(everything|all|previous)',
    ]

    for pattern in injection_patterns:
        if re.search(pattern, text, re.IGNORECASE):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid input detected"
            )

    return text
