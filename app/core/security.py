"""
Firebase Authentication Middleware

Verifies bearer ID tokens with the Firebase Admin SDK and extracts user
information. Supports credentials from:
1. Local file (service-account.json)
2. Environment variable (GOOGLE_APPLICATION_CREDENTIALS_JSON)
3. Default credentials (Google Cloud environments)
"""

import os
import json
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import firebase_admin
from firebase_admin import auth, credentials

from ..config import get_settings
from .exceptions import UnauthorizedError
from .logging import get_logger

logger = get_logger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

# Firebase initialization flag
_firebase_initialized = False


def initialize_firebase():
    """
    Initialize Firebase Admin SDK with credentials from multiple sources.

    Priority:
    1. Local file path (FIREBASE_CREDENTIALS_PATH)
    2. JSON from environment variable (GOOGLE_APPLICATION_CREDENTIALS_JSON)
    3. Default credentials (for Google Cloud environments)
    """
    global _firebase_initialized

    if _firebase_initialized:
        return

    settings = get_settings()
    cred_path = settings.firebase_credentials_path

    if cred_path and os.path.exists(cred_path):
        logger.info("firebase_credentials_file", path=cred_path)
        firebase_admin.initialize_app(credentials.Certificate(cred_path))
        _firebase_initialized = True
        return

    creds_json = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS_JSON")
    if creds_json:
        try:
            cred = credentials.Certificate(json.loads(creds_json))
            firebase_admin.initialize_app(cred)
            logger.info("firebase_credentials_env")
            _firebase_initialized = True
            return
        except ValueError as e:
            logger.error("firebase_credentials_env_invalid", error=str(e))

    try:
        firebase_admin.initialize_app()
        logger.info("firebase_default_credentials")
    except Exception as e:
        logger.warning("firebase_init_failed", error=str(e))
    # Mark as initialized to avoid retry loops
    _firebase_initialized = True


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """
    Verify the bearer ID token and return user info.

    Returns:
        dict with keys: uid, email (optional), name (optional)

    Raises:
        UnauthorizedError if token is missing or invalid
    """
    if credentials is None:
        raise UnauthorizedError("No token, auth denied")

    try:
        initialize_firebase()
        decoded_token = auth.verify_id_token(credentials.credentials)
    except auth.ExpiredIdTokenError:
        raise UnauthorizedError("Token has expired")
    except auth.InvalidIdTokenError:
        raise UnauthorizedError("Token not valid")
    except Exception as e:
        logger.warning("token_verification_failed", error=str(e))
        raise UnauthorizedError("Token not valid")

    return {
        "uid": decoded_token["uid"],
        "email": decoded_token.get("email"),
        "name": decoded_token.get("name"),
    }
