# product_catalog/security.py

"""
Admin gate for write endpoints.
Callers present the configured admin token as a bearer credential.
"""
import logging
import os
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN")

bearer_scheme = HTTPBearer(auto_error=False)


def require_admin(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> None:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not ADMIN_API_TOKEN:
        logger.warning("ADMIN_API_TOKEN is not set; rejecting admin request.")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    if not secrets.compare_digest(credentials.credentials.encode(), ADMIN_API_TOKEN.encode()):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
