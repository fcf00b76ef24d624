from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from coursegraph_backend.api.exceptions import UnauthorizedException
from coursegraph_backend.database import get_db
from coursegraph_backend.model.auth import User
from coursegraph_backend.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    return UserService(db)


def parse_authorization_header(authorization: Optional[str]) -> Optional[str]:
    """
    Accept both ``Bearer <token>`` and the bare token.
    """
    if not authorization:
        return None

    scheme, param = get_authorization_scheme_param(authorization)

    if scheme.lower() == "bearer":
        return param or None

    return authorization.strip() or None


async def get_current_user(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)]
) -> User:
    """
    Main dependency for getting the authenticated user of a request.
    Anything short of a valid, unexpired token is answered with 401.
    """
    authentication = parse_authorization_header(request.headers.get("Authorization"))

    if authentication is None:
        raise UnauthorizedException("Missing authorization")

    user = await user_service.authenticate(authentication)

    if user is None:
        logger.debug("Rejected request with invalid or expired token")
        raise UnauthorizedException("Invalid or expired token")

    return user
