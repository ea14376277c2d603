"""Registration, login and the bearer-token dependency (get_current_user)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from filmbox.core.database import (
    DuplicateEmailError,
    PersistenceError,
    PersistenceGateway,
    get_gateway,
)
from filmbox.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    password_problem,
    verify_password,
)
from filmbox.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserPublic,
)

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

MISSING_FIELDS = "Please fill in all fields"
EMAIL_TAKEN = "A user with this email already exists"
INVALID_CREDENTIALS = "Invalid email or password"
SERVER_ERROR = "Server error"


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def normalize_email(email: str) -> str:
    """Emails are compared and stored lower-cased."""
    return email.strip().lower()


def _issue_token(user: UserPublic) -> str:
    return create_access_token(user_id=user.id, name=user.name, email=user.email)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    gateway: Annotated[PersistenceGateway, Depends(get_gateway)],
) -> AuthResponse:
    """
    Create an account and return a token for it.

    Password must be at least 8 characters with a digit, an uppercase letter
    and a special character. Duplicate emails (any casing) are rejected.
    """
    if _blank(body.name) or _blank(body.email) or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_FIELDS)
    problem = password_problem(body.password)
    if problem:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=problem)

    email = normalize_email(body.email)
    try:
        # Fast path only; the unique constraint decides under concurrency.
        if gateway.find_user_by_email(email) is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_TAKEN)
        user = gateway.insert_user(
            name=body.name.strip(),
            email=email,
            password_hash=hash_password(body.password),
        )
    except DuplicateEmailError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_TAKEN)
    except PersistenceError as e:
        logger.error("Register failed: %s", e.message, exc_info=e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR
        ) from e

    logger.info("Registered user id=%s", user.id)
    return AuthResponse(token=_issue_token(user), user=user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    gateway: Annotated[PersistenceGateway, Depends(get_gateway)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    if _blank(body.email) or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_FIELDS)

    try:
        found = gateway.find_user_by_email(normalize_email(body.email))
    except PersistenceError as e:
        logger.error("Login failed: %s", e.message, exc_info=e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR
        ) from e

    # Same response for unknown email and wrong password.
    if found is None or not verify_password(body.password, found.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
        )
    user = UserPublic.model_validate(found)
    return AuthResponse(token=_issue_token(user), user=user)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT. 401 if missing, 403 if invalid or expired."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
        return CurrentUser.model_validate(payload)
    except (jwt.PyJWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )


@router.get("/me", response_model=MeResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MeResponse:
    """Return the user the bearer token was issued to (session restore)."""
    return MeResponse(user=current_user)
