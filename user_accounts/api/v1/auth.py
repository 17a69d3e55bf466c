"""
Authentication endpoints: register, login, current user.
"""

from fastapi import APIRouter, HTTPException, status

from user_accounts.api.deps import Accounts, ClientIp, CurrentUser, UserAgent
from user_accounts.kernel.identity.errors import (
    AccountError,
    InvalidCredentials,
    RegistrationFailed,
    UserNotFound,
    ValidationError,
)
from user_accounts.logging_config import get_logger
from user_accounts.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from user_accounts.schemas.common import ErrorResponse

logger = get_logger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
    500: {"model": ErrorResponse, "description": "Hashing or storage failure"},
}


def _validation_error(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": exc.message, "fields": exc.fields},
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def register(
    data: RegisterRequest,
    accounts: Accounts,
    client_ip: ClientIp,
    user_agent: UserAgent,
):
    """
    Register a new user account.

    Responds with a confirmation message only; no token and no user record.
    """
    try:
        await accounts.register(
            username=data.username,
            email=data.email,
            password=data.password,
            role=data.role,
            ip_address=client_ip,
            user_agent=user_agent,
        )
    except ValidationError as e:
        raise _validation_error(e)
    except RegistrationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )

    return RegisterResponse()


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        **ERROR_RESPONSES,
        401: {"model": ErrorResponse, "description": "Wrong password"},
        404: {"model": ErrorResponse, "description": "Unknown email"},
    },
)
async def login(
    data: LoginRequest,
    accounts: Accounts,
    client_ip: ClientIp,
    user_agent: UserAgent,
):
    """
    Authenticate user and return a bearer token valid for one hour.
    """
    try:
        result = await accounts.login(
            email=data.email,
            password=data.password,
            ip_address=client_ip,
            user_agent=user_agent,
        )
    except ValidationError as e:
        raise _validation_error(e)
    except UserNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except InvalidCredentials as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except AccountError:
        logger.exception("Login failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed.",
        )

    return TokenResponse(
        token=result.token,
        token_type=result.token_type,
        expires_in=result.expires_in,
    )


@router.get("/me", response_model=UserResponse, responses={401: {"model": ErrorResponse}})
async def get_current_user_profile(user: CurrentUser):
    """Get current user's profile."""
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role_value,
        created_at=user.created_at,
    )
