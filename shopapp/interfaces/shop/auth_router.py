"""
FastAPI router for the public identity endpoints.

Signup and login are the only routes reachable without a bearer
token. Both are rate limited per client address.
"""

from fastapi import APIRouter, Depends, Request, status

from shopapp.application.shop.dtos import LoginCommand, RegisterUserCommand
from shopapp.application.shop.login import LoginUseCase
from shopapp.application.shop.register_user import RegisterUserUseCase
from shopapp.interfaces.shop.dependencies import (
    get_login_use_case,
    get_register_user_use_case,
)
from shopapp.interfaces.shop.schemas import (
    ErrorResponse,
    LoginRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from shopapp.shared.security.rate_limiting import AUTH_RATE_LIMIT, limiter

router = APIRouter(tags=["auth"])


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Register an account",
    description="Create a customer account. The admin flag is never set here.",
)
@limiter.limit(AUTH_RATE_LIMIT)
def signup(
    request: Request,
    payload: SignupRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
) -> UserResponse:
    """Register a new customer."""
    user = use_case.execute(
        RegisterUserCommand(
            username=payload.username,
            email=payload.email,
            password=payload.password,
        )
    )
    return UserResponse.from_entity(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Obtain an access token",
    description="Exchange a username and password for a signed bearer token.",
)
@limiter.limit(AUTH_RATE_LIMIT)
def login(
    request: Request,
    payload: LoginRequest,
    use_case: LoginUseCase = Depends(get_login_use_case),
) -> TokenResponse:
    """Exchange credentials for a JWT."""
    result = use_case.execute(
        LoginCommand(username=payload.username, password=payload.password)
    )
    return TokenResponse(access_token=result.access_token, token_type=result.token_type)
