"""
Authentication API endpoints.

Every route that signs a user in returns ``{accessToken, user}`` and sets
the refresh token cookie. Errors are raised as module exceptions and
mapped to responses by the API error handlers.
"""

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_auth_service
from modules.otp.models import OtpRequest, OtpVerifyRequest
from modules.sessions.cookies import (
    clear_refresh_cookie,
    read_refresh_cookie,
    set_refresh_cookie,
)

from .interfaces import IAuthService
from .models import (
    AuthResult,
    DemoLoginRequest,
    DemoProof,
    GoogleLoginRequest,
    IdentityTokenProof,
    LoginRequest,
    OkResponse,
    OtpProof,
    PasswordProof,
    RegisterRequest,
    SessionResponse,
)

router = APIRouter()


def _session_response(response: Response, result: AuthResult) -> SessionResponse:
    set_refresh_cookie(response, result.session)
    return SessionResponse.from_result(result)


@router.post("/register", response_model=SessionResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Create a password account and sign it in."""
    result = await service.register(body.email, body.name, body.password)
    return _session_response(response, result)


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    result = await service.authenticate(PasswordProof(email=body.email, password=body.password))
    return _session_response(response, result)


@router.post("/google", response_model=SessionResponse)
async def google_login(
    body: GoogleLoginRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Sign in with a Google ID token, linking or creating the account."""
    result = await service.authenticate(IdentityTokenProof(token=body.credential))
    return _session_response(response, result)


@router.post("/otp/request", response_model=OkResponse)
async def request_otp(
    body: OtpRequest,
    service: IAuthService = Depends(get_auth_service),
) -> OkResponse:
    """Send a one-time login code by email."""
    await service.request_otp(body.email)
    return OkResponse()


@router.post("/otp/verify", response_model=SessionResponse)
async def verify_otp(
    body: OtpVerifyRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    result = await service.authenticate(OtpProof(email=body.email, code=body.code))
    return _session_response(response, result)


@router.post("/demo", response_model=SessionResponse)
async def demo_login(
    body: DemoLoginRequest,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Sign in as one of the seeded demo accounts (demo mode only)."""
    result = await service.authenticate(DemoProof(account=body.type))
    return _session_response(response, result)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(
    request: Request,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """
    Rotate the refresh cookie.

    The presented token is revoked and a new pair is issued; presenting
    it again fails.
    """
    result = await service.refresh(read_refresh_cookie(request))
    return _session_response(response, result)


@router.post("/logout", response_model=OkResponse)
async def logout(
    request: Request,
    response: Response,
    service: IAuthService = Depends(get_auth_service),
) -> OkResponse:
    await service.logout(read_refresh_cookie(request))
    clear_refresh_cookie(response)
    return OkResponse()
