"""
Operator authentication API routes.

Login returns a bearer token together with where the client should
navigate next.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from condo_gate.api.deps import AuthSvc, CurrentUser, SessionToken
from condo_gate.application.authentication import post_login_target
from condo_gate.domain.models import Role, User

router = APIRouter(prefix="/auth", tags=["auth"])


class OperatorResponse(BaseModel):
    """Public view of an operator account."""

    id: str
    name: str
    national_id: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "OperatorResponse":
        return cls(id=user.id, name=user.name, national_id=user.national_id, role=user.role)


class LoginRequest(BaseModel):
    """Operator credentials."""

    national_id: str = Field(..., min_length=1, max_length=32)
    secret: str = Field(..., min_length=1, max_length=128)
    next: str | None = Field(
        default=None,
        max_length=512,
        description="Path the operator was heading to before being sent to login",
    )


class LoginResponse(BaseModel):
    """Issued session."""

    access_token: str
    token_type: str = "bearer"
    operator: OperatorResponse
    redirect_to: str


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in",
    description="Authenticate with national id and secret.",
)
async def login(request: LoginRequest, auth: AuthSvc) -> LoginResponse:
    """Open a session and report the post-login destination."""
    session = auth.login(request.national_id, request.secret)
    return LoginResponse(
        access_token=session.token,
        operator=OperatorResponse.from_user(session.user),
        redirect_to=post_login_target(session.user, request.next),
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
)
async def logout(auth: AuthSvc, token: SessionToken) -> None:
    """Close the current session. Unknown tokens are ignored."""
    auth.logout(token)


@router.get(
    "/me",
    response_model=OperatorResponse,
    summary="Current operator",
)
async def me(user: CurrentUser) -> OperatorResponse:
    return OperatorResponse.from_user(user)
