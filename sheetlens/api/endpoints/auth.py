# sheetlens/api/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends

from sheetlens.api.dependencies import get_services, require_service_credential
from sheetlens.schemas import SignupRequest, UserResponse, LoginRequest, Token
from sheetlens.services.container import Services

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", response_model=UserResponse, dependencies=[Depends(require_service_credential)])
async def signup(
        user_in: SignupRequest,
        services: Services = Depends(get_services)
):
    """Create a confirmed account with the identity provider"""
    user = await services.identity.create_user(
        email=user_in.email,
        password=user_in.password,
        name=user_in.name
    )
    logger.info(f"👤 Signed up user {user.id}")
    return UserResponse(user=user)


@router.post("/login", response_model=Token)
async def login(
        form_data: LoginRequest,
        services: Services = Depends(get_services)
):
    """Exchange email and password for an access token (local identity provider)"""
    return await services.identity.issue_token(form_data.email, form_data.password)
