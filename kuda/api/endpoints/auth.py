import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from kuda.api.dependencies import bearer_token, flow_response, get_state_manager
from kuda.database.token_store import TokenStore
from kuda.flows.auth import LoginFlow, SignupFlow, logout
from kuda.flows.state_manager import StateManager

logger = logging.getLogger(__name__)

api = APIRouter()
auth_api = api


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignupRequestBody(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    password: str = ""
    confirm_password: str = ""


class UserResponse(BaseModel):
    id: str
    name: str
    initials: str
    email: str
    phone: str = ""
    account_number: str = ""
    balance: float = 0
    address: Optional[str] = None
    created_at: Optional[str] = Field(default=None, description="ISO-8601 timestamp")


@api.post("/login", tags=["Auth"])
async def login(request: LoginRequest, state: StateManager = Depends(get_state_manager)):
    token_store = TokenStore()
    result = await LoginFlow(state.backend.bind(token_store), state.error_handler).submit(request.email, request.password)
    flow_response(result)
    result["data"] = {"auth_token": token_store.get_token()}
    return result


@api.post("/signup", tags=["Auth"])
async def signup(request: SignupRequestBody, state: StateManager = Depends(get_state_manager)):
    token_store = TokenStore()
    result = await SignupFlow(state.backend.bind(token_store), state.error_handler).submit(request.model_dump())
    flow_response(result)
    result["data"] = {"auth_token": token_store.get_token()}
    return result


@api.post("/logout", tags=["Auth"])
async def logout_endpoint(token: str = Depends(bearer_token), state: StateManager = Depends(get_state_manager)):
    result = logout(state.backend_for(token))
    state.end_session(token)
    return result


@api.get("/me", tags=["Auth"], response_model=UserResponse)
async def me(token: str = Depends(bearer_token), state: StateManager = Depends(get_state_manager)):
    try:
        user = await state.backend_for(token).get_me()
    except Exception as e:
        flow_response(state.error_handler.handle_exception(e, title="Could not load profile"))
    return UserResponse(
        id=user.id,
        name=user.name,
        initials=user.initials,
        email=user.email,
        phone=user.phone,
        account_number=user.account_number,
        balance=user.balance,
        address=user.address,
        created_at=user.created_at.isoformat() if user.created_at else None,
    )
