from fastapi import APIRouter, Depends, Request, status

from src.todo_api.schemas import LoginRequest, LoginResponse, SignupRequest, SignupResponse, User
from src.todo_api.users import UserRepository

router = APIRouter(prefix="/api", tags=["Auth"])


def get_user_repository(request: Request) -> UserRepository:
    return UserRepository(request.app.state.db)


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
)
def signup(payload: SignupRequest, users: UserRepository = Depends(get_user_repository)) -> SignupResponse:
    """Register a new user. Duplicate emails answer 409."""
    user = users.register(payload.email, payload.password)
    return SignupResponse(user=User(id=user["id"], email=user["email"]))


@router.post("/login", response_model=LoginResponse, summary="Login")
def login(payload: LoginRequest, users: UserRepository = Depends(get_user_repository)) -> LoginResponse:
    """Check email/password. No session or token is issued."""
    user = users.authenticate(payload.username, payload.password)
    return LoginResponse(userId=user["id"], email=user["email"])
