# Registration and login. Both take a plain {email, password} body;
# login hands back a bearer session token valid for seven days.

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from orderhub.api.dependencies import get_context, get_current_user, get_db
from orderhub.core.accounts import authenticate, register_account
from orderhub.core.context import AppContext
from orderhub.models.users import User
from orderhub.schemas.users import RegistrationResponse, TokenResponse, UserCreate, UserRead


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegistrationResponse)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    register_account(db, user_in.email, user_in.password)
    return RegistrationResponse()


@router.post("/login", response_model=TokenResponse)
def login(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    token = authenticate(db, ctx.settings, user_in.email, user_in.password)
    return TokenResponse(token=token)


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return UserRead(id=current_user.id, email=current_user.email)
