from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import accounts, mailer
from ..database import get_db
from ..models import User
from ..schemas import ForgotPasswordRequest, LoginRequest, ResetPasswordRequest, SignupRequest
from ..security import create_access_token, get_current_user
from ..serializers import user_to_dict

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=201)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    user = accounts.signup(db, data)
    return {"user": user_to_dict(user), "token": create_access_token(user)}


@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = accounts.login(db, data.email, data.password)
    return {"user": user_to_dict(user), "token": create_access_token(user)}


@router.post("/logout")
def logout(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    accounts.touch_last_login(db, user)
    return {"message": "Logged out successfully"}


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    user, token = accounts.issue_reset_token(db, data.email)

    if mailer.mail_configured():
        await mailer.send_reset_token(user.email, token)
        return {"message": "Password reset token sent to email"}

    # Without a mail server the token is handed back directly.
    return {"message": "Password reset token generated", "resetToken": token}


@router.post("/reset-password")
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    accounts.reset_password(db, data.token, data.new_password)
    return {"message": "Password has been reset successfully"}
