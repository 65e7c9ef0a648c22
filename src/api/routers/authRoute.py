import logging
import smtplib

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.config import ACCESS_TOKEN_EXPIRE_MINUTES, AUTH_COOKIE_SECURE, FRONTEND_URL
from src.api.core.dependencies import GetSession, requireSignin
from src.api.core.email_service import send_password_reset_email
from src.api.core.response import api_response, raiseExceptions
from src.api.core.security import (
    AUTH_COOKIE_NAME,
    create_access_token,
    create_reset_token,
    decode_reset_token,
    exist_user,
    hash_password,
    user_token_data,
    verify_password,
)
from src.api.models import User, UserRole
from src.api.models.usersModel import (
    ForgotPasswordForm,
    RegisterForm,
    ResetPasswordForm,
    SignInForm,
    UserRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

FORGOT_PASSWORD_MESSAGE = "If the email exists, a password reset link has been sent"


# ✅ REGISTER
@router.post("/register")
def register(request: RegisterForm, session: GetSession):
    raiseExceptions((exist_user(session, request.email), 400, "Email is already registered", True))

    user = User(
        name=request.name.strip(),
        email=request.email.strip().lower(),
        password=hash_password(request.password),
        phone=request.phone,
        role=UserRole.CUSTOMER,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("User %s registered", user.id)

    return api_response(201, "Registration successful", UserRead.model_validate(user))


# ✅ SIGN IN
@router.post("/signin")
def signin(request: SignInForm, session: GetSession):
    user = exist_user(session, request.email)
    if not user or not verify_password(request.password, user.password):
        return api_response(401, "Invalid email or password")
    raiseExceptions((user.is_active, 403, "Account is disabled"))

    token = create_access_token(user_token_data(user))

    response = api_response(
        200,
        "Signed in successfully",
        {"user": UserRead.model_validate(user), "token": token},
    )
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return response


# ✅ LOGOUT
@router.post("/logout")
def logout():
    response = JSONResponse(status_code=200, content={"success": True, "detail": "Signed out", "data": None})
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return response


# ✅ CURRENT USER
@router.get("/me")
def me(user: requireSignin, session: GetSession):
    db_user = session.get(User, user.get("id"))
    raiseExceptions((db_user, 404, "User not found"))

    return api_response(200, "User found", UserRead.model_validate(db_user))


# ✅ FORGOT PASSWORD
@router.post("/forgot-password")
def forgot_password(request: ForgotPasswordForm, session: GetSession):
    user = exist_user(session, request.email)
    # same answer whether or not the email exists
    if not user:
        return api_response(200, FORGOT_PASSWORD_MESSAGE)

    token = create_reset_token(user)
    reset_url = f"{FRONTEND_URL.rstrip('/')}/auth/reset-password?token={token}"
    try:
        send_password_reset_email(user.email, reset_url, user.name)
    except (ValueError, smtplib.SMTPException, OSError) as e:
        logger.error("Password reset email to user %s failed: %s", user.id, e)

    return api_response(200, FORGOT_PASSWORD_MESSAGE)


# ✅ RESET PASSWORD
@router.post("/reset-password")
def reset_password(request: ResetPasswordForm, session: GetSession):
    payload = decode_reset_token(request.token)
    raiseExceptions((payload, 400, "Invalid or expired reset token"))

    user = session.get(User, int(payload["sub"]))
    raiseExceptions((user and user.email == payload.get("email"), 400, "Invalid or expired reset token"))

    user.password = hash_password(request.password)
    session.add(user)
    session.commit()
    logger.info("Password reset for user %s", user.id)

    return api_response(200, "Password has been reset")
