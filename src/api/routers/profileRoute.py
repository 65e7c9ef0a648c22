from fastapi import APIRouter

from src.api.core.dependencies import GetSession, requireSignin
from src.api.core.operation import updateOp
from src.api.core.response import api_response, raiseExceptions
from src.api.core.security import hash_password, verify_password
from src.api.models import User
from src.api.models.usersModel import ChangePasswordForm, ProfileUpdate, UserRead

router = APIRouter(prefix="/profile", tags=["Profile"])


# ✅ READ
@router.get("")
def read_profile(user: requireSignin, session: GetSession):
    db_user = session.get(User, user.get("id"))
    raiseExceptions((db_user, 404, "User not found"))

    return api_response(200, "Profile found", UserRead.model_validate(db_user))


# ✅ UPDATE
@router.put("")
def update_profile(request: ProfileUpdate, user: requireSignin, session: GetSession):
    db_user = session.get(User, user.get("id"))
    raiseExceptions((db_user, 404, "User not found"))

    updateOp(db_user, request, session)
    session.commit()
    session.refresh(db_user)

    return api_response(200, "Profile updated successfully", UserRead.model_validate(db_user))


# ✅ CHANGE PASSWORD
@router.put("/password")
def change_password(request: ChangePasswordForm, user: requireSignin, session: GetSession):
    db_user = session.get(User, user.get("id"))
    raiseExceptions(
        (db_user, 404, "User not found"),
    )
    raiseExceptions(
        (verify_password(request.current_password, db_user.password), 400, "Current password is incorrect"),
        (request.current_password == request.new_password, 400, "New password must differ from the current one", True),
    )

    db_user.password = hash_password(request.new_password)
    session.add(db_user)
    session.commit()

    return api_response(200, "Password changed successfully")
