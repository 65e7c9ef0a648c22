from fastapi import APIRouter
from sqlalchemy import update as sql_update
from sqlmodel import select

from src.api.core.dependencies import GetSession, requireSignin
from src.api.core.operation import updateOp
from src.api.core.response import api_response, raiseExceptions
from src.api.models import Address
from src.api.models.addressModel import AddressCreate, AddressRead, AddressUpdate

router = APIRouter(prefix="/addresses", tags=["Address"])


def _clear_default(session, user_id: int, exclude_id=None):
    stmt = sql_update(Address).where(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
    if exclude_id is not None:
        stmt = stmt.where(Address.id != exclude_id)
    session.exec(stmt.values(is_default=False))


def _user_address(session, user_id: int, id: int):
    return session.exec(select(Address).where(Address.id == id, Address.user_id == user_id)).first()


# ✅ LIST (default first)
@router.get("")
def list_addresses(user: requireSignin, session: GetSession):
    addresses = session.exec(
        select(Address)
        .where(Address.user_id == user.get("id"))
        .order_by(Address.is_default.desc(), Address.created_at.desc())
    ).all()
    return api_response(200, "Addresses found", [AddressRead.model_validate(a) for a in addresses], total=len(addresses))


# ✅ CREATE
@router.post("")
def create_address(request: AddressCreate, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    has_address = session.exec(select(Address.id).where(Address.user_id == user_id)).first()

    address = Address(**request.model_dump(), user_id=user_id)
    # the first address becomes the default
    if not has_address:
        address.is_default = True
    elif address.is_default:
        _clear_default(session, user_id)

    session.add(address)
    session.commit()
    session.refresh(address)

    return api_response(201, "Address created successfully", AddressRead.model_validate(address))


# ✅ UPDATE
@router.put("/{id}")
def update_address(id: int, request: AddressUpdate, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    address = _user_address(session, user_id, id)
    raiseExceptions((address, 404, "Address not found"))

    if request.is_default:
        _clear_default(session, user_id, exclude_id=id)
    updateOp(address, request, session)
    session.commit()
    session.refresh(address)

    return api_response(200, "Address updated successfully", AddressRead.model_validate(address))


# ✅ DELETE
@router.delete("/{id}")
def delete_address(id: int, user: requireSignin, session: GetSession):
    user_id = user.get("id")
    address = _user_address(session, user_id, id)
    raiseExceptions((address, 404, "Address not found"))

    was_default = address.is_default
    session.delete(address)
    session.flush()

    # promote the most recent remaining address
    if was_default:
        replacement = session.exec(
            select(Address).where(Address.user_id == user_id).order_by(Address.created_at.desc())
        ).first()
        if replacement:
            replacement.is_default = True
            session.add(replacement)

    session.commit()
    return api_response(200, "Address deleted successfully")
