from typing import Any, Optional, Union
from decimal import Decimal, InvalidOperation

from fastapi import HTTPException
from fastapi.encoders import (
    jsonable_encoder,
)
from fastapi.responses import (
    JSONResponse,
)

from src.api.core.decimal_formatter import MONETARY_FIELDS, to_number


def _money(value):
    # pydantic dumps Decimal as a string in json mode
    if isinstance(value, str):
        try:
            amount = Decimal(value)
        except InvalidOperation:
            return value
        return to_number(amount) if amount.is_finite() else value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return to_number(value)
    return value


def format_monetary_values(obj, path_key=None):
    """Recursively format monetary fields in the response"""
    if isinstance(obj, dict):
        result = {}
        for key, value in obj.items():
            if key in MONETARY_FIELDS and not isinstance(value, (dict, list)):
                result[key] = _money(value)
            elif isinstance(value, (dict, list)):
                result[key] = format_monetary_values(value, key)
            else:
                result[key] = value
        return result
    elif isinstance(obj, list):
        return [format_monetary_values(item, path_key) for item in obj]
    elif path_key in MONETARY_FIELDS:
        return _money(obj)
    else:
        return obj


def encode_data(data: Any) -> Any:
    """JSON-able, camelCase, money-normalised representation of data"""
    return format_monetary_values(jsonable_encoder(data))


def api_response(
    code: int,
    detail: str,
    data: Optional[Union[dict, list]] = None,
    total: Optional[int] = None,
    pagination: Optional[dict] = None,
):
    # Raise error if code >= 400
    if code >= 400:
        raise HTTPException(
            status_code=code,
            detail=detail,
        )

    content = {
        "success": True,
        "detail": detail,
        "data": encode_data(data),
    }

    if total is not None:
        content["total"] = total
    if pagination is not None:
        content["pagination"] = pagination

    return JSONResponse(
        status_code=code,
        content=content,
    )


def error_response(
    code: int,
    detail: str,
    error_code: Optional[str] = None,
    errors: Optional[Any] = None,
):
    content = {
        "success": False,
        "detail": detail,
    }
    if error_code is not None:
        content["code"] = error_code
    if errors is not None:
        content["errors"] = jsonable_encoder(errors)
    return JSONResponse(status_code=code, content=content)


def raiseExceptions(*conditions: tuple[Any, int | None, str | None, bool | None]):
    """
    Example usage:
        raiseExceptions(
            (user, 404, "User not found"),
            (is_blocked, 403, "User is disabled", True),
        )
    """
    for cond in conditions:
        # Unpack with defaults
        condition = cond[0] if len(cond) > 0 else False  # Condition
        code = cond[1] if len(cond) > 1 else 400
        detail = cond[2] if len(cond) > 2 else "error"
        isCond = cond[3] if len(cond) > 3 else False

        if isCond and condition:  # Fail if condition is True
            return api_response(code, detail)
        elif not condition and not isCond:  # Fail if condition is False
            return api_response(code, detail)
    return None  # everything passed
