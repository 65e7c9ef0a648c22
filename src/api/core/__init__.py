from .operation import updateOp, paginate
from .response import api_response, raiseExceptions
from .dependencies import (
    GetSession,
    requireSignin,
    requireAdmin,
    isAuthenticated,
    ListQueryParams,
    ProductQueryParams,
)


__all__ = [
    "GetSession",
    "requireSignin",
    "requireAdmin",
    "isAuthenticated",
    "ListQueryParams",
    "ProductQueryParams",
    "api_response",
    "raiseExceptions",
    "updateOp",
    "paginate",
]
