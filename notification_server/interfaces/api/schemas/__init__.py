from .common import ErrorDetail, ErrorResponse, StandardResponse
from .notification import NotificationRead, NotificationRetrieveRequest

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "NotificationRead",
    "NotificationRetrieveRequest",
    "StandardResponse",
]
