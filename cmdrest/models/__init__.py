from .requests import CallerContext, IncomingRequest, OptionValue
from .responses import CommandResult, ErrorDetail, ErrorResponse


__all__ = [
    "CallerContext",
    "CommandResult",
    "ErrorDetail",
    "ErrorResponse",
    "IncomingRequest",
    "OptionValue",
]
