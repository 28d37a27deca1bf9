from asynciterable.utils.async_utils import maybe_await
from asynciterable.utils.logging_utils import (
    bind_log_context,
    clear_log_context,
    get_library_logger,
    get_logger,
    setup_logging,
    unbind_log_context,
)

__all__ = [
    "maybe_await",
    "setup_logging",
    "get_logger",
    "get_library_logger",
    "bind_log_context",
    "clear_log_context",
    "unbind_log_context",
]
