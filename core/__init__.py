"""Core utilities for the markdown formatter."""

from core.config import FormatterConfig, get_config, reload_config
from core.container import (
    CheckpointStoreProtocol,
    Container,
    NotifierProtocol,
    SchedulerProtocol,
    get_container,
    reset_container,
    set_container,
)
from core.errors import (
    APIError,
    AuthenticationError,
    FormatterError,
    InvalidInputError,
    MissingConfigurationError,
    NoEditAccessError,
    NotAuthenticatedError,
    RemoteForbiddenError,
    RemoteNotFoundError,
    TransientToolError,
    format_error,
)
from core.managers import Checkpoint, CheckpointManager

__all__ = [
    "APIError",
    "AuthenticationError",
    "Checkpoint",
    "CheckpointManager",
    "CheckpointStoreProtocol",
    "Container",
    "format_error",
    "FormatterConfig",
    "FormatterError",
    "get_config",
    "get_container",
    "InvalidInputError",
    "MissingConfigurationError",
    "NoEditAccessError",
    "NotAuthenticatedError",
    "NotifierProtocol",
    "reload_config",
    "RemoteForbiddenError",
    "RemoteNotFoundError",
    "reset_container",
    "SchedulerProtocol",
    "set_container",
    "TransientToolError",
]
