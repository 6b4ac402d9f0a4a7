"""Error types raised while refreshing and resolving schema definitions."""

from typing import Any, Dict, Optional


class SchemaDefinitionError(Exception):
    """Base class for every error raised by this package"""


# ============================================================================
# Refresh errors
# ============================================================================


class RefreshError(SchemaDefinitionError):
    """A refresh cycle failed or only partially succeeded"""


class DocumentFetchError(RefreshError):
    """The OpenAPI document could not be fetched"""


class ModelParseError(RefreshError):
    """The OpenAPI document could not be turned into models"""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class DiscoveryError(RefreshError):
    """The API groups and resources could not be listed at all"""


class GroupDiscoveryFailedError(DiscoveryError):
    """
    Some group/versions failed discovery while others succeeded

    The successfully discovered groups and resources travel with the error so
    callers can keep going with what is available.
    """

    def __init__(
        self,
        groups: Dict[Any, Exception],
        api_groups: Optional[list] = None,
        resource_lists: Optional[list] = None,
    ):
        self.groups = groups
        self.api_groups = api_groups or []
        self.resource_lists = resource_lists or []
        failed = ", ".join(sorted(str(gv) for gv in groups))
        super().__init__(f"unable to retrieve the complete list of server APIs: {failed}")


class GroupVersionParseError(RefreshError):
    """A discovery entry carried a group-version string that does not parse"""

    def __init__(self, group_version: str):
        self.group_version = group_version
        super().__init__(f"unexpected GroupVersion string: {group_version!r}")


class SchemaIndexError(RefreshError):
    """One or more discovery entries could not be indexed"""

    def __init__(self, errors: list):
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"unable to index {len(errors)} discovery entries: {details}")


# ============================================================================
# Lookup errors
# ============================================================================


class ModelNotKindError(SchemaDefinitionError):
    """The requested model is missing or is not an object (Kind) model"""

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"model {model_name} is not a recognized kind")


class APIError(SchemaDefinitionError):
    """A lookup failure that maps onto an HTTP status"""

    status_code = 500
    code = "ServerError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "error",
            "status": self.status_code,
            "code": self.code,
            "message": self.message,
        }


class NotReadyError(APIError):
    status_code = 503
    code = "ServiceUnavailable"


class DefinitionNotFoundError(APIError):
    status_code = 404
    code = "NotFound"


class ModelUnavailableError(APIError):
    status_code = 503
    code = "ServiceUnavailable"


class InternalInconsistencyError(APIError):
    status_code = 500
    code = "ServerError"


def is_api_error(err: BaseException) -> bool:
    """Return True if err carries an HTTP status for the calling layer"""
    return isinstance(err, APIError)
