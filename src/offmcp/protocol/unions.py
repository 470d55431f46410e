from offmcp.protocol.common import EmptyResult, PingRequest
from offmcp.protocol.initialization import (
    InitializedNotification,
    InitializeRequest,
    InitializeResult,
)
from offmcp.protocol.resources import (
    ListResourcesRequest,
    ListResourcesResult,
    ReadResourceRequest,
    ReadResourceResult,
)
from offmcp.protocol.roots import RootsListChangedNotification, UpdateRootsRequest

# ----------- Client Requests -------------
ClientRequest = (
    PingRequest
    | InitializeRequest
    | ListResourcesRequest
    | ReadResourceRequest
    | UpdateRootsRequest
)

# ----------- Client Notifications -------------
ClientNotification = InitializedNotification | RootsListChangedNotification

# ----------- Server Results -------------
ServerResult = EmptyResult | InitializeResult | ListResourcesResult | ReadResourceResult


# ------------ Registries -------------

CLIENT_SENT_REQUEST_REGISTRY: dict[str, type[ClientRequest]] = {
    "ping": PingRequest,
    "initialize": InitializeRequest,
    "resources/list": ListResourcesRequest,
    "resources/read": ReadResourceRequest,
    "roots/update": UpdateRootsRequest,
}

CLIENT_SENT_NOTIFICATION_REGISTRY: dict[str, type[ClientNotification]] = {
    "notifications/initialized": InitializedNotification,
    "notifications/roots/list_changed": RootsListChangedNotification,
}
