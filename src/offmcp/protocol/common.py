from typing import Literal

from offmcp.protocol.base import Request, Result


class EmptyResult(Result):
    """
    A response that indicates success but carries no data.
    """


class PingRequest(Request):
    """
    Liveness check. Answered with an EmptyResult.
    """

    method: Literal["ping"] = "ping"

    @classmethod
    def expected_result_type(cls) -> type[EmptyResult]:
        return EmptyResult
