"""An interceptor that runs a chain of request interceptors."""

from __future__ import annotations

from typing import Any, Iterator, Protocol


class RequestInterceptor(Protocol):
    def intercept_request(self, info: Any) -> None: ...


class ContainerInterceptor:
    """Passes each request through every added interceptor in order."""

    def __init__(self) -> None:
        self._interceptors: list[RequestInterceptor] = []

    def add_interceptor(self, interceptor: RequestInterceptor) -> None:
        """Append an interceptor to the chain."""
        if not callable(getattr(interceptor, "intercept_request", None)):
            raise TypeError("interceptor must have an intercept_request method")
        self._interceptors.append(interceptor)

    def intercept_request(self, info: Any) -> None:
        """Let each interceptor in turn inspect or modify the request."""
        for interceptor in self._interceptors:
            interceptor.intercept_request(info)

    def __iter__(self) -> Iterator[RequestInterceptor]:
        return iter(self._interceptors)

    def __len__(self) -> int:
        return len(self._interceptors)