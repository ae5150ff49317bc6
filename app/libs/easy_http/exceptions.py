from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .response import Response


class EasyHttpError(Exception):
    detail: str = "HTTP client error."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.detail
        super().__init__(self.detail)


class URLParseError(EasyHttpError):
    detail = "Failed to build request URL."


class RequestAlreadySentError(EasyHttpError):
    detail = "Request has already been executed."


class PreHookError(EasyHttpError):
    detail = "Pre-request hook failed."

    def __init__(self, detail: str | None = None, hook: Any = None):
        super().__init__(detail)
        self.hook = hook


class TransportError(EasyHttpError):
    """The network call failed. ``response`` holds the partially populated Response."""

    detail = "Transport call failed."

    def __init__(self, detail: str | None = None, response: "Response | None" = None):
        super().__init__(detail)
        self.response = response


class PostHookError(EasyHttpError):
    """A post-response hook failed. ``response`` is fully populated."""

    detail = "Post-response hook failed."

    def __init__(
        self,
        detail: str | None = None,
        response: "Response | None" = None,
        hook: Any = None,
    ):
        super().__init__(detail)
        self.response = response
        self.hook = hook
