from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .client import Client
    from .request import Request
    from .response import Response

RequestHook = Callable[["Client", "Request"], None]
ResponseHook = Callable[["Client", "Response"], None]
