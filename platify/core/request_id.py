"""Per-request correlation ids carried in a context variable."""

import uuid
from contextvars import ContextVar, Token

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    return uuid.uuid4().hex


def get_request_id() -> str:
    """Id of the request being handled by the current task, or ``""``."""
    return request_id_var.get()


def bind_request_id(request_id: str) -> Token:
    """Bind ``request_id`` to the current context; pass the token to :func:`unbind_request_id`."""
    return request_id_var.set(request_id)


def unbind_request_id(token: Token) -> None:
    request_id_var.reset(token)
