"""ASGI middleware that aborts requests whose body grows past a fixed size."""

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()


class RequestBodyTooLarge(Exception):
    """Raised to tear down a connection whose request body exceeded the cap."""

    def __init__(self, received: int, limit: int) -> None:
        super().__init__(f"Request body exceeded {limit} bytes ({received} received)")
        self.received = received
        self.limit = limit


class BodySizeLimitMiddleware:
    """Count body bytes as chunks arrive and drop the connection once max_bytes is exceeded.

    Whatever the wrapped app tries to send after the limit is hit is discarded.
    A bare response start is then emitted before raising so the server closes
    the transport mid-response instead of writing a well-formed 500.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        received = 0
        exceeded = False
        response_started = False

        async def receive_within_limit() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    exceeded = True
                    raise RequestBodyTooLarge(received, self.max_bytes)
            return message

        async def send_unless_exceeded(message: Message) -> None:
            nonlocal response_started
            if exceeded:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive_within_limit, send_unless_exceeded)
        except Exception:
            if not exceeded:
                raise

        if exceeded:
            logger.warning(
                "request.body_too_large",
                path=scope.get("path"),
                received=received,
                limit=self.max_bytes,
            )
            if not response_started:
                await send(
                    {
                        "type": "http.response.start",
                        "status": 413,
                        "headers": [(b"connection", b"close")],
                    }
                )
            raise RequestBodyTooLarge(received, self.max_bytes)
