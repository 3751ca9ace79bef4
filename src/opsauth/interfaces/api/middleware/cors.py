"""CORS middleware - echoes allowed origins and answers preflight."""

import falcon
import falcon.asgi


class CORSMiddleware:
    """Adds CORS headers for configured origins; ``*`` allows any origin."""

    def __init__(self, origins: list[str]) -> None:
        self._origins = origins
        self._allow_any = "*" in origins

    def _allowed_origin(self, origin: str | None) -> str | None:
        if not origin:
            return None
        if self._allow_any or origin in self._origins:
            return origin
        return None

    def _set_cors_headers(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        origin = self._allowed_origin(req.get_header("Origin"))
        if not origin:
            return
        resp.set_header("Access-Control-Allow-Origin", origin)
        resp.set_header("Vary", "Origin")
        resp.set_header("Access-Control-Allow-Methods", "GET, POST, PUT, PATCH, DELETE, OPTIONS")
        resp.set_header("Access-Control-Allow-Headers", "Authorization, Content-Type")
        resp.set_header("Access-Control-Max-Age", "86400")

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if req.method == "OPTIONS":
            self._set_cors_headers(req, resp)
            resp.status = falcon.HTTP_204
            resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        self._set_cors_headers(req, resp)
