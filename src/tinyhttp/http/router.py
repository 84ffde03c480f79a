"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler. First registered match wins; anything
unmatched is a 404 with an empty body.

=============================================================================
ROUTE PATTERNS
=============================================================================

    Pattern             Regex                         "/echo/a/b?x"
    ─────────────────   ───────────────────────────   ─────────────────────
    /                   ^/$                           no match
    /user-agent         ^/user\\-agent$                no match
    /echo/*text         ^/echo/(?P<text>.*)$          text = "a/b?x"
    /files/*name        ^/files/(?P<name>.*)$         no match

A "*name" segment captures the OPAQUE remainder of the path: slashes,
query strings, percent escapes and all. Nothing is decoded, nothing is
normalized. "/echo/" matches with text = "".

=============================================================================
WHY NO 405?
=============================================================================

A general-purpose router would answer "DELETE /" with 405 Method Not
Allowed and an Allow header. This server's contract is simpler: any
method/path pair that isn't in the table is a 404.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found

logger = logging.getLogger(__name__)

# =============================================================================
# TYPE ALIASES
# =============================================================================
# Handler: takes the request plus the captured path parameters.
# Requests are immutable, so captures are passed alongside instead of being
# injected into the request object.
Handler = Callable[[HTTPRequest, Dict[str, str]], HTTPResponse]


@dataclass
class Route:
    """
    A registered route: method + path pattern → handler.

        Route(
            method="GET",
            path="/echo/*text",
            handler=echo,
            _pattern=re.compile(r"^/echo/(?P<text>.*)$"),
        )
    """

    method: str
    path: str
    handler: Handler
    name: Optional[str] = None

    # Internal: compiled regex for matching
    _pattern: Optional[re.Pattern] = field(default=None, repr=False)


@dataclass
class RouteMatch:
    """
    Result of a successful route match.

    Example:
        Pattern: /files/*name
        Path:    /files/report.txt
        Result:  RouteMatch(route=<Route>, params={"name": "report.txt"})
    """

    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered route table.

        router = Router()

        @router.get("/echo/*text")
        def echo(request, params):
            return ok(request.version, text=params["text"])

        response = router.handle(request)

    Routes are tried in registration order, so register the most specific
    ones first.
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: str = "GET",
        name: Optional[str] = None
    ) -> Route:
        """
        Register a route.

        Args:
            path: Pattern such as "/" or "/files/*name".
            handler: Called with (request, params) on a match.
            method: HTTP method the route answers to.
            name: Optional label used in logs.

        Returns:
            The registered Route.
        """
        route = Route(
            method=method.upper(),
            path=path,
            handler=handler,
            name=name or getattr(handler, "__name__", None),
            _pattern=self._compile_pattern(path),
        )
        self._routes.append(route)
        logger.debug("Registered route %s %s", route.method, route.path)
        return route

    def _compile_pattern(self, path: str) -> re.Pattern:
        """
        Compile a route pattern into an anchored regex.

            "/files/*name"  →  ^/files/(?P<name>.*)$

        Everything before the "*" is matched literally (re.escape); the
        wildcard must be the final segment and swallows the rest.
        """
        prefix, star, param_name = path.partition("*")
        regex = "^" + re.escape(prefix)

        if star:
            if "/" in param_name:
                raise ValueError(f"Wildcard must be the last segment: {path}")
            regex += f"(?P<{param_name or 'wildcard'}>.*)"

        return re.compile(regex + "$", re.DOTALL)

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator: register a GET route."""
        return self.route(path, "GET", name)

    def post(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator: register a POST route."""
        return self.route(path, "POST", name)

    def route(
        self,
        path: str,
        method: str = "GET",
        name: Optional[str] = None
    ) -> Callable[[Handler], Handler]:
        """
        Decorator form of add_route().

            @router.route("/files/*name", method="POST")
            def write_file(request, params):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler  # Unchanged, so decorators can stack
        return decorator

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        The method comparison is exact: "get" is not "GET". The path is
        matched as sent.
        """
        for route in self._routes:
            if route.method != method:
                continue

            found = route._pattern.match(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and return the handler's response.

        Unmatched requests get a 404 with an empty body. Exceptions raised by
        a handler propagate to the caller.
        """
        found = self.match(request.method, request.path)
        if found is None:
            logger.debug("No route for %s %s", request.method, request.path)
            return not_found(request.version)

        return found.route.handler(request, found.params)

    def routes(self) -> List[Route]:
        """All registered routes, in match order."""
        return list(self._routes)
