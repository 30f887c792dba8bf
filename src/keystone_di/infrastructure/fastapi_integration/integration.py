import logging
from typing import Awaitable, Callable, TypeVar

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from keystone_di.domain import IContainer, Target

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_fastapi_dependency(container: IContainer, target: Target) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the DI container.

    The resolved instance lifetime follows the registration in the container
    (singleton, scoped, or transient).

    Args:
        container: The DI container to resolve dependencies from.
        target: The Token or class to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = Container()
        >>> container.register_singleton(UserRepository)
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> T:
        """Resolve the dependency from the container."""
        return container.resolve(target)

    return dependency


class ScopeResetMiddleware(BaseHTTPMiddleware):
    """Middleware that ends the container scope after each request.

    Scoped dependencies resolved while handling a request are dropped once
    the response is produced, so the next request gets new instances.
    The container holds a single scope, so this suits workers that handle
    one request at a time.

    Attributes:
        container: The DI container whose scoped values are reset.

    Example:
        >>> container = Container()
        >>> container.register_scoped(RequestContext)
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(ScopeResetMiddleware, container=container)
    """

    def __init__(self, app: FastAPI, container: IContainer):
        """Initialize the middleware with a container.

        Args:
            app: The FastAPI/Starlette application.
            container: The DI container whose scoped values are reset.
        """
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Execute the endpoint, then reset the scoped dependencies.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        try:
            response = await call_next(request)
            return response
        finally:
            logger.debug("Ending scope for %s %s", request.method, request.url.path)
            self.container.reset_scoped_dependencies()
