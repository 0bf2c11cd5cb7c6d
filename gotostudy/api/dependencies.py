"""Request-scoped dependencies."""

from collections.abc import Generator

from fastapi import Depends, Request

from ..container import AppContainer
from ..services import TaskService, UserService


def get_container(request: Request) -> Generator[AppContainer, None, None]:
    """Yield a container from the app's factory for the length of a request."""
    with request.app.state.container_factory() as container:
        yield container


def get_user_service(container: AppContainer = Depends(get_container)) -> UserService:
    return container.user_service


def get_task_service(container: AppContainer = Depends(get_container)) -> TaskService:
    return container.task_service
