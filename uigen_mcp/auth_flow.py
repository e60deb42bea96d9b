"""
Sign-in / sign-up flow and the migration of anonymous work that follows it.

After a successful authentication the user lands on exactly one project:
anonymous work (if any messages were exchanged) becomes a new project,
otherwise the most recent existing project is opened, otherwise a new empty
project is created.
"""

import inspect
import logging
import random
from datetime import datetime
from typing import Any, Awaitable, Callable, Protocol

from uigen_mcp.anon_work import AnonWorkStore
from uigen_mcp.models.project import AuthResult, Project

logger = logging.getLogger(__name__)

Navigate = Callable[[str], Awaitable[None] | None]


class AuthClient(Protocol):
    async def sign_in(self, email: str, password: str) -> AuthResult: ...

    async def sign_up(self, email: str, password: str) -> AuthResult: ...


class ProjectStore(Protocol):
    async def create_project(
        self, name: str, messages: list[dict[str, Any]], data: dict[str, str]
    ) -> Project: ...

    async def get_projects(self) -> list[Project]:
        """Returns the user's projects, most recently updated first."""
        ...


def migrated_project_name(now: datetime | None = None) -> str:
    return f"Design from {(now or datetime.now()).strftime('%H:%M:%S')}"


def new_project_name() -> str:
    return f"New Design #{random.randrange(100000)}"


class AuthFlow:
    """Runs authentication and resolves the project the user continues in."""

    def __init__(
        self,
        auth_client: AuthClient,
        project_store: ProjectStore,
        anon_store: AnonWorkStore,
        navigate: Navigate,
    ) -> None:
        self.auth_client = auth_client
        self.project_store = project_store
        self.anon_store = anon_store
        self.navigate = navigate
        self.is_loading = False

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(self.auth_client.sign_in, email, password)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(self.auth_client.sign_up, email, password)

    async def _authenticate(
        self,
        action: Callable[[str, str], Awaitable[AuthResult]],
        email: str,
        password: str,
    ) -> AuthResult:
        self.is_loading = True
        try:
            result = await action(email, password)
            if result.success:
                await self._handle_post_sign_in()
            else:
                logger.info(f"Authentication failed: {result.error}")
            return result
        finally:
            self.is_loading = False

    async def _handle_post_sign_in(self) -> str:
        """
        Resolves the project to open after authentication and navigates to it.

        Returns:
            The id of the project the user was sent to.
        """
        anon_work = self.anon_store.get_anon_work_data()
        if anon_work is not None and anon_work.messages:
            project = await self.project_store.create_project(
                name=migrated_project_name(),
                messages=anon_work.messages,
                data=anon_work.file_system_data,
            )
            # Cleared only once the project exists, so a failed create loses nothing.
            self.anon_store.clear_anon_work()
            logger.info(f"Migrated anonymous work into project {project.id}")
            return await self._go_to(project.id)

        projects = await self.project_store.get_projects()
        if projects:
            return await self._go_to(projects[0].id)

        project = await self.project_store.create_project(
            name=new_project_name(),
            messages=[],
            data={},
        )
        logger.info(f"Created empty project {project.id}")
        return await self._go_to(project.id)

    async def _go_to(self, project_id: str) -> str:
        outcome = self.navigate(f"/{project_id}")
        if inspect.isawaitable(outcome):
            await outcome
        return project_id
