"""Read-only lookups over team membership and project assignment."""

from dataclasses import dataclass

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import AccessLevel, ProjectTeam, Team, TeamMember


@dataclass(frozen=True)
class TeamRef:
    """A team as seen from a project."""

    team_id: int
    name: str
    access_level: AccessLevel


class TeamMembershipResolver:
    """Answers who belongs to which team and which teams a project has."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_teams_for_project(self, project_id: int) -> list[TeamRef]:
        """Teams assigned to the project, in assignment order."""
        result = await self.session.execute(
            select(ProjectTeam.team_id, Team.name, ProjectTeam.access_level)
            .join(Team, Team.id == ProjectTeam.team_id)
            .where(ProjectTeam.project_id == project_id)
            .order_by(ProjectTeam.id)
        )
        return [
            TeamRef(team_id=row.team_id, name=row.name, access_level=row.access_level)
            for row in result
        ]

    async def is_member(self, team_id: int, user_id: int) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    TeamMember.team_id == team_id,
                    TeamMember.user_id == user_id,
                )
            )
        )
        return bool(result.scalar())

    async def is_team_assigned(self, project_id: int, team_id: int) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    ProjectTeam.project_id == project_id,
                    ProjectTeam.team_id == team_id,
                )
            )
        )
        return bool(result.scalar())

    async def get_access_level(self, project_id: int, team_id: int) -> AccessLevel | None:
        result = await self.session.execute(
            select(ProjectTeam.access_level).where(
                ProjectTeam.project_id == project_id,
                ProjectTeam.team_id == team_id,
            )
        )
        return result.scalar_one_or_none()

    async def has_project_access(self, project_id: int, user_id: int) -> bool:
        """True if the user belongs to any team assigned to the project."""
        result = await self.session.execute(
            select(
                exists()
                .where(ProjectTeam.project_id == project_id)
                .where(TeamMember.team_id == ProjectTeam.team_id)
                .where(TeamMember.user_id == user_id)
            )
        )
        return bool(result.scalar())
