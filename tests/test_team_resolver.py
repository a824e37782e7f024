"""Tests for team membership lookups."""

from reviewgate.models import AccessLevel
from reviewgate.services.team_resolver import TeamMembershipResolver


async def test_teams_in_assignment_order(db_session, seeded):
    teams = await TeamMembershipResolver(db_session).get_teams_for_project(seeded.project.id)

    assert [(t.name, t.access_level) for t in teams] == [
        ("Backend", AccessLevel.WRITE),
        ("Security", AccessLevel.READ),
    ]


async def test_membership_and_assignment(db_session, seeded):
    resolver = TeamMembershipResolver(db_session)

    assert await resolver.is_member(seeded.team_a.id, seeded.u1.id)
    assert not await resolver.is_member(seeded.team_b.id, seeded.u1.id)
    assert await resolver.is_team_assigned(seeded.project.id, seeded.team_b.id)
    assert not await resolver.is_team_assigned(seeded.project.id, seeded.team_c.id)


async def test_access_level(db_session, seeded):
    resolver = TeamMembershipResolver(db_session)

    assert await resolver.get_access_level(seeded.project.id, seeded.team_a.id) == AccessLevel.WRITE
    assert await resolver.get_access_level(seeded.project.id, seeded.team_c.id) is None


async def test_project_access_follows_team_assignment(db_session, seeded):
    resolver = TeamMembershipResolver(db_session)

    assert await resolver.has_project_access(seeded.project.id, seeded.u3.id)
    assert not await resolver.has_project_access(seeded.project.id, seeded.outsider.id)
    assert not await resolver.has_project_access(seeded.bare_project.id, seeded.u1.id)
