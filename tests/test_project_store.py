"""
Tests for ProjectStore: CRUD, search and cascading delete.
"""
import pytest

from taskboard.errors import NotFound, ValidationError
from taskboard.models import TaskStatus


@pytest.mark.asyncio
async def test_create_and_get(projects):
    created = await projects.create_project("  Website  ", "Relaunch")
    fetched = await projects.get_project(created.id)
    assert fetched.name == "Website"
    assert fetched.description == "Relaunch"
    assert fetched.created_at is not None


@pytest.mark.asyncio
async def test_create_validates_name_and_description(projects):
    with pytest.raises(ValidationError):
        await projects.create_project("")
    with pytest.raises(ValidationError):
        await projects.create_project("x" * 101)
    with pytest.raises(ValidationError):
        await projects.create_project("ok", "x" * 501)


@pytest.mark.asyncio
async def test_get_unknown(projects):
    with pytest.raises(NotFound):
        await projects.get_project("missing")


@pytest.mark.asyncio
async def test_search_matches_name_or_description(projects):
    await projects.create_project("Website", "Marketing site")
    await projects.create_project("Backend", "API for the WEBSITE")
    await projects.create_project("Infra", "Terraform")

    names = {p.name for p in await projects.list_projects("website")}
    assert names == {"Website", "Backend"}

    assert {p.name for p in await projects.list_projects("TERRA")} == {"Infra"}
    assert len(await projects.list_projects("   ")) == 3
    assert len(await projects.list_projects()) == 3


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(projects):
    await projects.create_project("100% done")
    await projects.create_project("Other")
    assert [p.name for p in await projects.list_projects("%")] == ["100% done"]


@pytest.mark.asyncio
async def test_update_is_partial(projects, project):
    updated = await projects.update_project(project.id, {"name": "Renamed"})
    assert updated.name == "Renamed"
    assert updated.description == "Main board"
    assert updated.updated_at >= updated.created_at

    with pytest.raises(ValidationError):
        await projects.update_project(project.id, {"name": " "})
    with pytest.raises(NotFound):
        await projects.update_project("missing", {"name": "x"})


@pytest.mark.asyncio
async def test_rejected_update_leaves_nothing_behind(projects, project):
    with pytest.raises(ValidationError):
        await projects.update_project(project.id, {"name": "Leaked", "description": "x" * 501})

    # The next successful commit on this session must not carry the rejected name.
    await projects.create_project("Another")
    assert (await projects.get_project(project.id)).name == "Board"


@pytest.mark.asyncio
async def test_delete_cascades_to_tasks(projects, tasks, project):
    other = await projects.create_project("Other")
    for title in ("A", "B", "C"):
        await tasks.create_task(project.id, title)
    await tasks.create_task(project.id, "D", status=TaskStatus.done)
    kept = await tasks.create_task(other.id, "Keep")

    removed = await projects.delete_project(project.id)

    assert removed == 4
    with pytest.raises(NotFound):
        await projects.get_project(project.id)
    with pytest.raises(NotFound):
        await tasks.list_by_project(project.id)
    lanes = await tasks.list_by_project(other.id)
    assert [t.id for t in lanes.todo] == [kept.id]


@pytest.mark.asyncio
async def test_project_with_tasks_groups_lanes(projects, tasks, project):
    await tasks.create_task(project.id, "A")
    await tasks.create_task(project.id, "B", status=TaskStatus.in_progress)
    await tasks.create_task(project.id, "C")

    board = await projects.get_project_with_tasks(project.id)

    assert board.id == project.id
    assert [t.title for t in board.tasks.todo] == ["A", "C"]
    assert [t.title for t in board.tasks.in_progress] == ["B"]
    assert board.tasks.done == []
