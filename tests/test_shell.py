"""Navigation between panels and the shell registry."""

from __future__ import annotations

import asyncio

import pytest

from academia import shell as shell_module
from academia.panels import DashboardPanel, PlannerPanel, VIEWS, WriterPanel
from academia.shell import DEFAULT_VIEW, Shell, close_all, close_shell, create_shell, get_shell

from conftest import make_client


@pytest.mark.asyncio
async def test_new_shell_shows_dashboard(client_factory):
    factory, client = client_factory(generate="Keep going!")
    shell = await create_shell(factory)
    try:
        assert shell.current_view == DEFAULT_VIEW
        assert isinstance(shell.panel, DashboardPanel)
        await shell.panel.refresh_task
        assert shell.panel.report == "Keep going!"
        assert get_shell(shell.shell_id) is shell
        assert shell.snapshot()["views"] == list(VIEWS)
    finally:
        await close_shell(shell.shell_id)
    assert get_shell(shell.shell_id) is None


@pytest.mark.asyncio
async def test_navigation_discards_panel_state():
    shell = Shell("s1", make_client)
    await shell.navigate("planner")
    shell.panel.add_task("Extra", "2024-12-01")
    await shell.navigate("writer")
    assert isinstance(shell.panel, WriterPanel)
    await shell.navigate("planner")
    assert isinstance(shell.panel, PlannerPanel)
    assert len(shell.panel.tasks) == 3
    await shell.close()


@pytest.mark.asyncio
async def test_leaving_a_panel_tears_it_down():
    gate = asyncio.Event()
    client = make_client()

    async def slow(prompt, **kwargs):
        await gate.wait()
        return "late"

    client.generate.side_effect = slow
    shell = Shell("s2", lambda: client)
    await shell.navigate("writer")
    writer = shell.panel
    pending = asyncio.create_task(writer.generate(prompt="Essay"))
    await asyncio.sleep(0)
    await shell.navigate("planner")
    gate.set()
    assert await pending is False
    assert not writer.mounted
    assert writer.result is None
    await shell.close()


@pytest.mark.asyncio
async def test_unknown_view():
    shell = Shell("s3", make_client)
    with pytest.raises(ValueError):
        await shell.navigate("settings")


@pytest.mark.asyncio
async def test_chat_survives_navigation(client_factory):
    factory, _ = client_factory(chat="Hello!")
    shell = Shell("s4", factory)
    await shell.navigate("writer")
    await shell.chat.send("Hi")
    await shell.navigate("planner")
    assert [m.content for m in shell.chat.messages] == ["Hi", "Hello!"]
    await shell.close()


@pytest.mark.asyncio
async def test_close_all_empties_registry(client_factory):
    factory, _ = client_factory(generate="ok")
    await create_shell(factory, view="writer")
    await create_shell(factory, view="planner")
    await close_all()
    assert shell_module._shells == {}


@pytest.mark.asyncio
async def test_slow_report_does_not_delay_create_shell():
    gate = asyncio.Event()
    client = make_client()

    async def slow(prompt, **kwargs):
        await gate.wait()
        return "late"

    client.generate.side_effect = slow
    shell = await asyncio.wait_for(create_shell(lambda: client), timeout=1)
    assert shell.panel.loading
    assert not gate.is_set()
    await asyncio.sleep(0)
    await close_shell(shell.shell_id)
    client.aclose.assert_awaited_once()
