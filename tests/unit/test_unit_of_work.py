"""Request unit of work: notifications are dispatched only after commit."""

import asyncio
import logging
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.datastructures import State

from engage.api.v1.dependencies import db as db_deps


@pytest.fixture
def journal():
    return []


@pytest.fixture
def request_stub(monkeypatch, journal):
    @asynccontextmanager
    async def fake_transaction():
        session = MagicMock()
        try:
            yield session
        except Exception:
            journal.append("rollback")
            raise
        journal.append("commit")

    monkeypatch.setattr(db_deps, "transaction", fake_transaction)

    dispatcher = SimpleNamespace(dispatch=AsyncMock())

    async def dispatch(outbox):
        journal.append("dispatch")

    dispatcher.dispatch.side_effect = dispatch
    state = State()
    state.notification_dispatcher = dispatcher
    return SimpleNamespace(app=SimpleNamespace(state=state))


async def test_dispatch_after_commit(request_stub, journal) -> None:
    gen = db_deps.get_uow(request_stub)
    uow = await anext(gen)
    uow.outbox.email("a@ey.com", "s", "<p>b</p>")
    with pytest.raises(StopAsyncIteration):
        await anext(gen)

    await asyncio.gather(*request_stub.app.state.notification_tasks)
    await asyncio.sleep(0)
    assert journal == ["commit", "dispatch"]
    assert not request_stub.app.state.notification_tasks


async def test_no_dispatch_when_request_fails(request_stub, journal) -> None:
    gen = db_deps.get_uow(request_stub)
    uow = await anext(gen)
    uow.outbox.email("a@ey.com", "s", "<p>b</p>")
    with pytest.raises(RuntimeError):
        await gen.athrow(RuntimeError("boom"))

    await asyncio.sleep(0)
    assert journal == ["rollback"]
    request_stub.app.state.notification_dispatcher.dispatch.assert_not_awaited()


async def test_empty_outbox_schedules_nothing(request_stub, journal) -> None:
    gen = db_deps.get_uow(request_stub)
    await anext(gen)
    with pytest.raises(StopAsyncIteration):
        await anext(gen)
    assert journal == ["commit"]
    assert getattr(request_stub.app.state, "notification_tasks", None) is None


async def test_crashed_dispatch_is_logged(request_stub, caplog) -> None:
    request_stub.app.state.notification_dispatcher.dispatch.side_effect = RuntimeError("boom")
    outbox = db_deps.NotificationOutbox()
    outbox.email("a@ey.com", "s", "<p>b</p>")

    with caplog.at_level(logging.ERROR):
        task = db_deps.schedule_dispatch(request_stub.app, outbox)
        await asyncio.gather(task, return_exceptions=True)
        await asyncio.sleep(0)

    assert "Notification dispatch crashed" in caplog.text
    assert not request_stub.app.state.notification_tasks
