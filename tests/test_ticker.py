"""Тесты для периодического таймера."""

import asyncio

import pytest

from app.ticker import Ticker


def test_ticker_runs_repeatedly() -> None:
    """Таймер вызывает callback несколько раз."""
    calls: list[int] = []

    async def callback() -> None:
        calls.append(1)

    async def _run_test() -> None:
        ticker = Ticker("test", 0.01, callback)
        ticker.start()
        await asyncio.sleep(0.1)
        await ticker.stop()

    asyncio.run(_run_test())

    assert len(calls) >= 2


@pytest.mark.parametrize("interval", [None, 0, -1])
def test_non_positive_interval_disables_ticker(interval: float | None) -> None:
    """Неположительный интервал отключает таймер."""
    calls: list[int] = []

    async def callback() -> None:
        calls.append(1)

    async def _run_test() -> None:
        ticker = Ticker("test", interval, callback)
        ticker.start()
        assert not ticker.running
        await asyncio.sleep(0.02)
        await ticker.stop()

    asyncio.run(_run_test())

    assert calls == []


def test_failing_tick_does_not_stop_ticker() -> None:
    """Ошибка в тике не останавливает таймер."""
    calls: list[int] = []

    async def callback() -> None:
        calls.append(1)
        raise RuntimeError("boom")

    async def _run_test() -> None:
        ticker = Ticker("test", 0.01, callback)
        ticker.start()
        await asyncio.sleep(0.1)
        assert ticker.running
        await ticker.stop()

    asyncio.run(_run_test())

    assert len(calls) >= 2


def test_ticks_never_overlap() -> None:
    """Медленный тик не пересекается со следующим."""
    active = 0
    max_active = 0

    async def callback() -> None:
        nonlocal active, max_active
        active += 1
        max_active = max(max_active, active)
        await asyncio.sleep(0.03)
        active -= 1

    async def _run_test() -> None:
        ticker = Ticker("test", 0.001, callback)
        ticker.start()
        await asyncio.sleep(0.15)
        await ticker.stop()

    asyncio.run(_run_test())

    assert max_active == 1


def test_stop_waits_for_in_flight_tick() -> None:
    """Остановка дожидается завершения текущего тика."""
    finished: list[bool] = []

    async def _run_test() -> None:
        tick_started = asyncio.Event()

        async def callback() -> None:
            tick_started.set()
            await asyncio.sleep(0.05)
            finished.append(True)

        ticker = Ticker("test", 10.0, callback)
        ticker.start()
        await tick_started.wait()
        await ticker.stop()
        assert not ticker.running

    asyncio.run(_run_test())

    assert finished == [True]
