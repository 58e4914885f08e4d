"""Testes do ParticipantLocks."""

from __future__ import annotations

import asyncio

import pytest

from app.use_cases.conversations.participant_locks import ParticipantLocks


class TestParticipantLocks:
    """Testes do ParticipantLocks."""

    @pytest.mark.asyncio
    async def test_same_participant_is_serialized(self) -> None:
        locks = ParticipantLocks()
        events: list[str] = []

        async def work(tag: str) -> None:
            async with locks.hold("p1"):
                events.append(f"{tag}-start")
                await asyncio.sleep(0.01)
                events.append(f"{tag}-end")

        await asyncio.gather(work("a"), work("b"))

        assert events == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_participants_run_in_parallel(self) -> None:
        locks = ParticipantLocks()
        inside = asyncio.Event()
        both_inside = asyncio.Event()
        count = 0

        async def work(participant_id: str) -> None:
            nonlocal count
            async with locks.hold(participant_id):
                count += 1
                if count == 2:
                    both_inside.set()
                inside.set()
                await asyncio.wait_for(both_inside.wait(), timeout=1.0)

        await asyncio.gather(work("p1"), work("p2"))

        assert both_inside.is_set()

    @pytest.mark.asyncio
    async def test_locks_are_released(self) -> None:
        locks = ParticipantLocks()

        async with locks.hold("p1"):
            assert len(locks) == 1

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_released_on_error(self) -> None:
        locks = ParticipantLocks()

        with pytest.raises(RuntimeError):
            async with locks.hold("p1"):
                raise RuntimeError("boom")

        assert len(locks) == 0
