"""
Unit tests for StepScheduler.

Tests cover:
- Depth-first execution of steps registered while draining
- Awaiting an empty or already drained scheduler
- Bus errors surfacing at checkpoints, one per checkpoint
- expect_next_step_to_fail outcomes
- Step diagnostics, drain depth limit, breakpoints and tracing
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import Self
from uuid import uuid4

import pytest

from eventbench.events.base import DomainEvent
from eventbench.exceptions import DrainDepthExceededError
from eventbench.observability import MockTracer
from eventbench.observability.attributes import ATTR_STEP_DEPTH
from eventbench.testing import BenchConfig, StepScheduler
from eventbench.testing.config import DEFAULT_STEP_LOGGER

HERE = str(Path(__file__).parent)


class Ping(DomainEvent):
    aggregate_type: str = "Ping"


class RecordingScheduler(StepScheduler):
    """Scheduler with a public step method, the way step-based benches are built."""

    def __init__(self, **config: object) -> None:
        super().__init__(
            config=BenchConfig(enable_tracing=False, project_root=HERE, **config)  # type: ignore[arg-type]
        )
        self.log: list[str] = []

    def record(self, name: str, then: Callable[[], object] | None = None) -> Self:
        async def action() -> None:
            self.log.append(name)
            if then is not None:
                then()

        return self.add_step(action)

    def fail(self, message: str, error: type[Exception] = RuntimeError) -> Self:
        def action() -> None:
            self.log.append(f"fail:{message}")
            raise error(message)

        return self.add_step(action)

    def publish(self, *events: DomainEvent) -> Self:
        async def action() -> None:
            await self.bus.publish(list(events))
            self.log.append("published")

        return self.add_step(action)


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


def failing_handler(messages: list[str]) -> Callable[[DomainEvent], None]:
    """Handler raising RuntimeError with the next message on each call."""
    remaining = list(messages)

    async def handle(event: DomainEvent) -> None:
        raise RuntimeError(remaining.pop(0))

    return handle  # type: ignore[return-value]


def step_messages(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == DEFAULT_STEP_LOGGER]


# =============================================================================
# Execution Order
# =============================================================================


class TestExecutionOrder:
    """Tests for depth-first draining."""

    @pytest.mark.asyncio
    async def test_top_level_steps_run_in_registration_order(
        self, scheduler: RecordingScheduler
    ) -> None:
        """Steps run in the order they were chained."""
        await scheduler.record("S1").record("S2").record("S3")

        assert scheduler.log == ["S1", "S2", "S3"]

    @pytest.mark.asyncio
    async def test_nested_steps_run_before_next_sibling(
        self, scheduler: RecordingScheduler
    ) -> None:
        """Steps registered by S1 run before S2."""
        scheduler.record("S1", then=lambda: scheduler.record("S1a").record("S1b"))
        scheduler.record("S2")

        await scheduler

        assert scheduler.log == ["S1", "S1a", "S1b", "S2"]

    @pytest.mark.asyncio
    async def test_deeply_nested_steps(self, scheduler: RecordingScheduler) -> None:
        """Nesting works at any depth."""
        scheduler.record(
            "S1",
            then=lambda: scheduler.record(
                "S1a", then=lambda: scheduler.record("S1a-i")
            ).record("S1b"),
        ).record("S2")

        await scheduler

        assert scheduler.log == ["S1", "S1a", "S1a-i", "S1b", "S2"]

    @pytest.mark.asyncio
    async def test_sync_actions_are_supported(self, scheduler: RecordingScheduler) -> None:
        """Actions returning a plain value are not awaited."""
        calls: list[str] = []

        await scheduler.add_step(lambda: calls.append("sync"), skip=0)

        assert calls == ["sync"]


# =============================================================================
# Awaiting
# =============================================================================


class TestAwaiting:
    """Tests for awaiting the scheduler."""

    @pytest.mark.asyncio
    async def test_await_returns_scheduler(self, scheduler: RecordingScheduler) -> None:
        """Awaiting the chain evaluates to the scheduler itself."""
        result = await scheduler.record("S1")

        assert result is scheduler

    @pytest.mark.asyncio
    async def test_run_returns_scheduler(self, scheduler: RecordingScheduler) -> None:
        result = await scheduler.record("S1").run()

        assert result is scheduler
        assert scheduler.log == ["S1"]

    @pytest.mark.asyncio
    async def test_second_await_is_noop(self, scheduler: RecordingScheduler) -> None:
        """Awaiting a drained scheduler runs nothing again."""
        await scheduler.record("S1").record("S2")

        result = await scheduler

        assert result is scheduler
        assert scheduler.log == ["S1", "S2"]

    @pytest.mark.asyncio
    async def test_pending_reflects_queue(self, scheduler: RecordingScheduler) -> None:
        assert scheduler.pending is False

        scheduler.record("S1")
        assert scheduler.pending is True

        await scheduler
        assert scheduler.pending is False

    @pytest.mark.asyncio
    async def test_empty_await_emits_no_diagnostics(
        self, scheduler: RecordingScheduler, step_log: pytest.LogCaptureFixture
    ) -> None:
        """Awaiting without steps resolves immediately and logs nothing."""
        result = await scheduler

        assert result is scheduler
        assert step_messages(step_log) == []


# =============================================================================
# Error Propagation
# =============================================================================


class TestErrorPropagation:
    """Tests for step errors and bus errors reaching the test."""

    @pytest.mark.asyncio
    async def test_step_error_propagates_unchanged(self, scheduler: RecordingScheduler) -> None:
        """The exception raised by an action reaches the awaiting test."""
        with pytest.raises(KeyError, match="missing"):
            await scheduler.fail("missing", KeyError)

    @pytest.mark.asyncio
    async def test_failure_discards_remaining_steps(self, scheduler: RecordingScheduler) -> None:
        """Steps after a failure don't run, now or on a later await."""
        scheduler.record("S1").fail("boom").record("S3")

        with pytest.raises(RuntimeError, match="boom"):
            await scheduler

        assert scheduler.pending is False
        await scheduler
        assert scheduler.log == ["S1", "fail:boom"]

    @pytest.mark.asyncio
    async def test_nested_failure_discards_parent_siblings(
        self, scheduler: RecordingScheduler
    ) -> None:
        scheduler.record("S1", then=lambda: scheduler.fail("nested")).record("S2")

        with pytest.raises(RuntimeError, match="nested"):
            await scheduler

        assert scheduler.log == ["S1", "fail:nested"]

    @pytest.mark.asyncio
    async def test_async_listener_failure_surfaces_at_checkpoint(
        self, scheduler: RecordingScheduler
    ) -> None:
        """A background handler error is raised after the publishing step returned."""
        scheduler.bus.subscribe(failing_handler(["listener failed"]))

        with pytest.raises(RuntimeError, match="listener failed"):
            await scheduler.publish(Ping(aggregate_id=uuid4())).record("after")

        assert scheduler.log == ["published"]

    @pytest.mark.asyncio
    async def test_errors_surface_one_per_checkpoint(self, scheduler: RecordingScheduler) -> None:
        """Two reported errors fail two successive awaits, the third is clean."""
        scheduler.bus.subscribe(failing_handler(["first", "second"]))

        with pytest.raises(RuntimeError, match="first"):
            await scheduler.publish(Ping(aggregate_id=uuid4()), Ping(aggregate_id=uuid4()))

        with pytest.raises(RuntimeError, match="second"):
            await scheduler.record("S2")

        await scheduler.record("S3")

        assert scheduler.log == ["published", "S2", "S3"]
        assert len(scheduler.errors) == 0


# =============================================================================
# Expected Failures
# =============================================================================


class TestExpectNextStepToFail:
    """Tests for expect_next_step_to_fail."""

    @pytest.mark.asyncio
    async def test_matching_failure_passes(self, scheduler: RecordingScheduler) -> None:
        """A matching failure is swallowed and the chain continues."""
        await scheduler.expect_next_step_to_fail("boom").fail("boom").record("after")

        assert scheduler.log == ["fail:boom", "after"]

    @pytest.mark.asyncio
    async def test_other_message_fails(self, scheduler: RecordingScheduler) -> None:
        with pytest.raises(AssertionError, match="containing 'boom'"):
            await scheduler.expect_next_step_to_fail("boom").fail("other")

    @pytest.mark.asyncio
    async def test_no_failure_fails(self, scheduler: RecordingScheduler) -> None:
        with pytest.raises(AssertionError, match="nothing was raised"):
            await scheduler.expect_next_step_to_fail("boom").record("fine")

        assert scheduler.log == ["fine"]

    @pytest.mark.asyncio
    async def test_only_next_step_is_intercepted(self, scheduler: RecordingScheduler) -> None:
        """The step after the expected failure runs with normal error handling."""
        scheduler.expect_next_step_to_fail("boom").fail("boom").fail("second")

        with pytest.raises(RuntimeError, match="second"):
            await scheduler

    @pytest.mark.asyncio
    async def test_failure_in_nested_step_counts(self, scheduler: RecordingScheduler) -> None:
        """A failure raised by a step the next step registered satisfies the expectation."""
        scheduler.expect_next_step_to_fail("deep")
        scheduler.record("S1", then=lambda: scheduler.fail("deep"))
        scheduler.record("S2")

        await scheduler

        assert scheduler.log == ["S1", "fail:deep", "S2"]

    @pytest.mark.asyncio
    async def test_bus_failure_counts(self, scheduler: RecordingScheduler) -> None:
        """An asynchronous handler failure after the next step satisfies the expectation."""
        scheduler.bus.subscribe(failing_handler(["handler boom"]))

        await scheduler.expect_next_step_to_fail("handler boom").publish(
            Ping(aggregate_id=uuid4())
        )

    @pytest.mark.asyncio
    async def test_matcher_by_class(self, scheduler: RecordingScheduler) -> None:
        await scheduler.expect_next_step_to_fail(LookupError).fail("x", KeyError)

        with pytest.raises(AssertionError, match="of type LookupError"):
            await scheduler.expect_next_step_to_fail(LookupError).fail("x", ValueError)

    @pytest.mark.asyncio
    async def test_matcher_by_pattern(self, scheduler: RecordingScheduler) -> None:
        await scheduler.expect_next_step_to_fail(re.compile(r"order \d+")).fail("order 42 failed")

    @pytest.mark.asyncio
    async def test_no_matcher_accepts_any_error(self, scheduler: RecordingScheduler) -> None:
        await scheduler.expect_next_step_to_fail().fail("anything", OSError)

    @pytest.mark.asyncio
    async def test_expectation_without_following_step_fails(
        self, scheduler: RecordingScheduler
    ) -> None:
        """A trailing expectation fails the run instead of passing silently."""
        with pytest.raises(AssertionError, match="was not followed by a step"):
            await scheduler.expect_next_step_to_fail("boom")

    @pytest.mark.asyncio
    async def test_unused_expectation_does_not_leak_into_next_run(
        self, scheduler: RecordingScheduler
    ) -> None:
        """Normal error handling is back for the next chain."""
        with pytest.raises(AssertionError):
            await scheduler.expect_next_step_to_fail("boom")

        await scheduler.record("later")

        with pytest.raises(RuntimeError, match="unrelated"):
            await scheduler.fail("unrelated")

        assert scheduler.log == ["later", "fail:unrelated"]


# =============================================================================
# Diagnostics
# =============================================================================


class TestDiagnostics:
    """Tests for step descriptions written to the step logger."""

    @pytest.mark.asyncio
    async def test_description_names_call_site_and_step(
        self, scheduler: RecordingScheduler, step_log: pytest.LogCaptureFixture
    ) -> None:
        frame = inspect.currentframe()
        assert frame is not None
        line = frame.f_lineno + 1
        scheduler.record("S1")

        await scheduler

        [message] = step_messages(step_log)
        assert re.fullmatch(rf"test_scheduler\.py:{line}:\d+ +record", message)

    @pytest.mark.asyncio
    async def test_location_column_is_padded(
        self, scheduler: RecordingScheduler, step_log: pytest.LogCaptureFixture
    ) -> None:
        await scheduler.record("S1")

        [message] = step_messages(step_log)
        assert len(message) == 60 + 1 + len("record")
        assert message.endswith(" record")

    @pytest.mark.asyncio
    async def test_nested_steps_are_indented(
        self, scheduler: RecordingScheduler, step_log: pytest.LogCaptureFixture
    ) -> None:
        """Each nesting level adds three spaces."""
        scheduler.record(
            "S1", then=lambda: scheduler.record("S1a", then=lambda: scheduler.record("S1a-i"))
        )

        await scheduler

        messages = step_messages(step_log)
        assert len(messages) == 3
        assert not messages[0].startswith(" ")
        assert messages[1].startswith("   ") and not messages[1].startswith("    ")
        assert messages[2].startswith("      ") and not messages[2].startswith("       ")

    @pytest.mark.asyncio
    async def test_label_replaces_step_name(
        self, scheduler: RecordingScheduler, step_log: pytest.LogCaptureFixture
    ) -> None:
        await scheduler.add_step(lambda: None, label="custom step", skip=0)

        [message] = step_messages(step_log)
        assert message.endswith(" custom step")
        assert message.startswith("test_scheduler.py:")

    @pytest.mark.asyncio
    async def test_get_logger_indents_relative_to_current_step(
        self, scheduler: RecordingScheduler, step_log: pytest.LogCaptureFixture
    ) -> None:
        def log_from_step() -> None:
            scheduler.get_logger(1).info("detail")

        scheduler.record("S1", then=lambda: scheduler.add_step(log_from_step, skip=0))

        await scheduler

        assert step_messages(step_log)[-1] == "      detail"

    @pytest.mark.asyncio
    async def test_custom_step_logger(self, scheduler: RecordingScheduler) -> None:
        captured: list[str] = []

        class ListHandler(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                captured.append(record.getMessage())

        custom = logging.getLogger("tests.custom_steps")
        custom.setLevel(logging.INFO)
        custom.addHandler(ListHandler())
        scheduler.set_step_logger(custom)

        await scheduler.record("S1")

        assert len(captured) == 1
        assert captured[0].endswith(" record")


# =============================================================================
# Drain Depth Limit
# =============================================================================


class TestDrainDepthLimit:
    """Tests for max_drain_depth."""

    @pytest.mark.asyncio
    async def test_runaway_nesting_raises(self) -> None:
        scheduler = RecordingScheduler(max_drain_depth=3)

        def again() -> None:
            scheduler.record("again", then=again)

        scheduler.record("start", then=again)

        with pytest.raises(DrainDepthExceededError) as exc_info:
            await scheduler

        assert exc_info.value.max_depth == 3
        assert scheduler.log == ["start", "again", "again"]
        assert scheduler.pending is False

    @pytest.mark.asyncio
    async def test_nesting_within_limit(self) -> None:
        scheduler = RecordingScheduler(max_drain_depth=2)

        await scheduler.record("S1", then=lambda: scheduler.record("S1a"))

        assert scheduler.log == ["S1", "S1a"]


# =============================================================================
# Breakpoints
# =============================================================================


class TestBreakpoint:
    """Tests for then_breakpoint."""

    @pytest.mark.asyncio
    async def test_breakpoint_calls_hook_before_next_step_in_debug(self) -> None:
        calls: list[str] = []
        scheduler = RecordingScheduler(debug=True, breakpoint_hook=lambda: calls.append("break"))

        def record_break_calls() -> None:
            calls.append("S2")

        await scheduler.record("S1").then_breakpoint().add_step(record_break_calls, skip=0)

        assert calls == ["break", "S2"]

    @pytest.mark.asyncio
    async def test_breakpoint_fires_once(self) -> None:
        calls: list[str] = []
        scheduler = RecordingScheduler(debug=True, breakpoint_hook=lambda: calls.append("break"))

        await scheduler.then_breakpoint().record("S1").record("S2")

        assert calls == ["break"]

    @pytest.mark.asyncio
    async def test_breakpoint_ignored_without_debug(self) -> None:
        calls: list[str] = []
        scheduler = RecordingScheduler(breakpoint_hook=lambda: calls.append("break"))

        await scheduler.then_breakpoint().record("S1")

        assert calls == []
        assert scheduler.log == ["S1"]


# =============================================================================
# Tracing
# =============================================================================


class TestTracing:
    """Tests for step spans."""

    @pytest.mark.asyncio
    async def test_each_step_runs_in_a_span(self, mock_tracer: MockTracer) -> None:
        scheduler = StepScheduler(config=BenchConfig(project_root=HERE), tracer=mock_tracer)

        def outer() -> None:
            scheduler.add_step(lambda: None, label="inner", skip=0)

        scheduler.add_step(outer, label="outer", skip=0)

        await scheduler

        step_spans = [
            attributes for name, attributes in mock_tracer.spans
            if name == "eventbench.testbench.step"
        ]
        assert len(step_spans) == 2
        assert [a[ATTR_STEP_DEPTH] for a in step_spans if a] == [0, 1]

    @pytest.mark.asyncio
    async def test_wait_until_processed_step(self, scheduler: RecordingScheduler) -> None:
        await scheduler.publish(Ping(aggregate_id=uuid4())).then_wait_until_processed()

        assert scheduler.bus.get_background_task_count() == 0
