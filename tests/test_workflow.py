"""
Tests for the step-by-step workflow runner.
"""

import pytest

from recy.application.workflow import (
    CompensationPolicy,
    Workflow,
    WorkflowFailure,
    WorkflowStep,
    WorkflowSuccess,
)
from recy.domain.audit.errors import StorageError, StorageErrorCode
from recy.shared.errors.kinds import ErrorKind


class Recorder:
    """Collects the names of the steps that ran."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def step(self, name: str, value=None, error: Exception | None = None):
        def effect(results):
            self.calls.append(name)
            if error is not None:
                raise error
            return value

        return effect


class TestWorkflowConstruction:
    """Invalid workflows are rejected up front."""

    def test_requires_steps(self) -> None:
        with pytest.raises(ValueError):
            Workflow("empty", [])

    def test_rejects_duplicate_step_names(self) -> None:
        step = WorkflowStep(name="A", effect=lambda results: None)
        with pytest.raises(ValueError):
            Workflow("dup", [step, step])

    def test_rejects_unknown_result_step(self) -> None:
        step = WorkflowStep(name="A", effect=lambda results: None)
        with pytest.raises(ValueError):
            Workflow("w", [step], result_step="B")

    def test_step_names(self) -> None:
        workflow = Workflow(
            "w",
            [
                WorkflowStep(name="A", effect=lambda results: 1),
                WorkflowStep(name="B", effect=lambda results: 2),
            ],
        )
        assert workflow.step_names == ("A", "B")


class TestWorkflowRun:
    """Execution order and terminal states."""

    def test_runs_steps_in_order_and_returns_last_result(self) -> None:
        recorder = Recorder()
        result = Workflow(
            "w",
            [
                WorkflowStep(name="A", effect=recorder.step("A", 1)),
                WorkflowStep(name="B", effect=recorder.step("B", 2)),
            ],
        ).run()

        assert isinstance(result, WorkflowSuccess)
        assert result.value == 2
        assert result.completed_steps == ("A", "B")
        assert recorder.calls == ["A", "B"]

    def test_result_step_selects_value(self) -> None:
        result = Workflow(
            "w",
            [
                WorkflowStep(name="A", effect=lambda results: "a"),
                WorkflowStep(name="B", effect=lambda results: "b"),
            ],
            result_step="A",
        ).run()
        assert result.value == "a"

    def test_later_steps_see_earlier_results(self) -> None:
        result = Workflow(
            "w",
            [
                WorkflowStep(name="A", effect=lambda results: 20),
                WorkflowStep(name="B", effect=lambda results: results["A"] + 1),
            ],
        ).run()
        assert result.value == 21

    def test_first_failure_stops_the_run(self) -> None:
        recorder = Recorder()
        result = Workflow(
            "w",
            [
                WorkflowStep(name="A", effect=recorder.step("A", 1)),
                WorkflowStep(
                    name="B",
                    effect=recorder.step(
                        "B", error=StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",))
                    ),
                ),
                WorkflowStep(name="C", effect=recorder.step("C", 3)),
            ],
        ).run()

        assert isinstance(result, WorkflowFailure)
        assert result.step == "B"
        assert result.error.kind is ErrorKind.NOT_FOUND
        assert result.completed_steps == ("A",)
        assert not result.is_partial
        assert recorder.calls == ["A", "B"]

    def test_failed_precondition_fails_the_step(self) -> None:
        recorder = Recorder()

        def require_value(value) -> None:
            if value is None:
                raise LookupError("missing")

        result = Workflow(
            "w",
            [
                WorkflowStep(name="A", effect=recorder.step("A", None), precondition=require_value),
                WorkflowStep(name="B", effect=recorder.step("B", 2)),
            ],
        ).run()

        assert isinstance(result, WorkflowFailure)
        assert result.step == "A"
        assert result.completed_steps == ()
        assert isinstance(result.cause, LookupError)
        assert recorder.calls == ["A"]

    def test_failures_are_returned_not_raised(self) -> None:
        def boom(_results):
            raise RuntimeError("boom")

        result = Workflow("w", [WorkflowStep(name="A", effect=boom)]).run()

        assert isinstance(result, WorkflowFailure)
        assert result.error.kind is ErrorKind.UNEXPECTED
        assert result.error.status_code == 500


class TestPartialFailure:
    """Failures after a step that cannot be undone automatically."""

    def _run(self, compensation: CompensationPolicy):
        def fail(_results):
            raise RuntimeError("flag update lost")

        return Workflow(
            "create",
            [
                WorkflowStep(name="Persist", effect=lambda results: "id-1", compensation=compensation),
                WorkflowStep(name="Flag", effect=fail),
            ],
            partial_failure_message="Stored but not flagged",
            references=lambda results: {"recordId": results["Persist"]},
        ).run()

    def test_manual_compensation_makes_failure_partial(self) -> None:
        result = self._run(CompensationPolicy.MANUAL_INTERVENTION_REQUIRED)

        assert result.is_partial
        assert result.unreconciled_steps == ("Persist",)
        assert result.references == {"recordId": "id-1"}

        classified = result.classified()
        assert classified.kind is ErrorKind.UNEXPECTED
        assert classified.message == "Stored but not flagged"
        assert classified.details == {
            "step": "Flag",
            "completedSteps": ["Persist"],
            "compensation": "manual-intervention-required",
            "recordId": "id-1",
        }

    def test_no_compensation_policy_is_plain_failure(self) -> None:
        result = self._run(CompensationPolicy.NONE)

        assert not result.is_partial
        assert result.references == {}
        assert result.classified().details == {"step": "Flag"}
