"""
Workflow orchestration for composite writes.

A workflow is an ordered list of named steps run one after the other
against a record store that only guarantees single-statement atomicity.
There is no cross-step transaction, no automatic compensation and no
retry: the first failing step ends the run, its failure is classified
once, and the run reports which step failed.

When a step fails after an earlier step whose effect cannot be undone
automatically (compensation policy `manual-intervention-required`), the
run ends in a *partial failure*. That outcome keeps the ids of the
records left behind so operators can reconcile them.

Outcomes are returned as values, never raised.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar, Union

from recy.shared.errors.kinds import ClassifiedError, ClassifiedFailure
from recy.shared.errors.taxonomy import classify

logger = logging.getLogger(__name__)

T = TypeVar("T")

StepResults = Mapping[str, Any]


class CompensationPolicy(Enum):
    """What happens to a completed step's effect if a later step fails."""

    NONE = "none"
    MANUAL_INTERVENTION_REQUIRED = "manual-intervention-required"


@dataclass(frozen=True)
class WorkflowStep:
    """A named unit of work.

    Attributes:
        name: Step name reported on failure.
        effect: Performs the step. Receives the results of earlier steps
            keyed by step name and returns this step's result.
        precondition: Checks the effect's result before the workflow
            advances; raises to fail the step.
        compensation: Policy for this step's effect if a later step fails.
    """

    name: str
    effect: Callable[[StepResults], Any]
    precondition: Optional[Callable[[Any], None]] = None
    compensation: CompensationPolicy = CompensationPolicy.NONE


@dataclass(frozen=True)
class WorkflowSuccess(Generic[T]):
    """Terminal state of a run in which every step completed."""

    value: T
    completed_steps: tuple[str, ...]


@dataclass(frozen=True)
class WorkflowFailure(ClassifiedFailure):
    """Terminal state of a run that stopped at a failing step.

    Attributes:
        workflow: Workflow name.
        step: Name of the step that failed.
        error: Classification of the step's failure.
        cause: The original failure. Never sent to callers.
        completed_steps: Steps that finished before the failure.
        unreconciled_steps: Completed steps whose effects persist and
            need manual reconciliation. Empty unless this is a partial failure.
        references: Public ids of the records left behind.
        partial_failure_message: Public message used for partial failures.
    """

    workflow: str
    step: str
    error: ClassifiedError
    cause: BaseException
    completed_steps: tuple[str, ...] = ()
    unreconciled_steps: tuple[str, ...] = ()
    references: Mapping[str, Any] = field(default_factory=dict)
    partial_failure_message: Optional[str] = None

    @property
    def is_partial(self) -> bool:
        return bool(self.unreconciled_steps)

    def classified(self) -> ClassifiedError:
        details: dict[str, Any] = dict(self.error.details or {})
        details["step"] = self.step
        message = self.error.message
        if self.is_partial:
            details["completedSteps"] = list(self.completed_steps)
            details["compensation"] = CompensationPolicy.MANUAL_INTERVENTION_REQUIRED.value
            details.update(self.references)
            if self.partial_failure_message:
                message = self.partial_failure_message
        return ClassifiedError(
            kind=self.error.kind,
            status_code=self.error.status_code,
            message=message,
            details=details,
            payload=self.error.payload,
        )


WorkflowResult = Union[WorkflowSuccess[T], WorkflowFailure]


class Workflow(Generic[T]):
    """Runs steps in order and stops at the first failure.

    Args:
        name: Workflow name used in logs and failures.
        steps: Steps in execution order.
        result_step: Step whose result is the workflow's value.
            Defaults to the last step.
        partial_failure_message: Public message for partial failures.
        references: Builds public record ids from completed step results;
            attached to partial failures.
    """

    def __init__(
        self,
        name: str,
        steps: list[WorkflowStep],
        result_step: Optional[str] = None,
        partial_failure_message: Optional[str] = None,
        references: Optional[Callable[[StepResults], Mapping[str, Any]]] = None,
    ) -> None:
        if not steps:
            raise ValueError("A workflow needs at least one step")
        names = [step.name for step in steps]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate step names in workflow {name}: {names}")
        if result_step is not None and result_step not in names:
            raise ValueError(f"Unknown result step {result_step!r} for workflow {name}")

        self.name = name
        self._steps = list(steps)
        self._result_step = result_step or names[-1]
        self._partial_failure_message = partial_failure_message
        self._references = references

    @property
    def step_names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self._steps)

    def run(self) -> WorkflowResult[T]:
        """Execute every step in order.

        Returns:
            WorkflowSuccess with the result step's value, or WorkflowFailure
            naming the failing step.
        """
        results: dict[str, Any] = {}
        completed: list[str] = []

        for step in self._steps:
            logger.debug("Workflow %s: running step %s", self.name, step.name)
            try:
                result = step.effect(results)
                if step.precondition is not None:
                    step.precondition(result)
            except Exception as exc:
                return self._fail(step, exc, results, completed)
            results[step.name] = result
            completed.append(step.name)

        logger.info("Workflow %s completed: %s", self.name, " -> ".join(completed))
        return WorkflowSuccess(value=results[self._result_step], completed_steps=tuple(completed))

    def _fail(
        self,
        step: WorkflowStep,
        exc: Exception,
        results: StepResults,
        completed: list[str],
    ) -> WorkflowFailure:
        unreconciled = tuple(
            done.name
            for done in self._steps
            if done.name in completed
            and done.compensation is CompensationPolicy.MANUAL_INTERVENTION_REQUIRED
        )
        references = dict(self._references(results)) if unreconciled and self._references else {}
        failure = WorkflowFailure(
            workflow=self.name,
            step=step.name,
            error=classify(exc),
            cause=exc,
            completed_steps=tuple(completed),
            unreconciled_steps=unreconciled,
            references=references,
            partial_failure_message=self._partial_failure_message,
        )

        if failure.is_partial:
            logger.warning(
                "Workflow %s partially failed at step %s after %s; "
                "manual reconciliation required for %s",
                self.name,
                step.name,
                ", ".join(unreconciled),
                references,
            )
        else:
            logger.info(
                "Workflow %s stopped at step %s: %s",
                self.name,
                step.name,
                failure.error.kind.value,
            )
        return failure
