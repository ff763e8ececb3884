"""Step graph resolution and sequential execution.

A StepGraph is an explicit map from step name to its ordered prerequisite
list. StepRunner walks that map depth-first, runs each step once, and stops
at the first failure.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from loguru import logger

from prefect_deploy.deployment.errors import StepGraphError

C = TypeVar("C")


@dataclass(frozen=True)
class Step(Generic[C]):
    """A named unit of work with ordered prerequisites.

    Attributes:
        name: Unique step name (also the CLI target name)
        action: Callable invoked with the run context; raising aborts the run
        requires: Prerequisite step names, executed in this order
        description: One-line summary shown by the help target
    """

    name: str
    action: Callable[[C], None]
    requires: tuple[str, ...] = ()
    description: str = ""


class StepGraph(Generic[C]):
    """Registry of steps forming a directed acyclic graph."""

    def __init__(self) -> None:
        self._steps: dict[str, Step[C]] = {}

    def add(self, step: Step[C]) -> Step[C]:
        """Register a step.

        Raises:
            StepGraphError: If a step with the same name already exists
        """
        if step.name in self._steps:
            raise StepGraphError(f"Duplicate step '{step.name}'")
        self._steps[step.name] = step
        return step

    def get(self, name: str) -> Step[C]:
        try:
            return self._steps[name]
        except KeyError:
            raise StepGraphError(
                f"Unknown target '{name}'",
                details="Available targets: " + ", ".join(self._steps),
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._steps

    def __iter__(self) -> Iterator[Step[C]]:
        return iter(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def names(self) -> list[str]:
        return list(self._steps)

    def validate(self) -> None:
        """Check that every prerequisite exists and that there are no cycles.

        Raises:
            StepGraphError: On an unknown prerequisite or a cycle
        """
        for step in self._steps.values():
            for dep in step.requires:
                if dep not in self._steps:
                    raise StepGraphError(
                        f"Step '{step.name}' requires unknown step '{dep}'"
                    )
        for name in self._steps:
            self.execution_order(name)

    def execution_order(self, target: str) -> list[str]:
        """Compute the order in which `target` and its prerequisites run.

        Prerequisites are visited depth-first in declaration order, so every
        step comes after all of its prerequisites and appears exactly once.

        Raises:
            StepGraphError: If the target is unknown or a cycle is reached
        """
        order: list[str] = []
        done: set[str] = set()
        path: list[str] = []

        def visit(name: str) -> None:
            if name in done:
                return
            if name in path:
                cycle = " -> ".join([*path[path.index(name) :], name])
                raise StepGraphError(f"Dependency cycle detected: {cycle}")
            step = self.get(name)
            path.append(name)
            for dep in step.requires:
                visit(dep)
            path.pop()
            done.add(name)
            order.append(name)

        visit(target)
        return order


@dataclass
class StepRunner(Generic[C]):
    """Executes targets of a StepGraph against a fixed context.

    Completed steps are remembered for the lifetime of the runner, so
    targets that share prerequisites run those prerequisites only once.

    Attributes:
        graph: The step graph to execute
        context: Object handed to every step action
        on_step: Optional callback invoked with each step before it runs
    """

    graph: StepGraph[C]
    context: C
    on_step: Callable[[Step[C]], None] | None = None
    completed: list[str] = field(default_factory=list)

    def run(self, target: str) -> list[str]:
        """Run `target` after its transitive prerequisites.

        Any exception raised by a step action stops the run and propagates
        unchanged. Steps that already ran are not rolled back.

        Returns:
            Names of the steps executed by this call, in order
        """
        executed: list[str] = []
        for name in self.graph.execution_order(target):
            if name in self.completed:
                logger.debug(f"Skipping already completed step '{name}'")
                continue
            step = self.graph.get(name)
            if self.on_step:
                self.on_step(step)
            logger.debug(f"Running step '{name}'")
            step.action(self.context)
            self.completed.append(name)
            executed.append(name)
        return executed
