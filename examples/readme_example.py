from dataclasses import dataclass, field
from enum import Enum

from graphclone import FrozenList, copy, deep_freeze


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Task:
    description: str
    status: TaskStatus
    owner: "Agent | None" = None


@dataclass
class Agent:
    """An agent holding tasks that point back at it.

    The back-references make the graph cyclic, which plain recursion
    would follow forever.
    """

    name: str
    tasks: list[Task] = field(default_factory=list)

    def assign(self, description: str) -> Task:
        task = Task(description, TaskStatus.PENDING, owner=self)
        self.tasks.append(task)
        return task


def progress(agent: Agent) -> Agent:
    """Return a progressed copy, leaving the input untouched."""
    draft = copy(agent)
    for task in draft.tasks:
        if task.status == TaskStatus.PENDING:
            task.status = TaskStatus.IN_PROGRESS
        elif task.status == TaskStatus.IN_PROGRESS:
            task.status = TaskStatus.COMPLETED
    return draft


def main() -> None:
    agent = Agent("planner")
    for description in ("Collect data", "Analyze data", "Generate report"):
        agent.assign(description)

    snapshot = deep_freeze(agent)
    print(f"Snapshot tasks frozen: {isinstance(snapshot.tasks, FrozenList)}")

    current = agent
    for tick in range(3):
        current = progress(current)
        statuses = ", ".join(task.status.value for task in current.tasks)
        print(f"Tick {tick}: {statuses}")

    # The original agent and the snapshot never changed.
    print(f"Original: {', '.join(task.status.value for task in agent.tasks)}")
    print(f"Snapshot: {', '.join(task.status.value for task in snapshot.tasks)}")


if __name__ == "__main__":
    main()
