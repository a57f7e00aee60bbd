from typing_extensions import *

from automaton import Transition
from configuration import Configuration


class RunStep(NamedTuple):
    from_state: int
    transition: Transition
    to_state: int


def record_run(configuration: Configuration) -> List[RunStep]:
    """Transitions taken from the start configuration to `configuration`, in order."""
    steps = []
    node = configuration
    while node.parent is not None:
        steps.append(RunStep(node.parent.state, node.transition, node.state))
        node = node.parent
    steps.reverse()
    return steps


def trace(configuration: Configuration) -> List[Configuration]:
    return configuration.path()


def format_step(step: RunStep) -> str:
    return f"q{step.from_state} --{step.transition.label()}--> q{step.to_state}"


def format_configuration(configuration: Configuration, word: Sequence[str]) -> str:
    remaining = "".join(configuration.remaining(word)) or "ε"
    stack = " ".join(configuration.stack)
    return f"(q{configuration.state}, {remaining}, [{stack}])"
