"""
Breadth-first acceptance search for nondeterministic PDAs.

The frontier holds configurations; a visited set keyed by
(state, input position, stack) keeps identical configurations reached along
different paths from being expanded twice. Epsilon loops that only push can
still generate infinitely many distinct stacks, so configurations whose stack
exceeds `stack_height_bound` are dropped. That bound is never smaller than the
highest stack of a shortest accepting run, so no verdict changes.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing_extensions import *

from automaton import EPSILON, Automaton, MalformedModelError, tokenize
from configuration import ConfigKey, Configuration
from run_recorder import RunStep, record_run
from transition_index import TransitionIndex

logger = logging.getLogger(__name__)

# Machines that push several symbols on epsilon reach exponentially many
# stacks below the height bound.
DEFAULT_MAX_CONFIGURATIONS = 100_000


@dataclass(frozen=True)
class SearchLimits:
    """
    Bounds on a single simulation.

    max_configurations: give up with BudgetExhausted after this many
        distinct configurations have been discovered. None means no limit.
    max_stack_height: prune configurations with a higher stack. Only ever
        lowers the automatically computed bound, and a lower value may
        reject words the machine accepts.
    """

    max_configurations: Optional[int] = DEFAULT_MAX_CONFIGURATIONS
    max_stack_height: Optional[int] = None


# -------------------------------------------------------------------------
# Results
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class Accepted:
    run: List[RunStep]
    configuration: Configuration
    explored: int = 0

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    explored: int = 0

    @property
    def accepted(self) -> bool:
        return False


@dataclass(frozen=True)
class MalformedModel:
    reason: str

    @property
    def accepted(self) -> bool:
        return False


@dataclass(frozen=True)
class BudgetExhausted:
    limit: int
    explored: int = 0

    @property
    def accepted(self) -> bool:
        return False


SimulationResult = Union[Accepted, Rejected, MalformedModel, BudgetExhausted]


# -------------------------------------------------------------------------
# Search
# -------------------------------------------------------------------------


def stack_height_bound(automaton: Automaton, input_length: int) -> int:
    """
    Highest stack a shortest accepting run can reach on an input of this length.

    Each stack level of the highest configuration is described by the state
    and input position when its symbol was written, the symbol, and the state
    and position when it is popped again (or "never"). If two levels shared
    that description, the run between them could be cut out and the run would
    not be shortest. Counting the descriptions gives the bound.
    """
    pushed = {
        t.push
        for state in automaton.states
        for t in automaton.transitions_from(state)
        if t.push != EPSILON
    }
    points = automaton.state_count * (input_length + 1)
    return points * len(pushed) * (points + 1)


def simulate(
    automaton: Automaton,
    word: Union[str, Sequence[str]],
    limits: Optional[SearchLimits] = None,
) -> SimulationResult:
    """
    Decide whether `automaton` accepts `word` by final state.

    Returns Accepted with a shortest accepting run, Rejected once every
    reachable configuration has been explored, MalformedModel if the
    automaton fails validation, or BudgetExhausted if
    limits.max_configurations was reached before either verdict. Without
    explicit limits DEFAULT_MAX_CONFIGURATIONS applies.
    """
    limits = limits or SearchLimits()
    symbols = tokenize(word)

    try:
        index = TransitionIndex(automaton)
    except MalformedModelError as exc:
        logger.warning("Malformed PDA, not simulating: %s", exc)
        return MalformedModel(str(exc))

    max_height = stack_height_bound(automaton, len(symbols))
    if limits.max_stack_height is not None:
        max_height = min(max_height, limits.max_stack_height)

    start = Configuration.initial(automaton.start)
    queue: Deque[Configuration] = deque([start])
    visited: Set[ConfigKey] = {start.key}

    steps = 0
    pruned = 0

    if start.is_accepting(symbols, automaton.accept):
        return _accepted(word, start, steps, visited)

    while queue:
        config = queue.popleft()
        steps += 1

        head = symbols[config.position] if config.position < len(symbols) else None
        for t in index.applicable(config.state, head, config.top):
            successor = config.apply(t, symbols)
            if successor is None or successor.key in visited:
                continue
            if len(successor.stack) > max_height:
                pruned += 1
                continue

            # BFS discovers configurations in order of depth, so the first
            # accepting one still ends a shortest run.
            if successor.is_accepting(symbols, automaton.accept):
                visited.add(successor.key)
                return _accepted(word, successor, steps, visited)

            if (
                limits.max_configurations is not None
                and len(visited) >= limits.max_configurations
            ):
                logger.debug(
                    "Budget of %d configurations exhausted on %r",
                    limits.max_configurations,
                    word,
                )
                return BudgetExhausted(limits.max_configurations, explored=len(visited))

            visited.add(successor.key)
            queue.append(successor)

    if pruned:
        logger.debug("Pruned %d configurations above stack height %d", pruned, max_height)
    logger.info(
        "PDA rejected %r. steps=%d, configs=%d", word, steps, len(visited)
    )
    return Rejected(explored=len(visited))


def _accepted(word, config: Configuration, steps: int, visited: Set[ConfigKey]) -> Accepted:
    logger.info(
        "PDA accepted %r with a %d-transition run after %d steps (configs discovered: %d).",
        word,
        config.depth,
        steps,
        len(visited),
    )
    return Accepted(record_run(config), config, explored=len(visited))
