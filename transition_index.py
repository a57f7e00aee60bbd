from collections import defaultdict
from typing_extensions import *

from automaton import EPSILON, Automaton, Transition

# Transitions are stored with their position inside their state's list so
# lookups can hand them back in declaration order.
Entry = Tuple[int, Transition]


class TransitionIndex:
    """
    Lookup table from (state, input, pop) to transitions, built once per automaton.

    Building validates the automaton, so an index only ever exists for a
    well-formed model.
    """

    def __init__(self, automaton: Automaton):
        automaton.validate()
        self.automaton = automaton
        table: Dict[Tuple[int, str, str], List[Entry]] = defaultdict(list)
        for state in automaton.states:
            for position, t in enumerate(automaton.transitions_from(state)):
                table[(state, t.input, t.pop)].append((position, t))
        self._table = dict(table)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._table.values())

    def applicable(
        self, state: int, head: Optional[str], top: Optional[str]
    ) -> List[Transition]:
        """
        Transitions of `state` whose input matches `head` or is epsilon and
        whose pop matches `top` or is epsilon.

        `head` is None at the end of the input and `top` is None on an empty
        stack; both then only match epsilon.
        """
        inputs = [EPSILON] if head in (None, EPSILON) else [EPSILON, head]
        pops = [EPSILON] if top in (None, EPSILON) else [EPSILON, top]

        found: List[Entry] = []
        for inp in inputs:
            for pop in pops:
                found.extend(self._table.get((state, inp, pop), ()))
        found.sort(key=lambda entry: entry[0])
        return [t for _, t in found]
