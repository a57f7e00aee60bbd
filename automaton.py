from collections import defaultdict
from dataclasses import dataclass, field
from typing_extensions import *

from graphviz import Digraph

EPSILON = ""
EPSILON_ALIASES = {"", "eps", "epsilon", "ε"}


class AutomatonFormatError(ValueError):
    """Raised when a machine description cannot be parsed."""


class MalformedModelError(ValueError):
    """Raised when a parsed machine references states or symbols it does not define."""


class Transition(NamedTuple):
    """
    A single PDA move: read `input`, pop `pop`, push `push`, go to `goto`.

    Any of the three symbols may be EPSILON (the empty string).
    """

    input: str
    pop: str
    push: str
    goto: int

    def label(self) -> str:
        return f"{_symbol_label(self.input)}, {_symbol_label(self.pop)} → {_symbol_label(self.push)}"


def _symbol_label(symbol: str) -> str:
    return "ε" if symbol == EPSILON else str(symbol)


def normalize_symbol(symbol: Any) -> str:
    """Map None and the usual epsilon spellings to EPSILON."""
    if symbol is None:
        return EPSILON
    s = str(symbol).strip()
    if s.lower() in EPSILON_ALIASES:
        return EPSILON
    return s


def tokenize(word: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    """A str is read one character per symbol; other sequences are taken as symbols."""
    if isinstance(word, str):
        return tuple(word)
    return tuple(str(symbol) for symbol in word)


@dataclass(frozen=True)
class Automaton:
    """
    Nondeterministic pushdown automaton.

    States are the integers 1..N, where N is the number of transition groups:
    transitions[0] holds the moves of state 1, transitions[1] those of state 2,
    and so on. The stack starts empty and a word is accepted by final state.
    """

    alphabet: FrozenSet[str] = field(default_factory=frozenset)
    stack_alphabet: FrozenSet[str] = field(default_factory=frozenset)
    start: int = 1
    accept: FrozenSet[int] = field(default_factory=frozenset)
    transitions: Tuple[Tuple[Transition, ...], ...] = ()

    def __post_init__(self):
        """Freeze the containers so a loaded model cannot change underneath a search."""
        object.__setattr__(self, "alphabet", frozenset(self.alphabet))
        object.__setattr__(self, "stack_alphabet", frozenset(self.stack_alphabet))
        object.__setattr__(self, "accept", frozenset(self.accept))
        object.__setattr__(
            self,
            "transitions",
            tuple(
                tuple(Transition(*t) for t in group) for group in self.transitions
            ),
        )

    # -------------------------------------------------------------------------
    # Construction / loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Automaton":
        """Build an automaton from the mapping produced by the YAML loader."""
        if not isinstance(data, Mapping):
            raise AutomatonFormatError("PDA definition must be a mapping")

        missing = [
            key
            for key in ("alphabet", "stack_alphabet", "start", "accept", "transitions")
            if key not in data
        ]
        if missing:
            raise AutomatonFormatError(f"Missing keys: {', '.join(missing)}")

        groups = []
        for state, group in enumerate(data["transitions"] or [], start=1):
            transitions = []
            for raw in group or []:
                if not isinstance(raw, (list, tuple)) or len(raw) != 4:
                    raise AutomatonFormatError(
                        f"State {state}: transition {raw!r} must be [input, pop, push, goto]"
                    )
                inp, pop, push, goto = raw
                transitions.append(
                    Transition(
                        normalize_symbol(inp),
                        normalize_symbol(pop),
                        normalize_symbol(push),
                        _parse_state(goto, f"state {state}"),
                    )
                )
            groups.append(tuple(transitions))

        return cls(
            alphabet=frozenset(str(s) for s in data["alphabet"] or []),
            stack_alphabet=frozenset(str(s) for s in data["stack_alphabet"] or []),
            start=_parse_state(data["start"], "start"),
            accept=frozenset(_parse_state(s, "accept") for s in data["accept"] or []),
            transitions=tuple(groups),
        )

    @staticmethod
    def from_string(content: str) -> List["Automaton"]:
        automata = []
        for block in content.split("---"):
            block = block.strip()
            if not block:
                continue
            automata.append(Automaton._parse_block(block))
        return automata

    @staticmethod
    def _parse_block(block: str) -> "Automaton":
        alphabet = set()
        stack_alphabet = set()
        start = None
        accept = set()
        state_count = None
        moves: Dict[int, List[Transition]] = defaultdict(list)

        for line_no, line in enumerate(block.split("\n"), start=1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            elif line.startswith("alphabet:"):
                alphabet.update(line[9:].strip().split())

            elif line.startswith("stack_alphabet:") or line.startswith("stack:"):
                prefix_len = 15 if line.startswith("stack_alphabet:") else 6
                stack_alphabet.update(line[prefix_len:].strip().split())

            elif line.startswith("states:"):
                state_count = _parse_state(line[7:].strip(), f"line {line_no}")

            elif line.startswith("start:"):
                start = _parse_state(line[6:].strip(), f"line {line_no}")

            elif line.startswith("accept:"):
                accept.update(
                    _parse_state(s, f"line {line_no}") for s in line[7:].strip().split()
                )

            # Format: 1, a, X -> 2, Y
            elif "->" in line:
                left, _, right = line.partition("->")
                left_parts = [p.strip() for p in left.split(",")]
                right_parts = [p.strip() for p in right.split(",")]
                if len(left_parts) != 3 or len(right_parts) != 2:
                    raise AutomatonFormatError(
                        f"Line {line_no}: expected 'src, input, pop -> goto, push', got {line!r}"
                    )
                src, input_sym, pop_sym = left_parts
                tgt, push_sym = right_parts
                moves[_parse_state(src, f"line {line_no}")].append(
                    Transition(
                        normalize_symbol(input_sym),
                        normalize_symbol(pop_sym),
                        normalize_symbol(push_sym),
                        _parse_state(tgt, f"line {line_no}"),
                    )
                )

            # Format: 1 a X 2 Y
            elif len(line.split()) == 5:
                src, input_sym, pop_sym, tgt, push_sym = line.split()
                moves[_parse_state(src, f"line {line_no}")].append(
                    Transition(
                        normalize_symbol(input_sym),
                        normalize_symbol(pop_sym),
                        normalize_symbol(push_sym),
                        _parse_state(tgt, f"line {line_no}"),
                    )
                )

            else:
                raise AutomatonFormatError(f"Line {line_no}: cannot parse {line!r}")

        if start is None:
            raise AutomatonFormatError("Missing 'start:' line")

        if state_count is None:
            referenced = set(moves) | accept | {start}
            referenced.update(t.goto for group in moves.values() for t in group)
            state_count = max(referenced)
        for src in moves:
            if not 1 <= src <= state_count:
                raise AutomatonFormatError(
                    f"Transition source {src} outside declared states 1..{state_count}"
                )

        return Automaton(
            alphabet=frozenset(alphabet),
            stack_alphabet=frozenset(stack_alphabet),
            start=start,
            accept=frozenset(accept),
            transitions=tuple(
                tuple(moves.get(state, ())) for state in range(1, state_count + 1)
            ),
        )

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    @property
    def state_count(self) -> int:
        return len(self.transitions)

    @property
    def states(self) -> range:
        return range(1, self.state_count + 1)

    def transitions_from(self, state: int) -> Tuple[Transition, ...]:
        return self.transitions[state - 1]

    def validate(self) -> None:
        """Check every state reference and symbol; raise MalformedModelError on the first problem."""
        n = self.state_count
        if n == 0:
            raise MalformedModelError("Automaton has no states")

        def out_of_range(s):
            if not isinstance(s, int) or isinstance(s, bool):
                return True
            return not 1 <= s <= n

        if out_of_range(self.start):
            raise MalformedModelError(f"Unknown start state `{self.start}`")

        for final_state in sorted(self.accept, key=str):
            if out_of_range(final_state):
                raise MalformedModelError(f"Unknown final state `{final_state}`")

        for state in self.states:
            for t in self.transitions_from(state):
                if t.input != EPSILON and t.input not in self.alphabet:
                    raise MalformedModelError(
                        f"State {state} cannot transition on unknown input symbol `{t.input}`"
                    )
                if t.pop != EPSILON and t.pop not in self.stack_alphabet:
                    raise MalformedModelError(
                        f"State {state} cannot pop unknown stack symbol `{t.pop}`"
                    )
                if t.push != EPSILON and t.push not in self.stack_alphabet:
                    raise MalformedModelError(
                        f"State {state} cannot push unknown stack symbol `{t.push}`"
                    )
                if out_of_range(t.goto):
                    raise MalformedModelError(
                        f"State {state} cannot transition to unknown state `{t.goto}`"
                    )

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def simulate(self, word: Union[str, Sequence[str]], limits=None):
        """Run the breadth-first search; see pda_search.simulate."""
        from pda_search import simulate

        return simulate(self, word, limits)

    def accepts(self, word: Union[str, Sequence[str]], limits=None) -> bool:
        return self.simulate(word, limits).accepted

    # -------------------------------------------------------------------------
    # Visualization
    # -------------------------------------------------------------------------

    @staticmethod
    def _state_id(state: int) -> str:
        return f"q{state}"

    def to_digraph(self, run: Optional[Sequence[Any]] = None) -> Digraph:
        """
        Build a Graphviz digraph of this automaton.

        `run` is a list of RunStep from an accepting simulation; the edges it
        uses are drawn in red and labelled with their step numbers.
        """
        dot = Digraph(
            name="PDA",
            format="png",
            graph_attr={
                "rankdir": "LR",
                "splines": "true",
                "nodesep": "0.8",
                "ranksep": "1.2",
                "label": "PDA",
                "labelloc": "t",
                "fontsize": "14",
                "fontname": "Arial",
                "bgcolor": "white",
                "pad": "0.5",
                "dpi": "300",
            },
            node_attr={
                "shape": "circle",
                "fontsize": "14",
                "fontname": "Arial",
                "width": "0.6",
                "height": "0.6",
                "fixedsize": "true",
                "style": "filled",
                "fillcolor": "lightblue",
                "color": "black",
                "penwidth": "2",
            },
            edge_attr={
                "fontsize": "12",
                "fontname": "Arial",
                "arrowsize": "0.8",
                "penwidth": "1.5",
                "color": "black",
            },
        )

        # Start arrow is purely structural and carries no label
        dot.node("__start__", shape="point", width="0.01", style="invis")

        for state in self.states:
            node_id = self._state_id(state)
            if state in self.accept:
                dot.node(
                    node_id,
                    label=node_id,
                    shape="doublecircle",
                    fillcolor="lightgreen",
                    peripheries="2",
                )
            else:
                dot.node(node_id, label=node_id)

        if 1 <= self.start <= self.state_count:
            dot.edge("__start__", self._state_id(self.start), penwidth="2")

        used: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        for step_no, step in enumerate(run or [], start=1):
            used[(step.from_state, step.to_state)].append(step_no)

        labels = defaultdict(list)
        for src in self.states:
            for t in self.transitions_from(src):
                labels[(src, t.goto)].append(t.label())

        for (src, tgt), edge_labels in labels.items():
            src_id = self._state_id(src)
            tgt_id = self._state_id(tgt)
            attrs = {"label": "\n".join(edge_labels)}
            if (src, tgt) in used:
                steps = ",".join(str(n) for n in used[(src, tgt)])
                attrs.update(color="red", fontcolor="red", penwidth="2.5")
                attrs["label"] += f"\n[{steps}]"
            if src == tgt:
                attrs.update(headport="n", tailport="n")
            dot.edge(src_id, tgt_id, **attrs)

        return dot

    def to_graphviz(
        self,
        filename: str = "automaton",
        view: bool = True,
        run: Optional[Sequence[Any]] = None,
    ) -> Digraph:
        """Render this automaton (and optionally an accepting run) to `filename`.png."""
        dot = self.to_digraph(run)
        dot.render(filename, view=view, cleanup=True)
        return dot


def _parse_state(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise AutomatonFormatError(f"Invalid state number {value!r} ({where})")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise AutomatonFormatError(f"Invalid state number {value!r} ({where})") from None
