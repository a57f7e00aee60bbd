from dataclasses import dataclass, field
from typing_extensions import *

from automaton import EPSILON, Transition

# (state, input position, stack contents)
ConfigKey = Tuple[int, int, Tuple[str, ...]]


@dataclass(frozen=True)
class Configuration:
    """
    One point of a PDA computation.

    `position` is an offset into the tokenized input word, so the remaining
    input is word[position:]. `stack` is a tuple with the top as the last
    element. `parent` and `transition` link back to the configuration this one
    was reached from; siblings share that history instead of copying it.
    """

    state: int
    position: int = 0
    stack: Tuple[str, ...] = ()
    parent: Optional["Configuration"] = field(default=None, compare=False, repr=False)
    transition: Optional[Transition] = None
    depth: int = field(default=0, compare=False)

    @classmethod
    def initial(cls, start: int) -> "Configuration":
        return cls(state=start)

    @property
    def key(self) -> ConfigKey:
        return (self.state, self.position, self.stack)

    @property
    def top(self) -> Optional[str]:
        return self.stack[-1] if self.stack else None

    def remaining(self, word: Sequence[str]) -> Sequence[str]:
        return word[self.position:]

    def is_accepting(self, word: Sequence[str], accept: AbstractSet[int]) -> bool:
        return self.position == len(word) and self.state in accept

    def apply(self, transition: Transition, word: Sequence[str]) -> Optional["Configuration"]:
        """
        Return the successor reached by `transition`, or None if it does not apply.

        The stack is popped before it is pushed; this configuration is left untouched.
        """
        position = self.position
        if transition.input != EPSILON:
            if position >= len(word) or word[position] != transition.input:
                return None
            position += 1

        stack = self.stack
        if transition.pop != EPSILON:
            if not stack or stack[-1] != transition.pop:
                return None
            stack = stack[:-1]

        if transition.push != EPSILON:
            stack = stack + (transition.push,)

        return Configuration(
            state=transition.goto,
            position=position,
            stack=stack,
            parent=self,
            transition=transition,
            depth=self.depth + 1,
        )

    def path(self) -> List["Configuration"]:
        """Configurations from the start configuration up to and including this one."""
        chain = []
        node: Optional[Configuration] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain
