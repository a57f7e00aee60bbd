import unittest

from automaton import Transition
from configuration import Configuration


class TestConfiguration(unittest.TestCase):
    def setUp(self):
        self.word = ("a", "b")
        self.start = Configuration.initial(1)

    def test_initial(self):
        self.assertEqual(self.start.key, (1, 0, ()))
        self.assertIsNone(self.start.parent)
        self.assertIsNone(self.start.top)
        self.assertEqual(self.start.remaining(self.word), ("a", "b"))
        self.assertEqual(self.start.path(), [self.start])

    def test_read_and_push(self):
        nxt = self.start.apply(Transition("a", "", "X", 2), self.word)
        self.assertEqual(nxt.key, (2, 1, ("X",)))
        self.assertIs(nxt.parent, self.start)
        self.assertEqual(nxt.depth, 1)
        self.assertEqual(nxt.remaining(self.word), ("b",))
        self.assertEqual(nxt.top, "X")

    def test_pop_then_push(self):
        config = Configuration(state=1, position=0, stack=("Z", "A"))
        nxt = config.apply(Transition("", "A", "B", 1), self.word)
        self.assertEqual(nxt.stack, ("Z", "B"))
        self.assertEqual(nxt.position, 0)
        self.assertEqual(config.stack, ("Z", "A"))

    def test_epsilon_pop_leaves_stack(self):
        config = Configuration(state=1, stack=("Z",))
        nxt = config.apply(Transition("", "", "", 3), self.word)
        self.assertEqual(nxt.key, (3, 0, ("Z",)))

    def test_pop_on_empty_stack_does_not_apply(self):
        self.assertIsNone(self.start.apply(Transition("", "X", "", 1), self.word))

    def test_pop_mismatch_does_not_apply(self):
        config = Configuration(state=1, stack=("Y",))
        self.assertIsNone(config.apply(Transition("", "X", "", 1), self.word))

    def test_input_mismatch_does_not_apply(self):
        self.assertIsNone(self.start.apply(Transition("b", "", "", 1), self.word))

    def test_read_past_end_does_not_apply(self):
        config = Configuration(state=1, position=2)
        self.assertIsNone(config.apply(Transition("a", "", "", 1), self.word))

    def test_siblings_do_not_interfere(self):
        base = Configuration(state=1, stack=("Z",))
        left = base.apply(Transition("", "", "A", 2), self.word)
        right = base.apply(Transition("", "Z", "", 3), self.word)
        self.assertEqual(left.stack, ("Z", "A"))
        self.assertEqual(right.stack, ())
        self.assertEqual(base.stack, ("Z",))

    def test_path_and_accepting(self):
        first = self.start.apply(Transition("a", "", "X", 2), self.word)
        second = first.apply(Transition("b", "X", "", 1), self.word)
        self.assertEqual([c.state for c in second.path()], [1, 2, 1])
        self.assertTrue(second.is_accepting(self.word, {1}))
        self.assertFalse(first.is_accepting(self.word, {2}))
        self.assertFalse(second.is_accepting(self.word, {2}))

    def test_equality_ignores_history(self):
        a = Configuration(state=1, position=1, stack=("X",), parent=self.start)
        b = Configuration(state=1, position=1, stack=("X",))
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()
