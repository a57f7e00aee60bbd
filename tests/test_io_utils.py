import os
import tempfile
import unittest

from automaton import Automaton, AutomatonFormatError, Transition
from io_utils import load_from_file, load_text, load_yaml
from pda_search import simulate

SAMPLES = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "samples")


class TestLoadYaml(unittest.TestCase):
    def test_single_machine(self):
        content = """
alphabet: [a, b]
stack_alphabet: [X]
start: 1
accept: [1]
transitions:
  - [[a, "", X, 2]]
  - [[b, X, ε, 1]]
"""
        automata = load_yaml(content, "pairs")
        self.assertEqual(list(automata), ["pairs"])
        aut = automata["pairs"]
        self.assertEqual(aut.transitions_from(2), (Transition("b", "X", "", 1),))
        self.assertTrue(simulate(aut, "abab").accepted)

    def test_named_machines(self):
        content = """
first:
  alphabet: [a]
  stack_alphabet: []
  start: 1
  accept: [1]
  transitions: [[]]
notes: just text
second:
  alphabet: [a]
  stack_alphabet: []
  start: 1
  accept: []
  transitions: [[[a, null, null, 1]]]
"""
        automata = load_yaml(content)
        self.assertEqual(sorted(automata), ["first", "second"])
        self.assertEqual(automata["second"].transitions_from(1), (Transition("a", "", "", 1),))

    def test_invalid_yaml(self):
        with self.assertRaises(AutomatonFormatError):
            load_yaml("alphabet: [a\n")

    def test_not_a_mapping(self):
        with self.assertRaises(AutomatonFormatError):
            load_yaml("- 1\n- 2\n")


class TestLoadText(unittest.TestCase):
    def test_unnamed_blocks(self):
        content = "start: 1\naccept: 1\n---\nstart: 1\n1 a eps 1 eps\nalphabet: a\n"
        automata = load_text(content, "machine")
        self.assertEqual(sorted(automata), ["machine", "machine1"])
        self.assertEqual(automata["machine"].state_count, 1)
        self.assertEqual(automata["machine1"].state_count, 1)

    def test_named_sections(self):
        content = "one:\nstart: 1\naccept:\n1 a eps 1 eps\n\ntwo:\nstart: 1\n"
        automata = load_text(content)
        self.assertEqual(sorted(automata), ["one", "two"])
        self.assertEqual(automata["one"].accept, frozenset())

    def test_errors_propagate(self):
        with self.assertRaises(AutomatonFormatError):
            load_text("start: one\n")

    def test_accepting_sink_without_states_line(self):
        automata = load_text("start: 1\naccept: 2\nalphabet: a\n1 a eps 2 eps\n")
        aut = automata["pda"]
        self.assertEqual(aut.state_count, 2)
        self.assertEqual(aut.transitions_from(2), ())
        self.assertTrue(simulate(aut, "a").accepted)
        self.assertFalse(simulate(aut, "aa").accepted)


class TestLoadFromFile(unittest.TestCase):
    def test_palindrome_sample(self):
        automata = load_from_file(os.path.join(SAMPLES, "palindrome.yaml"))
        aut = automata["palindrome"]
        aut.validate()
        self.assertTrue(simulate(aut, "0110").accepted)
        self.assertFalse(simulate(aut, "011").accepted)

    def test_balanced_sample(self):
        automata = load_from_file(os.path.join(SAMPLES, "balanced.txt"))
        self.assertEqual(sorted(automata), ["matched", "pairs"])
        self.assertTrue(simulate(automata["matched"], "aabb").accepted)
        self.assertFalse(simulate(automata["matched"], "aab").accepted)
        self.assertTrue(simulate(automata["pairs"], "ab").accepted)
        self.assertFalse(simulate(automata["pairs"], "aabb").accepted)

    def test_suffix_selects_format(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tiny.yml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("alphabet: []\nstack_alphabet: []\nstart: 1\naccept: [1]\ntransitions: [[]]\n")
            automata = load_from_file(path)
        self.assertIsInstance(automata["tiny"], Automaton)
        self.assertTrue(simulate(automata["tiny"], "").accepted)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_from_file(os.path.join(SAMPLES, "does_not_exist.txt"))


if __name__ == "__main__":
    unittest.main()
