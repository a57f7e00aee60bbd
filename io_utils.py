import logging
import os
import re
from typing_extensions import *

import yaml

from automaton import Automaton, AutomatonFormatError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _base_name(filename: str) -> str:
    return os.path.basename(filename).rsplit(".", 1)[0]


def is_machine_mapping(data: Any) -> bool:
    return isinstance(data, dict) and "transitions" in data


def load_yaml(content: str, base_name: str = "pda") -> Dict[str, Automaton]:
    """
    Load PDAs from YAML.

    The document is either one machine (alphabet, stack_alphabet, start,
    accept, transitions), named `base_name`, or a mapping of names to machines.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise AutomatonFormatError(f"Unable to parse yaml: {e}") from e

    if is_machine_mapping(data):
        return {base_name: Automaton.from_dict(data)}

    if not isinstance(data, dict):
        raise AutomatonFormatError("YAML document must be a PDA or a mapping of named PDAs")

    automata: Dict[str, Automaton] = {}
    for name, definition in data.items():
        if not is_machine_mapping(definition):
            logger.warning("Skipping '%s': not a PDA definition", name)
            continue
        automata[str(name)] = Automaton.from_dict(definition)
    return automata


def load_text(content: str, base_name: str = "pda") -> Dict[str, Automaton]:
    """
    Load PDAs from the line-oriented text format.

    `NAME:` lines on their own split the file into named sections; without
    them every `---` separated block becomes base_name, base_name1, ...
    """
    automata: Dict[str, Automaton] = {}

    name_pattern = re.compile(
        r"^(?!(?:alphabet|stack_alphabet|stack|states|start|accept):)([A-Za-z]\w*):\s*$",
        re.MULTILINE,
    )

    if name_pattern.search(content):
        sections = name_pattern.split(content)

        for i in range(1, len(sections), 2):
            if i + 1 >= len(sections):
                continue

            name = sections[i].strip()
            definition = sections[i + 1].strip()

            if not definition:
                logger.warning("Skipping '%s': empty definition", name)
                continue

            loaded = Automaton.from_string(definition)
            if loaded:
                automata[name] = loaded[0]
    else:
        for idx, aut in enumerate(Automaton.from_string(content)):
            key = f"{base_name}{idx if idx > 0 else ''}"
            automata[key] = aut

    return automata


def load_from_file(filename: str) -> Dict[str, Automaton]:
    with open(filename, "r", encoding="utf-8") as f:
        content = f.read()

    base_name = _base_name(filename)
    if filename.lower().endswith(YAML_SUFFIXES):
        return load_yaml(content, base_name)
    return load_text(content, base_name)
