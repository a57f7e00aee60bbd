import logging
import sys
from typing_extensions import *

from automaton import Automaton, tokenize
from io_utils import load_from_file
from pda_search import (
    DEFAULT_MAX_CONFIGURATIONS,
    Accepted,
    BudgetExhausted,
    MalformedModel,
    SearchLimits,
    simulate,
)
from run_recorder import format_configuration, format_step, trace

HELP = """
Commands:
  LOADING:
    load <file>                  - Load PDAs from a .txt or .yaml file
    list                         - List all loaded PDAs

  PDA OPERATIONS:
    show <name>                  - Show PDA info
    test <name> <word>           - Test if word is accepted
    run <name> <word>            - Show the accepting run and its configurations
    graph <name> [word]          - Visualize PDA (highlighting the run for word)

  SETTINGS:
    budget <n|default>           - Limit explored configurations per word
    debug <on|off>               - Toggle search logging

  GENERAL:
    delete <name>                - Delete PDA
    clear                        - Clear all
    exit                         - Exit

  Use ε or "" for the empty word. Separate symbols with spaces
  to use multi-character symbols.
"""


def parse_word(parts: List[str]) -> Union[str, List[str]]:
    """
    One argument is read character by character; several arguments are
    taken as separate symbols, so `test p if fi` reads the symbols `if`, `fi`.
    """
    symbols = parts[2:]
    if len(symbols) > 1:
        return symbols
    word = symbols[0] if symbols else ""
    if word in ("ε", '""', "''"):
        return ""
    return word


def describe(result) -> str:
    if isinstance(result, Accepted):
        return "ACCEPTED"
    if isinstance(result, MalformedModel):
        return f"MALFORMED: {result.reason}"
    if isinstance(result, BudgetExhausted):
        return f"GAVE UP after {result.explored} configurations (budget {result.limit})"
    return "REJECTED"


def load_into(filename: str, automata: Dict[str, Automaton]) -> None:
    loaded = load_from_file(filename)
    automata.update(loaded)
    if loaded:
        print(f"Loaded {len(loaded)} PDAs: {', '.join(loaded.keys())}")
    else:
        print("No items loaded")


def main(argv: Optional[List[str]] = None) -> None:
    """Simple interactive terminal for PDA simulation."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    automata: Dict[str, Automaton] = {}
    limits = SearchLimits()

    print("PDA Simulator Terminal - Type 'help' for commands\n")

    for filename in sys.argv[1:] if argv is None else argv:
        try:
            load_into(filename, automata)
        except Exception as e:
            print(f"Error: {e}")

    while True:
        try:
            command = input("> ").strip()
            if not command:
                continue

            parts = command.split()
            cmd = parts[0].lower()

            # Exit
            if cmd in ["exit", "quit"]:
                break

            # Help
            elif cmd == "help":
                print(HELP)

            # Load
            elif cmd == "load":
                if len(parts) < 2:
                    print("Usage: load <filename>")
                    continue
                try:
                    load_into(parts[1], automata)
                except Exception as e:
                    print(f"Error: {e}")

            # List
            elif cmd == "list":
                if automata:
                    print("PDAs:")
                    for name, aut in sorted(automata.items()):
                        print(
                            f"  {name}: {aut.state_count} states, "
                            f"{sum(len(g) for g in aut.transitions)} transitions"
                        )
                else:
                    print("Nothing loaded")

            # Show PDA info
            elif cmd == "show":
                if len(parts) < 2:
                    print("Usage: show <name>")
                elif parts[1] not in automata:
                    print(f"PDA not found: {parts[1]}")
                else:
                    aut = automata[parts[1]]
                    print(f"\n{parts[1]}:")
                    print(f"  Alphabet: {{{', '.join(sorted(aut.alphabet))}}}")
                    print(f"  Stack alphabet: {{{', '.join(sorted(aut.stack_alphabet))}}}")
                    print(f"  States: {aut.state_count}")
                    print(f"  Start: q{aut.start}")
                    print(f"  Accepting: {{{', '.join(f'q{s}' for s in sorted(aut.accept))}}}")
                    print("  Transitions:")
                    for state in aut.states:
                        for t in aut.transitions_from(state):
                            print(f"    q{state} --{t.label()}--> q{t.goto}")
                    print()

            # Test word
            elif cmd == "test":
                if len(parts) < 2:
                    print("Usage: test <name> <word>")
                elif parts[1] not in automata:
                    print(f"PDA not found: {parts[1]}")
                else:
                    result = simulate(automata[parts[1]], parse_word(parts), limits)
                    print(describe(result))

            # Show the accepting run
            elif cmd == "run":
                if len(parts) < 2:
                    print("Usage: run <name> <word>")
                elif parts[1] not in automata:
                    print(f"PDA not found: {parts[1]}")
                else:
                    word = parse_word(parts)
                    result = simulate(automata[parts[1]], word, limits)
                    print(describe(result))
                    if isinstance(result, Accepted):
                        print("Run:")
                        for n, step in enumerate(result.run, start=1):
                            print(f"  {n}. {format_step(step)}")
                        print("Configurations:")
                        for config in trace(result.configuration):
                            print(f"  {format_configuration(config, tokenize(word))}")

            # Graph PDA
            elif cmd == "graph":
                if len(parts) < 2:
                    print("Usage: graph <name> [word]")
                elif parts[1] not in automata:
                    print(f"PDA not found: {parts[1]}")
                else:
                    try:
                        aut = automata[parts[1]]
                        run = None
                        if len(parts) > 2:
                            result = simulate(aut, parse_word(parts), limits)
                            print(describe(result))
                            if isinstance(result, Accepted):
                                run = result.run
                        aut.to_graphviz(filename=parts[1], view=True, run=run)
                        print(f"Created: {parts[1]}.png")
                    except Exception as e:
                        print(f"Error: {e}")

            # Configuration budget
            elif cmd == "budget":
                if len(parts) < 2:
                    print(f"Budget: {limits.max_configurations}")
                elif parts[1].lower() in ("off", "default"):
                    limits = SearchLimits()
                    print(f"Budget: {DEFAULT_MAX_CONFIGURATIONS} (default)")
                elif parts[1].isdigit() and int(parts[1]) > 0:
                    limits = SearchLimits(max_configurations=int(parts[1]))
                    print(f"Budget: {limits.max_configurations}")
                else:
                    print("Usage: budget <n|default>")

            # Logging
            elif cmd == "debug":
                if len(parts) < 2 or parts[1].lower() not in ("on", "off"):
                    print("Usage: debug <on|off>")
                else:
                    on = parts[1].lower() == "on"
                    logging.getLogger().setLevel(logging.DEBUG if on else logging.WARNING)
                    print(f"Debug: {'on' if on else 'off'}")

            # Delete PDA
            elif cmd == "delete":
                if len(parts) < 2:
                    print("Usage: delete <name>")
                elif parts[1] in automata:
                    del automata[parts[1]]
                    print(f"Deleted: {parts[1]}")
                else:
                    print(f"Not found: {parts[1]}")

            # Clear all
            elif cmd == "clear":
                automata.clear()
                print("Cleared all")

            else:
                print(f"Unknown command: {cmd}")

        except KeyboardInterrupt:
            print("\nUse 'exit' to quit")
        except EOFError:
            break
        except Exception as e:
            print(f"Error: {e}")

    print("Goodbye!")


if __name__ == "__main__":
    main()
