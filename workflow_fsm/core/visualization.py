"""Graphviz DOT rendering of a workflow graph."""

from typing import Iterable

from workflow_fsm.core.models import State, Transition


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def generate_graph(states: Iterable[State], transitions: Iterable[Transition]) -> str:
    """
    Render states and transitions as a DOT digraph.

    The active state is drawn bold; edges are labelled with their guard rule.
    """
    lines = ["digraph Workflow {"]

    for state in states:
        style = ", style=bold" if state.is_active else ""
        lines.append(f"  {_quote(state.name)} [shape=ellipse{style}];")

    for transition in transitions:
        label = f" [label={_quote(transition.condition)}]" if transition.condition else ""
        lines.append(f"  {_quote(transition.from_state)} -> {_quote(transition.to_state)}{label};")

    lines.append("}")
    return "\n".join(lines)
