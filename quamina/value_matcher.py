"""Byte-driven automaton matching a single field's values."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .shell_style import make_shell_style_automaton
from .small_table import (
    VALUE_TERMINATOR,
    DfaStep,
    NextField,
    SmallTable,
    make_small_dfa_table,
    merge_dfas,
    nfa_to_dfa,
)


class ValueType(Enum):
    """The kinds of value a pattern can ask a field to match."""

    STRING = "string"
    NUMBER = "number"
    LITERAL = "literal"
    SHELL_STYLE = "shellstyle"
    PREFIX = "prefix"


_EXACT_TYPES = frozenset({ValueType.STRING, ValueType.NUMBER, ValueType.LITERAL})


@dataclass(frozen=True)
class TypedVal:
    """A pattern value and its kind; string values keep their quotes."""

    vtype: ValueType
    val: str


@dataclass(frozen=True)
class _State:
    start_dfa: SmallTable[DfaStep] | None = None
    singleton_match: bytes | None = None
    singleton_transition: NextField | None = None


class ValueMatcher:
    """Matches a field's value bytes against every value added for that field.

    While only a single exact value has been added it is kept as a plain
    byte string; from the second value on, a merged DFA is used.  Each update
    replaces the whole state at once, so readers always see a consistent one.
    """

    def __init__(self) -> None:
        self._state = _State()

    def transition_on(self, val: bytes) -> list[NextField]:
        """Return the field states reached by matching ``val``."""
        state = self._state
        if state.singleton_match is not None:
            if state.singleton_match == val:
                return [state.singleton_transition]
            return []
        if state.start_dfa is not None:
            return transition_dfa(state.start_dfa, val)
        return []

    def add_transition(self, val: TypedVal) -> NextField:
        """Add ``val`` and return the field state a match on it leads to.

        Raises ValueError for an unknown value type, leaving the matcher unchanged.
        """
        state = self._state
        data = val.val.encode("utf-8")

        if state.start_dfa is not None:
            new_dfa, next_field = _automaton_for(val)
            self._state = replace(state, start_dfa=merge_dfas(state.start_dfa, new_dfa))
            return next_field

        if state.singleton_match is None:
            if val.vtype in _EXACT_TYPES:
                next_field = NextField()
                self._state = replace(
                    state, singleton_match=data, singleton_transition=next_field
                )
                return next_field
            new_dfa, next_field = _automaton_for(val)
            self._state = replace(state, start_dfa=new_dfa)
            return next_field

        if val.vtype in _EXACT_TYPES and data == state.singleton_match:
            return state.singleton_transition

        singleton_dfa, _ = make_string_automaton(
            state.singleton_match, state.singleton_transition
        )
        new_dfa, next_field = _automaton_for(val)
        self._state = _State(start_dfa=merge_dfas(singleton_dfa, new_dfa))
        return next_field


def _automaton_for(val: TypedVal) -> tuple[SmallTable[DfaStep], NextField]:
    data = val.val.encode("utf-8")
    if val.vtype in _EXACT_TYPES:
        return make_string_automaton(data)
    if val.vtype is ValueType.SHELL_STYLE:
        nfa, next_field = make_shell_style_automaton(data)
        return nfa_to_dfa(nfa), next_field
    if val.vtype is ValueType.PREFIX:
        return make_prefix_automaton(data)
    raise ValueError(f"unknown value type: {val.vtype!r}")


def transition_dfa(table: SmallTable[DfaStep], val: bytes) -> list[NextField]:
    """Run ``val`` through a DFA, collecting every field transition reached."""
    transitions: list[NextField] = []
    for utf8_byte in val:
        step = table.step(utf8_byte)
        if step is None:
            return transitions
        transitions.extend(step.field_transitions)
        table = step.table

    last_step = table.step(VALUE_TERMINATOR)
    if last_step is not None:
        transitions.extend(last_step.field_transitions)
    return transitions


def _chain(
    data: bytes, next_field: NextField | None
) -> tuple[SmallTable[DfaStep], NextField]:
    if next_field is None:
        next_field = NextField()
    step = DfaStep(SmallTable(), [next_field])
    table: SmallTable[DfaStep] = step.table
    for utf8_byte in reversed(data):
        table = make_small_dfa_table(None, [utf8_byte], [step])
        step = DfaStep(table)
    return table, next_field


def make_prefix_automaton(
    val: bytes, next_field: NextField | None = None
) -> tuple[SmallTable[DfaStep], NextField]:
    """Build a DFA matching any value that starts with the quoted ``val``.

    The closing quote of ``val`` is not part of the prefix.
    """
    if len(val) < 2:
        raise ValueError("prefix value must be a quoted string")
    return _chain(val[:-1], next_field)


def make_string_automaton(
    val: bytes, next_field: NextField | None = None
) -> tuple[SmallTable[DfaStep], NextField]:
    """Build a DFA matching exactly ``val``, followed by the value terminator."""
    return _chain(val + bytes([VALUE_TERMINATOR]), next_field)