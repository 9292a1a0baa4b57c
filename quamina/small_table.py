"""Byte-range transition tables and the DFA/NFA steps built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

# The automaton runs on UTF-8 bytes. 0xF5-0xFF never occur in UTF-8; 0xF5 is
# used as the value terminator, so every table covers the bytes below 0xF6.
BYTE_CEILING = 0xF6
VALUE_TERMINATOR = 0xF5

S = TypeVar("S")


@dataclass(eq=False)
class NextField:
    """The field-level state an automaton moves to once a value has matched."""

    transitions: dict[str, Any] = field(default_factory=dict)


class SmallTable(Generic[S]):
    """Maps ranges of byte values to steps.

    ``ceilings[i]`` is the exclusive upper bound of the range mapped to
    ``steps[i]``; the last ceiling is always ``BYTE_CEILING``.
    """

    def __init__(self) -> None:
        self.ceilings: list[int] = [BYTE_CEILING]
        self.steps: list[S | None] = [None]

    def __repr__(self) -> str:
        return f"SmallTable(ceilings={self.ceilings!r})"

    def step(self, utf8_byte: int) -> S | None:
        """Return the step for ``utf8_byte``, which may be None."""
        for ceiling, step in zip(self.ceilings, self.steps):
            if utf8_byte < ceiling:
                return step
        raise ValueError("malformed small table")

    def unpack(self) -> list[S | None]:
        """Return one entry per byte value below ``BYTE_CEILING``."""
        unpacked: list[S | None] = []
        for ceiling, step in zip(self.ceilings, self.steps):
            if ceiling > len(unpacked):
                unpacked.extend([step] * (ceiling - len(unpacked)))
        return unpacked

    def pack(self, unpacked: Sequence[S | None]) -> None:
        """Replace the table's contents with the per-byte entries given."""
        ceilings: list[int] = []
        steps: list[S | None] = []
        last = unpacked[0]
        for index, step in enumerate(unpacked):
            if step != last:
                ceilings.append(index)
                steps.append(last)
            last = step
        ceilings.append(BYTE_CEILING)
        steps.append(last)
        self.ceilings = ceilings
        self.steps = steps

    def add_byte_step(self, utf8_byte: int, step: S | None) -> None:
        unpacked = self.unpack()
        unpacked[utf8_byte] = step
        self.pack(unpacked)

    def add_range_steps(self, floor: int, ceiling: int, step: S | None) -> None:
        unpacked = self.unpack()
        unpacked[floor:ceiling] = [step] * (ceiling - floor)
        self.pack(unpacked)


@dataclass(eq=False)
class DfaStep:
    """A deterministic state; reaching it may complete a value match."""

    table: SmallTable[DfaStep] = field(default_factory=SmallTable)
    field_transitions: list[NextField] = field(default_factory=list)


@dataclass(eq=False)
class NfaStep:
    """A nondeterministic state; its table maps bytes to tuples of states."""

    table: SmallTable[tuple[NfaStep, ...]] = field(default_factory=SmallTable)
    field_transitions: list[NextField] = field(default_factory=list)


def merge_dfas(existing: SmallTable[DfaStep], new_table: SmallTable[DfaStep]) -> SmallTable[DfaStep]:
    """Return a table recognising the union of two DFAs; neither input is changed."""
    return merge_dfa_steps(DfaStep(existing), DfaStep(new_table), {}).table


def merge_dfa_steps(
    step1: DfaStep,
    step2: DfaStep,
    memo: dict[tuple[DfaStep, DfaStep], DfaStep] | None = None,
) -> DfaStep:
    """Merge two DFA states, following only the product states that are reachable."""
    if memo is None:
        memo = {}
    key = (step1, step2)
    combined = memo.get(key)
    if combined is not None:
        return combined

    combined = DfaStep(SmallTable(), step1.field_transitions + step2.field_transitions)
    memo[key] = combined

    u_existing = step1.table.unpack()
    u_new = step2.table.unpack()
    u_combined: list[DfaStep | None] = [None] * BYTE_CEILING
    for index, (existing, new) in enumerate(zip(u_existing, u_new)):
        if existing is None:
            u_combined[index] = new
        elif new is None:
            u_combined[index] = existing
        elif index > 0 and existing is u_existing[index - 1] and new is u_new[index - 1]:
            u_combined[index] = u_combined[index - 1]
        else:
            u_combined[index] = merge_dfa_steps(existing, new, memo)
    combined.table.pack(u_combined)
    return combined


def nfa_to_dfa(table: SmallTable[tuple[NfaStep, ...]]) -> SmallTable[DfaStep]:
    """Convert an NFA without epsilon transitions into an equivalent DFA."""
    return _nfa_steps_to_dfa((NfaStep(table),), {}).table


def _nfa_steps_to_dfa(
    nfa_steps: tuple[NfaStep, ...],
    memo: dict[frozenset[NfaStep], DfaStep],
) -> DfaStep:
    key = frozenset(nfa_steps)
    found = memo.get(key)
    if found is not None:
        return found

    dfa_step = DfaStep(SmallTable())
    memo[key] = dfa_step

    if len(nfa_steps) == 1:
        only = nfa_steps[0]
        dfa_step.field_transitions = list(only.field_transitions)
        dfa_step.table.ceilings = list(only.table.ceilings)
        dfa_step.table.steps = [
            _nfa_steps_to_dfa(tuple(targets), memo) if targets else None
            for targets in only.table.steps
        ]
        return dfa_step

    for nfa_step in nfa_steps:
        dfa_step.field_transitions.extend(nfa_step.field_transitions)
    unpacked_nfas = [nfa_step.table.unpack() for nfa_step in nfa_steps]
    unpacked: list[DfaStep | None] = [None] * BYTE_CEILING
    previous_targets: tuple[Any, ...] | None = None
    previous: DfaStep | None = None
    for utf8_byte in range(BYTE_CEILING):
        targets = tuple(u[utf8_byte] for u in unpacked_nfas)
        if targets != previous_targets:
            merged = dict.fromkeys(
                step for target in targets if target for step in target
            )
            previous = _nfa_steps_to_dfa(tuple(merged), memo) if merged else None
            previous_targets = targets
        unpacked[utf8_byte] = previous
    dfa_step.table.pack(unpacked)
    return dfa_step


def make_small_dfa_table(
    default_step: DfaStep | None,
    indices: Sequence[int],
    steps: Sequence[DfaStep | None],
) -> SmallTable[DfaStep]:
    """Build a table mapping each of ``indices`` (ascending) to its step, all else to the default."""
    table: SmallTable[DfaStep] = SmallTable()
    ceilings: list[int] = []
    table_steps: list[DfaStep | None] = []
    last_index = 0
    for index, step in zip(indices, steps, strict=True):
        if index > last_index:
            ceilings.append(index)
            table_steps.append(default_step)
        ceilings.append(index + 1)
        table_steps.append(step)
        last_index = index + 1
    if last_index < BYTE_CEILING:
        ceilings.append(BYTE_CEILING)
        table_steps.append(default_step)
    table.ceilings = ceilings
    table.steps = table_steps
    return table