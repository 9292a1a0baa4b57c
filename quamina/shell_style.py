"""Automata for shell-style patterns containing a single '*' wildcard."""

from __future__ import annotations

from .small_table import BYTE_CEILING, VALUE_TERMINATOR, NextField, NfaStep, SmallTable

_GLOB = ord("*")


def make_shell_style_automaton(
    val: bytes,
    next_field: NextField | None = None,
) -> tuple[SmallTable[tuple[NfaStep, ...]], NextField]:
    """Build an NFA recognising the quoted shell-style pattern ``val``.

    Returns the start table and the field state reached on a match; that state
    is ``next_field`` when one is given, otherwise a fresh one.
    """
    if next_field is None:
        next_field = NextField()
    table: SmallTable[tuple[NfaStep, ...]] = SmallTable()
    start = table

    glob_step: NfaStep | None = None
    glob_exit_step: NfaStep | None = None
    glob_exit_byte = 0

    chars = iter(enumerate(val))
    for index, ch in chars:
        if ch == _GLOB:
            # A pattern ending in '*"' matches as soon as it gets here.
            if index == len(val) - 2:
                final = NfaStep(SmallTable(), [next_field])
                table.add_range_steps(0, BYTE_CEILING, (final,))
                return start, next_field

            glob_step = NfaStep(table)
            table.add_range_steps(0, BYTE_CEILING, (glob_step,))

            _, glob_exit_byte = next(chars)
            glob_exit_step = NfaStep(SmallTable())
            table.add_byte_step(glob_exit_byte, (glob_exit_step,))
            table = glob_exit_step.table
        else:
            next_step = NfaStep(SmallTable())
            if glob_exit_step is not None:
                table.add_range_steps(0, BYTE_CEILING, (glob_step,))
                if ch == glob_exit_byte:
                    table.add_byte_step(ch, (glob_exit_step, next_step))
                else:
                    table.add_byte_step(glob_exit_byte, (glob_exit_step,))
                    table.add_byte_step(ch, (next_step,))
            else:
                table.add_byte_step(ch, (next_step,))
            table = next_step.table

    last_step = NfaStep(SmallTable(), [next_field])
    if glob_exit_step is not None:
        table.add_range_steps(0, BYTE_CEILING, (glob_step,))
        table.add_byte_step(glob_exit_byte, (glob_exit_step,))
    table.add_byte_step(VALUE_TERMINATOR, (last_step,))
    return start, next_field