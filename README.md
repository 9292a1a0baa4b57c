# quamina

Building blocks for matching event field values against patterns. Each
value is checked by running its UTF-8 bytes through a compact finite
automaton. All the patterns for a field are merged into one automaton, so
checking a value takes one pass over its bytes however many patterns there
are.

## Modules

- `quamina.value_matcher` holds the value patterns for one field.
  - `ValueMatcher.add_transition(TypedVal(vtype, val))` adds a pattern. It
    returns the `NextField` that a match on that pattern leads to. Adding the
    same exact value twice returns the same `NextField`.
  - `ValueMatcher.transition_on(value_bytes)` returns the list of
    `NextField`s that the value reaches. The list is empty when nothing
    matches.
  - `ValueType` has the members `STRING`, `NUMBER`, `LITERAL`, `PREFIX` and
    `SHELL_STYLE`. String, prefix and shell-style values keep their double
    quotes, for example `'"foo"'`. The event value is given quoted in the
    same way, for example `b'"foo"'`.
  - While there is only one exact value, the matcher compares bytes
    directly. From the second value on, it builds a merged DFA.
  - Lower-level helpers:
    - `make_string_automaton(val, next_field=None)` matches exactly `val`.
    - `make_prefix_automaton(val, next_field=None)` matches any value that
      starts with the quoted `val`. The closing quote is not part of the
      prefix. It raises `ValueError` for a value shorter than two bytes.
    - `transition_dfa(table, val)` runs bytes through a DFA.
- `quamina.shell_style` has `make_shell_style_automaton(val, next_field=None)`.
  It builds an NFA for a quoted pattern with one `*` wildcard, such as
  `"foo*"`, `"*ST"` or `"B*K"`. It returns the start table and the
  `NextField` reached on a match.
- `quamina.small_table` has the automaton building blocks:
  - `SmallTable`, a byte-range transition table, with `step`, `unpack`,
    `pack`, `add_byte_step` and `add_range_steps`.
  - The states `DfaStep` and `NfaStep`, and the match target `NextField`.
  - `merge_dfas` and `merge_dfa_steps`, which build the union of two DFAs.
  - `nfa_to_dfa`, which converts an NFA without epsilon transitions.
  - `make_small_dfa_table`.

  Byte `0xF5` (`VALUE_TERMINATOR`) marks the end of a value. Tables cover the
  bytes below `0xF6` (`BYTE_CEILING`).
- `quamina.segments_tree` has `SegmentsTree`, a tree of the field paths that
  patterns mention. `SegmentsTreeTracker` is the abstract interface it
  implements.
  - `new_segments_index("a\nb", "c")` builds a root from newline-separated
    paths.
  - A node answers `get`, `is_root`, `is_segment_used`, `path_for_segment`,
    `nodes_count` and `fields_count`.
  - `copy()` returns an independent deep copy.
- `quamina.rebuilding` has rebuild policies that decide from `RebuildStats`
  (`live`, `added`, `deleted`, `filtered`) whether to rebuild.
  - `LiveRatioTrigger(ratio, min_live).rebuild(added, stats)` fires only on
    deletion. It fires when at least `min_live` patterns remain live and
    `deleted / live` reaches `ratio`.
  - `NeverTrigger().rebuild(...)` always returns `False`.

## Example

```python
from quamina.value_matcher import TypedVal, ValueMatcher, ValueType

vm = ValueMatcher()
street = vm.add_transition(TypedVal(ValueType.STRING, '"CRANLEIGH"'))
glob = vm.add_transition(TypedVal(ValueType.SHELL_STYLE, '"B*K"'))

assert vm.transition_on(b'"CRANLEIGH"') == [street]
assert vm.transition_on(b'"BANNOCK"') == [glob]
assert vm.transition_on(b'"MASON"') == []
```

## What it does not do

This package works on one field's values at a time. It has none of the
following:

- Whole-event matching.
- A parser for JSON patterns.
- A flattener that turns JSON events into path/value fields.
- Matchers that support pattern deletion. The rebuild policies are provided
  for such a matcher but nothing here uses them.
- "anything-but" or "exists" patterns.

`make_shell_style_automaton` does not check its input. Patterns with more
than one `*` are not supported.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```