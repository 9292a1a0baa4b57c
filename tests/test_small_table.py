import random

import pytest

from quamina.small_table import (
    BYTE_CEILING,
    VALUE_TERMINATOR,
    DfaStep,
    NextField,
    NfaStep,
    SmallTable,
    make_small_dfa_table,
    merge_dfa_steps,
    merge_dfas,
    nfa_to_dfa,
)


def _transitions(table, data):
    found = []
    for utf8_byte in data:
        step = table.step(utf8_byte)
        if step is None:
            return found
        found.extend(step.field_transitions)
        table = step.table
    last = table.step(VALUE_TERMINATOR)
    if last is not None:
        found.extend(last.field_transitions)
    return found


def _dfa_transition(next_field):
    return DfaStep(SmallTable(), [next_field])


@pytest.mark.parametrize(
    "positions",
    [
        [1, 2, 33],
        [0, 1, 2, 33, BYTE_CEILING - 1],
        [2, 33, BYTE_CEILING - 1],
        [0, 1, 2, 33],
    ],
)
def test_make_small_table(positions):
    comp = DfaStep()
    default = DfaStep()
    comp.table.add_range_steps(0, BYTE_CEILING, default)
    steps = []
    for pos in positions:
        one = DfaStep()
        steps.append(one)
        comp.table.add_byte_step(pos, one)
    table = make_small_dfa_table(default, positions, steps)
    expected = comp.table.unpack()
    got = table.unpack()
    assert len(got) == BYTE_CEILING
    assert all(a is b for a, b in zip(expected, got))


def test_combiner():
    # "jab"
    a0, a1, a2, a3 = DfaStep(), DfaStep(), DfaStep(), DfaStep()
    a0.table.add_byte_step(ord("j"), a1)
    a1.table.add_byte_step(ord("a"), a2)
    a2.table.add_byte_step(ord("b"), a3)
    afm = NextField({"AFM": None})
    a3.table.add_byte_step(VALUE_TERMINATOR, _dfa_transition(afm))

    # *ay*
    b0, b1, b2 = DfaStep(), DfaStep(), DfaStep()
    b0.table.add_range_steps(0, BYTE_CEILING, b0)
    b0.table.add_byte_step(ord("a"), b1)
    b1.table.add_range_steps(0, BYTE_CEILING, b0)
    b1.table.add_byte_step(ord("y"), b2)
    bfm = NextField({"BFM": None})
    b2.table.add_range_steps(0, BYTE_CEILING, _dfa_transition(bfm))

    combo = merge_dfa_steps(a0, b0, {})
    assert _transitions(combo.table, b"jab") == [afm]
    assert _transitions(combo.table, b"jayhawk") == [bfm]

    # *yy
    c0, c1, c2 = DfaStep(), DfaStep(), DfaStep()
    c0.table.add_range_steps(0, BYTE_CEILING, c0)
    c0.table.add_byte_step(ord("y"), c1)
    c1.table.add_range_steps(0, BYTE_CEILING, c0)
    c1.table.add_byte_step(ord("y"), c2)
    c2.table.add_range_steps(0, BYTE_CEILING, c0)
    cfm = NextField({"CFM": None})
    c2.table.add_byte_step(VALUE_TERMINATOR, _dfa_transition(cfm))

    combo = merge_dfa_steps(DfaStep(combo.table), c0, {})
    assert _transitions(combo.table, b"jab") == [afm]
    assert _transitions(combo.table, b"jayhawk") == [bfm]
    matches = _transitions(combo.table, b"xayjjyy")
    assert len(matches) == 2
    assert bfm in matches and cfm in matches


def test_unpack():
    st1 = DfaStep()
    table = SmallTable()
    table.ceilings = [2, 3, BYTE_CEILING]
    table.steps = [None, st1, None]
    unpacked = table.unpack()
    assert len(unpacked) == BYTE_CEILING
    assert unpacked[2] is st1
    assert all(u is None for i, u in enumerate(unpacked) if i != 2)


@pytest.mark.parametrize("seed", [9, 81, 1729, 8, 64, 512, 7, 49, 343, 6, 36, 216, 5, 25, 125])
def test_fuzz_pack(seed):
    rng = random.Random(seed)
    used = [False] * BYTE_CEILING
    unpacked = [None] * BYTE_CEILING
    for _ in range(30):
        while True:
            length = rng.randrange(4) + 1
            base = rng.randrange(BYTE_CEILING - 6)
            if not any(used[base : base + length]):
                used[base : base + length] = [True] * length
                break
        step = DfaStep()
        unpacked[base : base + length] = [step] * length

    packed = SmallTable()
    packed.pack(unpacked)
    for i in range(BYTE_CEILING):
        assert packed.step(i) is unpacked[i]

    re_unpacked = packed.unpack()
    assert all(a is b for a, b in zip(unpacked, re_unpacked, strict=True))

    re_packed = SmallTable()
    re_packed.pack(re_unpacked)
    assert re_packed.ceilings == packed.ceilings
    assert all(a is b for a, b in zip(re_packed.steps, packed.steps, strict=True))


def test_step_on_malformed_table_raises():
    table = SmallTable()
    table.ceilings = [3]
    table.steps = [None]
    with pytest.raises(ValueError):
        table.step(10)


def test_add_range_steps_sets_only_range():
    table = SmallTable()
    step = DfaStep()
    table.add_range_steps(10, 20, step)
    assert table.ceilings == [10, 20, BYTE_CEILING]
    assert table.step(9) is None
    assert table.step(10) is step
    assert table.step(19) is step
    assert table.step(20) is None


def _string_dfa(text, next_field):
    last = _dfa_transition(next_field)
    table = make_small_dfa_table(None, [VALUE_TERMINATOR], [last])
    for ch in reversed(text):
        table = make_small_dfa_table(None, [ch], [DfaStep(table)])
    return table


def test_merge_dfas_keeps_both_and_leaves_inputs():
    f1, f2 = NextField(), NextField()
    t1 = _string_dfa(b"ab", f1)
    t2 = _string_dfa(b"ac", f2)
    before = list(t1.ceilings)
    merged = merge_dfas(t1, t2)
    assert _transitions(merged, b"ab") == [f1]
    assert _transitions(merged, b"ac") == [f2]
    assert _transitions(merged, b"a") == []
    assert _transitions(merged, b"abc") == []
    assert t1.ceilings == before
    assert _transitions(t1, b"ac") == []


def test_nfa_to_dfa_combines_branches():
    f1, f2, f3 = NextField(), NextField(), NextField()
    end1 = NfaStep(field_transitions=[f1])
    end2 = NfaStep(field_transitions=[f2])
    end3 = NfaStep(field_transitions=[f3])
    s1, s2 = NfaStep(), NfaStep()
    s1.table.add_byte_step(ord("b"), (end1,))
    s2.table.add_byte_step(ord("b"), (end2,))
    s2.table.add_byte_step(ord("c"), (end3,))
    start = SmallTable()
    start.add_byte_step(ord("a"), (s1, s2))

    dfa = nfa_to_dfa(start)
    assert set(_transitions(dfa, b"ab")) == {f1, f2}
    assert len(_transitions(dfa, b"ab")) == 2
    assert _transitions(dfa, b"ac") == [f3]
    assert _transitions(dfa, b"ad") == []
    assert _transitions(dfa, b"b") == []