import pytest

from pispigot.nines import PendingDigits, advance


def _feed(candidates):
    state = PendingDigits()
    out = []
    for q in candidates:
        state, confirmed = advance(state, q)
        out.extend(confirmed)
    return state, out


def test_first_candidate_only_seeds():
    state, confirmed = advance(PendingDigits(), 3)
    assert confirmed == []
    assert state == PendingDigits(3, 0)


def test_first_candidate_nine_is_held_not_deferred():
    state, confirmed = advance(PendingDigits(), 9)
    assert confirmed == []
    assert state == PendingDigits(9, 0)


def test_first_candidate_ten_seeds_zero():
    state, _ = advance(PendingDigits(), 10)
    assert state == PendingDigits(0, 0)


def test_plain_digits_flush_one_step_behind():
    state, out = _feed([3, 1, 4, 1, 5])
    assert out == [3, 1, 4, 1]
    assert state == PendingDigits(5, 0)


def test_nines_confirmed_as_nines():
    state, out = _feed([3, 4, 9, 9, 9, 8])
    assert out == [3, 4, 9, 9, 9]
    assert state == PendingDigits(8, 0)


def test_carry_rolls_nines_over():
    state, out = _feed([3, 4, 9, 9, 10])
    assert out == [3, 5, 0, 0]
    assert state == PendingDigits(0, 0)


def test_nines_stay_pending():
    state, out = _feed([3, 4, 9, 9])
    assert out == [3]
    assert state == PendingDigits(4, 2)
    assert not state.empty


def test_candidate_out_of_range():
    with pytest.raises(ValueError):
        advance(PendingDigits(), 11)
    with pytest.raises(ValueError):
        advance(PendingDigits(1, 0), -1)
