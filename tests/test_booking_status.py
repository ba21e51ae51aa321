from nomad_cabs import booking_status as bs


def test_forward_path():
    assert bs.can_transition(bs.PENDING, bs.ACCEPTED)
    assert bs.can_transition(bs.ACCEPTED, bs.IN_PROGRESS)
    assert bs.can_transition(bs.IN_PROGRESS, bs.COMPLETED)


def test_cancel_from_any_open_state():
    for s in (bs.PENDING, bs.ACCEPTED, bs.IN_PROGRESS):
        assert bs.can_transition(s, bs.CANCELLED)


def test_terminal_states_are_final():
    for s in bs.TERMINAL:
        assert bs.next_statuses(s) == []
        for target in bs.STATUSES:
            assert not bs.can_transition(s, target)


def test_no_skipping_or_going_back():
    assert not bs.can_transition(bs.PENDING, bs.COMPLETED)
    assert not bs.can_transition(bs.PENDING, bs.IN_PROGRESS)
    assert not bs.can_transition(bs.IN_PROGRESS, bs.ACCEPTED)


def test_norm_accepts_other_spellings():
    assert bs.norm("IN-PROGRESS") == bs.IN_PROGRESS
    assert bs.norm(" Cancelled ") == bs.CANCELLED
    assert bs.is_valid("Accepted")
    assert not bs.is_valid("rejected")
    assert not bs.is_valid(None)


def test_next_statuses_order():
    assert bs.next_statuses("pending") == [bs.ACCEPTED, bs.CANCELLED]
