from lingplot._text import enumeration, n_of, plural


def test_text():
    "Test report text functions"
    assert enumeration(['a', 'b', 'c']) == 'a, b and c'
    assert enumeration(['a', 2]) == 'a and 2'
    assert enumeration(['experiment', 'data'], 'or') == 'experiment or data'
    assert n_of(3, 'step') == '3 steps'
    assert n_of(1, 'directory') == '1 directory'
    assert n_of(0, 'problem') == 'no problem'
    assert n_of(0, 'problem', True) == 'no problems'
    assert plural('Key', 2) == 'Keys'
    assert plural('is', 2) == 'are'
