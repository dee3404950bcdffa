from gitobj.pack.bounds import Bounds


def test_bounds_left():
    assert Bounds(1, 2).left == 1


def test_bounds_right():
    assert Bounds(1, 2).right == 2


def test_with_left_returns_new_bounds():
    b1 = Bounds(1, 2)
    b2 = b1.with_left(3)
    assert (b1.left, b1.right) == (1, 2)
    assert (b2.left, b2.right) == (3, 2)


def test_with_right_returns_new_bounds():
    b1 = Bounds(1, 2)
    b2 = b1.with_right(3)
    assert (b1.left, b1.right) == (1, 2)
    assert (b2.left, b2.right) == (1, 3)


def test_equal_with_identical_bounds():
    b1 = Bounds(1, 2)
    b2 = Bounds(1, 2)
    assert (b1 == b2) is True
    assert (b1.left, b1.right) == (b2.left, b2.right) == (1, 2)


def test_equal_with_different_bounds():
    assert (Bounds(1, 2) == Bounds(3, 4)) is False


def test_equal_with_none():
    assert (Bounds(1, 2) == None) is False  # noqa: E711
    assert (None == Bounds(1, 2)) is False  # noqa: E711


def test_string():
    assert str(Bounds(1, 2)) == "[1,2]"