import pytest

from avocadoos.circular_list import CircularList, main


def test_push_back_keeps_order():
    values = [0, 1, 2, 3, 4]
    items = CircularList(values)
    assert list(items) == values
    assert len(items) == len(values)


def test_push_front_becomes_head():
    items = CircularList([1, 2])
    node = items.push_front(0)
    assert items.head is node
    assert list(items) == [0, 1, 2]


def test_reversed_iteration():
    values = ["a", "b", "c", "d"]
    items = CircularList(values)
    assert list(reversed(items)) == values[::-1]


def test_empty_list():
    items = CircularList()
    assert list(items) == []
    assert list(reversed(items)) == []
    assert len(items) == 0


def test_extract_head_moves_head():
    items = CircularList([10, 20, 30])
    assert items.extract_head() == 10
    assert list(items) == [20, 30]


def test_pop_back_and_front():
    items = CircularList([1, 2, 3])
    assert items.pop_back() == 3
    assert items.pop_front() == 1
    assert items.pop_back() == 2
    assert len(items) == 0
    assert items.head is None


def test_pops_on_empty_raise():
    items = CircularList()
    with pytest.raises(IndexError):
        items.pop_back()
    with pytest.raises(IndexError):
        items.pop_front()
    with pytest.raises(IndexError):
        items.extract_head()


def test_find_index():
    values = [5, 6, 7]
    items = CircularList(values)
    assert [items.find_index(i).value for i in range(3)] == values
    with pytest.raises(IndexError):
        items.find_index(3)
    with pytest.raises(IndexError):
        items.find_index(-1)


def test_pop_index_sequence():
    items = CircularList(range(5))
    with pytest.raises(IndexError):
        items.pop_index(100)
    assert items.pop_index(0) == 0
    assert items.pop_index(1) == 2
    assert list(items) == [1, 3, 4]
    assert items.pop_index(2) == 4
    assert list(items) == [1, 3]


def test_push_index_builds_in_order():
    items = CircularList()
    for index, value in enumerate((1000, 2000, 3000, 4000)):
        items.push_index(index, value)
    assert list(items) == [1000, 2000, 3000, 4000]


def test_push_index_middle_and_bounds():
    items = CircularList(["a", "c"])
    items.push_index(1, "b")
    assert list(items) == ["a", "b", "c"]
    with pytest.raises(IndexError):
        items.push_index(5, "x")
    with pytest.raises(IndexError):
        CircularList().push_index(1, "x")


def test_swap_same_node_is_noop():
    items = CircularList([1, 2, 3])
    node = items.find_index(1)
    items.swap(node, node)
    assert list(items) == [1, 2, 3]


def test_swap_adjacent_with_head():
    items = CircularList([1, 2, 3, 4])
    first, second = items.find_index(0), items.find_index(1)
    result = items.swap(first, second)
    assert result is second
    assert items.head is second
    assert list(items) == [2, 1, 3, 4]


def test_swap_adjacent_reverse_order():
    items = CircularList([1, 2, 3, 4])
    items.swap(items.find_index(2), items.find_index(1))
    assert list(items) == [1, 3, 2, 4]


def test_swap_non_adjacent():
    items = CircularList([1, 2, 3, 4, 5])
    items.swap(items.find_index(1), items.find_index(3))
    assert list(items) == [1, 4, 3, 2, 5]
    assert list(reversed(items)) == [5, 2, 3, 4, 1]


def test_swap_two_elements():
    items = CircularList(["x", "y"])
    items.swap(items.find_index(0), items.find_index(1))
    assert list(items) == ["y", "x"]
    assert len(items) == 2


def test_swap_twice_restores():
    values = list(range(6))
    items = CircularList(values)
    a, b = items.find_index(0), items.find_index(4)
    items.swap(a, b)
    items.swap(b, a)
    assert list(items) == values


def test_clear():
    items = CircularList(range(10))
    items.clear()
    assert len(items) == 0
    assert list(items) == []


def test_main_demo(capsys):
    assert main() == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "List:"
    assert lines[-1] == "List: " + " ".join(str(i) for i in range(128))