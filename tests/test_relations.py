import numpy as np
import pandas as pd

from inference.relations import (get_possible_and_necessary_relations, outranking_frequency,
                                  rank_acceptability, rank_bounds, relations_frame)

VALUES = np.array([
    [0.5, 0.3, 0.3],
    [0.2, 0.4, 0.2],
])


def test_possible_and_necessary_from_hand_table():
    relations = get_possible_and_necessary_relations(VALUES)
    assert relations['necessary'] == {(0, 2), (1, 2)}
    assert relations['possible'] == {(0, 1), (1, 0), (0, 2), (2, 0), (1, 2), (2, 1)}
    assert relations['necessary'] <= relations['possible']


def test_outranking_frequency():
    freq = outranking_frequency(VALUES)
    np.testing.assert_allclose(np.diag(freq), 1.0)
    assert freq[0, 1] == 0.5
    assert freq[0, 2] == 1.0
    assert freq[2, 0] == 0.5


def test_rank_bounds():
    np.testing.assert_array_equal(rank_bounds(VALUES), [[0, 1], [0, 1], [1, 1]])


def test_rank_acceptability_rows_sum_to_one():
    rai = rank_acceptability(VALUES)
    np.testing.assert_allclose(rai.sum(axis=1), 1.0)
    np.testing.assert_allclose(rai.sum(axis=0), 1.0)
    assert rai[0, 0] == 0.5


def test_tolerance_treats_close_values_as_equal():
    relations = get_possible_and_necessary_relations([[0.3, 0.3 + 1e-9, 0.1]])
    assert (0, 1) in relations['necessary']
    assert (1, 0) in relations['necessary']

    strict = get_possible_and_necessary_relations([[0.3, 0.3 + 1e-9, 0.1]], tol=0.0)
    assert (0, 1) not in strict['possible']


def test_single_solution_relations_are_total_preorder():
    relations = get_possible_and_necessary_relations([[0.1, 0.7, 0.4]])
    assert relations['possible'] == relations['necessary'] == {(1, 0), (1, 2), (2, 0)}


def test_no_solutions():
    relations = get_possible_and_necessary_relations(np.empty((0, 3)))
    assert relations['possible'] == set()
    assert relations['necessary'] == set()
    assert relations['frequency'] is None


def test_relations_frame():
    frame = relations_frame({(0, 2), (1, 2)}, 3, names=['a', 'b', 'c'])
    assert isinstance(frame, pd.DataFrame)
    assert list(frame.index) == ['a', 'b', 'c']
    assert frame.loc['a', 'c'] and frame.loc['b', 'c']
    assert frame.values.sum() == 2
