import pytest

from pcstream.algorithm import parse_metadata
from pcstream.lod_selector import LodSelectionError, LodSelector, LodSelectorType

METADATA = b"cost value\n1 1\n2 2\n3 3\n1 1\n2 2\n3 3\n"


def test_default_kind_is_dp_based():
    assert LodSelector().kind is LodSelectorType.DP_BASED


def test_unknown_kind_falls_back_to_lm_based():
    assert LodSelector("nonsense").kind is LodSelectorType.LM_BASED


def test_kind_accepts_value_string():
    assert LodSelector("equal").kind is LodSelectorType.EQUAL


def test_get_before_post_raises():
    with pytest.raises(LodSelectionError):
        LodSelector().get()


def test_post_then_get_returns_selection_within_budget():
    selector = LodSelector(LodSelectorType.DP_BASED)
    selector.post(2, 3, METADATA, [1.0, 1.0], 4)
    selection = selector.get()
    table = parse_metadata(METADATA, 2, 3, [1.0, 1.0])
    assert len(selection) == 2
    assert sum(table[i][v][0] for i, v in enumerate(selection)) <= 4
    assert (selector.n_mod, selector.n_ver) == (2, 3)


def test_large_bandwidth_picks_best_versions():
    selector = LodSelector()
    selector.post(2, 3, METADATA, [1.0, 1.0], 1_000)
    assert selector.get() == [2, 2]


def test_get_returns_a_copy():
    selector = LodSelector()
    selector.post(2, 3, METADATA, [1.0, 1.0], 1_000)
    first = selector.get()
    assert first == [2, 2]
    first[0] = 99
    assert selector.get() == [2, 2]


@pytest.mark.parametrize(
    "kind", [LodSelectorType.LM_BASED, LodSelectorType.EQUAL, LodSelectorType.HYBRID]
)
def test_unsupported_kinds_fail(kind):
    selector = LodSelector(kind)
    with pytest.raises(LodSelectionError):
        selector.post(2, 3, METADATA, [1.0, 1.0], 4)
    with pytest.raises(LodSelectionError):
        selector.get()