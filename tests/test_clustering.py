"""Tests for greedy first-match clustering."""

import pytest

from feedcluster.clustering import ClusterBuilder, cluster_items, validate_threshold


def test_storm_scenario_forms_one_cluster(make_item):
    a = make_item("Storm hits coast", "Heavy rain floods streets", hours_ago=2)
    b = make_item("Storm hits coast", "Heavy rainfall floods downtown streets", hours_ago=1)
    clusters = cluster_items([a, b], threshold=50)
    assert len(clusters) == 1
    assert clusters[0].size == 2
    assert clusters[0].members == (a, b)


def test_unrelated_items_stay_apart(make_item):
    a = make_item("Storm hits coast", "Heavy rain floods streets")
    b = make_item("Team wins final", "Fans celebrate overnight")
    clusters = cluster_items([a, b])
    assert [c.size for c in clusters] == [1, 1]


def test_joins_first_matching_cluster_not_best(make_item):
    a = make_item("alpha beta", "gamma delta")
    b = make_item("epsilon zeta", "eta theta")
    # 50% against a, 100% against b
    c = make_item("alpha beta epsilon zeta", "eta theta")
    clusters = cluster_items([a, b, c], threshold=50)
    assert clusters[0].members == (a, c)
    assert clusters[1].members == (b,)


def test_comparison_uses_anchor_not_representative(make_item):
    a = make_item("one two", "three four", hours_ago=5)
    b = make_item("one two five six", "seven eight", hours_ago=1)
    c = make_item("five six seven", "eight", hours_ago=0)
    clusters = cluster_items([a, b, c], threshold=50)
    assert len(clusters) == 2
    assert clusters[0].anchor is a
    assert clusters[0].representative is b
    assert clusters[1].anchor is c


def test_representative_is_newest_dated_member(make_item):
    old = make_item("Storm hits coast", "rain", hours_ago=10)
    newer = make_item("Storm hits coast", "rain", hours_ago=1)
    middle = make_item("Storm hits coast", "rain", hours_ago=5)
    cluster = cluster_items([old, newer, middle])[0]
    assert cluster.representative is newer


def test_undated_item_never_displaces_dated_representative(make_item):
    dated = make_item("Storm hits coast", "rain", hours_ago=3)
    undated = make_item("Storm hits coast", "rain")
    cluster = cluster_items([dated, undated])[0]
    assert cluster.representative is dated


def test_dated_item_displaces_undated_anchor(make_item):
    undated = make_item("Storm hits coast", "rain")
    dated = make_item("Storm hits coast", "rain", hours_ago=3)
    cluster = cluster_items([undated, dated])[0]
    assert cluster.anchor is undated
    assert cluster.representative is dated


def test_equal_dates_keep_first_representative(make_item):
    a = make_item("Storm hits coast", "rain", hours_ago=2)
    b = make_item("Storm hits coast", "rain", hours_ago=2)
    assert cluster_items([a, b])[0].representative is a


def test_every_item_lands_in_exactly_one_cluster(make_item):
    items = [
        make_item("Storm hits coast", "Heavy rain floods streets"),
        make_item("Team wins final", "Fans celebrate"),
        make_item("Storm hits the coast", "Heavy rain"),
        make_item("Budget vote delayed", "Parliament adjourns"),
        make_item("Team wins the final", "Fans celebrate in city"),
    ]
    clusters = cluster_items(items)
    assert sum(c.size for c in clusters) == len(items)
    members = [m for c in clusters for m in c.members]
    assert sorted(m.link for m in members) == sorted(i.link for i in items)


def test_clustering_is_deterministic(make_item):
    items = [
        make_item("Storm hits coast", "Heavy rain floods streets"),
        make_item("Storm hits the coast", "Heavy rain"),
        make_item("Team wins final", "Fans celebrate"),
    ]
    assert cluster_items(items, 40) == cluster_items(items, 40)


def test_threshold_zero_groups_everything_and_100_requires_containment(make_item):
    a = make_item("alpha", "beta")
    b = make_item("gamma", "delta")
    assert len(cluster_items([a, b], threshold=0)) == 1
    assert len(cluster_items([a, b], threshold=100)) == 2


def test_empty_input_gives_no_clusters():
    assert cluster_items([]) == []


@pytest.mark.parametrize("bad", [-1, 100.5, "50", None, True])
def test_invalid_threshold_is_rejected(bad, make_item):
    with pytest.raises(ValueError):
        cluster_items([make_item()], threshold=bad)


def test_none_items_is_rejected():
    with pytest.raises(ValueError):
        cluster_items(None)


def test_validate_threshold_accepts_bounds():
    assert validate_threshold(0) == 0.0
    assert validate_threshold(100) == 100.0
    assert validate_threshold(42.5) == 42.5


def test_builder_freeze_snapshots_members(make_item):
    a = make_item("Storm", "rain")
    builder = ClusterBuilder(a)
    cluster = builder.freeze()
    builder.add(make_item("Storm", "rain"))
    assert cluster.members == (a,)
    assert cluster.size == 1
