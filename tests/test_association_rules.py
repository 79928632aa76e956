import math

import pytest

from spark_apriori.a_priori import InvalidParameterError, apriori, validate_min_confidence
from spark_apriori.association_rules import (
    antecedents,
    build_support_map,
    generate_association_rules,
    generate_rules_from_itemset,
)


class FakeBroadcast:
    def __init__(self, value):
        self.value = value


def fs(*items):
    return frozenset(items)


FREQUENT = [
    (fs("a"), 3),
    (fs("b"), 2),
    (fs("c"), 2),
    (fs("a", "b"), 2),
    (fs("a", "c"), 2),
]


def test_build_support_map():
    support_map = build_support_map(FREQUENT)

    assert support_map[fs("b", "a")] == 2
    assert len(support_map) == 5


def test_rules_from_single_item_itemset():
    bc = FakeBroadcast(build_support_map(FREQUENT))

    assert generate_rules_from_itemset((fs("a"), 3), bc, 0.0) == []


def test_rules_from_pair():
    bc = FakeBroadcast(build_support_map(FREQUENT))

    rules = generate_rules_from_itemset((fs("a", "b"), 2), bc, 0.0)

    assert set(rules) == {
        (fs("a"), fs("b"), 2 / 3, 2, 3),
        (fs("b"), fs("a"), 1.0, 2, 2),
    }


def test_rules_skip_unknown_antecedent():
    bc = FakeBroadcast({fs("a", "b", "c"): 2, fs("a"): 4})

    rules = generate_rules_from_itemset((fs("a", "b", "c"), 2), bc, 0.0)

    assert rules == [(fs("a"), fs("b", "c"), 0.5, 2, 4)]


def test_generate_association_rules_sorted_by_confidence(sc):
    rules = generate_association_rules(sc, FREQUENT, 0.6)

    assert [(r[0], r[1]) for r in rules] == [
        (fs("b"), fs("a")),
        (fs("c"), fs("a")),
        (fs("a"), fs("b")),
        (fs("a"), fs("c")),
    ]
    assert rules[0][2] == 1.0
    assert rules[-1][2] == pytest.approx(2 / 3)


def test_generate_association_rules_confidence_filter(sc):
    rules = generate_association_rules(sc, FREQUENT, 0.7)

    assert {(r[0], r[1]) for r in rules} == {(fs("b"), fs("a")), (fs("c"), fs("a"))}


def test_rules_from_mined_itemsets(sc, market_baskets):
    frequent = apriori(sc.parallelize(market_baskets), 0.4)

    rules = generate_association_rules(sc, frequent, 1.0)

    # beer always comes with diaper
    assert (fs("beer"), fs("diaper"), 1.0, 3, 3) in rules
    assert all(r[2] == 1.0 for r in rules)


def test_no_rules_without_pairs(sc):
    assert generate_association_rules(sc, [(fs("a"), 3)], 0.5) == []
    assert generate_association_rules(sc, [], 0.5) == []


@pytest.mark.parametrize(
    "min_confidence", [-0.1, 1.1, math.nan, True, "0.5", None]
)
def test_invalid_confidence(sc, min_confidence):
    with pytest.raises(InvalidParameterError):
        generate_association_rules(sc, FREQUENT, min_confidence)


def test_confidence_checked_before_spark_is_used():
    # no SparkContext: the bad threshold must be rejected first
    with pytest.raises(InvalidParameterError):
        generate_association_rules(None, FREQUENT, "0.5")


@pytest.mark.parametrize("min_confidence", [0, 0.0, 0.5, 1, 1.0])
def test_valid_confidence(min_confidence):
    validate_min_confidence(min_confidence)


def test_antecedents_are_proper_non_empty_subsets():
    subsets = list(antecedents(fs("a", "b", "c")))

    assert subsets == [
        fs("a"),
        fs("b"),
        fs("c"),
        fs("a", "b"),
        fs("a", "c"),
        fs("b", "c"),
    ]
    assert list(antecedents(fs("a"))) == []
