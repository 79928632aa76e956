"""
Association Rules Generation with Spark RDD
Generates association rules from the frequent itemsets found by the A-Priori miner.

An association rule is an implication X -> Y, where X and Y are itemsets such that
X ∩ Y = ∅. Support of rule X -> Y is the number of transactions containing X ∪ Y.
Confidence of rule X -> Y is support(X ∪ Y) / support(X).
"""

from itertools import combinations

from spark_apriori.a_priori import validate_min_confidence
from spark_apriori.itemsets import itemset_key


def build_support_map(frequent_itemsets):
    """
    Convert the mining result into a support lookup.

    Args:
        frequent_itemsets: List of (itemset, support) pairs

    Returns:
        Dictionary mapping itemset (frozenset) -> support count
    """
    return {itemset: support for itemset, support in frequent_itemsets}


def antecedents(itemset):
    """Yield every non-empty proper subset of an itemset, smallest first."""
    items = itemset_key(itemset)
    for size in range(1, len(items)):
        for subset in combinations(items, size):
            yield frozenset(subset)


def generate_rules_from_itemset(itemset_and_support, support_map_bc, min_confidence):
    """
    Split one frequent itemset I (support s) into rules X -> I - X.

    A rule is kept when support(X) is known and s / support(X) >= min_confidence.
    Single-item itemsets yield no rules.

    Returns:
        List of (antecedent, consequent, confidence, support, antecedent_support)
    """
    itemset, itemset_support = itemset_and_support
    support_map = support_map_bc.value
    rules = []

    for antecedent in antecedents(itemset):
        antecedent_support = support_map.get(antecedent)
        if not antecedent_support:
            continue

        confidence = itemset_support / antecedent_support
        if confidence >= min_confidence:
            rules.append(
                (
                    antecedent,
                    itemset - antecedent,
                    confidence,
                    itemset_support,
                    antecedent_support,
                )
            )

    return rules


def generate_association_rules(sc, frequent_itemsets, min_confidence):
    """
    Generate all association rules from frequent itemsets using Spark RDD.

    Args:
        sc: SparkContext
        frequent_itemsets: List of (itemset, support) pairs, as returned by apriori()
        min_confidence: Minimum confidence threshold, in [0, 1]

    Returns:
        List of rules sorted by confidence (descending)
    """
    validate_min_confidence(min_confidence)

    itemsets_for_rules = [entry for entry in frequent_itemsets if len(entry[0]) >= 2]
    if not itemsets_for_rules:
        return []

    support_map_bc = sc.broadcast(build_support_map(frequent_itemsets))

    try:
        all_rules = (
            sc.parallelize(itemsets_for_rules)
            .flatMap(
                lambda x: generate_rules_from_itemset(x, support_map_bc, min_confidence)
            )
            .collect()
        )
    finally:
        support_map_bc.unpersist()

    all_rules.sort(key=lambda r: (-r[2], itemset_key(r[0]), itemset_key(r[1])))
    return all_rules
