"""Console reports for frequent itemsets and association rules."""

from spark_apriori.itemsets import format_itemset, itemset_key


def group_by_size(frequent_itemsets):
    """Split a flat mining result back into {k: [(itemset, support), ...]}."""
    levels = {}
    for itemset, support in frequent_itemsets:
        levels.setdefault(len(itemset), []).append((itemset, support))
    return levels


def print_banner(title, width=70):
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def print_levels(frequent_itemsets, num_transactions, top_n=20):
    """
    Print frequent itemsets level by level.

    Args:
        frequent_itemsets: List of (itemset, support) pairs in level order
        num_transactions: Number of transactions, for support percentages
        top_n: Number of itemsets to show per level (highest support first)
    """
    print_banner("FREQUENT ITEMSETS")

    if not frequent_itemsets:
        print("No frequent itemsets found.")
        return

    levels = group_by_size(frequent_itemsets)
    print(f"\nTotal frequent itemsets found: {len(frequent_itemsets):,}")
    for k in sorted(levels):
        print(f"  L{k}: {len(levels[k]):,} itemsets")

    for k in sorted(levels):
        level = sorted(levels[k], key=lambda x: (-x[1], itemset_key(x[0])))
        print_banner(f"Frequent {k}-itemsets (L{k}): {len(level):,} itemsets")

        for i, (itemset, support) in enumerate(level[:top_n], 1):
            support_pct = support / num_transactions * 100 if num_transactions else 0.0
            print(
                f"{i:2d}. {format_itemset(itemset):<50s} support={support:>6,} ({support_pct:>5.2f}%)"
            )

        if len(level) > top_n:
            print(f"\n... and {len(level) - top_n:,} more itemsets")


def print_rules(all_rules, top_n=20):
    """Print the first top_n rules, one numbered row each."""
    print_banner("ASSOCIATION RULES RESULTS")

    if not all_rules:
        print("No association rules found.")
        return

    print(f"\nTotal rules found: {len(all_rules)}")
    print(f"    {'Rule':<50s} {'Confidence':>10} {'Support':>8} {'Ant.':>8}")
    print("-" * 80)

    for i, (antecedent, consequent, confidence, support, ant_support) in enumerate(
        all_rules[:top_n], 1
    ):
        rule = f"{format_itemset(antecedent)} => {format_itemset(consequent)}"
        print(f"{i:2d}. {rule:<50s} {confidence:>10.4f} {support:>8,} {ant_support:>8,}")

    if len(all_rules) > top_n:
        print(f"\n... and {len(all_rules) - top_n} more rules")
