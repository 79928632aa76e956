"""
Itemset helpers shared by the miner, the rule generator and the reports.

Itemsets are plain frozensets of item tokens, so equality and hashing ignore
insertion order and union is the ``|`` operator.
"""


def to_itemset(items):
    """Convert one input record (possibly with duplicates) into an itemset."""
    return frozenset(items)


def itemset_key(itemset):
    # sorted tuple gives a stable order for output and ties
    return tuple(sorted(itemset))


def format_itemset(itemset):
    return "{" + ", ".join(itemset_key(itemset)) + "}"


def flatten_levels(levels):
    """
    Concatenate collected levels into one list of (itemset, support) pairs.

    Args:
        levels: Sequence of levels [L1, L2, ...], each an iterable of
            (itemset, support) pairs

    Returns:
        List of (itemset, support); L1 entries first, then L2, and so on.
        Entries inside a level are ordered by their sorted items.
    """
    result = []
    for level in levels:
        result.extend(sorted(level, key=lambda entry: itemset_key(entry[0])))
    return result
