"""Application-wide constants.

Groups the fixed numbers the allocation and holding ledgers depend on so the
services and schemas agree on them.
"""

from decimal import Decimal


class AllocationConstants:
    """Constants for splitting a deposit across pockets."""

    # Pocket percentages are expressed out of 100
    PERCENT_BASE = Decimal(100)
    MIN_PERCENTAGE = Decimal(0)
    MAX_PERCENTAGE = Decimal(100)

    # Largest deposit a BigInteger column can hold
    MAX_SOURCE_AMOUNT = 2**63 - 1

    # Percentages are stored with two decimal places (e.g. 33.33)
    PERCENTAGE_PRECISION = 5
    PERCENTAGE_SCALE = 2


class MoneyConstants:
    """Column precision for monetary and quantity values."""

    AMOUNT_PRECISION = 18
    AMOUNT_SCALE = 2

    # Gold is bought by the gram and crypto in fractions, so keep 6 places
    QUANTITY_PRECISION = 18
    QUANTITY_SCALE = 6

    # Budget-source percentages accumulate across transactions and can pass 100
    ACCUMULATED_PERCENTAGE_PRECISION = 12


PERCENT_BASE = AllocationConstants.PERCENT_BASE
