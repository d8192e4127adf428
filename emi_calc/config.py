"""Calculator defaults.

The command-line interface exposes most of these as options, which can also be
set through ``EMI_CALC_<COMMAND>_<OPTION>`` environment variables.
"""

from decimal import Decimal

# Durations (in years) always shown in the comparison tables. The user's own
# duration is added to this list.
DEFAULT_CANDIDATE_YEARS = (5, 10, 15, 20, 25)

# Upper bound for the payoff-horizon search: 50 years.
MAX_PAYOFF_MONTHS = 600

# Balances below half a cent count as fully repaid.
BALANCE_EPSILON = Decimal("0.005")

# Money comparisons (best option selection) are made at cent precision.
CENT = Decimal("0.01")

# Balance trajectory sampling interval in months.
TRAJECTORY_EVERY = 6

CURRENCY_SYMBOL = "₹"

# Rows printed by the ``schedule`` command before truncating.
MAX_PRINTED_ROWS = 120
