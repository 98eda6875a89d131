from .r01_unique_amount_date import R01_UNIQUE_AMOUNT_DATE
from .r02_standing_orders import R02_STANDING_ORDERS
from .r03_aggregate_transfers import R03_AGGREGATE_TRANSFERS
from .r04_check_clearing import R04_CHECK_CLEARING
from .r05_small_amounts import R05_SMALL_AMOUNTS
from .r06_counterparty_debit import R06_COUNTERPARTY_DEBIT
from .r07_custody_cheques import R07_CUSTODY_CHEQUES
from .r08_transmitted_cheques import R08_TRANSMITTED_CHEQUES
from .r09_machine_cheques import R09_MACHINE_CHEQUES
from .r10_nonzero_code_set import R10_NONZERO_CODE_SET
from .r11_residual_transfers import R11_RESIDUAL_TRANSFERS

__all__ = [
    "R01_UNIQUE_AMOUNT_DATE",
    "R02_STANDING_ORDERS",
    "R03_AGGREGATE_TRANSFERS",
    "R04_CHECK_CLEARING",
    "R05_SMALL_AMOUNTS",
    "R06_COUNTERPARTY_DEBIT",
    "R07_CUSTODY_CHEQUES",
    "R08_TRANSMITTED_CHEQUES",
    "R09_MACHINE_CHEQUES",
    "R10_NONZERO_CODE_SET",
    "R11_RESIDUAL_TRANSFERS",
]
