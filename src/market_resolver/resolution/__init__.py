"""Pure resolution logic: outcome classification, settlement and reporting."""
from market_resolver.resolution.classifier import (Classification,
                                                   Confidence, classify)
from market_resolver.resolution.report import (ResolutionReport,
                                               compute_outcome_hash,
                                               verify_outcome_hash)
from market_resolver.resolution.settlement import (Payout, clamp_fee_rate,
                                                   compute_payouts)

__all__ = [
    "Classification",
    "Confidence",
    "Payout",
    "ResolutionReport",
    "clamp_fee_rate",
    "classify",
    "compute_outcome_hash",
    "compute_payouts",
    "verify_outcome_hash",
]
