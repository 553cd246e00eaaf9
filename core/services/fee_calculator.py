"""
Fee calculator - revenue split between tournament organizer and platform.

Pure functions, safe to call on every form change for live previews.
Amounts are Decimal so that commission + net always equals total exactly.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from config.settings import settings
from core.domain.constants import PLATFORM_FEES
from core.domain.errors import ValidationError
from core.domain.models import EntryFeeType, FeeBreakdown, TournamentRegistration

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


def _dec(value: Number) -> Decimal:
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def commission_rate(fee_type: str = "tournament_commission") -> Decimal:
    """Platform commission percentage for a fee type"""
    if fee_type == "tournament_commission":
        return _dec(settings.commission_percentage)
    fee = PLATFORM_FEES.get(fee_type)
    if not fee or "percentage" not in fee:
        raise ValidationError(f"No percentage fee configured for '{fee_type}'", field="fee_type")
    return _dec(fee["percentage"])


def validate_fee_inputs(
    entry_fee: Number,
    max_teams: int,
    team_size_max: int,
    commission_percentage: Number,
) -> None:
    """Preconditions for compute(); run by callers before computing"""
    if _dec(entry_fee) < 0:
        raise ValidationError("Entry fee cannot be negative", field="entry_fee")
    if max_teams < 0:
        raise ValidationError("Max teams cannot be negative", field="max_teams")
    if team_size_max < 0:
        raise ValidationError("Team size cannot be negative", field="team_size_max")
    pct = _dec(commission_percentage)
    if pct < 0 or pct > 100:
        raise ValidationError("Commission must be between 0 and 100", field="commission_percentage")


def compute(
    entry_fee: Number,
    max_teams: int,
    team_size_max: int,
    entry_fee_type: EntryFeeType,
    commission_percentage: Number,
) -> FeeBreakdown:
    """
    Compute total revenue, platform commission and organizer net.

    per_team:   total = fee * max_teams
    per_player: total = fee * max_teams * team_size_max
    commission = round(total * pct / 100), net = total - commission
    """
    fee = _dec(entry_fee)
    pct = _dec(commission_percentage)
    entry_fee_type = EntryFeeType(entry_fee_type)

    if entry_fee_type == EntryFeeType.PER_TEAM:
        total = fee * max_teams
        per_unit_label = "Entry Fee per Team"
        headcount_label = "Max Teams"
        headcount = max_teams
    else:
        total = fee * max_teams * team_size_max
        per_unit_label = "Entry Fee per Player"
        headcount_label = "Expected Participants"
        headcount = max_teams * team_size_max

    commission = (total * pct / 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    # rounding up a fractional total at 100% must not push net below zero
    commission = min(commission, total)
    net = total - commission

    return FeeBreakdown(
        total_revenue=total,
        commission_percentage=pct,
        commission_amount=commission,
        net_amount=net,
        per_unit_label=per_unit_label,
        per_unit_value=fee,
        headcount_label=headcount_label,
        headcount=headcount,
    )


def compute_for_tournament(
    tournament: TournamentRegistration,
    commission_percentage: Optional[Number] = None,
) -> FeeBreakdown:
    """Organizer revenue breakdown for a tournament at full team capacity"""
    pct = commission_rate() if commission_percentage is None else commission_percentage
    validate_fee_inputs(tournament.entry_fee, tournament.max_teams, tournament.team_size_max, pct)
    breakdown = compute(
        tournament.entry_fee,
        tournament.max_teams,
        tournament.team_size_max,
        tournament.entry_fee_type,
        pct,
    )
    logger.debug(
        f"[FEES] tournament={tournament.id} total={breakdown.total_revenue} "
        f"commission={breakdown.commission_amount} net={breakdown.net_amount}"
    )
    return breakdown
