from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP, ROUND_FLOOR

from shares.models import Share


def allocate_shares(contribution_amount, value_per_share):
    """
    Whole shares a contribution buys and their total value.
    Raises ValueError when the contribution cannot buy a single share.
    """
    value_per_share = Decimal(value_per_share)
    if value_per_share <= 0:
        raise ValueError("Share type has no value per share.")

    contribution = Decimal(contribution_amount).quantize(
        Decimal("0.01"), ROUND_HALF_UP
    )
    count = int((contribution / value_per_share).to_integral_value(ROUND_FLOOR))
    if count <= 0:
        raise ValueError("Contribution amount is insufficient to allocate any shares.")

    total_value = (value_per_share * count).quantize(Decimal("0.01"), ROUND_HALF_UP)
    return count, total_value


def share_holdings(member):
    """
    Approved shares a member still holds, per share type, net of refunds.
    Returns a list of (share_type, count, value).
    """
    holdings = OrderedDict()
    approved = (
        Share.objects.filter(member=member, status=Share.APPROVED)
        .select_related("share_type")
        .order_by("allocation_date", "created_at")
    )
    for share in approved:
        count, value = holdings.get(share.share_type, (0, Decimal("0.00")))
        if share.transaction_type == Share.REFUND:
            value -= share.total_value_allocated
        else:
            value += share.total_value_allocated
        holdings[share.share_type] = (count + share.signed_count, value)
    return [
        (share_type, count, value)
        for share_type, (count, value) in holdings.items()
        if count > 0 or value > 0
    ]


def total_share_value(member):
    return sum((value for _, _, value in share_holdings(member)), Decimal("0.00"))
