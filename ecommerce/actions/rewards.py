# ecommerce/actions/rewards.py
from __future__ import annotations

from . import ActionResponse, call


def get_reward_points(request) -> ActionResponse:
    res = call(request, "get", "rewards/getRewardPoints/", msg="Reward points fetched",
               error="Error fetching reward points")
    if res.ok and isinstance(res.data, dict):
        res.data = res.data.get("availablePoints", 0)
    return res


def apply_reward_points(request, order_total, points) -> ActionResponse:
    """Data on success: {"used_points", "discount"} as computed by the backend."""
    return call(request, "post", "rewards/applyRewardPoints/",
                json={"order_total": str(order_total), "appliedReward": points},
                msg="Reward points applied successfully!",
                error="Something went wrong. Please try again.",
                errors={404: "No reward points found."})
