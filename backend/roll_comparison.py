# backend/roll_comparison.py

"""
Cross-user rankings built from per-user stats snapshots.

Users without any rolls must not be passed in; they take no part in the
highest/lowest lists or the averages.
"""

from backend.roll_stats import round_half_up, percentage

COMPARED_METRICS = (
    "mean",
    "median",
    "auto_success",
    "auto_success_percentage",
    "auto_failure",
    "auto_failure_percentage",
)


### 🗣️ Mode Phrasing ###
def format_mode(mode):
    """[1, 2, 3] -> '1, 2 or 3'"""
    text = ", ".join(str(m) for m in mode)
    if len(mode) > 1:
        head, _, tail = text.rpartition(",")
        text = head + " or" + tail
    return text


def format_mode_percentage(mode):
    """[1, 2, 3] -> '1, 2, or 3' (used for the percentage leaders)"""
    text = ", ".join(str(m) for m in mode)
    if len(mode) > 1:
        head, _, tail = text.rpartition(",")
        text = head + ", or" + tail
    return text


### 🏆 Rankings ###
def tied_at(values, target):
    return [user_id for user_id, value in values.items() if value == target]


def _entry(user_id, names, stats, value):
    return {
        "user_id": user_id,
        "name": names.get(user_id),
        "value": value,
        "rolls": stats["count"],
    }


def compare_metric(all_stats, names, metric):
    """Highest and lowest users (ties kept) plus the rounded average."""
    values = {user_id: stats[metric] for user_id, stats in all_stats.items()}
    if not values:
        return {"highest": [], "lowest": [], "average": 0}

    top = max(values.values())
    bottom = min(values.values())
    return {
        "highest": [_entry(u, names, all_stats[u], values[u]) for u in tied_at(values, top)],
        "lowest": [_entry(u, names, all_stats[u], values[u]) for u in tied_at(values, bottom)],
        "average": round_half_up(sum(values.values()) / len(values)),
    }


def compare_comparator(all_stats, names, metric):
    """
    Leaders for the distinguished count metric, both by absolute value and by
    share of the user's rolls. The two lists are independent.
    """
    result = {"metric": metric, "highest": [], "highest_percentage": []}
    if not all_stats:
        return result

    values = {user_id: stats[metric] for user_id, stats in all_stats.items()}
    shares = {user_id: percentage(stats[metric], stats["count"]) for user_id, stats in all_stats.items()}

    for user_id in tied_at(values, max(values.values())):
        entry = _entry(user_id, names, all_stats[user_id], values[user_id])
        entry["percentage"] = shares[user_id]
        entry["mode"] = format_mode(all_stats[user_id]["mode"])
        result["highest"].append(entry)

    for user_id in tied_at(shares, max(shares.values())):
        entry = _entry(user_id, names, all_stats[user_id], values[user_id])
        entry["percentage"] = shares[user_id]
        entry["mode"] = format_mode_percentage(all_stats[user_id]["mode"])
        result["highest_percentage"].append(entry)

    return result


def compare_across_users(all_stats, names=None, comparator="criticals"):
    """
    all_stats: user_id -> stats snapshot (see roll_stats.compute_stats)
    names:     user_id -> display name
    """
    names = names or {}
    report = {metric: compare_metric(all_stats, names, metric) for metric in COMPARED_METRICS}
    report["comparator"] = compare_comparator(all_stats, names, comparator)
    report["users_compared"] = len(all_stats)
    return report
