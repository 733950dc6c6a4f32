# backend/roll_stats.py

import math


def round_half_up(value):
    """Rounds .5 upwards (2.5 -> 3), unlike the built-in round()."""
    return int(math.floor(value + 0.5))


def percentage(part, total):
    if not total:
        return 0
    return round_half_up(part / total * 100)


### 📊 Basic Measures ###
def calc_mean(values):
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def calc_median(values):
    if not values:
        return 0
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[middle]
    median = (ordered[middle - 1] + ordered[middle]) / 2
    return int(median) if median.is_integer() else median


def frequencies(values):
    """Value -> count, in first-seen order."""
    counts = {}
    for v in values:
        counts[v] = counts.get(v, 0) + 1
    return counts


def calc_mode(values):
    """
    Returns (counts, mode, mode_count). `mode` lists every value tied at the
    highest frequency, in first-seen order.
    """
    counts = frequencies(values)
    mode_count = max(counts.values(), default=0)
    mode = [v for v, c in counts.items() if c == mode_count]
    return counts, mode, mode_count


### 🎯 d100 Outcome Rules ###
def is_double(value):
    """Doubles (11, 22, ... 99) and 100 are criticals or fumbles."""
    return value % 11 == 0 or value == 100


def count_criticals(rolls):
    return sum(1 for r in rolls if is_double(r["value"]) and r.get("success"))


def count_fumbles(rolls):
    return sum(1 for r in rolls if is_double(r["value"]) and not r.get("success"))


def empty_stats():
    return {
        "mean": 0,
        "median": 0,
        "mode": [],
        "mode_count": 0,
        "mode_count_percentage": 0,
        "auto_success": 0,
        "auto_success_percentage": 0,
        "auto_failure": 0,
        "auto_failure_percentage": 0,
        "criticals": 0,
        "criticals_percentage": 0,
        "fumbles": 0,
        "fumbles_percentage": 0,
        "fortune": 0,
        "dark_deal": 0,
        "last_roll": "",
        "count": 0,
    }


def compute_stats(rolls, auto_success_threshold, auto_failure_threshold):
    """
    Builds a stats snapshot for one user's roll history.

    Auto success counts every roll at or below `auto_success_threshold`,
    auto failure every roll at or above `auto_failure_threshold`.
    """
    if not rolls:
        return empty_stats()

    values = [r["value"] for r in rolls]
    count = len(values)
    counts, mode, mode_count = calc_mode(values)

    auto_success = sum(c for v, c in counts.items() if v <= auto_success_threshold)
    auto_failure = sum(c for v, c in counts.items() if v >= auto_failure_threshold)
    criticals = count_criticals(rolls)
    fumbles = count_fumbles(rolls)

    return {
        "mean": calc_mean(values),
        "median": calc_median(values),
        "mode": mode,
        "mode_count": mode_count,
        "mode_count_percentage": percentage(mode_count, count),
        "auto_success": auto_success,
        "auto_success_percentage": percentage(auto_success, count),
        "auto_failure": auto_failure,
        "auto_failure_percentage": percentage(auto_failure, count),
        "criticals": criticals,
        "criticals_percentage": percentage(criticals, count),
        "fumbles": fumbles,
        "fumbles_percentage": percentage(fumbles, count),
        "fortune": sum(1 for r in rolls if r.get("fortune_used_reroll")),
        "dark_deal": sum(1 for r in rolls if r.get("dark_deal_reroll")),
        "last_roll": ", ".join(str(v) for v in values),
        "count": count,
    }


def export_text(rolls):
    """`value,frequency` per distinct value, ascending by value (R-friendly)."""
    counts = frequencies(r["value"] for r in rolls)
    return "".join(f"{value},{freq}\n" for value, freq in sorted(counts.items()))


### 🔁 Reroll Classification ###
def build_roll_record(event, previous=None):
    """
    Turns a roll event into a stored record.

    A fortune reroll only counts when the previous roll was not already a
    fortune reroll; a generic reroll counts as a dark deal unless it is the
    fortune reroll itself, so one reroll is never counted twice.
    """
    context = event.get("reroll_context") or {}
    fortune = bool(context.get("fortune"))
    reroll = bool(context.get("reroll"))
    previous_fortune = bool(previous and previous.get("fortune_used_reroll"))

    return {
        "id": str(event["id"]),
        "value": int(event["value"]),
        "success": bool(event.get("success")),
        "type": event.get("skill_name") or "",
        "fortune_used_reroll": fortune and not previous_fortune,
        "dark_deal_reroll": reroll and (not fortune or previous_fortune),
    }
