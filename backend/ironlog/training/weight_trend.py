"""Body-weight smoothing and trend direction."""

from ironlog.core.time_utils import as_date, days_between

TREND_PERIOD = 7
STABLE_RATE_PER_WEEK = 0.1


def moving_averages(entries: list[dict], windows=(7, 30)) -> list[dict]:
    """Trailing mean over the last N entries (not days) for each window.

    Returns new dicts in chronological order with `ma<N>` and
    `ma<N>_count` keys added.
    """
    ordered = sorted(entries, key=lambda e: as_date(e["date"]))
    out = []
    for idx, entry in enumerate(ordered):
        row = dict(entry)
        for n in windows:
            window = ordered[max(0, idx - n + 1): idx + 1]
            row[f"ma{n}"] = round(sum(float(e["weight"]) for e in window) / len(window), 1)
            row[f"ma{n}_count"] = len(window)
        out.append(row)
    return out


def weight_trend(entries: list[dict], period: int = TREND_PERIOD) -> dict:
    """Least-squares slope of weight against days over the last `period` entries.

    `rate` is in weight units per week; `confidence` is R² of the fit.
    """
    valid = [e for e in entries if e.get("weight") and float(e["weight"]) > 0]
    ordered = sorted(valid, key=lambda e: as_date(e["date"]))[-period:]
    if len(ordered) < 2:
        return {"direction": "insufficient_data", "rate": 0.0, "confidence": 0.0, "data_points": len(ordered)}

    origin = ordered[0]["date"]
    xs = [days_between(origin, e["date"]) for e in ordered]
    ys = [float(e["weight"]) for e in ordered]
    n = len(xs)
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    sxx = sum((x - mean_x) ** 2 for x in xs)
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))

    # All entries on the same day: no time axis to fit against
    slope = sxy / sxx if sxx else 0.0
    rate = slope * 7

    total_ss = sum((y - mean_y) ** 2 for y in ys)
    residual_ss = sum((y - (mean_y + slope * (x - mean_x))) ** 2 for x, y in zip(xs, ys))
    r_squared = 0.0 if total_ss == 0 or sxx == 0 else 1 - residual_ss / total_ss

    if abs(rate) < STABLE_RATE_PER_WEEK:
        direction = "stable"
    elif rate > 0:
        direction = "gaining"
    else:
        direction = "losing"

    return {
        "direction": direction,
        "rate": round(rate, 2),
        "confidence": round(r_squared, 3),
        "data_points": n,
        "days_covered": xs[-1],
    }
