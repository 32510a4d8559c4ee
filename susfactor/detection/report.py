"""Text summaries for the query/command surface"""

from detection.stats import mean, population_stddev
from utils.helpers import format_pct

REVEAL_MIN_HITS      = 50
CALIBRATION_PLAYERS  = 10
TOP_PLAYER_WEAPONS   = 3
TOP_BASELINE_WEAPONS = 5

_COLORS = {
    'grey':    '<color=#555555>',
    'ltgrey':  '<color=#AAAAAA>',
    'cyan':    '<color=#00FFFF>',
    'yellow':  '<color=#FFFF88>',
    'green':   '<color=#88FF88>',
    'red':     '<color=#FF8888>',
    'warning': '<color=#FFD700>',
}


class _Palette:
    def __init__(self, use_color):
        self.use_color = use_color

    def __getattr__(self, name):
        if name == 'end':
            return '</color>' if self.use_color else ''
        if name in _COLORS:
            return _COLORS[name] if self.use_color else ''
        raise AttributeError(name)


def player_summary(record, baseline, threshold, reveal_full_detail=True, use_color=False, name=None):
    """Suspicion and top weapon stats for one player, compared to the server baseline.

    With reveal_full_detail False, weapons under REVEAL_MIN_HITS hits are withheld.
    """
    c = _Palette(use_color)
    if record is None:
        return f"No aim data found for player {c.warning}{name}{c.end}."

    with record.lock:
        suspicion = record.suspicion
        display   = record.display_name
        weapons   = sorted(record.weapon_stats.items(), key=lambda kv: kv[1].hits, reverse=True)
        weapons   = [(w, s.hits, s.headshot_ratio, list(s.aim_deltas)) for w, s in weapons[:TOP_PLAYER_WEAPONS]]

    lines = []
    if baseline.total_players_sampled < CALIBRATION_PLAYERS:
        lines.append(f"{c.warning}[SERVER IS CALIBRATING - STATS MAY BE INACCURATE]{c.end}")

    if suspicion < threshold * 0.5:
        sus_color = c.green
    elif suspicion < threshold * 0.9:
        sus_color = c.yellow
    else:
        sus_color = c.red

    lines.append(f"{c.grey}---{c.end} Aim Stats for {c.cyan}{display}{c.end} {c.grey}---{c.end}")
    lines.append(f" {c.ltgrey}Suspicion:{c.end} {sus_color}{suspicion:.2f}{c.end} / {threshold:.1f}")

    if not weapons:
        lines.append(" No weapon data recorded yet.")

    for weapon_id, hits, hsr, deltas in weapons:
        lines.append(f"{c.grey}--- {c.cyan}{weapon_id}{c.end} ({hits} hits) ---{c.end}")

        if not reveal_full_detail and hits < REVEAL_MIN_HITS:
            lines.append(f"  {c.ltgrey}Not enough data recorded for this weapon.{c.end}")
            continue

        wb = baseline.get(weapon_id)
        server_hsr = f"(Avg: {format_pct(wb.mean_hsr)})" if wb else "(Calibrating...)"
        server_aim = f"(Avg: {wb.mean_aim_delta:.2f}°)" if wb else "(Calibrating...)"

        lines.append(f"  {c.ltgrey}HS Ratio:{c.end} {c.cyan}{format_pct(hsr)}{c.end} {c.ltgrey}{server_hsr}{c.end}")
        if deltas:
            std_text = f" (StdDev: {population_stddev(deltas):.2f})" if use_color \
                else f", StdDev: {population_stddev(deltas):.2f}"
            lines.append(
                f"  {c.ltgrey}Aim Delta:{c.end} {c.cyan}{mean(deltas):.2f}°{std_text}{c.end} "
                f"{c.ltgrey}{server_aim}{c.end}"
            )

    lines.append(f"{c.grey}-------------------------------------{c.end}")
    return '\n'.join(lines)


def baseline_summary(baseline):
    lines = [
        "--- SusFactor Status ---",
        f"Baseline calculated from {baseline.total_players_sampled} players & "
        f"{baseline.total_hits_sampled:,} total hits across {len(baseline.weapons)} weapon types.",
    ]
    top = sorted(baseline.weapons.items(), key=lambda kv: kv[1].mean_hsr, reverse=True)
    lines.append(f"Top {TOP_BASELINE_WEAPONS} Weapons by Avg HSR:")
    for weapon_id, wb in top[:TOP_BASELINE_WEAPONS]:
        lines.append(
            f" - {weapon_id}: HSR {format_pct(wb.mean_hsr)}, AimDelta {wb.mean_aim_delta:.2f}° "
            f"(StdDev: {wb.stddev_aim_delta:.2f})"
        )
    lines.append("--------------------------------")
    return '\n'.join(lines)
