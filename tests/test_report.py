"""Tests for the player and baseline text summaries."""

from detection.baseline import ServerBaseline, WeaponBaseline
from detection.report import baseline_summary, player_summary
from detection.stats import PlayerRecord, WeaponStat


def baseline(players=20):
    return ServerBaseline(
        {
            'rifle.ak':   WeaponBaseline(0.25, 0.05, 6.0, 2.0),
            'smg.mp5':    WeaponBaseline(0.15, 0.05, 8.0, 3.0),
            'bow.hunting': WeaponBaseline(0.40, 0.10, 2.0, 1.0),
            'pistol.m92': WeaponBaseline(0.30, 0.05, 5.0, 2.0),
            'rifle.lr300': WeaponBaseline(0.20, 0.05, 5.5, 2.0),
            'shotgun.pump': WeaponBaseline(0.05, 0.02, 9.0, 4.0),
        },
        total_players_sampled=players,
        total_hits_sampled=123456,
    )


def record():
    return PlayerRecord('Alice', 7.0, {
        'rifle.ak':     WeaponStat(120, 30, [2.0, 4.0]),
        'smg.mp5':      WeaponStat(10, 1),
        'pistol.m92':   WeaponStat(60, 20, [1.0]),
        'shotgun.pump': WeaponStat(5, 0),
        'bow.custom':   WeaponStat(70, 14),
    })


def test_top_three_weapons_by_hits():
    text = player_summary(record(), baseline(), 10.0)
    assert 'rifle.ak (120 hits)' in text
    assert 'bow.custom (70 hits)' in text
    assert 'pistol.m92 (60 hits)' in text
    assert 'smg.mp5' not in text
    assert text.index('rifle.ak') < text.index('bow.custom') < text.index('pistol.m92')


def test_weapon_lines():
    text = player_summary(record(), baseline(), 10.0)
    assert 'HS Ratio: 25.00% (Avg: 25.00%)' in text
    assert 'Aim Delta: 3.00°, StdDev: 1.00 (Avg: 6.00°)' in text
    # no baseline for this weapon yet
    assert 'HS Ratio: 20.00% (Calibrating...)' in text
    assert 'CALIBRATING' not in text


def test_calibrating_banner():
    assert '[SERVER IS CALIBRATING' in player_summary(record(), baseline(players=9), 10.0)


def test_hidden_detail_only_for_small_samples():
    rec = record()
    rec.weapon_stats['smg.mp5'].hits = 200
    text = player_summary(rec, baseline(), 10.0, reveal_full_detail=False)
    assert text.count('Not enough data recorded for this weapon.') == 0

    rec = PlayerRecord('Bob', 0.0, {'smg.mp5': WeaponStat(49, 1)})
    text = player_summary(rec, baseline(), 10.0, reveal_full_detail=False)
    assert 'Not enough data recorded for this weapon.' in text
    assert 'HS Ratio' not in text


def test_no_weapons():
    text = player_summary(PlayerRecord('Eve'), baseline(), 10.0)
    assert 'No weapon data recorded yet.' in text
    assert 'Suspicion: 0.00 / 10.0' in text


def test_unknown_player():
    assert player_summary(None, baseline(), 10.0, name='Zed') == 'No aim data found for player Zed.'
    assert player_summary(None, baseline(), 10.0, name='Zed', use_color=True) == \
        'No aim data found for player <color=#FFD700>Zed</color>.'


def test_suspicion_color_bands():
    calm     = player_summary(PlayerRecord('a', 4.9), baseline(), 10.0, use_color=True)
    elevated = player_summary(PlayerRecord('a', 5.0), baseline(), 10.0, use_color=True)
    flagged  = player_summary(PlayerRecord('a', 9.0), baseline(), 10.0, use_color=True)
    assert '<color=#88FF88>4.90</color>' in calm
    assert '<color=#FFFF88>5.00</color>' in elevated
    assert '<color=#FF8888>9.00</color>' in flagged


def test_plain_text_has_no_tags():
    assert '<color' not in player_summary(record(), baseline(players=1), 10.0)


def test_baseline_summary_top_five():
    text = baseline_summary(baseline())
    assert 'Baseline calculated from 20 players & 123,456 total hits across 6 weapon types.' in text
    lines = [l for l in text.splitlines() if l.startswith(' - ')]
    assert [l.split(':')[0][3:] for l in lines] == [
        'bow.hunting', 'pistol.m92', 'rifle.ak', 'rifle.lr300', 'smg.mp5',
    ]
    assert ' - rifle.ak: HSR 25.00%, AimDelta 6.00° (StdDev: 2.00)' in lines


def test_empty_baseline_summary():
    text = baseline_summary(ServerBaseline())
    assert 'from 0 players & 0 total hits across 0 weapon types' in text
