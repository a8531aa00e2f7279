import pytest

from leaderboard_service.models import Entry
from leaderboard_service.ranking import MAX_ENTRIES, rank, time_to_seconds


def entry(username, score=10, time="01:00", difficulty="EASY"):
    return Entry(username=username, score=score, time=time, difficulty=difficulty)


def names(entries):
    return [e.username for e in entries]


@pytest.mark.parametrize("value, expected", [
    ("00:00", 0),
    ("00:45", 45),
    ("01:30", 90),
    ("10:05", 605),
    ("1:5", 65),
])
def test_time_to_seconds(value, expected):
    assert time_to_seconds(value) == expected


@pytest.mark.parametrize("value", ["abc", "130", "aa:bb", "01:", ":30", None, 90])
def test_time_to_seconds_rejects_malformed(value):
    with pytest.raises(ValueError):
        time_to_seconds(value)


def test_difficulty_beats_score_and_time():
    ranked = rank([
        entry("easy", score=999, time="00:01", difficulty="EASY"),
        entry("hard", score=1, time="59:59", difficulty="HARD"),
        entry("medium", score=500, time="00:10", difficulty="MEDIUM"),
    ])
    assert names(ranked) == ["hard", "medium", "easy"]


def test_higher_score_first_within_tier():
    ranked = rank([entry("low", score=10), entry("high", score=30), entry("mid", score=20)])
    assert names(ranked) == ["high", "mid", "low"]


def test_lower_time_first_within_tier_and_score():
    ranked = rank([
        entry("slow", time="02:00"),
        entry("fast", time="00:59"),
        entry("mid", time="01:30"),
    ])
    assert names(ranked) == ["fast", "mid", "slow"]


def test_numeric_strings_compare_as_numbers():
    ranked = rank([entry("nine", score="9"), entry("ten", score="10"), entry("hundred", score=100)])
    assert names(ranked) == ["hundred", "ten", "nine"]


def test_truncates_to_top_five():
    ranked = rank([entry(f"u{i}", score=i) for i in range(8)])
    assert len(ranked) == MAX_ENTRIES
    assert names(ranked) == ["u7", "u6", "u5", "u4", "u3"]


def test_custom_limit():
    assert len(rank([entry(f"u{i}") for i in range(4)], limit=2)) == 2


def test_malformed_time_sorts_last_within_tier_and_score():
    ranked = rank([
        entry("broken", time="abc"),
        entry("slow", time="30:00"),
        entry("other_tier", time="abc", difficulty="MEDIUM"),
    ])
    assert names(ranked) == ["other_tier", "slow", "broken"]


def test_non_numeric_score_sorts_last_within_tier():
    ranked = rank([entry("nan", score="lots"), entry("zero", score=0)])
    assert names(ranked) == ["zero", "nan"]


def test_unknown_stored_tier_ranks_below_easy():
    ranked = rank([entry("weird", score=1000, difficulty="INSANE"), entry("easy", score=1)])
    assert names(ranked) == ["easy", "weird"]


def test_rank_does_not_mutate_input():
    entries = [entry("b", score=1), entry("a", score=2)]
    rank(entries)
    assert names(entries) == ["b", "a"]


def test_ordering_property_holds_pairwise():
    tiers = ["EASY", "MEDIUM", "HARD"]
    pool = [
        entry(f"u{i}", score=(i * 7) % 5, time=f"0{i % 3}:{(i * 13) % 60:02d}", difficulty=tiers[i % 3])
        for i in range(12)
    ]
    ranked = rank(pool, limit=len(pool))
    order = {"EASY": 0, "MEDIUM": 1, "HARD": 2}
    for a, b in zip(ranked, ranked[1:]):
        ka = (order[a.difficulty], a.score, -time_to_seconds(a.time))
        kb = (order[b.difficulty], b.score, -time_to_seconds(b.time))
        assert ka >= kb


@pytest.mark.parametrize("value", ["1_0:00", "01:3_0", "١:٠٠", "１:00", "0x1:00"])
def test_time_to_seconds_wants_ascii_decimal_digits(value):
    with pytest.raises(ValueError):
        time_to_seconds(value)


def test_time_to_seconds_allows_padding_and_sign():
    assert time_to_seconds(" 01 : 30 ") == 90
    assert time_to_seconds("+1:00") == 60


def test_underscored_time_sorts_with_malformed_times():
    ranked = rank([entry("underscored", time="1_0:00"), entry("slow", time="59:59")])
    assert names(ranked) == ["slow", "underscored"]

