from datetime import datetime, timezone

from bangarang_console.display import format_description, format_stats, status_color, status_label
from bangarang_console.models import Incident, SystemStats
from bangarang_console.utils import format_clock


def test_status_labels_and_colors():
    assert [status_label(code) for code in (0, 1, 2)] == ["OK", "WARNING", "CRITICAL"]
    assert [status_color(code) for code in (0, 1, 2)] == ["green", "#FFFD82", "#FB5C5C"]
    assert status_label(7) is None


def test_description_with_sub_service():
    incident = Incident(
        service="db", sub_service="replica", host="db-1", metric=93.126, time=1700000000, status=2
    )

    text = format_description(incident, tz=timezone.utc)

    assert text == "db.replica on db-1 is 93.13 at 10:13:20PM November-14-2023"


def test_description_without_sub_service():
    incident = Incident(service="db", host="db-1", metric=1, time=0, status=0)

    assert format_description(incident, tz=timezone.utc).startswith("db  on db-1 is 1.00 at 12:0:0AM")


def test_format_stats():
    stats = SystemStats(memory_used=512, memory_total=2048, load_one=1, uptime=3725)

    assert format_stats(stats) == "mem 512.0B/2.0KB | load 1.00 0.00 0.00 | up 1h02m05s"


def test_clock_does_not_pad_minutes_or_seconds():
    moment = datetime(2026, 10, 19, 15, 7, 9, tzinfo=timezone.utc)

    assert format_clock(moment) == "3:7:9PM October-19-2026"
