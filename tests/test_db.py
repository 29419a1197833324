from datetime import datetime, timedelta, timezone

from mood_journal_api.app.core.db import SYSTEM_PROMPTS, format_timestamp, get_connection, init_db


def system_prompt_count(conn):
    return conn.execute("SELECT COUNT(*) FROM mood_prompts WHERE is_system = 1").fetchone()[0]


def test_init_db_is_idempotent_and_seeds_once():
    conn = get_connection(":memory:")
    try:
        init_db(conn, seed=True)
        init_db(conn, seed=True)
        assert system_prompt_count(conn) == len(SYSTEM_PROMPTS)
        owners = {row[0] for row in conn.execute("SELECT user_id FROM mood_prompts")}
        assert owners == {None}
    finally:
        conn.close()


def test_init_db_without_seed():
    conn = get_connection(":memory:")
    try:
        init_db(conn, seed=False)
        assert system_prompt_count(conn) == 0
    finally:
        conn.close()


def test_timestamps_sort_chronologically():
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    later = base + timedelta(microseconds=1)
    assert format_timestamp(base) < format_timestamp(later)
    assert format_timestamp(base) == "2025-01-01T00:00:00.000000+00:00"


def test_naive_timestamps_are_treated_as_utc():
    assert format_timestamp(datetime(2025, 1, 1, 12)) == "2025-01-01T12:00:00.000000+00:00"
