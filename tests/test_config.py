"""Settings tests."""

from room.config import get_settings


def test_defaults(monkeypatch):
    for key in ("ROOM_NAME", "MAX_PLAYERS", "CLUE_TIME", "DISCUSSION_TIME", "VOTING_TIME", "ADMIN_KEY", "GAME_SEED"):
        monkeypatch.delenv(key, raising=False)
    settings = get_settings()
    assert settings.MAX_PLAYERS == 15
    assert settings.CLUE_TIME == 20
    assert settings.DISCUSSION_TIME == 30
    assert settings.VOTING_TIME == 20
    assert settings.ADMIN_KEY is None
    assert settings.GAME_SEED is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ROOM_NAME", "Test room")
    monkeypatch.setenv("CLUE_TIME", "15")
    monkeypatch.setenv("ADMIN_KEY", "s3cret")
    monkeypatch.setenv("GAME_SEED", "42")
    settings = get_settings()
    assert settings.ROOM_NAME == "Test room"
    assert settings.CLUE_TIME == 15
    assert settings.ADMIN_KEY == "s3cret"
    assert settings.GAME_SEED == 42


def test_malformed_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("VOTING_TIME", "soon")
    monkeypatch.setenv("ADMIN_KEY", "")
    settings = get_settings()
    assert settings.VOTING_TIME == 20
    assert settings.ADMIN_KEY is None


def test_game_settings(monkeypatch):
    monkeypatch.setenv("CLUE_TIME", "12")
    monkeypatch.setenv("DISCUSSION_TIME", "45")
    monkeypatch.setenv("VOTING_TIME", "25")
    game = get_settings().game_settings()
    assert game.clue_seconds == 12
    assert game.discussion_seconds == 45
    assert game.voting_seconds == 25
    assert game.min_players == 5
    assert game.round_size == 5
