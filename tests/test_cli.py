"""
Tests for the command line interface.
"""

import json

import pytest

from main import build_context, main, parse_value


class TestBuildContext:

    def test_inline_json(self):
        assert build_context('{"gold": 50, "career": "thief"}', []) == {"gold": 50, "career": "thief"}

    def test_json_file(self, tmp_path):
        path = tmp_path / "player.json"
        path.write_text('{"level": 12}', encoding="utf-8")
        assert build_context(str(path), []) == {"level": 12}

    def test_assignments_override(self):
        context = build_context('{"gold": 50}', ["gold=75", "career=merchant", "traits=[\"bold\"]"])
        assert context == {"gold": 75, "career": "merchant", "traits": ["bold"]}

    def test_bad_assignment(self):
        with pytest.raises(ValueError):
            build_context(None, ["gold"])

    def test_context_must_be_object(self):
        with pytest.raises(ValueError):
            build_context("[1, 2]", [])

    @pytest.mark.parametrize("raw,expected", [
        ("12", 12),
        ("1.5", 1.5),
        ("true", True),
        ("Iron Fist", "Iron Fist"),
    ])
    def test_parse_value(self, raw, expected):
        assert parse_value(raw) == expected


class TestMain:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("RPG_EVENTS_SEED", "RPG_EVENTS_STATE_SIZE", "RPG_EVENTS_AI_ENABLED", "OPENAI_API_KEY"):
            monkeypatch.delenv(name, raising=False)

    def test_writes_events_to_file(self, tmp_path, capsys):
        output = tmp_path / "out" / "events.json"
        main(["--seed", "3", "-s", "gold=50", "-n", "2", "-o", str(output)])

        events = json.loads(output.read_text(encoding="utf-8"))
        assert len(events) == 2
        assert events[0]["context"]["gold"] == 50
        assert "Saved 2 event(s)" in capsys.readouterr().out

    def test_seed_is_reproducible(self, tmp_path):
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"
        main(["--seed", "8", "-o", str(first)])
        main(["--seed", "8", "-o", str(second)])
        assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")

    def test_prints_events(self, capsys):
        main(["--seed", "4", "-c", '{"level": 1, "gold": 10}'])
        out = capsys.readouterr().out
        assert "Power level: 31 (easy)" in out
        assert "/ easy]" in out

    def test_loads_corpus(self, tmp_path, capsys):
        (tmp_path / "harbor.txt").write_text("Gulls circle above the harbor masts.", encoding="utf-8")
        main(["--seed", "1", "-d", str(tmp_path)])
        assert "Added 1 sentences." in capsys.readouterr().out

    def test_invalid_context_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["-c", "{not json"])
        assert excinfo.value.code == 1

    def test_missing_corpus_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["-d", str(tmp_path / "missing")])
