import json
import os
import sys

import pytest
from streamlit.testing.v1 import AppTest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT)
import config

APP_PATH = os.path.join(ROOT, "workout.py")


def _markdown_text(at) -> str:
    return "\n".join(m.value for m in at.markdown)


class TestWorkoutApp:
    @pytest.fixture(autouse=True)
    def _data_dir(self, tmp_path, monkeypatch):
        self.data_dir = tmp_path
        monkeypatch.setenv("GYM_JOURNAL_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("GYM_JOURNAL_TIMEZONE", "UTC")

    def _app(self) -> AppTest:
        at = AppTest.from_file(APP_PATH, default_timeout=20)
        at.run()
        assert not at.exception
        return at

    def _log_set(self, at, exercise, reps, weight):
        at.button(key=f"pick_{exercise}").click().run()
        at.number_input(key="reps_input").set_value(reps)
        at.selectbox(key="weight_input").set_value(weight)
        at.button(key="save_set").click().run()
        assert not at.exception

    def test_empty_journal(self):
        at = self._app()
        assert [t.label for t in at.tabs] == ["⚡ Workout", "📖 Journal"]
        assert at.info[0].value == "No workouts logged yet."
        for name in config.EXERCISES:
            assert at.button(key=f"pick_{name}").label == name

    def test_entry_form_defaults(self):
        at = self._app()
        at.button(key="pick_Deadlift").click().run()
        assert at.subheader[0].value == "Deadlift"
        assert [n.key for n in at.number_input] == ["reps_input"]
        assert at.number_input(key="reps_input").value == 1
        assert at.selectbox(key="weight_input").value == 45

    def test_cancel_returns_to_picker(self):
        at = self._app()
        at.button(key="pick_Squat").click().run()
        at.button(key="cancel_set").click().run()
        assert at.button(key="pick_Squat").label == "Squat"
        assert not (self.data_dir / "Workouts.json").exists()

    def test_logged_sets_appear_in_journal(self):
        at = self._app()
        self._log_set(at, "Bench Press", 5, 135)
        self._log_set(at, "Squat", 5, 185)
        self._log_set(at, "Bench Press", 3, 145)

        text = _markdown_text(at)
        assert "5 reps @ 135 lbs" in text
        assert "3 reps @ 145 lbs" in text
        assert "2035 lbs" in text
        assert len(at.get("plotly_chart")) == 1

        data = json.loads((self.data_dir / "Workouts.json").read_text())
        assert len(data) == 1
        assert [s["exercise"] for s in data[0]["sets"]] == ["Bench Press", "Squat", "Bench Press"]

    def test_each_save_records_one_set(self):
        at = self._app()
        self._log_set(at, "Barbell Row", 8, 95)
        data = json.loads((self.data_dir / "Workouts.json").read_text())
        assert data[0]["sets"] == [{"exercise": "Barbell Row", "reps": 8, "weight": 95}]
        assert "760 lbs" in _markdown_text(at)

    def test_sessions_share_one_history(self):
        first = self._app()
        second = self._app()
        self._log_set(first, "Bench Press", 5, 135)
        self._log_set(second, "Squat", 5, 185)

        data = json.loads((self.data_dir / "Workouts.json").read_text())
        assert len(data) == 1
        assert [s["exercise"] for s in data[0]["sets"]] == ["Bench Press", "Squat"]

        first.run()
        text = _markdown_text(first)
        assert "5 reps @ 135 lbs" in text
        assert "5 reps @ 185 lbs" in text

    def test_history_loaded_on_startup(self):
        (self.data_dir / "Workouts.json").write_text(json.dumps([
            {"date": "2026-10-14T18:00:00+00:00", "sets": [{"exercise": "Deadlift", "reps": 5, "weight": 315}]}
        ]))
        at = self._app()
        text = _markdown_text(at)
        assert "Oct 14, 2026" in text
        assert "Deadlift:" in text
        assert "1575 lbs" in text

    def test_corrupt_history_starts_empty(self):
        (self.data_dir / "Workouts.json").write_bytes(b"not json at all")
        at = self._app()
        assert at.info[0].value == "No workouts logged yet."
