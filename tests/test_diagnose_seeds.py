import importlib.util
import json
import os

from layoutforge.generation import generate
from layoutforge.generation.checks import analyze
from layoutforge.generation.geometry import Segment
from layoutforge.generation.halls import RoomEdge
from layoutforge.generation.rooms import Room

from layout_test_utils import small_config

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _load_script():
    path = os.path.join(ROOT, "scripts", "diagnose_seeds.py")
    spec = importlib.util.spec_from_file_location("diagnose_seeds", path)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_script_reports_ok_for_seeds(capsys, monkeypatch):
    monkeypatch.setenv("LAYOUTFORGE_NUMBER_OF_ROOMS", "30")
    monkeypatch.setenv("LAYOUTFORGE_MIN_MAIN_ROOMS", "3")
    mod = _load_script()
    assert mod.main(["1", "2"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert [r["seed"] for r in report["results"]] == [1, 2]
    assert all(r["ok"] for r in report["results"])


def test_analyze_flags_broken_layout():
    layout = generate(small_config(), 12)
    assert not any(analyze(layout).values())
    stray = Room(0, 0, 5, 5, "secondary")
    layout.secondary_rooms.extend([stray, stray])
    layout.halls.append(Room(0, 0, 7, 7, "hall"))
    outsider = Room(10_000, 10_000, 14, 14, "main")
    layout.connections.append(RoomEdge(Segment.of(outsider.center, (0, 0)), outsider, outsider))
    issues = analyze(layout)
    assert issues["overlapping_rooms"]
    assert issues["bad_hall_shapes"] == [Room(0, 0, 7, 7, "hall").to_dict()]
    assert len(issues["unknown_connection_rooms"]) == 1
