import pytest

from layoutforge.generation import GenerationError, LayoutStepper, generate
from layoutforge.generation.pipeline import STAGES

from layout_test_utils import small_config


def test_steps_follow_stage_table():
    stepper = LayoutStepper(small_config(), 42)
    names = []
    while not stepper.done:
        expected = stepper.stage_name
        result = stepper.step()
        assert result.name == expected
        assert result.index == len(names)
        names.append(result.name)
    assert names == [name for name, _ in STAGES]
    assert stepper.stage_name is None
    assert result.done is True


def test_only_last_step_reports_done():
    stepper = LayoutStepper(small_config(), 3)
    flags = [stepper.step().done for _ in STAGES]
    assert flags == [False] * (len(STAGES) - 1) + [True]


def test_step_after_completion_raises():
    stepper = LayoutStepper(small_config(), 3)
    stepper.run_to_completion()
    with pytest.raises(GenerationError):
        stepper.step()


def test_stepper_matches_batch_generation():
    cfg = small_config()
    for seed in (0, 5, 123):
        stepped = LayoutStepper(cfg, seed).run_to_completion()
        assert stepped.to_dict() == generate(cfg, seed).to_dict()


def test_partial_steps_then_finish():
    cfg = small_config(separation="mtv")
    stepper = LayoutStepper(cfg, 17)
    stepper.step()
    stepper.step()
    assert stepper.stage_name == "select_main_rooms"
    assert stepper.run_to_completion().to_dict() == generate(cfg, 17).to_dict()


def test_summaries_describe_stage_output():
    stepper = LayoutStepper(small_config(), 9)
    populate = stepper.step()
    assert populate.summary["rooms"] >= 40
    separate = stepper.step()
    assert separate.summary["rooms"] + separate.summary["dropped"] == populate.summary["rooms"]
    select = stepper.step()
    assert select.summary["main_rooms"] + select.summary["pool"] == separate.summary["rooms"]
    connect = stepper.step()
    assert connect.summary["tree_edges"] <= connect.summary["triangulation_edges"]
    augment = stepper.step()
    assert augment.summary["edges"] == connect.summary["tree_edges"] + augment.summary["extra_edges"]
    carve = stepper.step()
    assert carve.summary["halls"] >= 0
    last = stepper.step()
    assert last.done and "secondary_rooms" in last.summary
    assert last.to_dict()["name"] == "secondary_rooms"


def test_metrics_filled_after_completion():
    stepper = LayoutStepper(small_config(), 9)
    layout = stepper.run_to_completion()
    assert set(layout.metrics["phase_ms"]) == {name for name, _ in STAGES}
    assert layout.seed == stepper.seed == 9
