import pytest

from microscopy.errors import EmptyName, NoActiveResult, SaveWorkflowClosed
from microscopy.session.history_store import HistoryStore
from microscopy.session.save_workflow import SaveWorkflow


@pytest.fixture()
def history():
    return HistoryStore()


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_names_rejected_and_workflow_stays_open(history, result, name):
    workflow = SaveWorkflow(history, lambda: result)
    with pytest.raises(EmptyName):
        workflow.confirm(name)
    assert workflow.is_open
    assert len(history) == 0


def test_confirm_appends_snapshot_and_closes(history, result):
    closed = []
    workflow = SaveWorkflow(history, lambda: result, on_close=closed.append)
    entry = workflow.confirm("  Dock-A-5 ")

    assert entry.name == "Dock-A-5"
    assert entry.snapshot == result
    assert entry.snapshot is not result
    assert list(history.list()) == [entry]
    assert not workflow.is_open
    assert closed == [workflow]


def test_confirm_uses_candidate_name(history, result):
    workflow = SaveWorkflow(history, lambda: result)
    workflow.set_name("Bay-Sample-001")
    assert workflow.confirm().name == "Bay-Sample-001"


def test_snapshot_taken_at_confirmation_time(history, result):
    from conftest import make_result

    current = {"value": result}
    workflow = SaveWorkflow(history, lambda: current["value"])
    later = make_result(totalOrganisms=120)
    current["value"] = later
    assert workflow.confirm("later").snapshot == later


def test_no_result_at_confirmation(history):
    workflow = SaveWorkflow(history, lambda: None)
    with pytest.raises(NoActiveResult):
        workflow.confirm("x")
    assert len(history) == 0


def test_cancel_has_no_side_effects(history, result):
    closed = []
    workflow = SaveWorkflow(history, lambda: result, on_close=closed.append)
    workflow.set_name("draft")
    workflow.cancel()
    assert not workflow.is_open
    assert workflow.candidate_name == ""
    assert len(history) == 0
    assert closed == [workflow]

    # Cancelling again is a no-op
    workflow.cancel()
    assert closed == [workflow]


def test_closed_workflow_cannot_confirm(history, result):
    workflow = SaveWorkflow(history, lambda: result)
    workflow.confirm("once")
    with pytest.raises(SaveWorkflowClosed):
        workflow.confirm("twice")
    assert len(history) == 1
