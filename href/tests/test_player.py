"""
Tests for HrefPlayer.

Critical: seeking to T must produce the same text state as playing to T,
and the same document must always replay to the same state.
"""

import io
import json

import pytest
from rich.console import Console

from href.config import PlayerOptions
from href.core.errors import LoadError, OperationError
from href.render import RichTextViewer
from href.replay import HrefPlayer, ManualClock, PlaybackStatus
from href.replay.snapshot import compute_state_hash
from href.tests.samples import input_event, make_doc, typing_doc


def new_player(**option_values):
    clock = ManualClock()
    player = HrefPlayer(options=PlayerOptions(**option_values), clock=clock)
    return player, clock


def loaded_player(**option_values):
    player, clock = new_player(**option_values)
    player.load(typing_doc())
    return player, clock


def test_operations_need_a_document():
    player, _ = new_player()
    with pytest.raises(OperationError):
        player.play()
    with pytest.raises(OperationError):
        player.seek(10)
    player.pause()
    player.stop()

    st = player.get_state()
    assert st.status == PlaybackStatus.IDLE
    assert st.text_state.text == ""


def test_load_publishes_initial_text():
    player, _ = new_player()
    seen = []
    player.on_state_change(seen.append)
    player.load(typing_doc())

    assert [s.text for s in seen] == ["cd"]
    assert player.document.session.id == "sess-001"
    assert player.get_state().status == PlaybackStatus.STOPPED
    assert player.get_state().duration == 800


@pytest.mark.parametrize("target", [0, 150, 450, 575, 800])
def test_seek_matches_play_then_pause(target):
    """Jumping to T and playing to T land on the same text state."""
    seeker, _ = loaded_player()
    seeker.seek(target)

    player, clock = loaded_player()
    player.play()
    clock.advance(target)
    player.pause()

    assert seeker.get_text_state() == player.get_text_state()
    assert compute_state_hash(seeker.get_text_state()) == compute_state_hash(player.get_text_state())


def test_seek_is_idempotent():
    player, _ = loaded_player()
    player.seek(575)
    first = player.get_text_state()
    player.seek(575)
    assert player.get_text_state() == first
    assert first.composition is not None
    assert first.preview_text() == "hiｋ"


def test_seek_backwards_rebuilds_from_start():
    player, _ = loaded_player()
    player.seek(800)
    assert player.get_text_state().text == "hiか"
    player.seek(250)
    assert player.get_text_state().text == "acd"


@pytest.mark.parametrize("target", [float("nan"), "100", None, True])
def test_rejected_seek_keeps_position_and_text(target):
    player, clock = new_player()
    player.load(
        make_doc(
            [
                input_event(0, "insertText", data="ab"),
                input_event(100, "insertText", data="c"),
            ]
        )
    )
    player.seek(50)
    assert player.get_text_state().text == "ab"

    with pytest.raises(OperationError):
        player.seek(target)
    assert player.get_text_state().text == "ab"
    assert player.get_state().current_time == 50

    final = player.run(sleep=clock.sleep)
    assert final.text_state.text == "abc"


def test_seek_publishes_one_state_change():
    player, _ = loaded_player()
    seen = []
    player.on_state_change(seen.append)
    player.seek(700)
    assert len(seen) == 1
    assert seen[0].text == "hiか"


def test_event_listeners_see_every_event_during_seek():
    player, _ = loaded_player()
    types = []
    player.on_event(lambda ev, state: types.append(ev.type))
    player.seek(800)
    assert len(types) == 13
    assert "custom" in types


def test_event_listener_receives_state_after_event():
    player, clock = loaded_player()
    pairs = []
    player.on_event(lambda ev, state: pairs.append((ev.time, state.text)))
    player.play()
    clock.advance(130)
    player.tick()
    assert pairs == [(0, "cd"), (100, "cd"), (120, "abcd")]


def test_play_publishes_each_event():
    player, clock = loaded_player()
    seen = []
    player.on_state_change(lambda s: seen.append(s.text))
    player.play()
    clock.advance(210)
    player.tick()
    assert seen == ["cd", "cd", "abcd", "acd"]


def test_run_to_end():
    player, clock = loaded_player()
    final = player.run(sleep=clock.sleep)

    assert final.status == PlaybackStatus.PAUSED
    assert final.current_time == 800
    assert final.text_state.text == "hiか"
    assert player.scheduler.is_finished


def test_play_after_finish_restarts():
    player, clock = loaded_player()
    player.run(sleep=clock.sleep)

    player.play()
    assert player.get_state().status == PlaybackStatus.PLAYING
    assert player.get_state().current_time == 0
    assert player.get_text_state().text == "cd"


def test_stop_restores_initial_text():
    player, _ = loaded_player()
    player.seek(450)
    player.stop()
    assert player.get_text_state().text == "cd"
    assert player.get_state().status == PlaybackStatus.STOPPED


def test_same_document_same_hash():
    hashes = set()
    for _ in range(5):
        player, clock = loaded_player()
        player.run(sleep=clock.sleep)
        hashes.add(compute_state_hash(player.get_text_state()))
    assert len(hashes) == 1


def test_speed():
    player, clock = loaded_player(speed=4)
    assert player.get_state().speed == 4
    player.play()
    clock.advance(100)
    player.tick()
    assert player.get_state().current_time == 400
    assert player.get_text_state().text == "hi"

    player.set_speed(0.5)
    assert player.get_state().speed == 0.5
    with pytest.raises(OperationError):
        player.set_speed(0)


def test_auto_play():
    player, _ = loaded_player(auto_play=True)
    assert player.get_state().is_playing


def test_invalid_load_keeps_previous_document():
    player, _ = loaded_player()
    player.seek(450)
    before = player.get_text_state()

    bad = make_doc([{"time": 5, "type": "focus"}, {"time": 1, "type": "blur"}])
    with pytest.raises(LoadError) as exc_info:
        player.load(bad)
    assert exc_info.value.problems

    assert player.document.session.id == "sess-001"
    assert player.get_text_state() == before
    assert player.get_state().duration == 800


def test_load_rejects_other_types():
    player, _ = new_player()
    with pytest.raises(LoadError):
        player.load(["not", "a", "document"])


def test_load_json():
    player, _ = new_player()
    player.load_json(json.dumps(typing_doc()))
    player.seek(800)
    assert player.get_text_state().text == "hiか"

    with pytest.raises(LoadError, match="Malformed JSON"):
        player.load_json("{")
    assert player.document is not None


def test_load_file(tmp_path):
    path = tmp_path / "doc.json"
    path.write_text(json.dumps(typing_doc(), ensure_ascii=False), encoding="utf-8")
    player, _ = new_player()
    player.load_file(path)
    assert len(player.document.events) == 13


def test_empty_document_plays_to_end():
    player, clock = new_player()
    player.load(make_doc([], initial_text="static"))
    final = player.run(sleep=clock.sleep)
    assert final.duration == 0
    assert final.text_state.text == "static"


def test_player_state_to_dict():
    player, _ = loaded_player()
    player.seek(120)
    data = player.get_state().to_dict()
    assert data["status"] == "paused"
    assert data["isPlaying"] is False
    assert data["currentTime"] == 120
    assert data["duration"] == 800
    assert data["textState"]["text"] == "abcd"
    assert data["textState"]["selectionStart"] == 2


def test_viewer_follows_state():
    console = Console(file=io.StringIO(), width=80)
    viewer = RichTextViewer(console=console)
    player, _ = loaded_player()

    player.attach_viewer(viewer)
    assert viewer.last.plain == "cd"

    player.seek(450)
    assert viewer.last.plain == "hi"

    player.detach_viewer()
    assert viewer.last.plain == ""
    player.seek(800)
    assert viewer.last.plain == ""
