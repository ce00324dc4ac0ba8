"""
Tests for HotspotSession.

The session is exercised headless: bounding boxes are plain values and
storage is an isolated in-memory blob store.
"""

import pytest
from unittest.mock import Mock

from hotspot_tour.core.hotspots import BoundingBox, EventType, TourState
from hotspot_tour.persistence import MemoryBlobStore, PersistenceGateway
from hotspot_tour.tests.conftest import make_hotspot, make_image


@pytest.fixture
def loaded_session(session):
    """Session with two images, the first one active."""
    session.add_images([make_image("A"), make_image("B")])
    return session


@pytest.fixture
def events_received(session):
    received = []
    for event_type in EventType:
        session.events.on(event_type, lambda event: received.append(event))
    return received


def event_types(events):
    return [e.event_type for e in events]


class TestCollection:
    def test_initialization(self, session):
        assert session.state.images == ()
        assert session.state.active_image_id is None
        assert not session.state.tour.is_active
        assert session.events is not None

    def test_first_batch_activates_first_image(self, loaded_session):
        assert [img.id for img in loaded_session.state.images] == ["A", "B"]
        assert loaded_session.state.active_image_id == "A"

    def test_later_batch_keeps_active_image(self, loaded_session):
        loaded_session.select_image("B")
        loaded_session.add_images([make_image("C")])
        assert loaded_session.state.active_image_id == "B"
        assert [img.id for img in loaded_session.state.images] == ["A", "B", "C"]

    def test_batch_activates_when_nothing_active(self, loaded_session):
        loaded_session.delete_image("A")
        assert loaded_session.state.active_image_id is None
        loaded_session.add_images([make_image("C")])
        assert loaded_session.state.active_image_id == "B"

    def test_empty_batch_is_ignored(self, session, memory_gateway):
        assert session.add_images([]) == ()
        assert memory_gateway.store.load(memory_gateway.key) is None

    def test_new_image_uses_prefix(self, session):
        image = session.new_image("data:image/png;base64,AA", "x.png")
        assert image.id == "img_1"
        assert image.hotspots == ()

    def test_select_unknown_image(self, loaded_session):
        assert not loaded_session.select_image("zzz")
        assert loaded_session.state.active_image_id == "A"

    def test_select_image_clears_hotspot_selection(self, loaded_session, box):
        loaded_session.place_hotspot(300, 150, box)
        assert loaded_session.state.selected_hotspot_id is not None
        loaded_session.select_image("B")
        assert loaded_session.state.selected_hotspot_id is None

    def test_delete_inactive_image(self, loaded_session):
        assert loaded_session.delete_image("B")
        assert loaded_session.state.active_image_id == "A"
        assert not loaded_session.delete_image("B")

    def test_load(self, id_factory):
        from hotspot_tour.core.hotspots import HotspotSession

        store = MemoryBlobStore()
        first = HotspotSession(gateway=PersistenceGateway(store), id_factory=id_factory)
        first.add_images([make_image("A", [make_hotspot("h", 1, 2, "c")]), make_image("B")])

        second = HotspotSession(gateway=PersistenceGateway(store))
        assert second.load() == 2
        assert second.state.images == first.state.images
        assert second.state.active_image_id == "A"

    def test_load_malformed_falls_back_to_empty(self, caplog):
        from hotspot_tour.core.hotspots import HotspotSession

        store = MemoryBlobStore({"hotspot_poc_v1": "{not json"})
        session = HotspotSession(gateway=PersistenceGateway(store))
        assert session.load() == 0
        assert session.state.images == ()
        assert "Could not parse stored collection" in caplog.text


class TestHotspots:
    def test_place_hotspot(self, loaded_session, box):
        hotspot = loaded_session.place_hotspot(300, 150, box)

        assert (hotspot.x, hotspot.y, hotspot.comment) == (50.0, 50.0, "")
        assert loaded_session.state.active_image.hotspots == (hotspot,)
        assert loaded_session.state.selected_hotspot_id == hotspot.id

    def test_place_hotspot_changes_image_identity(self, loaded_session, box):
        before = loaded_session.state.active_image
        loaded_session.place_hotspot(300, 150, box)
        assert loaded_session.state.active_image is not before
        assert before.hotspots == ()

    def test_place_without_usable_box(self, loaded_session):
        assert loaded_session.place_hotspot(10, 10, None) is None
        assert loaded_session.place_hotspot(10, 10, BoundingBox(0, 0, 0, 0)) is None
        assert loaded_session.state.active_image.hotspots == ()

    def test_place_without_active_image(self, session, box):
        assert session.place_hotspot(300, 150, box) is None

    def test_place_blocked_during_tour(self, loaded_session, box):
        loaded_session.place_hotspot(300, 150, box)
        loaded_session.start_tour()
        assert loaded_session.place_hotspot(200, 100, box) is None
        assert loaded_session.add_hotspot_at("A", 10, 10) is None
        assert len(loaded_session.state.active_image.hotspots) == 1

    def test_update_comment(self, loaded_session, box):
        hotspot = loaded_session.place_hotspot(300, 150, box)
        assert loaded_session.update_comment(hotspot.id, "Look here")
        assert loaded_session.state.active_image.hotspots[0].comment == "Look here"

    def test_update_comment_unknown(self, loaded_session):
        assert not loaded_session.update_comment("missing", "x")

    def test_delete_selected_hotspot_clears_selection(self, loaded_session, box):
        hotspot = loaded_session.place_hotspot(300, 150, box)
        assert loaded_session.delete_hotspot(hotspot.id)
        assert loaded_session.state.active_image.hotspots == ()
        assert loaded_session.state.selected_hotspot_id is None

    def test_delete_other_hotspot_keeps_selection(self, loaded_session, box):
        first = loaded_session.place_hotspot(300, 150, box)
        second = loaded_session.place_hotspot(200, 100, box)
        loaded_session.select_hotspot(first.id)
        loaded_session.delete_hotspot(second.id)
        assert loaded_session.state.selected_hotspot_id == first.id

    def test_delete_unknown_hotspot(self, loaded_session):
        assert not loaded_session.delete_hotspot("missing")

    def test_select_hotspot(self, loaded_session, box):
        hotspot = loaded_session.place_hotspot(300, 150, box)
        loaded_session.clear_selection()
        assert loaded_session.state.selected_hotspot_id is None
        assert loaded_session.select_hotspot(hotspot.id)
        assert not loaded_session.select_hotspot("missing")
        assert loaded_session.state.selected_hotspot_id == hotspot.id

    def test_editor_anchor(self, loaded_session, box):
        loaded_session.place_hotspot(200, 200, box)
        assert loaded_session.editor_anchor(box) == (200.0, 200.0)
        resized = BoundingBox(left=0, top=0, width=800, height=400)
        assert loaded_session.editor_anchor(resized) == (200.0, 300.0)
        loaded_session.clear_selection()
        assert loaded_session.editor_anchor(box) is None

    def test_add_hotspot_at_other_image(self, loaded_session):
        hotspot = loaded_session.add_hotspot_at("B", 12.345, 150, "x")
        image_b = loaded_session.state.images[1]
        assert image_b.hotspots == (hotspot,)
        assert hotspot.y == 100.0
        # Selection only follows placements on the active image
        assert loaded_session.state.selected_hotspot_id is None

    def test_every_change_is_saved(self, loaded_session, memory_gateway, box):
        memory_gateway.save = Mock(return_value=True)
        hotspot = loaded_session.place_hotspot(300, 150, box)
        loaded_session.update_comment(hotspot.id, "a")
        loaded_session.delete_hotspot(hotspot.id)
        loaded_session.delete_image("B")
        assert memory_gateway.save.call_count == 4
        last_saved = memory_gateway.save.call_args[0][0]
        assert last_saved == loaded_session.state.images

    def test_failed_save_does_not_raise(self, loaded_session, memory_gateway, box):
        memory_gateway.store.save = Mock(side_effect=OSError("disk full"))
        assert loaded_session.place_hotspot(300, 150, box) is not None


class TestTour:
    @pytest.fixture
    def tour_session(self, loaded_session, box):
        """Image A with hotspots a (10%, 10%) and b (90%, 90%)."""
        a = loaded_session.add_hotspot_at("A", 10, 10, "a")
        b = loaded_session.add_hotspot_at("A", 90, 90, "b")
        loaded_session.hotspot_ids = (a.id, b.id)
        return loaded_session

    def test_walkthrough(self, tour_session):
        assert tour_session.start_tour("A")
        assert tour_session.state.tour == TourState("A", 0)
        assert tour_session.next_step()
        assert tour_session.state.tour == TourState("A", 1)
        assert not tour_session.next_step()
        assert tour_session.state.tour == TourState("A", 1)
        assert tour_session.prev_step()
        assert not tour_session.prev_step()
        assert tour_session.state.tour == TourState("A", 0)

    def test_start_defaults_to_active_image(self, tour_session):
        assert tour_session.start_tour()
        assert tour_session.state.tour.image_id == "A"

    def test_start_on_empty_image(self, tour_session):
        assert not tour_session.start_tour("B")
        assert not tour_session.state.tour.is_active

    def test_exit(self, tour_session):
        tour_session.start_tour("A")
        assert tour_session.exit_tour()
        assert not tour_session.state.tour.is_active
        assert not tour_session.exit_tour()

    def test_current_step(self, tour_session):
        assert tour_session.current_tour_step() is None
        tour_session.start_tour("A")
        tour_session.next_step()
        step = tour_session.current_tour_step()
        assert step.hotspot.comment == "b"
        assert step.label == "Step 2 / 2"

    def test_deleting_only_hotspot_ends_tour(self, session, events_received):
        session.add_images([make_image("A")])
        hotspot = session.add_hotspot_at("A", 50, 50)
        session.start_tour("A")

        session.delete_hotspot(hotspot.id)

        assert session.state.tour == TourState(None, 0)
        assert session.current_tour_step() is None
        assert EventType.TOUR_ENDED in event_types(events_received)

    def test_listeners_never_see_tour_on_empty_image(self, session):
        session.add_images([make_image("A")])
        hotspot = session.add_hotspot_at("A", 50, 50)
        session.start_tour("A")

        seen = []

        def record(event):
            state = session.state
            seen.append((state.tour, len(state.active_image.hotspots)))

        session.events.on(EventType.STATE_CHANGED, record)
        session.delete_hotspot(hotspot.id)

        assert seen
        for tour, count in seen:
            assert not (tour.is_active and count == 0)
        assert seen[0] == (TourState(None, 0), 0)

    def test_deleting_current_last_hotspot_clamps(self, tour_session):
        tour_session.start_tour("A")
        tour_session.next_step()
        tour_session.delete_hotspot(tour_session.hotspot_ids[1])
        assert tour_session.state.tour == TourState("A", 0)
        assert tour_session.current_tour_step().hotspot.comment == "a"

    def test_deleting_tour_image_ends_tour(self, tour_session):
        tour_session.start_tour("A")
        tour_session.delete_image("A")
        assert not tour_session.state.tour.is_active

    def test_select_image_during_tour_keeps_step(self, tour_session):
        tour_session.start_tour("A")
        tour_session.next_step()
        tour_session.select_image("B")
        assert tour_session.state.tour == TourState("A", 1)

    def test_render_data(self, tour_session):
        data = tour_session.get_render_data()
        assert data["active_image_id"] == "A"
        assert data["hotspot_count"] == 2
        assert not data["tour_active"]
        tour_session.start_tour()
        data = tour_session.get_render_data()
        assert data["tour_active"]
        assert data["tour_step"].step_index == 0


class TestEvents:
    def test_event_emission(self, session, events_received, box):
        session.add_images([make_image("A")])
        hotspot = session.place_hotspot(300, 150, box)
        session.update_comment(hotspot.id, "x")
        session.start_tour()
        session.next_step()
        session.exit_tour()

        types = event_types(events_received)
        for expected in [
            EventType.IMAGES_ADDED,
            EventType.ACTIVE_IMAGE_CHANGED,
            EventType.HOTSPOT_ADDED,
            EventType.HOTSPOT_SELECTED,
            EventType.HOTSPOT_UPDATED,
            EventType.COLLECTION_SAVED,
            EventType.TOUR_STARTED,
            EventType.TOUR_STEP_CHANGED,
            EventType.TOUR_ENDED,
            EventType.STATE_CHANGED,
        ]:
            assert expected in types

    def test_step_event_payload(self, session, events_received):
        session.add_images([make_image("A")])
        session.add_hotspot_at("A", 10, 20, "hello")
        session.start_tour()
        step_events = [
            e for e in events_received if e.event_type == EventType.TOUR_STEP_CHANGED
        ]
        assert step_events[-1].data["description"] == "hello"
        assert step_events[-1].data["step_count"] == 1

    def test_broken_listener_does_not_break_session(self, session, box):
        session.events.on(EventType.HOTSPOT_ADDED, Mock(side_effect=RuntimeError("boom")))
        session.add_images([make_image("A")])
        assert session.place_hotspot(300, 150, box) is not None


class TestEventSystem:
    """Test suite for the event emitter."""

    def test_event_subscription(self):
        from hotspot_tour.core.hotspots import EventEmitter, HotspotEvent

        emitter = EventEmitter()
        received = []
        emitter.on(EventType.HOTSPOT_ADDED, received.append)
        emitter.emit(HotspotEvent(EventType.HOTSPOT_ADDED, {"x": 50}))

        assert len(received) == 1
        assert received[0].data == {"x": 50}

    def test_event_unsubscription(self):
        from hotspot_tour.core.hotspots import EventEmitter, HotspotEvent

        emitter = EventEmitter()
        received = []
        emitter.on(EventType.HOTSPOT_ADDED, received.append)
        emitter.off(EventType.HOTSPOT_ADDED, received.append)
        emitter.off(EventType.TOUR_ENDED, received.append)
        emitter.emit(HotspotEvent(EventType.HOTSPOT_ADDED))
        assert received == []

    def test_default_payload(self):
        from hotspot_tour.core.hotspots import HotspotEvent

        assert HotspotEvent(EventType.TOUR_ENDED).data == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

    def test_unsubscribe_callable(self):
        from hotspot_tour.core.hotspots import EventEmitter, HotspotEvent

        emitter = EventEmitter()
        received = []
        unsubscribe = emitter.on(EventType.HOTSPOT_ADDED, received.append)
        assert emitter.listener_count(EventType.HOTSPOT_ADDED) == 1
        unsubscribe()
        unsubscribe()
        emitter.emit(HotspotEvent(EventType.HOTSPOT_ADDED))
        assert received == []
        assert emitter.listener_count(EventType.HOTSPOT_ADDED) == 0

    def test_once(self):
        from hotspot_tour.core.hotspots import EventEmitter, HotspotEvent

        emitter = EventEmitter()
        received = []
        emitter.once(EventType.TOUR_ENDED, received.append)
        emitter.emit(HotspotEvent(EventType.TOUR_ENDED, {"reason": "exit"}))
        emitter.emit(HotspotEvent(EventType.TOUR_ENDED, {"reason": "exit"}))
        assert len(received) == 1

    def test_listener_may_unsubscribe_during_emit(self):
        from hotspot_tour.core.hotspots import EventEmitter, HotspotEvent

        emitter = EventEmitter()
        calls = []
        unsubscribe = emitter.on(EventType.TOUR_ENDED, lambda e: unsubscribe())
        emitter.on(EventType.TOUR_ENDED, calls.append)
        emitter.emit(HotspotEvent(EventType.TOUR_ENDED))
        assert len(calls) == 1
        assert emitter.listener_count(EventType.TOUR_ENDED) == 1
