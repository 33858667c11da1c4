"""End-to-end lifecycle through BroadcastService with a recording transport."""

from audiocast.schemas import ConnectionId


class TestBroadcastScenario:
    def test_host_viewer_negotiation_and_host_departure(self, service, notifier):
        a = ConnectionId("A")
        b = ConnectionId("B")
        service.connect(a)
        service.connect(b)

        service.register_host(a)
        assert service.viewer_join(b) is True
        stats = notifier.stats()[-1]
        assert (stats.viewer_count, stats.host_present) == (1, True)

        service.relay_offer(b, "X", a)
        assert notifier.events_for(b)[-1] == ("webrtc-offer", {"sdp": "X", "hostId": "A"})

        service.relay_answer(a, "Y", b)
        assert notifier.events_for(a)[-1] == ("webrtc-answer", {"sdp": "Y", "viewerId": "B"})

        service.disconnect(a)
        assert notifier.events_for(b)[-1] == ("host-left", None)
        stats = notifier.stats()[-1]
        assert (stats.viewer_count, stats.host_present) == (0, False)

    def test_join_without_host_replies_no_host(self, service, notifier, viewer_id):
        service.connect(viewer_id)

        assert service.viewer_join(viewer_id) is False
        assert notifier.events_for(viewer_id) == [("no-host", None)]
        assert service.registry.viewer_count == 0

    def test_viewer_can_rejoin_after_host_returns(self, service, notifier, host_id, viewer_id):
        service.register_host(host_id)
        service.viewer_join(viewer_id)
        service.disconnect(host_id)

        new_host = ConnectionId("cn_host_new")
        service.register_host(new_host)
        assert service.viewer_join(viewer_id) is True
        assert notifier.events_for(new_host)[-1] == ("viewer-joined", {"viewerId": "cn_viewer_b"})

    def test_relay_to_absent_target_delivers_nothing(self, service, notifier, host_id):
        service.register_host(host_id)
        notifier.clear()

        ghost = ConnectionId("cn_ghost")
        assert service.relay_offer(ghost, "X", host_id) is False
        assert service.relay_answer(ghost, "Y", host_id) is False
        assert service.relay_ice_candidate(ghost, {"candidate": "c"}, host_id) is False

        assert notifier.sent == []
        assert notifier.broadcasts == []
