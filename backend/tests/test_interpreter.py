"""
Tests for message interpretation and track building.
"""

import pytest

from conftest import START_US
from flightlog.models.track import RunState, Track, TrackSample
from flightlog.services.interpreter import MessageInterpreter
from flightlog.services.track_builder import append_sample


def _gps_raw(link, lat, lon, alt, fix_type=3):
    return link.gps_raw_int_encode(0, fix_type, lat, lon, alt, 65535, 65535, 0, 0, 10)


def _global_position(link, lat, lon, alt):
    return link.global_position_int_encode(0, lat, lon, alt, 0, 0, 0, 0, 0)


def _vfr_hud(link, groundspeed):
    return link.vfr_hud_encode(0.0, groundspeed, 0, 0, 0.0, 0.0)


@pytest.fixture
def interpreter():
    return MessageInterpreter(legacy_raw_fix_lon=False)


@pytest.fixture
def state():
    return RunState()


class TestStartTime:

    def test_first_frame_sets_start(self, interpreter, state, link):
        """Any message, even one without a sample, fixes the time origin."""
        link_msg = link.heartbeat_encode(2, 12, 0, 0, 4)
        interpreter.apply(state, START_US, link_msg)
        interpreter.apply(state, START_US + 5, link_msg)

        assert state.start_time_us == START_US

    def test_elapsed_relative_to_start(self, interpreter, state, link):
        interpreter.apply(state, START_US, _vfr_hud(link, 1.0))
        sample = interpreter.apply(state, START_US + 2_500_000, _global_position(link, 1, 2, 3))

        assert sample.elapsed_s == pytest.approx(2.5)

    def test_elapsed_never_negative(self, interpreter, state, link):
        interpreter.apply(state, START_US, _vfr_hud(link, 1.0))
        sample = interpreter.apply(state, START_US - 1_000_000, _global_position(link, 1, 2, 3))

        assert sample.elapsed_s == 0.0


class TestGlobalPosition:
    """GLOBAL_POSITION_INT handling."""

    def test_scaled_fields(self, interpreter, state, link):
        sample = interpreter.apply(state, START_US, _global_position(link, 377749000, -1224194000, 30000))

        assert sample.lat == pytest.approx(37.7749)
        assert sample.lon == pytest.approx(-122.4194)
        assert sample.alt == 30.0
        assert sample.speed == 0.0
        assert state.has_global_position

    def test_uses_last_speed(self, interpreter, state, link):
        interpreter.apply(state, START_US, _vfr_hud(link, 5.0))
        sample = interpreter.apply(state, START_US, _global_position(link, 1, 2, 3))

        assert sample.speed == 5.0


class TestGpsRawInt:
    """GPS_RAW_INT handling."""

    def test_3d_fix_produces_sample(self, interpreter, state, link):
        sample = interpreter.apply(state, START_US, _gps_raw(link, 377749000, -1224194000, 12500))

        assert sample.lat == pytest.approx(37.7749)
        assert sample.lon == pytest.approx(-122.4194)
        assert sample.alt == 12.5
        assert state.has_gps_raw

    def test_better_fix_types_accepted(self, interpreter, state, link):
        # 6 = RTK fixed
        assert interpreter.apply(state, START_US, _gps_raw(link, 1, 2, 3, fix_type=6)) is not None

    @pytest.mark.parametrize("fix_type", [0, 1, 2])
    def test_no_sample_without_3d_fix(self, interpreter, state, link, fix_type):
        assert interpreter.apply(state, START_US, _gps_raw(link, 1, 2, 3, fix_type=fix_type)) is None

    def test_suppressed_after_global_position(self, interpreter, state, link):
        """Once a fused position is seen, raw fixes are ignored for the rest of the run."""
        interpreter.apply(state, START_US, _global_position(link, 1, 2, 3))

        assert interpreter.apply(state, START_US + 1, _gps_raw(link, 10, 20, 30)) is None
        assert interpreter.apply(state, START_US + 2, _gps_raw(link, 11, 21, 31)) is None

    def test_legacy_longitude_output(self, state, link):
        """Legacy mode writes the fix latitude into the longitude field."""
        legacy = MessageInterpreter(legacy_raw_fix_lon=True)
        sample = legacy.apply(state, START_US, _gps_raw(link, 377749000, -1224194000, 0))

        assert sample.lon == sample.lat == pytest.approx(37.7749)


class TestVfrHud:

    def test_updates_speed_without_sample(self, interpreter, state, link):
        assert interpreter.apply(state, START_US, _vfr_hud(link, 4.25)) is None
        assert state.last_speed == 4.25

    def test_nan_speed_is_zero(self, interpreter, state, link):
        interpreter.apply(state, START_US, _vfr_hud(link, 4.0))
        interpreter.apply(state, START_US, _vfr_hud(link, float("nan")))

        assert state.last_speed == 0.0


class TestOtherMessages:

    def test_ignored(self, interpreter, state, link):
        msg = link.attitude_encode(0, 0.1, 0.2, 0.3, 0.0, 0.0, 0.0)

        assert interpreter.apply(state, START_US, msg) is None
        assert state.last_speed == 0.0
        assert not state.has_global_position


class TestAppendSample:
    """Tests for dead time suppression."""

    def test_first_sample_always_appended(self):
        track = Track()

        assert append_sample(track, TrackSample(0.0, 1.0, 2.0, 3.0, 0.0))
        assert len(track) == 1

    def test_identical_position_dropped(self):
        track = Track()
        append_sample(track, TrackSample(0.0, 1.0, 2.0, 3.0, 0.0))

        assert not append_sample(track, TrackSample(9.0, 1.0, 2.0, 3.0, 0.0))
        assert len(track) == 1
        assert track.last.elapsed_s == 0.0

    @pytest.mark.parametrize(
        "changed",
        [
            TrackSample(1.0, 1.5, 2.0, 3.0, 0.0),
            TrackSample(1.0, 1.0, 2.5, 3.0, 0.0),
            TrackSample(1.0, 1.0, 2.0, 3.5, 0.0),
            TrackSample(1.0, 1.0, 2.0, 3.0, 0.5),
        ],
    )
    def test_any_field_change_appended(self, changed):
        track = Track()
        append_sample(track, TrackSample(0.0, 1.0, 2.0, 3.0, 0.0))

        assert append_sample(track, changed)
        assert len(track) == 2

    def test_only_adjacent_samples_compared(self):
        track = Track()
        a = TrackSample(0.0, 1.0, 2.0, 3.0, 0.0)
        b = TrackSample(1.0, 1.0, 2.0, 4.0, 0.0)

        for sample in (a, b, TrackSample(2.0, 1.0, 2.0, 3.0, 0.0)):
            append_sample(track, sample)

        assert len(track) == 3


class TestTrackSummary:

    def test_empty_track(self):
        track = Track()

        assert track.get_time_range() == (0.0, 0.0)
        assert track.get_bounding_box() == (0.0, 0.0, 0.0, 0.0)
        assert track.distance_m() == 0.0
        assert track.to_array().shape == (0, 5)

    def test_bounding_box_and_distance(self):
        track = Track([
            TrackSample(0.0, -89.0, 32.0, 0.0, 0.0),
            TrackSample(1.0, -89.0, 33.0, 0.0, 0.0),
        ])

        assert track.get_bounding_box() == (-89.0, 32.0, -89.0, 33.0)
        # One degree of latitude
        assert track.distance_m() == pytest.approx(111000, rel=0.01)
        assert track.get_time_range() == (0.0, 1.0)
