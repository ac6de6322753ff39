"""Tests for capture state models."""

from __future__ import annotations

from dumpsock.capture.buffer import CaptureBuffer
from dumpsock.capture.models import Active, CaptureStep, DrainStats, Failed


class TestDrainStats:
    def test_throughput_units(self):
        stats = DrainStats(byte_count=2 * 1024 * 1024, elapsed=2.0)
        assert stats.bytes_per_second == 1024 * 1024
        assert stats.kib_per_second == 1024
        assert stats.mib_per_second == 1.0

    def test_summary_line(self):
        stats = DrainStats(byte_count=2 * 1024 * 1024, elapsed=2.0)
        assert stats.summary() == "2097152 bytes in 2s for 1 MiB/s"

    def test_zero_elapsed_reports_zero_throughput(self):
        stats = DrainStats(byte_count=5, elapsed=0.0)
        assert stats.mib_per_second == 0.0
        assert stats.summary() == "5 bytes in 0s for 0 MiB/s"


class TestStates:
    def test_active_release_is_idempotent(self):
        released = []
        state = Active(buffer=CaptureBuffer())
        state.resources.callback(released.append, "closed")
        state.release()
        state.release()
        assert released == ["closed"]

    def test_failed_carries_step_and_partial(self):
        failed = Failed(step=CaptureStep.DRAIN, message="socket error during read", partial=b"ab")
        failed.release()
        assert failed.step is CaptureStep.DRAIN
        assert failed.partial == b"ab"

    def test_steps_in_pipeline_order(self):
        assert [s.value for s in CaptureStep] == [
            "init",
            "create_socket",
            "bind",
            "listen",
            "accept",
            "drain",
            "report",
        ]
