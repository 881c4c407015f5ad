import pytest

from cirrus.types import Pagination, Phase, ResourceKind, Status

pytestmark = [pytest.mark.unit]


class TestStatusParse:
    @pytest.mark.parametrize("raw", ["running", "RUNNING", " Running "])
    def test_case_and_whitespace_insensitive(self, raw: str):
        assert Status.parse(raw) is Status.RUNNING

    def test_unknown_string(self):
        assert Status.parse("hibernating") is Status.UNKNOWN

    def test_missing(self):
        assert Status.parse(None) is Status.UNKNOWN


class TestPhase:
    def test_every_status_has_a_phase(self):
        for status in Status:
            assert isinstance(status.phase, Phase)

    def test_unknown_is_transitional(self):
        assert Status.UNKNOWN.is_transitional

    def test_active_counts_as_running(self):
        assert Status.ACTIVE.phase is Phase.RUNNING

    def test_failed_and_error(self):
        assert Status.FAILED.phase is Status.ERROR.phase is Phase.FAILED


def test_kind_labels():
    assert [k.label for k in ResourceKind] == [
        "VPS",
        "database",
        "cache",
        "storage bucket",
        "serverless container",
        "VPS snapshot",
        "database snapshot",
        "cache snapshot",
        "SSH key",
        "firewall",
        "storage access key",
    ]


def test_snapshot_statuses():
    assert Status.parse("Completed") is Status.COMPLETED
    assert Status.COMPLETED.phase is Phase.RUNNING
    assert Status.CREATING.is_transitional


def test_pagination_defaults():
    p = Pagination.from_dict(None)
    assert (p.current_page, p.last_page) == (1, 1)


def test_pagination_from_dict():
    p = Pagination.from_dict({"current_page": 2, "last_page": 3, "per_page": 10, "total": 24})
    assert p == Pagination(current_page=2, last_page=3, per_page=10, total=24)
