from cirrus.engine.clock import Clock, MonotonicClock
from cirrus.engine.pagination import collect_pages, parse_page
from cirrus.engine.teardown import Lifecycle, teardown
from cirrus.engine.wait import wait_for_status

__all__ = [
    "Clock",
    "Lifecycle",
    "MonotonicClock",
    "collect_pages",
    "parse_page",
    "teardown",
    "wait_for_status",
]
