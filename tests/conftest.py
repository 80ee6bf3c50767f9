import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from toast_store.clock import ManualScheduler  # noqa: E402
from toast_store.config import ToastConfig  # noqa: E402
from toast_store.ids import SequentialIdGenerator  # noqa: E402
from toast_store.store import ToastStore  # noqa: E402


@pytest.fixture
def clock() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def store(clock: ManualScheduler) -> ToastStore:
    """Fresh store on a fake clock: capacity 5, 1000ms removal delay, ids "1", "2", ..."""
    return ToastStore(ToastConfig(capacity=5, remove_delay_ms=1000), scheduler=clock, id_factory=SequentialIdGenerator())
