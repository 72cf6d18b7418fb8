from core.errors import PersistenceFailure
from core.position import ReadingPosition
from core.progress import SAVE_DELAY_MS, ProgressPersister
from core.scheduler import ManualScheduler


class _RecordingStore:
    def __init__(self, fail=False):
        self.writes = []
        self.fail = fail

    def update_reading_progress(self, document_id, absolute_position):
        if self.fail:
            raise OSError("disk full")
        self.writes.append((document_id, absolute_position))


def _position(index, count=10, total=300, doc="doc-1"):
    return ReadingPosition(document_id=doc, page_index=index, page_count=count, total_absolute_units=total)


def test_burst_of_changes_results_in_single_write_of_last_position():
    scheduler = ManualScheduler()
    store = _RecordingStore()
    persister = ProgressPersister(scheduler, store)

    for index in (1, 2, 3, 4):
        persister.on_position_changed(_position(index))
        scheduler.advance(SAVE_DELAY_MS - 10)

    assert store.writes == []

    scheduler.advance(10)

    assert store.writes == [("doc-1", 120)]
    assert persister.last_saved == ("doc-1", 120)
    assert not persister.has_pending


def test_separate_quiet_windows_write_separately():
    scheduler = ManualScheduler()
    store = _RecordingStore()
    persister = ProgressPersister(scheduler, store, delay_ms=200)

    persister.on_position_changed(_position(1))
    scheduler.advance(200)
    persister.on_position_changed(_position(5))
    scheduler.advance(200)

    assert store.writes == [("doc-1", 30), ("doc-1", 150)]


def test_failed_write_is_reported_and_not_retried(caplog):
    scheduler = ManualScheduler()
    store = _RecordingStore(fail=True)
    failures = []
    persister = ProgressPersister(scheduler, store, on_failure=failures.append)

    persister.on_position_changed(_position(2))
    scheduler.advance(SAVE_DELAY_MS)

    assert len(failures) == 1
    assert isinstance(failures[0], PersistenceFailure)
    assert "Could not save progress" in caplog.text
    assert scheduler.pending == 0


def test_flush_writes_immediately_and_cancels_timer():
    scheduler = ManualScheduler()
    store = _RecordingStore()
    persister = ProgressPersister(scheduler, store)

    persister.on_position_changed(_position(3))
    assert persister.flush() is True
    scheduler.advance(SAVE_DELAY_MS * 2)

    assert store.writes == [("doc-1", 90)]
    assert persister.flush() is False


def test_cancel_drops_pending_write():
    scheduler = ManualScheduler()
    store = _RecordingStore()
    persister = ProgressPersister(scheduler, store)

    persister.on_position_changed(_position(3))
    persister.cancel()
    scheduler.advance(SAVE_DELAY_MS)

    assert store.writes == []
