from __future__ import annotations

import threading

from runloop import LoopConfig, MonotonicClock, Scheduler, ThreadedRuntime


def test_microtasks_from_many_threads_all_run_once() -> None:
    loop = Scheduler(MonotonicClock(), config=LoopConfig())
    counts: dict[int, int] = {}
    lock = threading.Lock()
    loop.schedule_after(lambda: None, 1000)
    runtime = ThreadedRuntime(loop).start()

    def record(key: int) -> None:
        with lock:
            counts[key] = counts.get(key, 0) + 1

    def produce(offset: int) -> None:
        for index in range(100):
            loop.queue_microtask(lambda key=offset + index: record(key))

    producers = [threading.Thread(target=produce, args=(n * 100,)) for n in range(4)]
    for producer in producers:
        producer.start()
    for producer in producers:
        producer.join()

    assert runtime.join(timeout=10.0)
    assert len(counts) == 400
    assert set(counts.values()) == {1}
    assert loop.is_drained()


def test_per_thread_submission_order_is_preserved() -> None:
    loop = Scheduler(MonotonicClock(), config=LoopConfig())
    order: list[tuple[str, int]] = []
    loop.schedule_after(lambda: None, 1000)
    runtime = ThreadedRuntime(loop).start()

    def produce(label: str) -> None:
        for index in range(50):
            loop.queue_microtask(lambda index=index: order.append((label, index)))

    threads = [threading.Thread(target=produce, args=(label,)) for label in ("x", "y")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert runtime.join(timeout=10.0)

    for label in ("x", "y"):
        assert [index for seen, index in order if seen == label] == list(range(50))
