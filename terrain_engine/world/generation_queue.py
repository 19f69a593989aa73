# ==============================================================================
# Файл: terrain_engine/world/generation_queue.py
# Назначение: Тяжёлая генерация в фоновых потоках, результаты - в общую
#             очередь, которую основной поток разбирает раз в тик (drain).
# ==============================================================================
from __future__ import annotations
import logging
import queue
import threading
from collections import deque
from typing import Any, Callable, Deque, Optional

from ..core.types import PendingResult

logger = logging.getLogger(__name__)

_STOP = object()


class GenerationQueue:
    """
    submit(work_fn, on_result) -> work_fn выполняется в фоне, (on_result, результат)
    попадает в FIFO под мьютексом. drain() вызывается владеющим потоком раз в
    тик и вызывает все накопленные колбэки в порядке их поступления.

    Порядок - порядок завершения, а не порядок запросов.

    max_workers=None: один короткоживущий поток на запрос.
    max_workers=N:    пул из N потоков и очередь задач на max_pending мест;
                      submit блокируется, пока место не освободится.
    """

    def __init__(self, max_workers: Optional[int] = None, max_pending: Optional[int] = None):
        self._results: Deque[PendingResult] = deque()
        self._lock = threading.Lock()
        self._idle = threading.Condition(threading.Lock())
        self._in_flight = 0

        self._max_workers = max_workers
        self._tasks: "queue.Queue[Any] | None" = None
        self._workers: list[threading.Thread] = []
        if max_workers is not None:
            self._tasks = queue.Queue(maxsize=max_pending or 0)
            for n in range(int(max_workers)):
                t = threading.Thread(target=self._worker_loop, name=f"terrain-gen-{n}", daemon=True)
                t.start()
                self._workers.append(t)

    # --- Фоновая часть ---
    def submit(
        self,
        work_fn: Callable[[], Any],
        on_result: Callable[[Any], None],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        with self._idle:
            self._in_flight += 1
        job = (work_fn, on_result, on_error)
        if self._tasks is not None:
            self._tasks.put(job)  # backpressure: ждём свободное место
        else:
            threading.Thread(target=self._run, args=job, daemon=True).start()

    def _worker_loop(self) -> None:
        while True:
            job = self._tasks.get()
            if job is _STOP:
                break
            self._run(*job)

    def _run(self, work_fn, on_result, on_error) -> None:
        try:
            item = PendingResult(callback=on_result, payload=work_fn())
        except Exception as e:
            logger.exception("Generation job failed")
            item = PendingResult(callback=on_result, error=e, on_error=on_error)
        with self._lock:
            self._results.append(item)
        with self._idle:
            self._in_flight -= 1
            self._idle.notify_all()

    # --- Основной поток ---
    def drain(self) -> int:
        """Отдаёт все результаты, накопленные к моменту вызова. Возвращает их число."""
        with self._lock:
            ready = list(self._results)
            self._results.clear()

        for item in ready:
            if item.error is None:
                handler, arg = item.callback, item.payload
            elif item.on_error is not None:
                handler, arg = item.on_error, item.error
            else:
                logger.error("Dropped failed generation result: %r", item.error)
                continue
            # упавший колбэк не должен терять остальные результаты этого тика
            try:
                handler(arg)
            except Exception:
                logger.exception("Generation callback %r raised", handler)
        return len(ready)

    @property
    def in_flight(self) -> int:
        with self._idle:
            return self._in_flight

    @property
    def ready_count(self) -> int:
        with self._lock:
            return len(self._results)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Ждёт, пока все отправленные задачи не положат результат в очередь."""
        with self._idle:
            return self._idle.wait_for(lambda: self._in_flight == 0, timeout=timeout)

    def shutdown(self) -> None:
        if self._tasks is None:
            return
        for _ in self._workers:
            self._tasks.put(_STOP)
        for t in self._workers:
            t.join()
        self._workers.clear()
