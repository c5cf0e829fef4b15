# patchspace/services/async_utils.py
from PySide6.QtCore import QThreadPool, QRunnable
from loguru import logger

_thread_pool: QThreadPool | None = None

def get_global_thread_pool() -> QThreadPool:
    """Gets the global QThreadPool instance, creating if necessary."""
    global _thread_pool
    if _thread_pool is None:
        _thread_pool = QThreadPool.globalInstance()
        logger.info(f"Initialized global QThreadPool. Max threads: {_thread_pool.maxThreadCount()}")
    return _thread_pool

def run_in_background(runnable: QRunnable):
    """Submits a QRunnable task to the global thread pool."""
    pool = get_global_thread_pool()
    logger.debug(f"Submitting task {type(runnable).__name__} to thread pool. Active threads: {pool.activeThreadCount()}")
    # QThreadPool takes ownership and deletes the runnable when done by default
    pool.start(runnable)
