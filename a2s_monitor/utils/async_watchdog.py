# a2s_monitor/utils/async_watchdog.py
import asyncio
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler


class AsyncEventHandler(FileSystemEventHandler):
    def __init__(self, callback, loop):
        self.callback = callback
        self.loop = loop  # Сохраняем ссылку на цикл событий

    def _dispatch(self, path):
        # Колбэк - корутина, выполняется в основном цикле событий
        asyncio.run_coroutine_threadsafe(self.callback(path), self.loop)

    def on_modified(self, event):
        if not event.is_directory:
            self._dispatch(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._dispatch(event.src_path)

    def on_moved(self, event):
        # Атомарная запись файла (tmp -> rename) приходит как перемещение
        if not event.is_directory and event.dest_path:
            self._dispatch(event.dest_path)


async def watch_directory(directory, callback, loop):
    """
    Асинхронно отслеживает изменения в указанной директории до отмены задачи.
    :param directory: Директория для наблюдения.
    :param callback: Корутина-обработчик, получает путь изменённого файла.
    :param loop: Цикл событий для выполнения асинхронных задач.
    """
    observer = Observer()
    handler = AsyncEventHandler(callback, loop)
    observer.schedule(handler, directory, recursive=False)

    # Запуск наблюдателя в отдельном потоке
    await loop.run_in_executor(None, observer.start)

    try:
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        observer.stop()
        observer.join()
        raise
