"""Tests for the engine lock — concurrent callers see consistent state."""

import threading

from py_memfs.filesystem import FileSystem

THREADS = 8
FILES_PER_THREAD = 10


class TestConcurrentMutation:
    """Verify one coarse lock keeps the tables consistent."""

    def test_parallel_creates_in_separate_directories(self) -> None:
        """Threads creating files in their own directories never collide."""
        fs = FileSystem()
        for t in range(THREADS):
            fs.create_directory(f"/t{t}")

        def worker(t: int) -> None:
            for i in range(FILES_PER_THREAD):
                path = f"/t{t}/f{i}"
                fs.create_regular(path)
                fs.write(path, 0, f"{t}:{i}".encode())

        threads = [threading.Thread(target=worker, args=(t,)) for t in range(THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        fs.verify()
        for t in range(THREADS):
            assert len(fs.list_dir(f"/t{t}")) == FILES_PER_THREAD + 2
            assert fs.read(f"/t{t}/f3", 0, 10) == f"{t}:3".encode()

    def test_parallel_link_and_unlink(self) -> None:
        """Link counts stay exact under concurrent link/unlink pairs."""
        fs = FileSystem()
        fs.create_regular("/shared")

        def worker(t: int) -> None:
            for i in range(FILES_PER_THREAD):
                alias = f"/alias-{t}-{i}"
                fs.hard_link("/shared", alias)
                fs.unlink(alias)

        threads = [threading.Thread(target=worker, args=(t,)) for t in range(THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert fs.getattr("/shared").link_count == 1
        fs.verify()
