"""Fake subprocess objects shared by the runner and manager tests."""

import asyncio


class ChunkStream:
    """Async reader yielding pre-recorded chunks, then EOF."""

    def __init__(self, chunks):
        self._chunks = list(chunks)

    async def read(self, _size=-1):
        await asyncio.sleep(0)
        if self._chunks:
            return self._chunks.pop(0)
        return b""


class DummyProcess:
    """Stand-in for ``asyncio.subprocess.Process``."""

    def __init__(
        self,
        *,
        stdout: bytes = b"",
        stderr: bytes = b"",
        returncode: int = 0,
        stdout_chunks=None,
        stderr_chunks=None,
        pid: int = 4242,
    ):
        self._stdout = stdout
        self._stderr = stderr
        self.returncode = returncode
        self.pid = pid
        self.stdout = ChunkStream(stdout_chunks if stdout_chunks is not None else [stdout] if stdout else [])
        self.stderr = ChunkStream(stderr_chunks if stderr_chunks is not None else [stderr] if stderr else [])
        self.terminated = False
        self.killed = False

    async def communicate(self, _input=None):
        return self._stdout, self._stderr

    async def wait(self):
        return self.returncode

    def terminate(self):
        self.terminated = True

    def kill(self):
        self.killed = True
