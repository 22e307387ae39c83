"""Pytest configuration and shared fixtures."""
import threading
import time

import pytest
import tempfile
from pathlib import Path


class FakeLookupClient:
    """Stand-in for LookupClient: canned responses, no network.

    Tracks how many fetches run at once so tests can check the window
    bound. `delay` may be a number or a callable(headword) -> seconds;
    `hook` is called with each headword before responding.
    """

    def __init__(self, responses=None, default=None, delay=0.0, hook=None, **kwargs):
        self.responses = responses or {}
        self.default = default
        self.delay = delay
        self.hook = hook
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._lock = threading.Lock()

    def fetch(self, headword):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.calls.append(headword)
        try:
            if self.hook is not None:
                self.hook(headword)
            delay = self.delay(headword) if callable(self.delay) else self.delay
            if delay:
                time.sleep(delay)
            return self.responses.get(headword, self.default)
        finally:
            with self._lock:
                self.in_flight -= 1

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def lookup_response(usphone="rʌn", ukphone="rʌn", translation=None, **extra):
    """A dictionary API response with the fields records are built from."""
    data = {
        "ec": {
            "word": [{"usphone": usphone, "ukphone": ukphone}],
            "exam_type": ["CET4", "CET6"],
        },
        "collins_primary": {"words": {"indexforms": ["runs", "running", "ran"]}},
        "pic_dict": {"pic": [{"image": "https://example.com/run.jpg"}]},
        "word_video": {
            "word_videos": [{
                "video": {
                    "cover": "https://example.com/cover.jpg",
                    "title": "Run!",
                    "url": "https://example.com/run.mp4",
                }
            }]
        },
    }
    if translation is not None:
        data["translation"] = translation
    data.update(extra)
    return data


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_client():
    """Factory for FakeLookupClient instances."""
    return FakeLookupClient


@pytest.fixture
def response_factory():
    """Factory for realistic lookup responses."""
    return lookup_response


@pytest.fixture
def vocab_text():
    """Build list text with one `n. ["<word>义"]` definition per word."""
    def build(words, start_rank=1):
        blocks = [
            f'{rank} {word}\nn. ["{word}义"]'
            for rank, word in enumerate(words, start_rank)
        ]
        return "\n\n".join(blocks) + "\n"
    return build


@pytest.fixture
def sample_list_text():
    """A small list mixing well-formed and malformed blocks."""
    return (
        '1 run\n'
        'v. ["跑","奔"]  n. ["跑步"]\n'
        '\n'
        '2 apple\n'
        'n. ["苹果"]\n'
        '\n'
        '\n'
        '3 the\n'
        'art. 这\n'
        '\n'
        'a lonely line\n'
        '\n'
        'four hello\n'
        'n. ["你好"]\n'
        '\n'
        '5 hello\n'
        '["你好", "n."]\n'
    )
