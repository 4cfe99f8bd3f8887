# tests/test_dedupe.py

from services.dedupe import ExpiringKeyCache
from services.notifier import Notifier


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_remembers_until_expiry():
    clock = FakeClock()
    cache = ExpiringKeyCache(10, timer=clock)

    assert cache.remember('leaderboard:1') is False
    assert cache.remember('leaderboard:1') is True
    clock.now = 9.9
    assert cache.remember('leaderboard:1') is True
    clock.now = 10.0
    assert cache.remember('leaderboard:1') is False


def test_expired_keys_are_cleaned_up():
    clock = FakeClock()
    cache = ExpiringKeyCache(5, timer=clock)
    cache.remember('a')
    cache.remember('b')
    assert len(cache) == 2

    clock.now = 6
    assert len(cache) == 0


def test_size_is_bounded():
    cache = ExpiringKeyCache(60, maxsize=2)
    for key in ('a', 'b', 'c'):
        cache.remember(key)

    assert len(cache) == 2
    # Самый старый ключ вытеснен и снова считается новым
    assert cache.remember('a') is False


def test_forget():
    cache = ExpiringKeyCache(60)
    cache.remember('a')
    cache.forget('a')
    assert cache.remember('a') is False


def test_notifier_swallows_transport_errors(caplog):
    def broken(topic, payload):
        raise ConnectionError('socket closed')

    notifier = Notifier(transport=broken)
    notifier.publish('event:1', {'type': 'leaderboard_update'})

    assert 'event:1' in caplog.text


def test_notifier_delivers():
    delivered = []
    notifier = Notifier(transport=lambda topic, payload: delivered.append((topic, payload)))
    notifier.publish('submission:3', {'type': 'review_added'})

    assert delivered == [('submission:3', {'type': 'review_added'})]
