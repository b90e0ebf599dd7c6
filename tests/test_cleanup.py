from uri_shortener.cleanup import SECONDS_PER_DAY, run_cleanup
from uri_shortener.config import Settings
from uri_shortener.services.shortener import URIShortener
from uri_shortener.storage import MEMORY


def test_run_cleanup_prunes_by_age(secret, registry, clock):
    settings = Settings(
        secret=secret,
        prefix="https://go.test",
        store_location=MEMORY,
        prune_max_age_days=30,
    )
    shortener = URIShortener.from_settings(settings, registry=registry)
    shortener.clock = clock

    stale = shortener.shorten("https://example.test/stale")
    clock.advance(20 * SECONDS_PER_DAY)
    fresh = shortener.shorten("https://example.test/fresh")
    clock.advance(20 * SECONDS_PER_DAY)

    removed = run_cleanup(settings, registry=registry, now=clock())

    assert removed == 1
    assert shortener.lengthen(stale) is None
    assert shortener.lengthen(fresh) == "https://example.test/fresh"


def test_run_cleanup_on_empty_store(secret, registry):
    settings = Settings(secret=secret, prefix="https://go.test", store_location=MEMORY)
    assert run_cleanup(settings, registry=registry) == 0


def test_run_cleanup_without_secret(secret, registry, clock):
    """Pruning only needs the store location"""
    shortener = URIShortener(secret, "https://go.test", MEMORY, registry=registry, clock=clock)
    stale = shortener.shorten("https://example.test/stale")

    settings = Settings(secret="", store_location=MEMORY, prune_max_age_days=1)
    removed = run_cleanup(settings, registry=registry, now=clock() + 2 * SECONDS_PER_DAY)

    assert removed == 1
    assert shortener.lengthen(stale) is None
