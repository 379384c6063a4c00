import pytest

from vacancy_engine.cache import JsonFileCacheStore, MemoryCacheStore, VacancyCache
from vacancy_engine.errors import WorkableDecodeError
from vacancy_engine.models import Vacancy


def vacancies():
    return [Vacancy(shortcode="A1", title="Analyst", full_description="a")]


class CountingFallback:
    def __init__(self, cache, result=None, error=None):
        self.cache = cache
        self.result = result if result is not None else []
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error:
            raise self.error
        self.cache.write(self.result)
        return self.result


def test_memory_store_returns_copies():
    store = MemoryCacheStore()
    value = [{"shortcode": "A1"}]
    store.set("k", value)
    value.append({"shortcode": "B2"})

    got = store.get("k")
    got.append({"shortcode": "C3"})

    assert store.get("k") == [{"shortcode": "A1"}]
    assert store.get("missing") is None


def test_cached_empty_collection_is_a_hit():
    cache = VacancyCache(MemoryCacheStore())
    cache.write([])
    fallback = CountingFallback(cache)

    assert cache.read(fallback) == []
    assert fallback.calls == 0


def test_miss_triggers_single_fallback_then_hits():
    cache = VacancyCache(MemoryCacheStore())
    fallback = CountingFallback(cache, result=vacancies())

    assert cache.read(fallback) == vacancies()
    assert cache.read(fallback) == vacancies()
    assert fallback.calls == 1


def test_failed_fallback_returns_empty_collection():
    cache = VacancyCache(MemoryCacheStore())
    fallback = CountingFallback(cache, error=WorkableDecodeError("bad body", endpoint="/jobs"))

    assert cache.read(fallback) == []
    assert cache.read_cached() is None


def test_invalid_cached_value_is_treated_as_miss():
    store = MemoryCacheStore()
    cache = VacancyCache(store)
    store.set(cache.key, "garbage")
    assert cache.read_cached() is None

    store.set(cache.key, [{"shortcode": ["not", "a", "string"]}])
    assert cache.read_cached() is None


def test_written_records_always_carry_full_description():
    store = MemoryCacheStore()
    cache = VacancyCache(store)
    cache.write([Vacancy(shortcode="A1", title="Analyst")])

    assert store.get(cache.key) == [{"shortcode": "A1", "title": "Analyst", "full_description": ""}]


def test_json_file_store_round_trip_and_delete(tmp_path):
    store = JsonFileCacheStore(tmp_path / "nested" / "cache.json")
    assert store.get("k") is None

    store.set("k", [])
    store.set("other", {"a": 1})
    assert store.get("k") == []
    assert JsonFileCacheStore(store.path).get("other") == {"a": 1}

    store.delete("k")
    assert store.get("k") is None
    assert store.get("other") == {"a": 1}


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_json_file_store_ignores_unusable_file(tmp_path, content):
    path = tmp_path / "cache.json"
    path.write_text(content, encoding="utf-8")
    store = JsonFileCacheStore(path)

    assert store.get("k") is None
    store.set("k", [])
    assert store.get("k") == []
