import json
import threading

from ringabell.index import FingerprintIndex, SearchResult


def test_empty_index_is_not_found(index):
    result = index.search([1, 2, 3])
    assert result == SearchResult.not_found()
    assert not result.found


def test_best_entry_wins(index):
    index.register("one", range(0, 20))
    index.register("two", range(100, 130))

    result = index.search(range(100, 125))
    assert result.song_name == "two"
    assert result.score == 25
    assert result.found


def test_threshold_boundary():
    """Score threshold - 1 is a miss, score == threshold is a match."""
    index = FingerprintIndex(min_score=10)
    index.register("song", range(10))

    assert index.search(range(9)) == SearchResult.not_found()
    assert index.search(range(10)) == SearchResult(song_name="song", score=10)


def test_ties_go_to_first_registered(index):
    index.register("first", range(20))
    index.register("second", range(20))
    assert index.search(range(15)).song_name == "first"


def test_duplicate_labels_are_separate_entries(index):
    index.register("dup", range(20))
    index.register("dup", range(50, 70))

    assert len(index) == 2
    assert index.labels() == ["dup", "dup"]
    assert index.scores(range(50, 62)) == [0, 12]


def test_repeated_query_fingerprints_count_each_time(index):
    index.register("song", [42])
    assert index.scores([42] * 12) == [12]
    assert index.search([42] * 12).score == 12


def test_entry_keeps_duplicate_fingerprints(index):
    entry = index.register("song", [1, 1, 2])
    assert entry.fingerprints == (1, 1, 2)
    assert entry.score([1, 3]) == 1


def test_result_json():
    assert json.loads(SearchResult.not_found().to_json()) == {"songName": "Not found", "score": 0}
    assert json.loads(SearchResult(song_name="A", score=12).to_json()) == {"songName": "A", "score": 12}


def test_concurrent_register():
    index = FingerprintIndex(min_score=1)

    def worker(n):
        for i in range(50):
            index.register(f"w{n}-{i}", [n * 1000 + i])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(index) == 200
    assert index.search([3 * 1000 + 7]).song_name == "w3-7"
