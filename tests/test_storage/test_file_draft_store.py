import os

import pytest

from quizflow.core.errors import DraftStoreError
from quizflow.core.storage.draft_store import Draft, decode_draft, encode_draft
from quizflow.core.storage.file_draft_store import FileDraftStore


@pytest.fixture
def file_store(tmpdir):
    """Provide a FileDraftStore instance using pytest's temporary directory."""
    return FileDraftStore(str(tmpdir))


def test_save_and_load_draft(file_store: FileDraftStore, quiz_document):
    """The document comes back without the step, which is returned separately."""
    document = {k: v for k, v in quiz_document.items() if k != "currentStep"}
    assert file_store.save(document, 3) is True

    draft = file_store.load()
    assert draft == Draft(document=document, current_step=3)
    assert "currentStep" not in draft.document


def test_stored_value_merges_current_step(file_store: FileDraftStore, tmpdir):
    file_store.save({"quizDetails": {"name": "X"}}, 2)
    with open(os.path.join(str(tmpdir), "quiz-builder-draft.json"), encoding="utf-8") as f:
        stored = f.read()
    assert '"currentStep": 2' in stored
    assert '"quizDetails"' in stored


def test_load_without_draft(file_store: FileDraftStore):
    assert file_store.load() is None


def test_save_overwrites(file_store: FileDraftStore):
    file_store.save({"quizDetails": {"name": "First"}}, 1)
    file_store.save({"quizDetails": {"name": "Second"}}, 4)
    draft = file_store.load()
    assert draft.document["quizDetails"]["name"] == "Second"
    assert draft.current_step == 4


def test_falsy_step_loads_as_none(file_store: FileDraftStore):
    file_store.save({"questions": []}, None)
    assert file_store.load().current_step is None


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"', "null", ""])
def test_malformed_draft_is_absent(file_store: FileDraftStore, raw):
    file_store.write_raw(file_store.key, raw)
    assert file_store.load() is None


def test_deeply_nested_draft_is_absent(file_store: FileDraftStore):
    file_store.write_raw(file_store.key, "[" * 100000 + "]" * 100000)
    assert file_store.load() is None


def test_deeply_nested_document_is_not_saved(file_store: FileDraftStore):
    nested = []
    for _ in range(100000):
        nested = [nested]
    assert file_store.save({"questions": nested}, 1) is False
    assert file_store.load() is None


def test_clear(file_store: FileDraftStore):
    file_store.save({"questions": []}, 1)
    assert file_store.clear() is True
    assert file_store.load() is None
    # Clearing twice is fine
    assert file_store.clear() is True


def test_save_failure_returns_false(tmpdir):
    blocker = tmpdir.join("blocker")
    blocker.write("file in the way")
    store = FileDraftStore(str(blocker))
    assert store.save({"questions": []}, 1) is False


def test_read_failure_raises_store_error(tmpdir):
    store = FileDraftStore(str(tmpdir))
    os.makedirs(store._path(store.key))
    with pytest.raises(DraftStoreError):
        store.read_raw(store.key)
    assert store.load() is None


def test_unserializable_document_is_not_saved(file_store: FileDraftStore):
    assert file_store.save({"bad": object()}, 1) is False
    assert file_store.load() is None


def test_non_dict_document_is_not_saved(file_store: FileDraftStore):
    assert file_store.save(None, 1) is False


def test_keys_are_kept_apart(tmpdir):
    first = FileDraftStore(str(tmpdir), key="first")
    second = FileDraftStore(str(tmpdir), key="../second")
    first.save({"n": 1}, 1)
    second.save({"n": 2}, 2)
    assert first.load().document == {"n": 1}
    assert second.load().document == {"n": 2}
    assert sorted(os.listdir(str(tmpdir))) == [".._second.json", "first.json"]


@pytest.mark.parametrize("step, expected", [(3, 3), (0, None), (-1, None),
                                            (True, None), ("2", None), (2.5, None)])
def test_decode_draft_step(step, expected):
    draft = decode_draft(encode_draft({"a": 1}, step))
    assert draft.current_step == expected
    assert draft.document == {"a": 1}
