import pytest
import numpy as np


TRAINING_DOCUMENTS = [
    "apple banana apple fruit",
    "banana fruit salad apple",
    "engine wheel car road",
    "car road engine engine",
    "fruit apple car",
    "wheel road banana",
]


def write_documents(filepath, documents):
    with open(filepath, "w", encoding="utf-8") as out:
        print(len(documents), file=out)
        for doc in documents:
            print(doc, file=out)


def write_wordmap(filepath, words):
    with open(filepath, "w", encoding="utf-8") as out:
        print(len(words), file=out)
        for word_id, word in enumerate(words):
            print("%s %d" % (word, word_id), file=out)


@pytest.fixture
def scenario_documents():
    ''' three documents over a vocabulary of three words '''
    return [np.array(doc, dtype=np.int64) for doc in [[0, 1, 0], [1, 2], [0, 2, 2]]]


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def model_dir(tmp_path):
    ''' directory holding a small training document file '''
    write_documents(tmp_path / "trndocs.dat", TRAINING_DOCUMENTS)
    return tmp_path
