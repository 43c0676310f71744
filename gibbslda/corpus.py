import re
import logging
from collections import namedtuple

import numpy as np

from .errors import CorpusFormatError

logger = logging.getLogger(__name__)

Corpus = namedtuple("Corpus", ["documents", "vocab_size"])

TOKEN = re.compile(r"\w+", re.UNICODE)


def read_wordmap(filepath):
    ''' reads a word map file into {word: id} '''
    with open(filepath, "r", encoding="utf-8") as wordmap_file:
        lines = wordmap_file.read().splitlines()
    if not lines:
        raise CorpusFormatError("Word map file %s is empty" % filepath)

    word2id = {}
    for line in lines[1:]:
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2:
            raise CorpusFormatError("Invalid word map line in %s: %r" % (filepath, line))
        word, word_id = fields
        try:
            word_id = int(word_id)
        except ValueError:
            raise CorpusFormatError("Invalid word id in %s: %r" % (filepath, line))
        if word_id < 0:
            raise CorpusFormatError("Negative word id in %s: %r" % (filepath, line))
        word2id[word] = word_id
    return word2id


def load_vocabulary(filepath):
    ''' reads a word map file into {id: word} '''
    return {word_id: word for word, word_id in read_wordmap(filepath).items()}


def write_wordmap(filepath, word2id):
    with open(filepath, "w", encoding="utf-8") as out:
        print(len(word2id), file=out)
        for word, word_id in sorted(word2id.items(), key=lambda item: item[1]):
            print("%s %d" % (word, word_id), file=out)


def read_documents(filepath):
    with open(filepath, "r", encoding="utf-8") as document_file:
        lines = document_file.read().splitlines()
    if not lines:
        raise CorpusFormatError("Document file %s is empty" % filepath)
    try:
        n_documents = int(lines[0].strip())
    except ValueError:
        raise CorpusFormatError("First line of %s must be the number of documents" % filepath)
    if n_documents < 0:
        raise CorpusFormatError("Negative document count in %s: %d" % (filepath, n_documents))

    documents = lines[1:]
    while len(documents) > n_documents and not documents[-1].strip():
        documents.pop()
    if len(documents) != n_documents:
        raise CorpusFormatError("%s declares %d documents but holds %d"
                                % (filepath, n_documents, len(documents)))
    return documents


def tokenize(line, raw_text_mode=False):
    if raw_text_mode:
        return TOKEN.findall(line.lower())
    return line.split()


def read_training_corpus(doc_path, vocab_path):
    '''
    Reads training documents, numbering words in first-seen order, and writes
    the resulting word map to vocab_path.
    '''
    word2id = {}
    documents = []
    for line in read_documents(doc_path):
        doc = []
        for word in line.split():
            if word not in word2id:
                word2id[word] = len(word2id)
            doc.append(word2id[word])
        documents.append(np.array(doc, dtype=np.int64))

    write_wordmap(vocab_path, word2id)
    logger.info("Read %d documents, %d unique words from %s", len(documents), len(word2id), doc_path)
    return Corpus(documents=documents, vocab_size=len(word2id))


def read_inference_corpus(doc_path, vocab_path, raw_text_mode=False):
    '''
    Reads new documents against a trained word map.

    Words missing from the trained map are dropped. Kept words get local ids in
    first-seen order; the returned array maps each local id to its trained id.
    '''
    word2id = read_wordmap(vocab_path)

    local_ids = {}
    local_to_trained = []
    documents = []
    skipped = 0
    for line in read_documents(doc_path):
        doc = []
        for word in tokenize(line, raw_text_mode):
            trained_id = word2id.get(word)
            if trained_id is None:
                skipped += 1
                continue
            if word not in local_ids:
                local_ids[word] = len(local_ids)
                local_to_trained.append(trained_id)
            doc.append(local_ids[word])
        documents.append(np.array(doc, dtype=np.int64))

    if skipped:
        logger.info("Skipped %d out-of-vocabulary tokens in %s", skipped, doc_path)
    corpus = Corpus(documents=documents, vocab_size=len(local_ids))
    return corpus, np.array(local_to_trained, dtype=np.int64)
