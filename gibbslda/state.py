import numpy as np


class CountTables:
    '''
    Count tables for one corpus under one topic assignment.

    word_topic[w, k]  tokens of word w assigned topic k
    doc_topic[m, k]   tokens of document m assigned topic k
    topic_total[k]    tokens assigned topic k
    doc_length[m]     tokens in document m
    '''

    def __init__(self, n_documents, vocab_size, n_topics):
        if n_topics < 1:
            raise ValueError("n_topics must be positive, got %d" % n_topics)
        self.n_documents = n_documents
        self.vocab_size = vocab_size
        self.n_topics = n_topics

        self.word_topic = np.zeros((vocab_size, n_topics), dtype=np.int64)
        self.doc_topic = np.zeros((n_documents, n_topics), dtype=np.int64)
        self.topic_total = np.zeros(n_topics, dtype=np.int64)
        self.doc_length = np.zeros(n_documents, dtype=np.int64)

    def add(self, m, w, k):
        self.word_topic[w, k] += 1
        self.doc_topic[m, k] += 1
        self.topic_total[k] += 1
        self.doc_length[m] += 1

    def remove(self, m, w, k):
        self.word_topic[w, k] -= 1
        self.doc_topic[m, k] -= 1
        self.topic_total[k] -= 1
        self.doc_length[m] -= 1

    def check_shape(self, documents, assignment):
        if len(documents) != self.n_documents or len(assignment) != self.n_documents:
            raise ValueError("Expected %d documents, got %d documents and %d assignments"
                             % (self.n_documents, len(documents), len(assignment)))
        for m, (doc, topics) in enumerate(zip(documents, assignment)):
            if len(doc) != len(topics):
                raise ValueError("Document %d has %d words but %d topics" % (m, len(doc), len(topics)))
            if len(doc) and (np.min(doc) < 0 or np.max(doc) >= self.vocab_size):
                raise ValueError("Document %d has word ids outside [0, %d)" % (m, self.vocab_size))
            if len(topics) and (np.min(topics) < 0 or np.max(topics) >= self.n_topics):
                raise ValueError("Document %d has topics outside [0, %d)" % (m, self.n_topics))

    def populate(self, documents, assignment):
        ''' replays an assignment into the tables, starting from zero '''
        self.check_shape(documents, assignment)
        self.word_topic[:] = 0
        self.doc_topic[:] = 0
        self.topic_total[:] = 0
        self.doc_length[:] = 0
        for m, (doc, topics) in enumerate(zip(documents, assignment)):
            np.add.at(self.word_topic, (doc, topics), 1)
            np.add.at(self.doc_topic[m], topics, 1)
            np.add.at(self.topic_total, topics, 1)
            self.doc_length[m] = len(doc)
        return self

    @classmethod
    def from_assignment(cls, documents, assignment, vocab_size, n_topics):
        return cls(len(documents), vocab_size, n_topics).populate(documents, assignment)

    def is_consistent(self, documents, assignment):
        expected = CountTables.from_assignment(documents, assignment, self.vocab_size, self.n_topics)
        return (np.array_equal(self.word_topic, expected.word_topic)
                and np.array_equal(self.doc_topic, expected.doc_topic)
                and np.array_equal(self.topic_total, expected.topic_total)
                and np.array_equal(self.doc_length, expected.doc_length))


def random_assignment(documents, n_topics, rng):
    ''' draws a topic uniformly from {0, ..., n_topics-1} for every token, in corpus order '''
    return [rng.integers(0, n_topics, size=len(doc)) for doc in documents]
