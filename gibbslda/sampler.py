"""
Collapsed Gibbs sampling for LDA.

A token of word w in document m is resampled from

    p(z = k | z_-i, w) ∝ word_term[k] * (doc_topic[m, k] + alpha) / (doc_length[m] + K * alpha)

with the token itself removed from the counts first. The word term is the
only part that differs between estimation and inference, so it is supplied
as a strategy object.
"""
import numpy as np


class TrainingWordTerm:
    ''' word term from the model's own counts: (n_wk + beta) / (n_k + V * beta) '''

    def __init__(self, beta):
        self.beta = beta

    def __call__(self, tables, w):
        return (tables.word_topic[w] + self.beta) / (tables.topic_total + tables.vocab_size * self.beta)

    def table(self, tables):
        return (tables.word_topic + self.beta) / (tables.topic_total + tables.vocab_size * self.beta)


class InferenceWordTerm:
    '''
    Word term for new documents: the trained counts are added to the counts of
    the new corpus. The trained tables are read, never written.
    '''

    def __init__(self, trained, local_to_trained, beta):
        self.trained = trained
        self.local_to_trained = np.asarray(local_to_trained, dtype=np.int64)
        self.beta = beta
        self.vbeta = trained.vocab_size * beta

    def __call__(self, tables, w):
        trained_w = self.local_to_trained[w]
        return ((self.trained.word_topic[trained_w] + tables.word_topic[w] + self.beta)
                / (self.trained.topic_total + tables.topic_total + self.vbeta))

    def table(self, tables):
        return ((self.trained.word_topic[self.local_to_trained] + tables.word_topic + self.beta)
                / (self.trained.topic_total + tables.topic_total + self.vbeta))


def sample_token(tables, m, w, topic, word_term, alpha, rng):
    tables.remove(m, w, topic)

    p = word_term(tables, w) * (tables.doc_topic[m] + alpha) / (tables.doc_length[m] + tables.n_topics * alpha)
    cumulative = np.cumsum(p)
    u = rng.random() * cumulative[-1]
    # first topic whose cumulative mass exceeds u
    topic = min(int(np.searchsorted(cumulative, u, side="right")), tables.n_topics - 1)

    tables.add(m, w, topic)
    return topic


def sweep(tables, documents, assignment, word_term, alpha, rng):
    ''' resamples every token once, document by document, position by position '''
    for m, doc in enumerate(documents):
        topics = assignment[m]
        for n, w in enumerate(doc):
            topics[n] = sample_token(tables, m, w, topics[n], word_term, alpha, rng)
