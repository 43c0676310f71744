import numpy as np
from scipy.special import gammaln


def compute_theta(tables, alpha):
    ''' document-topic distribution, M x K '''
    return (tables.doc_topic + alpha) / (tables.doc_length[:, np.newaxis] + tables.n_topics * alpha)


def compute_phi(tables, word_term):
    ''' topic-word distribution, K x V '''
    return word_term.table(tables).T


def log_likelihood(tables, beta):
    '''
    log p(w | z) with phi integrated out (Griffiths & Steyvers, 2004)
    '''
    V = tables.vocab_size
    K = tables.n_topics
    lhood = K * (gammaln(V * beta) - V * gammaln(beta))
    lhood += np.sum(gammaln(tables.word_topic + beta))
    lhood -= np.sum(gammaln(tables.topic_total + V * beta))
    return float(lhood)


def perplexity(documents, theta, phi):
    n_tokens = sum(len(doc) for doc in documents)
    if n_tokens == 0:
        return float("nan")
    log_sum = 0.
    for m, doc in enumerate(documents):
        log_sum += np.sum(np.log(np.dot(theta[m], phi[:, doc])))
    return float(np.exp(-log_sum / n_tokens))
