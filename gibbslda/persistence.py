"""
Reading and writing model artifacts.

A saved model named <name> is the file set

    <name>.tassign  word:topic tokens, one document per line
    <name>.theta    document-topic distribution, M x K
    <name>.phi      topic-word distribution, K x V
    <name>.others   hyperparameters as key=value lines
    <name>.twords   most likely words of every topic (only when requested)
"""
import logging
from collections import namedtuple
from os import path

import numpy as np
from matplotlib.figure import Figure

from .errors import ModelFormatError

logger = logging.getLogger(__name__)

TASSIGN_SUFFIX = ".tassign"
THETA_SUFFIX = ".theta"
PHI_SUFFIX = ".phi"
OTHERS_SUFFIX = ".others"
TWORDS_SUFFIX = ".twords"

ModelInfo = namedtuple("ModelInfo", ["alpha", "beta", "n_topics", "n_documents", "vocab_size", "liter"])

OTHERS_KEYS = [
    ("alpha", "alpha", float),
    ("beta", "beta", float),
    ("ntopics", "n_topics", int),
    ("ndocs", "n_documents", int),
    ("nwords", "vocab_size", int),
    ("liter", "liter", int),
]


def generate_model_name(iteration):
    if iteration < 0:
        return "model-final"
    return "model-%05d" % iteration


def save_tassign(filepath, documents, assignment):
    with open(filepath, "w") as out:
        for doc, topics in zip(documents, assignment):
            out.write(" ".join("%d:%d" % (w, k) for w, k in zip(doc, topics)))
            out.write("\n")


def read_tassign(filepath, n_documents):
    '''
    Reads back documents and their topic assignment. The word ids come from the
    file itself, so the original document file is not needed.
    '''
    with open(filepath, "r") as tassign_file:
        lines = tassign_file.read().splitlines()

    if len(lines) < n_documents:
        raise ModelFormatError("Invalid word-topic assignment file %s: expected %d documents, found %d"
                               % (filepath, n_documents, len(lines)))
    if any(line.strip() for line in lines[n_documents:]):
        raise ModelFormatError("Invalid word-topic assignment file %s: more than %d documents"
                               % (filepath, n_documents))

    documents = []
    assignment = []
    for line in lines[:n_documents]:
        words = []
        topics = []
        for token in line.split():
            fields = token.split(":")
            if len(fields) != 2:
                raise ModelFormatError("Invalid word-topic assignment token %r in %s" % (token, filepath))
            try:
                words.append(int(fields[0]))
                topics.append(int(fields[1]))
            except ValueError:
                raise ModelFormatError("Invalid word-topic assignment token %r in %s" % (token, filepath))
        documents.append(np.array(words, dtype=np.int64))
        assignment.append(np.array(topics, dtype=np.int64))
    return documents, assignment


def save_theta(filepath, theta):
    np.savetxt(filepath, theta, fmt="%f", delimiter=" ")


def save_phi(filepath, phi):
    np.savetxt(filepath, phi, fmt="%f", delimiter=" ")


def save_others(filepath, info):
    with open(filepath, "w") as out:
        print("alpha=%f" % info.alpha, file=out)
        print("beta=%f" % info.beta, file=out)
        print("ntopics=%d" % info.n_topics, file=out)
        print("ndocs=%d" % info.n_documents, file=out)
        print("nwords=%d" % info.vocab_size, file=out)
        print("liter=%d" % info.liter, file=out)


def read_others(filepath):
    values = {}
    with open(filepath, "r") as others_file:
        for line in others_file:
            line = line.strip()
            if not line:
                continue
            key, sep, value = line.partition("=")
            if not sep:
                raise ModelFormatError("Invalid line %r in %s" % (line, filepath))
            values[key.strip()] = value.strip()

    fields = {}
    for key, field, cast in OTHERS_KEYS:
        if key not in values:
            raise ModelFormatError("Missing %s in %s" % (key, filepath))
        try:
            fields[field] = cast(values[key])
        except ValueError:
            raise ModelFormatError("Invalid value for %s in %s: %r" % (key, filepath, values[key]))
    return ModelInfo(**fields)


def top_words(phi, n_words):
    ''' word ids of each topic ordered by descending probability, lower id first on ties '''
    return np.argsort(-phi, axis=1, kind="stable")[:, :n_words]


def save_twords(filepath, phi, n_words, id2word, local_to_trained=None):
    '''
    Writes the n_words most likely words of every topic. When local_to_trained
    is given, phi columns are local ids of an inference corpus.
    '''
    if not id2word:
        raise ModelFormatError("Vocabulary is empty, cannot write top words to %s" % filepath)

    n_topics, vocab_size = phi.shape
    if n_words > vocab_size:
        logger.warning("Requested %d words per topic, vocabulary has %d: using %d",
                       n_words, vocab_size, vocab_size)
        n_words = vocab_size

    with open(filepath, "w", encoding="utf-8") as out:
        for k, word_ids in enumerate(top_words(phi, n_words)):
            print("Topic %dth:" % k, file=out)
            for w in word_ids:
                word_id = w if local_to_trained is None else local_to_trained[w]
                word = id2word.get(int(word_id))
                if word is None:
                    continue
                print("%s\t%f" % (word, phi[k, w]), file=out)
    return n_words


def save_model(directory, model_name, documents, assignment, theta, phi, info,
               n_words=0, id2word=None, local_to_trained=None):
    prefix = path.join(directory, model_name)
    save_tassign(prefix + TASSIGN_SUFFIX, documents, assignment)
    save_others(prefix + OTHERS_SUFFIX, info)
    save_theta(prefix + THETA_SUFFIX, theta)
    save_phi(prefix + PHI_SUFFIX, phi)
    if n_words > 0:
        save_twords(prefix + TWORDS_SUFFIX, phi, n_words, id2word, local_to_trained)


def save_trainlog(filepath, likelihoods, append=False):
    with open(filepath, "a" if append else "w") as out:
        for iteration, lhood in likelihoods:
            print("%d %f" % (iteration, lhood), file=out)


def read_trainlog(filepath):
    likelihoods = []
    with open(filepath, "r") as trainlog_file:
        for line in trainlog_file:
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 2:
                raise ModelFormatError("Invalid trainlog line in %s: %r" % (filepath, line))
            try:
                likelihoods.append((int(fields[0]), float(fields[1])))
            except ValueError:
                raise ModelFormatError("Invalid trainlog line in %s: %r" % (filepath, line))
    return likelihoods


def plot_trainlog(filepath, likelihoods):
    iterations = [iteration for iteration, _ in likelihoods]
    lhoods = [lhood for _, lhood in likelihoods]
    fig = Figure()
    ax = fig.subplots()
    ax.set_title("Log-likelihood of the word-topic assignment")
    ax.plot(iterations, lhoods)
    ax.set_ylabel("log p(w|z)")
    ax.set_xlabel("Iteration")
    fig.savefig(filepath)
