import time
import logging
from collections import namedtuple
from os import path

import numpy as np
from tqdm import trange

from .corpus import read_training_corpus, read_inference_corpus, load_vocabulary
from .errors import ConfigurationError, ModelFormatError
from .estimates import compute_theta, compute_phi, log_likelihood, perplexity
from .persistence import (ModelInfo, OTHERS_SUFFIX, TASSIGN_SUFFIX, generate_model_name,
                          read_others, read_tassign, read_trainlog, save_model, save_trainlog,
                          plot_trainlog)
from .sampler import TrainingWordTerm, InferenceWordTerm, sweep
from .state import CountTables, random_assignment

logger = logging.getLogger(__name__)

EST = "est"
ESTC = "estc"
INF = "inf"
MODES = (EST, ESTC, INF)

TRAINLOG = "trainlog.txt"
TRAINLOG_PLOT = "trainlog.png"

LdaConfig = namedtuple("LdaConfig", [
    "directory", "dfile", "model_name", "wordmap",
    "n_topics", "alpha", "beta", "niters", "savestep", "twords",
    "raw_text", "seed", "trainlog"], defaults=(
    "./", "trndocs.dat", "model-final", "wordmap.txt",
    100, None, 0.1, 2000, 200, 0,
    False, None, False))


def make_rng(seed=None):
    if seed is None:
        seed = int(time.time())
    logger.info("Random seed %d", seed)
    return np.random.default_rng(seed)


class LdaModel:
    '''
    LDA estimated by collapsed Gibbs sampling.

    The model runs in one of three modes, fixed by init():
        est   estimate a new model from a document file
        estc  continue estimating a saved model
        inf   sample topics for new documents against a saved model
    '''

    def __init__(self, config):
        self.config = config
        self.mode = None
        self.rng = None

        self.alpha = config.alpha
        self.beta = config.beta
        self.n_topics = config.n_topics
        self.liter = 0

        self.documents = None
        self.assignment = None
        self.tables = None
        self.word_term = None
        self.theta = None
        self.phi = None
        self.id2word = None
        self.likelihoods = []

        # inference only
        self.new_documents = None
        self.new_assignment = None
        self.new_tables = None
        self.local_to_trained = None
        self.inf_liter = 0

    def path(self, filename):
        return path.join(self.config.directory, filename)

    def init(self, mode):
        if mode not in MODES:
            raise ValueError("Unknown mode %r, expected one of %s" % (mode, ", ".join(MODES)))
        self.mode = mode
        if mode == EST:
            self.init_est()
        elif mode == ESTC:
            self.init_estc()
        else:
            self.init_inf()
        return self

    def run(self):
        if self.mode is None:
            raise ValueError("Model is not initialized, call init() first")
        if self.mode == INF:
            self.infer()
        else:
            self.estimate()
        return self

    def init_est(self):
        if self.n_topics < 1:
            raise ConfigurationError("Number of topics must be at least 1, got %d" % self.n_topics)
        corpus = read_training_corpus(self.path(self.config.dfile), self.path(self.config.wordmap))
        if self.alpha is None:
            self.alpha = 50. / self.n_topics
        self.documents = corpus.documents
        self.rng = make_rng(self.config.seed)
        self.assignment = random_assignment(self.documents, self.n_topics, self.rng)
        self.tables = CountTables.from_assignment(self.documents, self.assignment, corpus.vocab_size, self.n_topics)
        self.word_term = TrainingWordTerm(self.beta)
        self.liter = 0

    def load_model(self, model_name):
        ''' reads the .others and .tassign files of a saved model and rebuilds its counts '''
        info = read_others(self.path(model_name + OTHERS_SUFFIX))
        tassign = self.path(model_name + TASSIGN_SUFFIX)
        documents, assignment = read_tassign(tassign, info.n_documents)

        self.alpha = info.alpha
        self.beta = info.beta
        self.n_topics = info.n_topics
        self.liter = info.liter
        self.documents = documents
        self.assignment = assignment
        try:
            self.tables = CountTables.from_assignment(documents, assignment, info.vocab_size, info.n_topics)
        except ValueError as e:
            raise ModelFormatError("Invalid word-topic assignment file %s: %s" % (tassign, e))
        logger.info("Loaded model %s: %d documents, %d words, %d topics, %d iterations",
                    model_name, info.n_documents, info.vocab_size, info.n_topics, info.liter)

    def init_estc(self):
        self.load_model(self.config.model_name)
        self.rng = make_rng(self.config.seed)
        self.word_term = TrainingWordTerm(self.beta)

    def init_inf(self):
        self.load_model(self.config.model_name)

        corpus, local_to_trained = read_inference_corpus(
            self.path(self.config.dfile), self.path(self.config.wordmap), self.config.raw_text)
        if len(local_to_trained) and (local_to_trained.min() < 0 or local_to_trained.max() >= self.tables.vocab_size):
            raise ModelFormatError("Word map %s has ids outside the %d words of model %s"
                                   % (self.path(self.config.wordmap), self.tables.vocab_size,
                                      self.config.model_name))

        self.new_documents = corpus.documents
        self.local_to_trained = local_to_trained
        self.rng = make_rng(self.config.seed)
        self.new_assignment = random_assignment(self.new_documents, self.n_topics, self.rng)
        self.new_tables = CountTables.from_assignment(
            self.new_documents, self.new_assignment, corpus.vocab_size, self.n_topics)
        self.word_term = InferenceWordTerm(self.tables, local_to_trained, self.beta)

    def compute_distributions(self):
        if self.mode == INF:
            self.theta = compute_theta(self.new_tables, self.alpha)
            self.phi = compute_phi(self.new_tables, self.word_term)
        else:
            self.theta = compute_theta(self.tables, self.alpha)
            self.phi = compute_phi(self.tables, self.word_term)

    def load_id2word(self):
        if self.config.twords > 0:
            self.id2word = load_vocabulary(self.path(self.config.wordmap))

    def estimate(self):
        self.load_id2word()
        logger.info("Sampling %d iterations!", self.config.niters)

        last_iter = self.liter
        for liter in trange(last_iter + 1, last_iter + self.config.niters + 1, desc="Sampling"):
            sweep(self.tables, self.documents, self.assignment, self.word_term, self.alpha, self.rng)
            self.liter = liter
            if self.config.trainlog:
                self.likelihoods.append((liter, log_likelihood(self.tables, self.beta)))

            if self.config.savestep > 0 and liter % self.config.savestep == 0:
                logger.info("Saving the model at iteration %d ...", liter)
                self.save(generate_model_name(liter))

        logger.info("Gibbs sampling completed!")
        logger.info("Saving the final model!")
        self.save(generate_model_name(-1))
        logger.info("Perplexity after %d iterations: %.4f",
                    self.liter, perplexity(self.documents, self.theta, self.phi))

        if self.config.trainlog:
            # a resumed model extends the log of the run it continues
            save_trainlog(self.path(TRAINLOG), self.likelihoods, append=self.mode == ESTC)
            plot_trainlog(self.path(TRAINLOG_PLOT), read_trainlog(self.path(TRAINLOG)))

    def save(self, model_name):
        self.compute_distributions()
        info = ModelInfo(alpha=self.alpha, beta=self.beta, n_topics=self.n_topics,
                         n_documents=self.tables.n_documents, vocab_size=self.tables.vocab_size,
                         liter=self.liter)
        save_model(self.config.directory, model_name, self.documents, self.assignment,
                   self.theta, self.phi, info, self.config.twords, self.id2word)

    def infer(self):
        self.load_id2word()
        logger.info("Sampling %d iterations for inference!", self.config.niters)

        for inf_liter in trange(1, self.config.niters + 1, desc="Inference"):
            sweep(self.new_tables, self.new_documents, self.new_assignment, self.word_term, self.alpha, self.rng)
            self.inf_liter = inf_liter

        logger.info("Gibbs sampling for inference completed!")
        logger.info("Saving the inference outputs!")
        self.save_inference(self.config.dfile)

    def save_inference(self, name):
        self.compute_distributions()
        info = ModelInfo(alpha=self.alpha, beta=self.beta, n_topics=self.n_topics,
                         n_documents=self.new_tables.n_documents, vocab_size=self.new_tables.vocab_size,
                         liter=self.inf_liter)
        trained_documents = [self.local_to_trained[doc] for doc in self.new_documents]
        save_model(self.config.directory, name, trained_documents, self.new_assignment,
                   self.theta, self.phi, info, self.config.twords, self.id2word, self.local_to_trained)
