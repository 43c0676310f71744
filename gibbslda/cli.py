import sys
import logging
import argparse

from .errors import GibbsLdaError
from .model import LdaConfig, LdaModel, EST, ESTC, INF

logger = logging.getLogger(__name__)

DEFAULTS = LdaConfig()


def add_common_arguments(parser):
    parser.add_argument("-dir", dest="directory", default=DEFAULTS.directory,
                        help="directory holding the model and data files")
    parser.add_argument("-niters", type=int, default=DEFAULTS.niters, help="number of Gibbs sampling iterations")
    parser.add_argument("-twords", type=int, default=DEFAULTS.twords,
                        help="number of most likely words to print for each topic")
    parser.add_argument("--seed", type=int, default=None, help="random seed, defaults to the current time")
    parser.add_argument("--verbose", action="store_true")


def build_parser():
    parser = argparse.ArgumentParser(prog="gibbslda", description="LDA topic models by collapsed Gibbs sampling")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    est = subparsers.add_parser(EST, help="estimate a model from scratch")
    add_common_arguments(est)
    est.add_argument("-dfile", required=True, help="training document file")
    est.add_argument("-alpha", type=float, default=None, help="document-topic prior, defaults to 50/ntopics")
    est.add_argument("-beta", type=float, default=DEFAULTS.beta, help="topic-word prior")
    est.add_argument("-ntopics", dest="n_topics", type=int, default=DEFAULTS.n_topics, help="number of topics")
    est.add_argument("-savestep", type=int, default=DEFAULTS.savestep,
                     help="save the model every savestep iterations, 0 to disable")
    est.add_argument("--trainlog", action="store_true", help="record and plot the log-likelihood of every iteration")

    estc = subparsers.add_parser(ESTC, help="continue estimating a saved model")
    add_common_arguments(estc)
    estc.add_argument("-model", dest="model_name", required=True, help="name of the saved model")
    estc.add_argument("-savestep", type=int, default=DEFAULTS.savestep,
                      help="save the model every savestep iterations, 0 to disable")
    estc.add_argument("--trainlog", action="store_true", help="record and plot the log-likelihood of every iteration")

    inf = subparsers.add_parser(INF, help="infer topics of new documents with a saved model")
    add_common_arguments(inf)
    inf.add_argument("-model", dest="model_name", required=True, help="name of the saved model")
    inf.add_argument("-dfile", required=True, help="new document file")
    inf.add_argument("-withrawdata", dest="raw_text", action="store_true",
                     help="documents are raw text and are tokenized before lookup")
    return parser


def make_config(args):
    options = {field: value for field, value in vars(args).items() if field in LdaConfig._fields}
    return LdaConfig(**options)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s  %(levelname)-8s %(name)s :: %(message)s")

    config = make_config(args)
    try:
        LdaModel(config).init(args.mode).run()
    except (GibbsLdaError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
