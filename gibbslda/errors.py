class GibbsLdaError(Exception):
    pass


class CorpusFormatError(GibbsLdaError, ValueError):
    ''' malformed document file or word map file '''


class ModelFormatError(GibbsLdaError, ValueError):
    ''' malformed model artifact (.tassign, .others) or missing vocabulary '''


class ConfigurationError(GibbsLdaError, ValueError):
    ''' hyperparameters that cannot produce a model '''
