from .model import LdaConfig, LdaModel
from .state import CountTables
from .errors import GibbsLdaError, CorpusFormatError, ModelFormatError
