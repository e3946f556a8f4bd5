from .version import __version__

from .tape import Tape, Record, logger
from .node import Node
from .backend import Backend, ScalarBackend, NumpyBackend, get_backend
