""" Python implementation of bushttp: HTTP-style GET requests carried over
    a publish/subscribe message bus. This includes client functions, such as
    issuing a request and draining the chunked response, and server
    functions, such as bridging inbound request messages to a content
    handler with windowed flow control on the response stream.
"""

__version__ = '0.1.0'

# Utility components.

from . import errors
from . import classify

# Submodules used by multiple other components.

from . import config
from . import protocol
from . import json
from . import transport

# Primary public-facing interfaces.

from . import bridge
from . import handlers
from . import requestor

handle = bridge.handle

from .bridge import Bridge
from .handlers import FileHandler
from .requestor import Requestor, Response

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
