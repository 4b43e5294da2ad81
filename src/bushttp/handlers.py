""" Content handlers suitable for use with :func:`bushttp.handle`. A handler
    is any callable accepting ``(writer, request)``.
"""

import http
import logging
import mimetypes
import os

from . import config as _config
from .protocol import fields

logger = logging.getLogger(__name__)


class FileHandler:
    """ Serve the single file at *path* for every request, whatever the
        requested path. The file is opened anew for each request, so
        changes to it are picked up immediately. The body is written in
        pieces of *chunk_size* bytes, each of which becomes one chunk
        message.
    """

    def __init__(self, path, chunk_size=None):

        if chunk_size is None:
            chunk_size = _config.default().chunk_size

        self.path = str(path)
        self.chunk_size = int(chunk_size)

        content_type, _encoding = mimetypes.guess_type(self.path)
        if content_type is None:
            content_type = 'application/octet-stream'

        self.content_type = content_type


    def __call__(self, writer, request):

        if request.method not in (fields.GET, fields.HEAD):
            writer.headers.set(fields.ALLOW, 'GET, HEAD')
            self._empty(writer, http.HTTPStatus.METHOD_NOT_ALLOWED)
            return

        try:
            handle = open(self.path, 'rb')
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            self._empty(writer, http.HTTPStatus.NOT_FOUND)
            return
        except PermissionError:
            self._empty(writer, http.HTTPStatus.FORBIDDEN)
            return

        with handle:
            size = os.fstat(handle.fileno()).st_size

            writer.headers.set(fields.CONTENT_LENGTH, size)
            writer.headers.set(fields.CONTENT_TYPE, self.content_type)
            writer.write_header(http.HTTPStatus.OK)

            if request.method == fields.HEAD:
                return

            while True:
                chunk = handle.read(self.chunk_size)
                if not chunk:
                    break
                writer.write(chunk)


    def _empty(self, writer, status):
        logger.debug('%s: %d', self.path, status)
        writer.headers.set(fields.CONTENT_LENGTH, 0)
        writer.write_header(status)


# end of class FileHandler


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
