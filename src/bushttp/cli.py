""" Command line entry points: ``bushttp-get`` requests a resource,
    ``bushttp-serve`` serves a file, ``bushttp-broker`` runs the ZeroMQ
    broker the other two connect through.
"""

import argparse
import logging
import os
import sys
import threading

from . import __version__
from . import config
from . import transport
from .bridge import handle
from .errors import RequestError, TransportError
from .handlers import FileHandler
from .requestor import Requestor

logger = logging.getLogger('bushttp')


def _logging(verbose):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format='%(message)s')


def _common(parser):
    parser.add_argument('-s', '--server', default=None,
        help='bus URL, tcp://host:port (default $BUSHTTP_URL or %s)' % (config.url))
    parser.add_argument('-v', '--verbose', action='store_true',
        help='enable debug logging')
    parser.add_argument('--version', action='version', version='%(prog)s ' + __version__)



def get_parser():

    parser = argparse.ArgumentParser(prog='bushttp-get',
        description='Request a resource over the message bus.')
    _common(parser)
    parser.add_argument('-i', '--include', action='store_true',
        help='show the response headers')
    parser.add_argument('-o', '--output', default=None, metavar='FILE',
        help='write the response body to FILE')
    parser.add_argument('-t', '--timeout', type=float, default=None,
        help='seconds to wait for each message')
    parser.add_argument('subject', help='subject the server listens on')
    parser.add_argument('url', nargs='?', default=None, help='path of the resource')
    return parser



def get_main(argv=None):

    arguments = get_parser().parse_args(argv)
    _logging(arguments.verbose)

    try:
        settings = config.Config.from_environ().copy(url=arguments.server, timeout=arguments.timeout)
    except ValueError as e:
        logger.error(str(e))
        return 1

    def show(header):
        logger.info('Received  [%s]', header.subject)
        for name, values in header.headers.items():
            logger.info('\x1b[1m%s:\x1b[0m %s', name, ','.join(values))

    def echo(text):
        sys.stdout.write(text)
        sys.stdout.flush()

    on_header = show if arguments.include else None

    sink = None

    try:
        if arguments.output is not None:
            try:
                sink = open(arguments.output, 'wb')
            except OSError as e:
                logger.error('Error opening output file %r: %s', arguments.output, e)
                return 1

        with transport.connect(config=settings) as bus:
            requestor = Requestor(bus, settings)
            response = requestor.get(arguments.subject, arguments.url, sink=sink, echo=echo, on_header=on_header)

    except (RequestError, TransportError) as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        if sink is not None:
            sink.close()

    if sink is None and response.text and not response.text.endswith('\n'):
        sys.stdout.write('\n')

    if not response.complete:
        logger.debug('received %d of %d bytes', response.received, response.content_length)

    return 0



def serve_parser():

    parser = argparse.ArgumentParser(prog='bushttp-serve',
        description='Serve a file over the message bus.')
    _common(parser)
    parser.add_argument('--subject', default='foo',
        help='subject to listen on (default: %(default)s)')
    parser.add_argument('file', help='file to serve')
    return parser



def serve_main(argv=None):

    arguments = serve_parser().parse_args(argv)
    _logging(arguments.verbose)

    path = arguments.file

    if not os.path.exists(path):
        logger.error('File %r does not exist', path)
        return 1

    if os.path.isdir(path):
        logger.error('%r is a directory', path)
        return 1

    try:
        settings = config.Config.from_environ().copy(url=arguments.server)
        bus = transport.connect(config=settings)
    except (ValueError, TransportError) as e:
        logger.error(str(e))
        return 1

    bridge = handle(bus, arguments.subject, FileHandler(path, settings.chunk_size), settings)
    logger.info('Serving %s on %r via %s', path, arguments.subject, settings.url)

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        bridge.close()
        bridge.join(settings.timeout)
        bus.close()

    return 0



def broker_parser():

    parser = argparse.ArgumentParser(prog='bushttp-broker',
        description='Forward messages between bushttp clients and servers.')
    _common(parser)
    return parser



def broker_main(argv=None):

    arguments = broker_parser().parse_args(argv)
    _logging(arguments.verbose)

    try:
        url = config.Config.from_environ().copy(url=arguments.server).url
        address, port = transport.zmq.framing.parse_url(url)
        broker = transport.zmq.Broker(address, port)
    except (ValueError, TransportError) as e:
        logger.error(str(e))
        return 1

    try:
        broker.wait()
    except KeyboardInterrupt:
        pass
    finally:
        broker.stop()

    return 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
