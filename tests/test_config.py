import pytest
import bushttp

Config = bushttp.config.Config


def test_defaults():

    config = Config()
    assert config.url == 'tcp://127.0.0.1:10139'
    assert config.window == 32 * 1024 * 1024
    assert config.window_wait == 0.001
    assert config.timeout == 2.0
    assert config.chunk_size == 1024 * 1024
    assert config.user_agent == 'bushttp/' + bushttp.__version__


def test_copy():

    config = Config()
    changed = config.copy(window=1024, timeout=None)

    assert changed.window == 1024
    assert changed.timeout == config.timeout
    assert config.window == 32 * 1024 * 1024
    assert changed != config
    assert changed.copy(window=config.window) == config

    with pytest.raises(TypeError):
        config.copy(bogus=1)


def test_environ():

    environ = dict()
    environ['BUSHTTP_URL'] = 'tcp://bus.example:4000'
    environ['BUSHTTP_WINDOW'] = '4096'
    environ['BUSHTTP_TIMEOUT'] = '0.25'

    config = Config.from_environ(environ)
    assert config.url == 'tcp://bus.example:4000'
    assert config.window == 4096
    assert config.timeout == 0.25
    assert config.chunk_size == Config().chunk_size

    assert Config.from_environ(dict()) == Config()


def test_environ_invalid():

    with pytest.raises(ValueError) as excinfo:
        Config.from_environ({'BUSHTTP_WINDOW': 'lots'})

    assert 'BUSHTTP_WINDOW' in str(excinfo.value)


def test_invalid():

    with pytest.raises(ValueError):
        Config(window=-1)

    with pytest.raises(ValueError):
        Config(chunk_size=0)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
