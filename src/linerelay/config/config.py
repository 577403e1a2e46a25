import os
import platform
from collections import namedtuple

from configobj import ConfigObj, ConfigObjError, flatten_errors
from configobj.validate import Validator

from linerelay.connector.socketconn import Endpoint
from linerelay.support.duration import parse_duration

# The default extension for configuration files
config_extension = '.cfg'

# the name shared by the packaged, platform and user configuration files
config_name = 'linerelay'

package_directory = os.path.dirname(__file__)


class ConfigurationError(ValueError):
    """ The arguments or configuration values are missing or invalid. """


RelayConfig = namedtuple('RelayConfig', ['endpoint', 'timeout', 'poll_interval', 'fatal_on_close'])
RelayConfig.__doc__ = """
The resolved settings for one run: the Endpoint to connect to, the connect timeout in seconds,
the local input poll interval in seconds, and whether benign shutdowns are reported as failures.
"""


def config_flavor(name, flavor=None):
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, directory=None):
    """
    Determines the location of a config file in the given directory.
    """
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory, subpart=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the specialization, if the specialization is given,
    otherwise just the base name.
    """
    file = config_filename(config_flavor(name, subpart), directory)
    return load_config_file_base(file, False)


def load_schema(name, directory) -> ConfigObj:
    file = config_filename(config_flavor(name, 'schema'), directory)
    return ConfigObj(file, interpolation=False, list_values=False, _inspec=True)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def user_config_file(name=config_name):
    return os.path.expanduser('~/' + name + config_extension)


def load_config(name=config_name, directory=package_directory, local_file=None, user_file=None):
    """
    Loads all the configuration files that relate to the given name.
    Configurations are merged in this order, later ones taking precedence:
    - the default specialization
    - the platform specialization
    - the user override (~/<name>.cfg)
    - the local file, if given. This file must exist.
    The merged configuration is then validated against the schema specialization.
    :return: the validated ConfigObj
    """
    default_config = config_flavor_file(name, directory, 'default')
    platform_config = config_flavor_file(name, directory, os_name())
    user_config = load_config_file_base(user_file or user_config_file(name), must_exist=False)
    config = ConfigObj()
    config.merge(default_config)
    config.merge(platform_config)
    config.merge(user_config)
    if local_file:
        config.merge(load_config_file_base(local_file, must_exist=True))

    config.configspec = load_schema(name, directory)
    result = config.validate(Validator(), preserve_errors=True)
    if result is not True:
        problems = []
        for sections, key, error in flatten_errors(config, result):
            where = '.'.join(sections + [key]) if key is not None else '.'.join(sections)
            problems.append("%s: %s" % (where, error or 'missing'))
        raise ConfigObjError("the config file %s failed validation %s" % (name, "; ".join(problems)))
    return config


def positive_timeout(value):
    """
    Parses a connect timeout given as a duration string, or as a number of seconds.
    >>> positive_timeout("1m")
    60.0
    """
    try:
        seconds = parse_duration(value) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("invalid timeout %s passed: %s" % (value, e)) from e
    if seconds <= 0:
        raise ConfigurationError("invalid timeout %s passed: must be positive" % value)
    return seconds


def relay_config(host, port, conf=None, **overrides) -> RelayConfig:
    """
    Builds the settings for a run from the positional arguments and the configuration,
    with any non-None overrides taking precedence over the configuration values.
    :param conf: a validated configuration, by default the result of load_config()
    """
    if not host or not port:
        raise ConfigurationError("both host and port are required")
    values = dict(conf if conf is not None else load_config())
    values.update((k, v) for k, v in overrides.items() if v is not None)
    try:
        endpoint = Endpoint(values['network'], host, port)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return RelayConfig(endpoint=endpoint,
                       timeout=positive_timeout(values['timeout']),
                       poll_interval=float(values['poll_interval']),
                       fatal_on_close=bool(values['fatal_on_close']))
