# spinwheel/infrastructure/logging/log_manager.py
import copy
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# --log-mode presets: root level, console level and per-layer levels.
# None keeps whatever the configuration file says.
LOG_MODES = {
    'all': {'level': 'DEBUG', 'console_level': 'DEBUG', 'layers': None},
    'app': {'level': 'WARNING', 'console_level': 'DEBUG',
            'layers': {'domain': 'WARNING', 'application': 'DEBUG', 'infrastructure': 'WARNING'}},
    'domain': {'level': 'WARNING', 'console_level': 'DEBUG',
               'layers': {'domain': 'DEBUG', 'application': 'WARNING', 'infrastructure': 'WARNING'}},
    'none': {'level': 'WARNING', 'console_level': 'WARNING', 'layers': {}},
}


class LogManager:
    """
    Centralized logging configuration for the spin engine.

    Loggers are named after the layer they live in (domain.spin.engine.<wheel>,
    infrastructure.rng, application.simulation.runner, ...), so a level set on
    "domain" or "domain.spin" covers a whole subtree.
    """
    def __init__(self):
        self.root_logger = logging.getLogger()
        self.loggers = {}  # name -> configured logger
        self.handlers = {}  # 'console' / 'file' -> handler
        self.initialized = False

    @staticmethod
    def apply_mode(config: Dict[str, Any], mode: Optional[str], verbose: bool = False) -> Dict[str, Any]:
        """
        Return a copy of a logging config with a --log-mode preset applied.

        Args:
            config: The "logging" section of the simulation config
            mode: One of LOG_MODES, or None to keep the config as is
            verbose: Force DEBUG on root and console afterwards

        Raises:
            ValueError: If mode is not a known preset
        """
        config = copy.deepcopy(config or {})

        if mode is not None:
            if mode not in LOG_MODES:
                raise ValueError(f"Unknown log mode: {mode}")
            preset = LOG_MODES[mode]
            config['level'] = preset['level']
            config['console_level'] = preset['console_level']

            if preset['layers'] is None:
                # 'all': every configured logger goes to DEBUG as well
                config['loggers'] = {name: {'level': 'DEBUG'} for name in (config.get('loggers') or {})}
            else:
                config['loggers'] = {layer: {'level': level} for layer, level in preset['layers'].items()}

        if verbose:
            config['level'] = 'DEBUG'
            config['console_level'] = 'DEBUG'

        return config

    def initialize(self, config: Dict[str, Any]):
        """
        Initialize logging from a configuration dictionary.

        Only the first call has an effect until shutdown() is called.

        Args:
            config: Logging configuration dictionary
        """
        if self.initialized:
            return

        log_level = self._get_log_level(config.get('level', 'INFO'))
        formatter = logging.Formatter(config.get('format', DEFAULT_FORMAT),
                                      config.get('date_format', DEFAULT_DATE_FORMAT))

        self.root_logger.setLevel(log_level)
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)

        if config.get('console', True):
            self._add_console_handler(config, log_level, formatter)

        file_config = config.get('file') or {}
        if file_config.get('enabled', False):
            self._add_file_handler(file_config, log_level, formatter)

        self._configure_loggers(config.get('loggers') or {}, log_level)

        self.root_logger.debug("Logging system initialized")
        self.initialized = True

    def shutdown(self):
        """Detach and close every handler this manager installed."""
        for logger in self.loggers.values():
            for handler in self.handlers.values():
                logger.removeHandler(handler)
        for handler in self.handlers.values():
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.loggers.clear()
        self.initialized = False

    def _add_console_handler(self, config: Dict[str, Any], default_level: int, formatter: logging.Formatter):
        stream = sys.stderr if config.get('console_stream') == 'stderr' else sys.stdout
        handler = logging.StreamHandler(stream)
        handler.setLevel(self._get_log_level(config.get('console_level', default_level)))
        handler.setFormatter(formatter)
        self.root_logger.addHandler(handler)
        self.handlers['console'] = handler

    def _add_file_handler(self, file_config: Dict[str, Any], default_level: int, formatter: logging.Formatter):
        file_path = file_config.get('path', 'logs/spinwheel.log')
        log_dir = os.path.dirname(file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        handler = RotatingFileHandler(
            file_path,
            maxBytes=file_config.get('max_bytes', 10 * 1024 * 1024),
            backupCount=file_config.get('backup_count', 5),
            encoding='utf-8'
        )
        handler.setLevel(self._get_log_level(file_config.get('level', default_level)))
        handler.setFormatter(formatter)
        self.root_logger.addHandler(handler)
        self.handlers['file'] = handler

    def _configure_loggers(self, loggers: Dict[str, Any], default_level: int):
        # 父 logger 先于子 logger 配置
        for logger_name in sorted(loggers, key=lambda name: len(name.split('.'))):
            logger_config = loggers[logger_name] or {}
            logger = logging.getLogger(logger_name)
            logger.setLevel(self._get_log_level(logger_config.get('level', default_level)))

            # Without propagation the logger needs its own handlers
            logger.propagate = logger_config.get('propagate', False)
            if not logger.propagate:
                for handler in self.handlers.values():
                    if handler not in logger.handlers:
                        logger.addHandler(handler)

            self.loggers[logger_name] = logger
            self.root_logger.debug(
                f"Configured logger '{logger_name}' with level={logging.getLevelName(logger.level)}, "
                f"propagate={logger.propagate}"
            )

    @staticmethod
    def _get_log_level(level_name: Union[str, int]) -> int:
        """Numeric level for a name such as "debug" or "WARNING"; unknown names map to INFO."""
        if isinstance(level_name, int):
            return level_name
        level = logging.getLevelName(str(level_name).upper())
        return level if isinstance(level, int) else logging.INFO


# Singleton instance
log_manager = LogManager()


DEFAULT_LOGGING_CONFIG = {
    'level': 'INFO',
    'console': True,
    'console_level': 'INFO',
    'file': {
        'enabled': False,
        'path': 'logs/spinwheel.log',
        'level': 'DEBUG',
        'max_bytes': 10 * 1024 * 1024,
        'backup_count': 5
    },
    'loggers': {
        'domain.spin': {'level': 'INFO'},
        'domain.wheel': {'level': 'INFO'},
        'infrastructure.rng': {'level': 'INFO'},
        'infrastructure.scheduling': {'level': 'WARNING'}
    }
}


def initialize_logging(config: Optional[Dict[str, Any]] = None) -> LogManager:
    """
    Initialize the shared LogManager, falling back to DEFAULT_LOGGING_CONFIG.

    Args:
        config: Optional logging configuration (the "logging" section of the
            simulation config)
    """
    log_manager.initialize(config or DEFAULT_LOGGING_CONFIG)
    return log_manager
