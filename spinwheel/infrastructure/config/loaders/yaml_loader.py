# spinwheel/infrastructure/config/loaders/yaml_loader.py
import os
import json
import logging
from typing import Dict, Any, List, Optional

import yaml

YAML_EXTENSIONS = ('.yaml', '.yml')


class ConfigError(Exception):
    """配置加载或验证错误的基类。"""
    pass


class FileNotFoundConfigError(ConfigError):
    """配置文件或目录不存在。"""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Configuration file or directory not found: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """YAML语法错误。"""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Error parsing YAML file {file_path}: {str(yaml_error)}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """配置不符合JSON模式，errors 为逐条错误信息。"""
    def __init__(self, file_path, errors: List[str]):
        self.file_path = file_path
        self.errors = errors
        details = "".join(f"\n  - {error}" for error in errors)
        self.message = f"Configuration validation failed for {file_path}:{details}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    读取模拟配置和转盘定义 (YAML)，可选地按 JSON 模式验证。

    strict_mode=True 时缺失文件、语法错误和验证失败都会抛出异常；
    关闭后尽量返回默认值或未验证的配置，并记录警告。
    Parsed schemas are cached by path, a wheels directory shares one schema.
    """
    def __init__(self, schema_validator=None):
        """
        Args:
            schema_validator: 可选的 SchemaValidator
        """
        self.logger = logging.getLogger("infrastructure.config.loader")
        self.schema_validator = schema_validator
        self.strict_mode = True
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def set_strict_mode(self, strict: bool = True):
        self.strict_mode = strict
        return self

    def load_file(self, file_path: str, schema_path: Optional[str] = None,
                  default_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Load one YAML file.

        Args:
            file_path: Path of the YAML file
            schema_path: Optional JSON schema to validate against
            default_config: Used for an empty file, and (lenient mode only)
                for a missing or unparsable one

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundConfigError: Missing file, unless lenient with a default
            YamlParseError: Broken YAML, unless lenient with a default
            SchemaValidationError: Validation failure in strict mode
        """
        try:
            config = self._read_yaml(file_path)
        except ConfigError as e:
            self.logger.error(e.message)
            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Falling back to default configuration for {file_path}")
                return default_config
            raise

        if config is None:
            self.logger.warning(f"Empty configuration file: {file_path}")
            config = default_config if default_config is not None else {}

        if schema_path and self.schema_validator:
            self._validate(config, file_path, schema_path)

        self.logger.debug(f"Loaded configuration from {file_path}")
        return config

    def load_directory(self, directory_path: str, schema_path: Optional[str] = None,
                       ignore_errors: bool = False) -> Dict[str, Dict[str, Any]]:
        """
        Load every .yaml/.yml file of a directory, in file name order.

        Args:
            directory_path: Directory to scan (not recursive)
            schema_path: Optional JSON schema applied to every file
            ignore_errors: Log and skip broken files instead of raising

        Returns:
            File stem -> configuration dictionary

        Raises:
            FileNotFoundConfigError: Missing directory in strict mode
            ConfigError: First broken file, unless ignore_errors or lenient
        """
        if not os.path.isdir(directory_path):
            if not self.strict_mode:
                self.logger.warning(f"Configuration directory not found, nothing loaded: {directory_path}")
                return {}
            raise FileNotFoundConfigError(directory_path)

        file_names = sorted(f for f in os.listdir(directory_path) if f.endswith(YAML_EXTENSIONS))
        if not file_names:
            self.logger.warning(f"No YAML files found in {directory_path}")
            return {}

        configs = {}
        failures = []
        for file_name in file_names:
            try:
                configs[os.path.splitext(file_name)[0]] = self.load_file(
                    os.path.join(directory_path, file_name), schema_path)
            except ConfigError as e:
                if not ignore_errors and self.strict_mode:
                    raise
                failures.append(f"{file_name}: {e}")

        if failures:
            self.logger.error(f"Skipped {len(failures)} file(s) in {directory_path}:\n" +
                              "\n".join(f"  - {failure}" for failure in failures))
        self.logger.info(f"Loaded {len(configs)} of {len(file_names)} configuration files from {directory_path}")
        return configs

    def find_file(self, directory_path: str, name: str) -> Optional[str]:
        """Path of <name>.yaml or <name>.yml inside directory_path, if present."""
        for extension in YAML_EXTENSIONS:
            candidate = os.path.join(directory_path, name + extension)
            if os.path.isfile(candidate):
                return candidate
        return None

    def _read_yaml(self, file_path: str) -> Any:
        if not os.path.isfile(file_path):
            raise FileNotFoundConfigError(file_path)
        try:
            with open(file_path, 'r', encoding='utf-8') as file:
                return yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise YamlParseError(file_path, e) from e

    def _validate(self, config: Dict[str, Any], file_path: str, schema_path: str):
        is_valid, errors = self.schema_validator.validate(config, self._load_schema(schema_path))
        if is_valid:
            return

        error = SchemaValidationError(file_path, errors)
        if self.strict_mode:
            raise error
        self.logger.warning(f"{error.message}\nUsing unvalidated configuration.")

    def _load_schema(self, schema_path: str) -> Dict[str, Any]:
        if schema_path in self._schemas:
            return self._schemas[schema_path]

        if not os.path.isfile(schema_path):
            raise FileNotFoundConfigError(schema_path, f"Schema file not found: {schema_path}")
        try:
            with open(schema_path, 'r', encoding='utf-8') as file:
                schema = json.load(file)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error parsing schema file {schema_path}: {str(e)}") from e

        self._schemas[schema_path] = schema
        return schema
