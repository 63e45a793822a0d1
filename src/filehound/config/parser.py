"""
YAML search profile parser for FileHound.

This module loads, validates and writes YAML search profiles. It handles
profile discovery in the usual locations, parsing, validation and gives
readable error messages for configuration issues.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from ..models.config import HoundConfig


logger = logging.getLogger(__name__)


@dataclass
class ConfigParseResult:
    """
    Result of a profile parsing operation.

    Attributes:
        config: The parsed and validated profile
        warnings: List of non-fatal warnings
        config_path: Path to the profile file used
        is_default: Whether the default profile was used
    """
    config: HoundConfig
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class ConfigurationError(Exception):
    """Raised when profile parsing or validation fails."""
    pass


class ConfigParser:
    """
    YAML profile parser with validation and error handling.

    Loads YAML files, validates their contents and converts them to
    HoundConfig objects. Supports profile discovery, default profiles and
    strict mode, where warnings are treated as errors.
    """

    DEFAULT_CONFIG_NAMES = [
        '.filehound.yaml',
        '.filehound.yml',
        'filehound.yaml',
        'filehound.yml',
    ]

    def __init__(self, strict_mode: bool = False):
        """
        Initialize the profile parser.

        Args:
            strict_mode: If True, treat warnings as errors
        """
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load and parse a profile from file or use defaults.

        Args:
            config_path: Path to the profile. If None, searches the default locations.

        Returns:
            ConfigParseResult containing the parsed profile and metadata

        Raises:
            ConfigurationError: If the profile is invalid or cannot be read
        """
        if config_path:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            config_data = self._load_yaml_file(config_path)
            is_default = False
        else:
            config_path, config_data = self._find_and_load_config()
            is_default = config_data is None
            if is_default:
                config_data = self._get_default_config()

        # Missing keys fall back to the defaults
        merged_config = self._get_default_config()
        merged_config.update(config_data)

        hound_config = self._validate_config_data(merged_config)

        warnings = hound_config.validate_configuration()
        warnings.extend(self._get_parser_warnings(hound_config, is_default))

        if self.strict_mode and warnings:
            raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")

        self.logger.info(f"Configuration loaded successfully from {config_path or 'defaults'}")

        return ConfigParseResult(
            config=hound_config,
            warnings=warnings,
            config_path=config_path,
            is_default=is_default
        )

    def _find_and_load_config(self) -> tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Find and load a profile from the default locations.

        Returns:
            Tuple of (config_path, config_data) or (None, None) if not found
        """
        search_paths = [
            Path.cwd(),
            Path.home(),
            Path.home() / '.config' / 'filehound',
        ]

        for search_path in search_paths:
            for config_name in self.DEFAULT_CONFIG_NAMES:
                config_file = search_path / config_name
                if config_file.is_file():
                    try:
                        config_data = self._load_yaml_file(config_file)
                    except ConfigurationError as e:
                        self.logger.warning(f"Failed to load {config_file}: {e}")
                        continue
                    self.logger.info(f"Found configuration file: {config_file}")
                    return config_file, config_data

        self.logger.info("No configuration file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()

            if not content.strip():
                self.logger.warning(f"Configuration file is empty: {file_path}")
                return {}

            data = yaml.safe_load(content)

            if data is None:
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Configuration file must contain a YAML object, got {type(data).__name__}")

            return data

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e

    def _validate_config_data(self, config_data: Dict[str, Any]) -> HoundConfig:
        """
        Validate raw profile data.

        Raises:
            ConfigurationError: If the profile is invalid
        """
        unknown = sorted(set(config_data) - set(HoundConfig.model_fields))
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        try:
            return HoundConfig.from_dict(config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def _get_default_config(self) -> Dict[str, Any]:
        """Get the default profile: everything under the current directory."""
        return {
            'paths': ['.'],
            'depth': None,
            'ignore_hidden_directories': False,
            'ignore_hidden_files': False,
            'include_file_stats': False,
        }

    def _get_parser_warnings(self, config: HoundConfig, is_default: bool) -> List[str]:
        warnings = []

        if is_default:
            warnings.append("No configuration file found, using default settings")

        if len(config.paths) > 10:
            warnings.append(f"Large number of search paths ({len(config.paths)}) may impact performance")

        return warnings

    def save_config(self, config: HoundConfig, output_path: Union[str, Path]) -> None:
        """
        Save a profile to a YAML file.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        try:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            yaml_content = self._generate_yaml_with_comments(config.to_dict())

            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(yaml_content)

            self.logger.info(f"Configuration saved to {output_path}")

        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file {output_path}: {e}") from e

    def _generate_yaml_with_comments(self, config_dict: Dict[str, Any]) -> str:
        lines = [
            "# FileHound search profile",
            "",
        ]

        sections = [
            ("paths", "Directories to search"),
            ("depth", "Maximum directory depth below each path (null = unlimited)"),
            ("extensions", "File extensions to match"),
            ("globs", "Glob patterns matched against names"),
            ("discard", "Regular expressions for paths to exclude"),
            ("size", "Size expression, e.g. '<10kb'"),
            ("modified", "Modification time expression, e.g. '< 2 days'"),
            ("accessed", "Access time expression"),
            ("changed", "Status change time expression"),
            ("empty", "Only match zero-byte entries"),
            ("sockets_only", "Only match sockets"),
            ("directories_only", "Report directories instead of files"),
            ("ignore_hidden_files", "Drop hidden entries"),
            ("ignore_hidden_directories", "Do not descend into hidden directories"),
            ("include_file_stats", "Attach stat snapshots to results"),
            ("negate", "Invert the combined filter result"),
        ]

        for section_name, comment in sections:
            if section_name in config_dict:
                lines.append(f"# {comment}")
                section_yaml = yaml.dump({section_name: config_dict[section_name]},
                                         default_flow_style=False,
                                         sort_keys=False)
                lines.append(section_yaml.rstrip())
                lines.append("")

        return "\n".join(lines)

    def validate_config_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Validate a profile file without building a search from it.

        Returns:
            List of validation errors (empty if valid)
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return [f"Configuration file not found: {config_path}"]

        try:
            self._validate_config_data(self._load_yaml_file(config_path))
        except ConfigurationError as e:
            return [str(e)]

        return []

    def get_config_template(self) -> str:
        """Get a template profile with all options and comments."""
        template_config = {
            'paths': ['.', '~/Documents'],
            'depth': None,
            'extensions': ['txt', 'md'],
            'globs': [],
            'discard': ['node_modules', r'\.git/'],
            'size': '<10mb',
            'modified': '< 30 days',
            'accessed': None,
            'changed': None,
            'empty': False,
            'sockets_only': False,
            'directories_only': False,
            'ignore_hidden_files': True,
            'ignore_hidden_directories': True,
            'include_file_stats': False,
            'negate': False,
        }

        return self._generate_yaml_with_comments(template_config)


def load_config(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> ConfigParseResult:
    """
    Convenience function to load a profile.

    Raises:
        ConfigurationError: If the profile is invalid
    """
    parser = ConfigParser(strict_mode=strict_mode)
    return parser.load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> List[str]:
    """Convenience function to validate a profile file."""
    parser = ConfigParser()
    return parser.validate_config_file(config_path)


def create_config_template(output_path: Union[str, Path]) -> None:
    """
    Create a template profile file.

    Raises:
        ConfigurationError: If the template cannot be written
    """
    parser = ConfigParser()
    template_content = parser.get_config_template()

    try:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template_content)

    except OSError as e:
        raise ConfigurationError(f"Cannot create template file {output_path}: {e}") from e
