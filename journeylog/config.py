"""
Configuration loading for the journey log tools.

Uses Python's built-in configparser (no extra dependencies).
Supports config.ini file with CLI argument overrides.
"""

import configparser
import os


DEFAULT_CONFIG = {
    'pilot': {
        'name': '',
    },
    'sheet': {
        'dz': '',
        'reg': '',
    },
    'files': {
        'storage_dir': './.journeylog',
        'csv_output': './pilot_journey_log.csv',
        'print_output': './pilot_journey_log.html',
        'pdf_output': '',
        'xlsx_output': './pilot_journey_log.xlsx',
    },
}

PATH_SETTINGS = [
    ('storage_dir', 'files', 'storage_dir'),
    ('csv_output', 'files', 'csv_output'),
    ('print_output', 'files', 'print_output'),
    ('pdf_output', 'files', 'pdf_output'),
    ('xlsx_output', 'files', 'xlsx_output'),
]


class Config:
    """Journey log tool configuration."""

    def __init__(self):
        self.pilot_name = ''
        self.dz = ''
        self.reg = ''
        self.storage_dir = ''
        self.csv_output = ''
        self.print_output = ''
        self.pdf_output = ''
        self.xlsx_output = ''
        self.input_file = ''

    @classmethod
    def from_file(cls, config_path):
        """Load configuration from an INI file.

        A missing file is not an error; the defaults apply.

        Args:
            config_path: Path to the config.ini file.

        Returns:
            Config instance.
        """
        config = cls()
        parser = configparser.ConfigParser()

        # Set defaults
        for section, values in DEFAULT_CONFIG.items():
            parser[section] = values

        # Read user config
        if os.path.exists(config_path):
            parser.read(config_path, encoding='utf-8')

        # Resolve paths relative to config file directory
        config_dir = os.path.dirname(os.path.abspath(config_path))

        config.pilot_name = parser.get('pilot', 'name', fallback='')
        config.dz = parser.get('sheet', 'dz', fallback='')
        config.reg = parser.get('sheet', 'reg', fallback='')

        for attr, section, key in PATH_SETTINGS:
            val = parser.get(section, key, fallback='')
            if val and not os.path.isabs(val):
                val = os.path.join(config_dir, val)
            setattr(config, attr, val)

        return config

    def override(self, **kwargs):
        """Override config values from CLI arguments.

        Only overrides non-None values.
        """
        for key, value in kwargs.items():
            if value is not None and hasattr(self, key):
                setattr(self, key, value)

    def header_defaults(self):
        """Header fields the config pre-fills on a sheet with none set."""
        return {'pilot': self.pilot_name, 'dz': self.dz, 'reg': self.reg}

    def validate(self, command=None):
        """Validate that required files exist for the given command.

        Raises:
            FileNotFoundError: If a required file is missing.
        """
        if command == 'import':
            if not self.input_file:
                raise FileNotFoundError(
                    "No input file given.\n"
                    "Pass the CSV to import with --input."
                )
            if not os.path.exists(self.input_file):
                raise FileNotFoundError(f"Input file not found: {self.input_file}")

    def __repr__(self):
        return (
            f"Config(\n"
            f"  pilot_name='{self.pilot_name}',\n"
            f"  dz='{self.dz}',\n"
            f"  reg='{self.reg}',\n"
            f"  storage_dir='{self.storage_dir}',\n"
            f"  csv_output='{self.csv_output}',\n"
            f"  print_output='{self.print_output}',\n"
            f"  pdf_output='{self.pdf_output}',\n"
            f"  xlsx_output='{self.xlsx_output}',\n"
            f")"
        )
