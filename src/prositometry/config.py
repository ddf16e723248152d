"""Configuration management for prositometry."""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional


@dataclass
class AnalysisConfig:
    """Transcript analysis settings."""
    max_workers: int = 4
    strict_alphabet: bool = False
    fail_fast: bool = False


@dataclass
class InputConfig:
    """Input file locations."""
    data_dir: str = "data"
    fasta_file: str = "Homo_sapiens.GRCh38.cdna.all.fa.gz"
    prosite_file: str = "prosite.dat"
    hbadeals_file: Optional[str] = None

    @property
    def fasta_path(self) -> Path:
        return Path(self.data_dir) / self.fasta_file

    @property
    def prosite_path(self) -> Path:
        return Path(self.data_dir) / self.prosite_file


@dataclass
class DownloadConfig:
    """Reference file download settings."""
    overwrite: bool = False
    ensembl_cdna_url: str = (
        "https://ftp.ensembl.org/pub/current_fasta/homo_sapiens/cdna/"
        "Homo_sapiens.GRCh38.cdna.all.fa.gz"
    )
    prosite_url: str = "https://ftp.expasy.org/databases/prosite/prosite.dat"
    timeout_seconds: int = 60
    retry_attempts: int = 3


@dataclass
class OutputConfig:
    """Output configuration settings."""
    format: str = "tsv"
    motif_separator: str = "<br/>"
    excel_compatible: bool = False


@dataclass
class Config:
    """Main configuration container."""
    analysis: AnalysisConfig
    input: InputConfig
    download: DownloadConfig
    output: OutputConfig

    @classmethod
    def default(cls) -> 'Config':
        """Create default configuration."""
        return cls(
            analysis=AnalysisConfig(),
            input=InputConfig(),
            download=DownloadConfig(),
            output=OutputConfig()
        )

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from JSON file."""
        if not path.exists():
            return cls.default()

        with open(path, 'r') as f:
            data = json.load(f)

        return cls(
            analysis=AnalysisConfig(**data.get('analysis', {})),
            input=InputConfig(**data.get('input', {})),
            download=DownloadConfig(**data.get('download', {})),
            output=OutputConfig(**data.get('output', {}))
        )

    def to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'analysis': asdict(self.analysis),
            'input': asdict(self.input),
            'download': asdict(self.download),
            'output': asdict(self.output)
        }

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def merge_env_vars(self) -> None:
        """Merge environment variables into configuration."""
        if os.getenv('PROSITOMETRY_DATA_DIR'):
            self.input.data_dir = os.getenv('PROSITOMETRY_DATA_DIR')
        if os.getenv('PROSITOMETRY_WORKERS'):
            self.analysis.max_workers = int(os.getenv('PROSITOMETRY_WORKERS'))
        if os.getenv('PROSITOMETRY_STRICT'):
            self.analysis.strict_alphabet = True

    def merge_cli_args(self, **kwargs) -> None:
        """Merge CLI arguments into configuration."""
        if kwargs.get('data_dir'):
            self.input.data_dir = kwargs['data_dir']
        if kwargs.get('fasta'):
            self.input.fasta_file = kwargs['fasta']
        if kwargs.get('prosite'):
            self.input.prosite_file = kwargs['prosite']
        if kwargs.get('hbadeals'):
            self.input.hbadeals_file = kwargs['hbadeals']

        if kwargs.get('workers'):
            self.analysis.max_workers = kwargs['workers']
        if kwargs.get('strict_alphabet'):
            self.analysis.strict_alphabet = True
        if kwargs.get('fail_fast'):
            self.analysis.fail_fast = True

        if kwargs.get('overwrite'):
            self.download.overwrite = True

        if kwargs.get('output_format'):
            self.output.format = kwargs['output_format']
        if kwargs.get('excel_compatible'):
            self.output.excel_compatible = True


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    locations = [
        Path.home() / '.prositometry' / 'config.json',
        Path.home() / '.config' / 'prositometry' / 'config.json',
        Path('.prositometry.json'),
        Path('prositometry.config.json')
    ]

    for path in locations:
        if path.exists():
            return path

    return Path.home() / '.prositometry' / 'config.json'


def create_example_config(path: Optional[Path] = None) -> Path:
    """Create an example configuration file."""
    if path is None:
        path = Path('prositometry.config.example.json')

    config = Config.default()
    config.input.hbadeals_file = "hbadeals_results.tsv"
    config.analysis.max_workers = 8

    config.to_file(path)
    return path
