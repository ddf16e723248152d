"""Download of the reference files used by the analysis.

Files are written to a data directory (``data`` by default, created if
needed): the Ensembl human cDNA FASTA and the PROSITE pattern database.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class ReferenceDownloader:
    """Downloads reference files into a data directory."""

    def __init__(self,
                 data_dir: str = "data",
                 overwrite: bool = False,
                 urls: Optional[Dict[str, str]] = None,
                 timeout: int = 60,
                 retry_attempts: int = 3):
        """
        Initialize the downloader.

        Args:
            data_dir: Directory to download into
            overwrite: Replace files that already exist
            urls: Mapping of local file name to URL
            timeout: Request timeout in seconds
            retry_attempts: Retries for failed requests
        """
        self.data_dir = Path(data_dir)
        self.overwrite = overwrite
        self.urls = dict(urls or {})
        self.timeout = timeout

        self.session = requests.Session()
        retry_strategy = Retry(
            total=retry_attempts,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({
            'User-Agent': 'prositometry/1.0'
        })

    def download(self) -> List[Path]:
        """Download every configured file; returns the local paths."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return [self.download_file(url, name) for name, url in self.urls.items()]

    def download_file(self, url: str, name: str) -> Path:
        """
        Download one file, unless it exists and overwrite is off.

        Data is streamed to ``<name>.part`` and renamed when complete.

        Raises:
            requests.HTTPError: If the server returns an error status
        """
        target = self.data_dir / name
        if target.exists() and not self.overwrite:
            logger.info(f"{target} already exists, skipping (use overwrite to replace)")
            return target

        partial = target.with_name(target.name + ".part")
        logger.info(f"Downloading {url} to {target}")

        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total_size = int(response.headers.get('content-length', 0))
                downloaded = 0
                with open(partial, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            downloaded += len(chunk)
                if total_size:
                    logger.debug(f"Downloaded {downloaded} of {total_size} bytes")
        except (requests.RequestException, OSError):
            if partial.exists():
                partial.unlink()
            logger.error(f"Download of {url} failed, partial file removed")
            raise

        partial.replace(target)
        logger.info(f"Download complete: {target} ({downloaded // 1024} KB)")
        return target
