"""
YAML exporter for gym records.

Writes one file per prefecture plus a summary file:

    {output_dir}/東京都.yaml
    {output_dir}/summary.yaml
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Union
import logging

import yaml

from ..base import Gym

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _dump(data: Dict, path: Path):
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(
            data,
            f,
            allow_unicode=True,
            sort_keys=False,
            indent=2,
            width=120,
        )


class YamlExporter:
    """Save gym records as YAML."""

    @staticmethod
    def save(gyms: List[Gym], file_path: Union[str, Path] = 'gyms.yaml') -> Path:
        """
        Save a list of gyms with export metadata.

        Args:
            gyms: Gym records
            file_path: Target file; parent directories are created

        Returns:
            Path of the written file
        """
        path = Path(file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            data = {
                'metadata': {
                    'exportedAt': _timestamp(),
                    'totalCount': len(gyms),
                    'description': 'Gym listings collected from FitMap',
                },
                'gyms': [gym.to_dict() for gym in gyms],
            }
            _dump(data, path)
            logger.info(f"Saved {len(gyms)} gyms to {path}")
            return path
        except Exception as e:
            logger.error(f"Failed to save YAML {path}: {e}")
            raise

    @staticmethod
    def save_by_prefecture(gyms_by_prefecture: Dict[str, List[Gym]], output_dir: Union[str, Path] = 'yaml') -> Path:
        """
        Save one file per prefecture and a summary.

        Prefectures without gyms get no file but are listed in the summary.

        Returns:
            Path of the summary file
        """
        output_dir = Path(output_dir)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)

            for prefecture, gyms in gyms_by_prefecture.items():
                if not gyms:
                    continue
                YamlExporter.save(gyms, output_dir / f"{prefecture}.yaml")

            summary = {
                'metadata': {
                    'exportedAt': _timestamp(),
                    'totalPrefectures': len(gyms_by_prefecture),
                    'totalGyms': sum(len(gyms) for gyms in gyms_by_prefecture.values()),
                },
                'prefectureSummary': {
                    prefecture: {
                        'count': len(gyms),
                        'personalCount': sum(1 for gym in gyms if gym.is_personal),
                    }
                    for prefecture, gyms in gyms_by_prefecture.items()
                },
            }
            summary_path = output_dir / 'summary.yaml'
            _dump(summary, summary_path)

            logger.info(f"Saved per-prefecture YAML files to {output_dir}")
            return summary_path
        except Exception as e:
            logger.error(f"Failed to save per-prefecture YAML: {e}")
            raise
