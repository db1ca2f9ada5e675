"""Exporters for processed gym records."""

from .yaml_exporter import YamlExporter

__all__ = ['YamlExporter']
