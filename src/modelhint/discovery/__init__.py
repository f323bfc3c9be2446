"""Discovery of candidate model classes under the configured directories."""

from modelhint.discovery.scanner import ModelScanner, namespaced_model_names

__all__ = ["ModelScanner", "namespaced_model_names"]
