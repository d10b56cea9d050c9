"""Utility modules"""

from .config_loader import CertificateConfig, ClientConfig, load_certificate, load_client_config

__all__ = ["CertificateConfig", "ClientConfig", "load_certificate", "load_client_config"]
