"""
Configuration loader for the credit report client
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from equifax_credit.codec.charset import WIRE_CHARSET
from equifax_credit.signing.certificate import SigningCertificate

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "equifax_credit.yml"

ENV_OVERRIDES = {
    "EQUIFAX_ENDPOINT_URL": "endpoint_url",
    "EQUIFAX_PARTNER_ID": "partner_id",
    "EQUIFAX_SCHEMA_PATH": "schema_path",
}


class CertificateConfig(BaseModel):
    """Signing certificate location: PEM pair or a PKCS#12 bundle"""

    cert_path: Optional[str] = None
    key_path: Optional[str] = None
    pkcs12_path: Optional[str] = None
    password_env: str = "EQUIFAX_CERT_PASSWORD"

    @model_validator(mode="after")
    def _one_source(self) -> "CertificateConfig":
        if bool(self.cert_path) == bool(self.pkcs12_path):
            raise ValueError("set exactly one of cert_path or pkcs12_path")
        return self


class ClientConfig(BaseModel):
    """Complete client configuration"""

    endpoint_url: str = Field(min_length=1)
    partner_id: str = Field(min_length=1)
    certificate: CertificateConfig
    schema_path: Optional[str] = None
    save_requests: bool = False
    requests_dir: str = "data/requests"
    timeout_seconds: float = Field(default=30.0, gt=0, le=600)
    reply_charset: str = WIRE_CHARSET
    allow_unsigned_replies: bool = True


def _apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            logger.debug(f"Config value '{key}' overridden from {env_name}")
            config_data[key] = value
    return config_data


def load_client_config(config_path: Optional[Path] = None) -> ClientConfig:
    """
    Load and validate client configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to config/equifax_credit.yml

    Returns:
        Validated ClientConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        config = ClientConfig(**_apply_env_overrides(config_data))
        logger.info(f"Successfully loaded client config from {config_path}")
        return config
    except ValidationError as e:
        logger.error(f"Client config validation failed: {e}")
        raise


def load_certificate(config: CertificateConfig) -> SigningCertificate:
    """Load the signing certificate described by ``config``; the password comes from the environment"""
    password = os.getenv(config.password_env) or None
    if config.pkcs12_path:
        return SigningCertificate.from_pkcs12(config.pkcs12_path, password=password)
    return SigningCertificate.from_pem(config.cert_path, config.key_path, password=password)
