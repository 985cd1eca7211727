"""
Eureka Registry Client - register, list and look up service instances
"""

from .client import EurekaClient
from .config import EurekaConfig
from .models import (
    AmazonMetadataType, Applications, DataCenterInfo, DcNameType, Instance,
    LeaseInfo, PortData, RegisterRequest, StatusType
)
from .errors import *

__version__ = "1.0.0"
__all__ = [
    'EurekaClient',
    'EurekaConfig',
    'AmazonMetadataType',
    'Applications',
    'DataCenterInfo',
    'DcNameType',
    'Instance',
    'LeaseInfo',
    'PortData',
    'RegisterRequest',
    'StatusType',
    'EurekaError',
    'TransportError',
    'UnexpectedStatusError',
    'DecodeError',
    'AppNotFoundError',
    'EurekaIOError',
    'ConfigurationError',
    'InvalidConfigurationError',
]
