"""
Pytest configuration and fixtures
"""

import json
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from eureka.models import DataCenterInfo, Instance, LeaseInfo, PortData, StatusType


def _instance_payload(port, instance_id, registered):
    return {
        "instanceId": instance_id,
        "hostName": "172.16.200.36",
        "app": "A-BOOTIFUL-CLIENT",
        "ipAddr": "172.16.200.36",
        "status": "UP",
        "overriddenStatus": "UNKNOWN",
        "port": {"$": port, "@enabled": "true"},
        "securePort": {"$": 443, "@enabled": "false"},
        "countryId": 1,
        "dataCenterInfo": {
            "@class": "com.netflix.appinfo.InstanceInfo$DefaultDataCenterInfo",
            "name": "MyOwn"
        },
        "leaseInfo": {
            "renewalIntervalInSecs": 30,
            "durationInSecs": 90,
            "registrationTimestamp": registered,
            "lastRenewalTimestamp": registered,
            "evictionTimestamp": 0,
            "serviceUpTimestamp": registered
        },
        "metadata": {"management.port": str(port)},
        "homePageUrl": f"http://172.16.200.36:{port}/",
        "statusPageUrl": f"http://172.16.200.36:{port}/actuator/info",
        "healthCheckUrl": f"http://172.16.200.36:{port}/actuator/health",
        "vipAddress": "a-bootiful-client",
        "secureVipAddress": "a-bootiful-client",
        "isCoordinatingDiscoveryServer": "false",
        "lastUpdatedTimestamp": str(registered),
        "lastDirtyTimestamp": str(registered),
        "actionType": "ADDED"
    }


@pytest.fixture
def registry_payload():
    """Registry snapshot: one application with two instances"""
    return {
        "applications": {
            "versions__delta": "1",
            "apps__hashcode": "UP_2_",
            "application": [
                {
                    "name": "A-BOOTIFUL-CLIENT",
                    "instance": [
                        _instance_payload(8082, "172.16.200.36:a-bootiful-client:8082",
                                          1623337208578),
                        _instance_payload(8080, "172.16.200.36:a-bootiful-client",
                                          1623337120451),
                    ]
                }
            ]
        }
    }


@pytest.fixture
def instance_payload():
    """A single instance as the registry returns it"""
    return _instance_payload(8082, "172.16.200.36:a-bootiful-client:8082", 1623337208578)


@pytest.fixture
def instance():
    """Instance the way a caller builds it before registering"""
    return Instance(
        host_name="127.0.0.1",
        app="myapp",
        ip_addr="127.0.0.1",
        vip_address="myapp.example.com",
        secure_vip_address="myapp.example.com",
        status=StatusType.UP,
        port=PortData(8787, True),
        secure_port=PortData(8787, True),
        home_page_url="http://127.0.0.1:8787/",
        status_page_url="http://127.0.0.1:8787/status",
        health_check_url="http://127.0.0.1:8787/health",
        data_center_info=DataCenterInfo(),
        lease_info=LeaseInfo(eviction_duration_in_secs=None),
        metadata=None
    )


def make_response(status_code, body=b"", url="http://registry/eureka/apps"):
    """Build a real requests.Response with a canned body"""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    response.encoding = "utf-8"
    return response


@pytest.fixture
def session():
    """Mock HTTP session; set `session.request.return_value` per test"""
    return Mock(spec=requests.Session)
