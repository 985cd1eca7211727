"""
Eureka Registry Models
Instance descriptors and the wire codec for the registry JSON format

The registry speaks an XML-flavoured JSON dialect: port numbers live under
``$``, flags are the strings ``"true"``/``"false"`` under ``@enabled``, and
the snapshot nests applications as a list of named objects. Every model here
encodes with ``to_dict()`` and decodes with ``from_dict()``; decoding is
strict and raises :class:`DecodeError` naming the offending field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import DecodeError

DEFAULT_DATACENTER_CLASS = "com.netflix.appinfo.InstanceInfo$DefaultDataCenterInfo"
AMAZON_DATACENTER_CLASS = "com.netflix.appinfo.AmazonInfo"

MAX_PORT = 65535


def _join(path: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


_EXPECTED = {str: "a string", int: "an integer", dict: "an object", list: "an array"}


def _field(data: Dict[str, Any], key: str, path: str, kind: type,
           optional: bool = False) -> Any:
    """Fetch ``data[key]`` checking its JSON type; ``None`` only if optional"""
    where = _join(path, key)
    value = data.get(key)
    if value is None:
        if optional:
            return None
        if key in data:
            raise DecodeError(f"{where}: invalid type: null, expected {_EXPECTED[kind]}")
        raise DecodeError(f"{where}: missing field `{key}`")
    # bool is an int subclass, JSON true/false is never a number here
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(
            f"{where}: invalid type: {_type_name(value)}, expected {_EXPECTED[kind]}"
        )
    return value


def _object(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{path or 'document'}: invalid type: {_type_name(value)}, expected an object")
    return value


def bool_from_string(value: Any, path: str = "") -> bool:
    """Decode a flag encoded as the literal string ``"true"`` or ``"false"``"""
    path = path or "value"
    if not isinstance(value, str):
        raise DecodeError(
            f"{path}: invalid type: {_type_name(value)} {value!r}, expected true or false"
        )
    if value == "true":
        return True
    if value == "false":
        return False
    raise DecodeError(f"{path}: invalid value: string {value!r}, expected true or false")


def bool_to_string(value: bool) -> str:
    return "true" if value else "false"


class StatusType(Enum):
    """Instance status as reported to and by the registry"""
    UP = "UP"
    DOWN = "DOWN"
    STARTING = "STARTING"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    UNKNOWN = "UNKNOWN"

    def __str__(self):
        return self.value


class DcNameType(Enum):
    """Datacenter flavour"""
    MY_OWN = "MyOwn"
    AMAZON = "Amazon"

    def __str__(self):
        return self.value


def _enum(enum_cls, data: Dict[str, Any], key: str, path: str):
    raw = _field(data, key, path, str)
    try:
        return enum_cls(raw)
    except ValueError:
        variants = ", ".join(member.value for member in enum_cls)
        raise DecodeError(
            f"{_join(path, key)}: unknown variant {raw!r}, expected one of {variants}"
        ) from None


@dataclass
class PortData:
    """Port number with its enabled flag"""
    port: int
    enabled: bool

    def __post_init__(self):
        if isinstance(self.port, bool) or not 0 <= self.port <= MAX_PORT:
            raise ValueError(f"Port must be within 0-{MAX_PORT}, got {self.port!r}")

    @property
    def value(self) -> Optional[int]:
        """Effective port: only defined when the port is enabled"""
        return self.port if self.enabled else None

    def to_dict(self) -> Dict:
        return {
            '$': self.port,
            '@enabled': bool_to_string(self.enabled)
        }

    @classmethod
    def from_dict(cls, data: Dict, path: str = "") -> 'PortData':
        data = _object(data, path)
        port = _field(data, '$', path, int)
        if port < 0 or port > MAX_PORT:
            raise DecodeError(
                f"{_join(path, '$')}: invalid value: integer {port}, expected u16"
            )
        if '@enabled' not in data:
            raise DecodeError(f"{_join(path, '@enabled')}: missing field `@enabled`")
        return cls(
            port=port,
            enabled=bool_from_string(data['@enabled'], _join(path, '@enabled'))
        )


@dataclass
class AmazonMetadataType:
    """AWS instance metadata; older agents omit several of these fields"""
    local_hostname: str
    availability_zone: str
    instance_id: str
    local_ipv4: str
    ami_id: str
    instance_type: str
    ami_launch_index: Optional[str] = None
    public_ipv4: Optional[str] = None
    public_hostname: Optional[str] = None
    ami_manifest_path: Optional[str] = None
    hostname: Optional[str] = None

    _REQUIRED = ('local_hostname', 'availability_zone', 'instance_id',
                 'local_ipv4', 'ami_id', 'instance_type')
    _OPTIONAL = ('ami_launch_index', 'public_ipv4', 'public_hostname',
                 'ami_manifest_path', 'hostname')

    @staticmethod
    def _wire_name(attr: str) -> str:
        return attr.replace('_', '-')

    def to_dict(self) -> Dict:
        return {
            self._wire_name(attr): getattr(self, attr)
            for attr in self._OPTIONAL + self._REQUIRED
        }

    @classmethod
    def from_dict(cls, data: Dict, path: str = "") -> 'AmazonMetadataType':
        data = _object(data, path)
        values = {}
        for attr in cls._REQUIRED:
            values[attr] = _field(data, cls._wire_name(attr), path, str)
        for attr in cls._OPTIONAL:
            values[attr] = _field(data, cls._wire_name(attr), path, str, optional=True)
        return cls(**values)


@dataclass
class DataCenterInfo:
    """
    Hosting datacenter descriptor.

    ``metadata`` belongs to Amazon entries only. The registry expects it
    whenever ``name`` is Amazon, but decoding accepts an Amazon entry
    without it.
    """
    name: DcNameType = DcNameType.MY_OWN
    class_name: str = DEFAULT_DATACENTER_CLASS
    metadata: Optional[AmazonMetadataType] = None

    @classmethod
    def amazon(cls, metadata: AmazonMetadataType) -> 'DataCenterInfo':
        return cls(name=DcNameType.AMAZON, class_name=AMAZON_DATACENTER_CLASS,
                   metadata=metadata)

    def to_dict(self) -> Dict:
        data = {
            '@class': self.class_name,
            'name': self.name.value
        }
        if self.metadata is not None:
            data['metadata'] = self.metadata.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict, path: str = "") -> 'DataCenterInfo':
        data = _object(data, path)
        metadata = _field(data, 'metadata', path, dict, optional=True)
        return cls(
            name=_enum(DcNameType, data, 'name', path),
            class_name=_field(data, '@class', path, str),
            metadata=(AmazonMetadataType.from_dict(metadata, _join(path, 'metadata'))
                      if metadata is not None else None)
        )


@dataclass
class LeaseInfo:
    """Lease settings sent on register (server default eviction is 90s)"""
    eviction_duration_in_secs: Optional[int] = None

    def to_dict(self) -> Dict:
        return {'evictionDurationInSecs': self.eviction_duration_in_secs}

    @classmethod
    def from_dict(cls, data: Dict, path: str = "") -> 'LeaseInfo':
        # renewal interval and timestamps returned by the server are dropped
        data = _object(data, path)
        duration = _field(data, 'evictionDurationInSecs', path, int, optional=True)
        if duration is not None and duration < 0:
            raise DecodeError(
                f"{_join(path, 'evictionDurationInSecs')}: invalid value: "
                f"integer {duration}, expected a non-negative integer"
            )
        return cls(eviction_duration_in_secs=duration)


@dataclass
class Instance:
    """One running copy of an application as known to the registry"""
    host_name: str
    app: str
    ip_addr: str
    vip_address: str
    status: StatusType
    secure_port: PortData
    home_page_url: str
    status_page_url: str
    health_check_url: str
    data_center_info: DataCenterInfo = field(default_factory=DataCenterInfo)
    secure_vip_address: Optional[str] = None
    port: Optional[PortData] = None
    lease_info: Optional[LeaseInfo] = None
    metadata: Optional[Dict[str, str]] = None

    def __post_init__(self):
        if not self.app:
            raise ValueError("Instance app must not be empty")
        if not self.host_name:
            raise ValueError("Instance host_name must not be empty")

    def to_dict(self) -> Dict:
        return {
            'hostName': self.host_name,
            'app': self.app,
            'ipAddr': self.ip_addr,
            'vipAddress': self.vip_address,
            'secureVipAddress': self.secure_vip_address,
            'status': self.status.value,
            'port': self.port.to_dict() if self.port else None,
            'securePort': self.secure_port.to_dict(),
            'homePageUrl': self.home_page_url,
            'statusPageUrl': self.status_page_url,
            'healthCheckUrl': self.health_check_url,
            'dataCenterInfo': self.data_center_info.to_dict(),
            'leaseInfo': self.lease_info.to_dict() if self.lease_info else None,
            'metadata': dict(self.metadata) if self.metadata is not None else None
        }

    @classmethod
    def from_dict(cls, data: Dict, path: str = "") -> 'Instance':
        data = _object(data, path)

        for key in ('app', 'hostName'):
            if _field(data, key, path, str) == "":
                raise DecodeError(f"{_join(path, key)}: invalid value: empty string")

        port = _field(data, 'port', path, dict, optional=True)
        lease = _field(data, 'leaseInfo', path, dict, optional=True)
        metadata = _field(data, 'metadata', path, dict, optional=True)
        if metadata is not None:
            metadata_path = _join(path, 'metadata')
            for key in metadata:
                _field(metadata, key, metadata_path, str)

        return cls(
            host_name=data['hostName'],
            app=data['app'],
            ip_addr=_field(data, 'ipAddr', path, str),
            vip_address=_field(data, 'vipAddress', path, str),
            secure_vip_address=_field(data, 'secureVipAddress', path, str, optional=True),
            status=_enum(StatusType, data, 'status', path),
            port=PortData.from_dict(port, _join(path, 'port')) if port is not None else None,
            secure_port=PortData.from_dict(
                _field(data, 'securePort', path, dict), _join(path, 'securePort')
            ),
            home_page_url=_field(data, 'homePageUrl', path, str),
            status_page_url=_field(data, 'statusPageUrl', path, str),
            health_check_url=_field(data, 'healthCheckUrl', path, str),
            data_center_info=DataCenterInfo.from_dict(
                _field(data, 'dataCenterInfo', path, dict), _join(path, 'dataCenterInfo')
            ),
            lease_info=LeaseInfo.from_dict(lease, _join(path, 'leaseInfo')) if lease is not None else None,
            metadata=dict(metadata) if metadata is not None else None
        )


@dataclass
class RegisterRequest:
    """Body of a register call: the instance wrapped under ``instance``"""
    instance: Instance

    def to_dict(self) -> Dict:
        return {'instance': self.instance.to_dict()}


@dataclass
class _WireApplication:
    """One element of ``applications.application`` exactly as sent"""
    name: str
    instance: List[Instance]


def _parse_wire_applications(data: Any) -> List[_WireApplication]:
    """Stage one: decode the nested snapshot shape without reshaping it"""
    outer = _object(data, "")
    apps = _field(outer, 'applications', "", dict)
    entries = _field(apps, 'application', 'applications', list)

    parsed = []
    for index, entry in enumerate(entries):
        path = _join('applications.application', index)
        entry = _object(entry, path)
        instances = _field(entry, 'instance', path, list)
        parsed.append(_WireApplication(
            name=_field(entry, 'name', path, str),
            instance=[
                Instance.from_dict(item, _join(_join(path, 'instance'), i))
                for i, item in enumerate(instances)
            ]
        ))
    return parsed


def _flatten(entries: List[_WireApplication]) -> Dict[str, List[Instance]]:
    """Stage two: name -> instances, later duplicates overwrite earlier ones"""
    applications: Dict[str, List[Instance]] = {}
    for entry in entries:
        applications[entry.name] = entry.instance
    return applications


@dataclass
class Applications:
    """Registry snapshot: application name -> its instances"""
    applications: Dict[str, List[Instance]] = field(default_factory=dict)

    def names(self) -> List[str]:
        return list(self.applications)

    def to_dict(self) -> Dict:
        return {
            'applications': {
                'application': [
                    {
                        'name': name,
                        'instance': [instance.to_dict() for instance in instances]
                    }
                    for name, instances in self.applications.items()
                ]
            }
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Applications':
        return cls(applications=_flatten(_parse_wire_applications(data)))
